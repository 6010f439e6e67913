"""Shared pytest fixtures for the readygo test suite.

Provides reusable fixtures for:
- Processed project configurations rooted in a temporary directory
- An in-memory template store
- A mocked external command runner
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from readygo.config import ProjectConfig
from readygo.scaffolder.templates import TemplateResolver


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def project_config(tmp_path: Path) -> ProjectConfig:
    """A processed, valid config whose output directory is a temp dir."""
    config = ProjectConfig.new("demo-service")
    config.module_name = "github.com/acme/demo-service"
    config.output_dir = tmp_path
    config.sample_api_name = "product"
    config.process()
    config.validate()
    return config


@pytest.fixture
def minimal_config(tmp_path: Path) -> ProjectConfig:
    """A processed config with Redis, Kafka and git all switched off."""
    config = ProjectConfig.new("lean")
    config.output_dir = tmp_path
    config.with_redis = False
    config.with_kafka = False
    config.skip_git = True
    config.process()
    return config


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

@pytest.fixture
def memory_store() -> dict[str, bytes]:
    """A tiny template store keyed the same way as the bundle."""
    return {
        "templates/hello.tmpl": b"Hello {{ project_name }}!\n",
        "templates/flags.tmpl": (
            b"{% if with_kafka %}\nkafka: on\n{% else %}\nkafka: off\n{% endif %}\n"
        ),
    }


@pytest.fixture
def memory_resolver(memory_store: dict[str, bytes], tmp_path: Path) -> TemplateResolver:
    """Resolver over ``memory_store`` whose disk fallback points at an empty dir."""
    empty = tmp_path / "no-templates-here"
    empty.mkdir()
    return TemplateResolver(store=memory_store, base_dir=empty)


# ---------------------------------------------------------------------------
# External commands
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_runner() -> AsyncMock:
    """Command runner that reports success for every command."""
    return AsyncMock(return_value=(0, "", ""))
