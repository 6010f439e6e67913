"""readygo project configuration.

A single typed ``ProjectConfig`` holds every scaffold parameter.  It is built
with defaults, optionally overridden by the CLI, environment variables or a
JSON file, then passed through :meth:`ProjectConfig.process` (derivation) and
:meth:`ProjectConfig.validate` exactly once before generation.  Nothing
downstream of validation mutates it.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Callable

from pydantic import BaseModel, Field, TypeAdapter

from readygo.errors import ConfigValidationError

_PROJECT_NAME_RE = re.compile(r"[A-Za-z0-9_-]+")

DEFAULT_MODULE_HOST = "github.com/username"

_JSON_OBJECT = TypeAdapter(dict[str, Any])


class ProjectConfig(BaseModel):
    """Everything needed to scaffold one Go service project."""

    # Project metadata
    project_name: str = Field(..., description="Directory and binary name")
    module_name: str = Field(default="", description="Go module path")
    description: str = Field(default="")
    author: str = Field(default="")
    go_version: str = Field(default="1.23")

    output_dir: Path = Field(default=Path("."), description="Parent of the project directory")

    # Optional services
    with_redis: bool = Field(default=True)
    with_kafka: bool = Field(default=True)

    # Sample entity.  The lower/table forms are derived by process().
    sample_api_name: str = Field(default="User")
    sample_api_name_lower: str = Field(default="")
    sample_table_name: str = Field(default="")

    # Container images
    mysql_version: str = Field(default="8.0")
    redis_version: str = Field(default="7-alpine")
    kafka_version: str = Field(default="7.6.0")

    # Ports
    app_port: int = Field(default=8080, ge=1, le=65535)
    mysql_port: int = Field(default=3306, ge=1, le=65535)
    redis_port: int = Field(default=6379, ge=1, le=65535)
    kafka_port: int = Field(default=9092, ge=1, le=65535)
    kafka_ui_port: int = Field(default=8090, ge=1, le=65535)

    skip_git: bool = Field(default=False)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def new(cls, project_name: str) -> "ProjectConfig":
        """Return a config for *project_name* with every default filled in."""
        return cls(
            project_name=project_name,
            module_name=f"{DEFAULT_MODULE_HOST}/{project_name}",
            description=f"A {project_name} service",
        )

    @classmethod
    def from_env(cls, project_name: str) -> "ProjectConfig":
        """Build a config for *project_name*, applying ``READYGO_*`` overrides.

        Recognised variables (all optional):
            READYGO_MODULE, READYGO_DESCRIPTION, READYGO_AUTHOR,
            READYGO_OUTPUT_DIR, READYGO_SAMPLE_API, READYGO_WITH_REDIS,
            READYGO_WITH_KAFKA, READYGO_SKIP_GIT.
        """
        config = cls.new(project_name)
        if os.environ.get("READYGO_MODULE"):
            config.module_name = os.environ["READYGO_MODULE"]
        if os.environ.get("READYGO_DESCRIPTION"):
            config.description = os.environ["READYGO_DESCRIPTION"]
        if os.environ.get("READYGO_AUTHOR"):
            config.author = os.environ["READYGO_AUTHOR"]
        if os.environ.get("READYGO_OUTPUT_DIR"):
            config.output_dir = Path(os.environ["READYGO_OUTPUT_DIR"])
        if os.environ.get("READYGO_SAMPLE_API"):
            config.sample_api_name = os.environ["READYGO_SAMPLE_API"]
        if os.environ.get("READYGO_WITH_REDIS"):
            config.with_redis = _env_flag(os.environ["READYGO_WITH_REDIS"])
        if os.environ.get("READYGO_WITH_KAFKA"):
            config.with_kafka = _env_flag(os.environ["READYGO_WITH_KAFKA"])
        if os.environ.get("READYGO_SKIP_GIT"):
            config.skip_git = _env_flag(os.environ["READYGO_SKIP_GIT"])
        return config

    @classmethod
    def load(cls, path: Path, project_name: str | None = None) -> "ProjectConfig":
        """Load a declarative configuration from a JSON file.

        Only ``project_name`` is required, and *project_name* replaces the
        file's value when given.  ``module_name`` and ``description`` fall
        back to the same defaults as :meth:`new`, derived from the final name.
        """
        data = _JSON_OBJECT.validate_json(Path(path).read_text(encoding="utf-8"))
        if project_name:
            data["project_name"] = project_name
        config = cls.model_validate(data)
        if "module_name" not in config.model_fields_set:
            config.module_name = f"{DEFAULT_MODULE_HOST}/{config.project_name}"
        if "description" not in config.model_fields_set:
            config.description = f"A {config.project_name} service"
        return config

    # ------------------------------------------------------------------
    # Derivation and validation
    # ------------------------------------------------------------------

    def process(self) -> None:
        """Recompute the sample-entity naming triple from ``sample_api_name``."""
        self.sample_api_name = title_case(self.sample_api_name)
        self.sample_api_name_lower = self.sample_api_name.lower()
        self.sample_table_name = pluralize(self.sample_api_name_lower)

    def validate(self) -> None:
        """Raise ``ConfigValidationError`` for the first violated invariant."""
        if not self.project_name:
            raise ConfigValidationError("project name cannot be empty")
        if not _PROJECT_NAME_RE.fullmatch(self.project_name):
            raise ConfigValidationError(
                "project name can only contain letters, numbers, hyphens, and underscores"
            )
        if not self.module_name:
            raise ConfigValidationError("module name cannot be empty")
        if not self.sample_api_name:
            raise ConfigValidationError("sample API name cannot be empty")

    # ------------------------------------------------------------------
    # Derived names
    # ------------------------------------------------------------------

    @property
    def project_path(self) -> Path:
        """Root of the project being generated."""
        return self.output_dir / self.project_name

    def container_name(self, service: str) -> str:
        return f"{self.project_name}-{service}"

    def network_name(self) -> str:
        return f"{self.project_name}-network"

    def volume_name(self, service: str) -> str:
        return f"{self.project_name}-{service}-data"

    def template_context(self) -> dict[str, Any]:
        """Values and helpers visible to templates."""
        helpers: dict[str, Callable[..., str]] = {
            "container_name": self.container_name,
            "network_name": self.network_name,
            "volume_name": self.volume_name,
        }
        return {**self.model_dump(), **helpers}


def title_case(value: str) -> str:
    """Upper-case the first letter of every word, leaving the rest untouched.

    ``"userProfile"`` becomes ``"UserProfile"``, not ``"Userprofile"``.
    """
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), value)


def pluralize(word: str) -> str:
    """Pluralize a lower-case English noun with a simple suffix heuristic.

    Irregular nouns ("person", "child") and words such as "day" are not
    handled correctly; this is a known limitation.
    """
    if word.endswith("y"):
        return word[:-1] + "ies"
    if word.endswith(("s", "x", "ch", "sh")):
        return word + "es"
    return word + "s"


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "y", "on")
