"""Directory and file manifest for a generated project.

:func:`build_manifest` turns a validated ``ProjectConfig`` into the ordered
directories to create and the ordered ``(template, destination)`` pairs to
render.  It performs no I/O, so the same configuration always yields the
same manifest.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from readygo.config import ProjectConfig
from readygo.errors import ConfigValidationError

# The lower-cased entity name doubles as a Go package name and a path segment.
_ENTITY_RE = re.compile(r"[a-z_][a-z0-9_]*")


@dataclass(frozen=True)
class ManifestEntry:
    """One file to render: a template identifier and where it goes."""

    template: str
    destination: Path


@dataclass(frozen=True)
class Manifest:
    directories: tuple[Path, ...]
    files: tuple[ManifestEntry, ...]

    @property
    def templates(self) -> list[str]:
        return [entry.template for entry in self.files]


def build_directories(config: ProjectConfig) -> list[Path]:
    """Directories to create, project root first."""
    root = config.project_path
    entity = config.sample_api_name_lower
    return [
        root,
        root / "cmd" / "server",
        root / "internal" / "config",
        root / "internal" / "database" / "migrations",
        root / "internal" / "database" / "query",
        root / "internal" / "database" / "store",
        root / "internal" / "entity",
        root / "internal" / "dto" / "request",
        root / "internal" / "dto" / "response",
        root / "internal" / "repository",
        root / "internal" / "service" / entity,
        root / "internal" / "handler" / "health",
        root / "internal" / "handler" / entity,
    ]


def build_files(config: ProjectConfig) -> list[ManifestEntry]:
    """Files to render, in generation order."""
    root = config.project_path
    internal = root / "internal"
    entity = config.sample_api_name_lower

    pairs: list[tuple[str, Path]] = [
        # Root level files
        ("project/main.go.tmpl", root / "cmd" / "server" / "main.go"),
        ("project/Dockerfile.tmpl", root / "Dockerfile"),
        ("project/docker-compose.yml.tmpl", root / "docker-compose.yml"),
        ("project/Makefile.tmpl", root / "Makefile"),
        ("project/config.toml.tmpl", root / "config.toml"),
        ("project/env.docker.tmpl", root / ".env.docker"),
        ("project/env.example.tmpl", root / ".env.example"),
        ("project/gitignore.tmpl", root / ".gitignore"),
        ("project/README.md.tmpl", root / "README.md"),
        # Application wiring
        ("internal/application.go.tmpl", internal / "application.go"),
        ("internal/config/config.go.tmpl", internal / "config" / "config.go"),
        # Database
        ("internal/database/database.go.tmpl", internal / "database" / "database.go"),
        ("internal/database/sqlc.yaml.tmpl", internal / "database" / "sqlc.yaml"),
        (
            "internal/database/migrations/migration.sql.tmpl",
            internal / "database" / "migrations" / "001_create_initial_schema.sql",
        ),
        ("internal/database/query/sample.sql.tmpl", internal / "database" / "query" / f"{entity}.sql"),
        ("internal/database/store/gitignore.tmpl", internal / "database" / "store" / ".gitignore"),
        # Entity
        ("internal/entity/entity.go.tmpl", internal / "entity" / f"{entity}.go"),
        # DTOs
        ("internal/dto/request/common.go.tmpl", internal / "dto" / "request" / "common.go"),
        (
            "internal/dto/request/sample_request.go.tmpl",
            internal / "dto" / "request" / f"{entity}_request.go",
        ),
        ("internal/dto/response/common.go.tmpl", internal / "dto" / "response" / "common.go"),
        (
            "internal/dto/response/error_response.go.tmpl",
            internal / "dto" / "response" / "error_response.go",
        ),
        (
            "internal/dto/response/sample_response.go.tmpl",
            internal / "dto" / "response" / f"{entity}_response.go",
        ),
        # Repository
        ("internal/repository/interfaces.go.tmpl", internal / "repository" / "interfaces.go"),
        (
            "internal/repository/sample_repository.go.tmpl",
            internal / "repository" / f"{entity}_repository.go",
        ),
        # Service
        ("internal/service/sample/sample.go.tmpl", internal / "service" / entity / f"{entity}.go"),
        (
            "internal/service/sample/create_sample_service.go.tmpl",
            internal / "service" / entity / f"create_{entity}_service.go",
        ),
        # Handlers
        (
            "internal/handler/health/health_handler.go.tmpl",
            internal / "handler" / "health" / "health_handler.go",
        ),
        ("internal/handler/middleware.go.tmpl", internal / "handler" / "middleware.go"),
        (
            "internal/handler/sample/sample_handler.go.tmpl",
            internal / "handler" / entity / f"{entity}_handler.go",
        ),
        (
            "internal/handler/sample/create_sample_handler.go.tmpl",
            internal / "handler" / entity / f"create_{entity}_handler.go",
        ),
    ]
    return [ManifestEntry(template, destination) for template, destination in pairs]


def build_manifest(config: ProjectConfig) -> Manifest:
    """Compute the full manifest for *config*.

    Raises:
        ConfigValidationError: If the sample entity name is not a Go
            identifier (so it could escape its directory, e.g. ``../x``) or
            makes two files share a destination (e.g. ``Health``).
    """
    entity = config.sample_api_name_lower
    if not _ENTITY_RE.fullmatch(entity):
        raise ConfigValidationError(
            f"sample API name '{config.sample_api_name}' must be a Go identifier "
            "(letters, digits and underscores, not starting with a digit)"
        )

    directories = build_directories(config)
    files = build_files(config)

    seen: dict[Path, str] = {}
    for entry in files:
        if entry.destination in seen:
            raise ConfigValidationError(
                f"sample API name '{config.sample_api_name}' makes "
                f"{seen[entry.destination]} and {entry.template} both write "
                f"{entry.destination}"
            )
        seen[entry.destination] = entry.template

    return Manifest(directories=tuple(dict.fromkeys(directories)), files=tuple(files))
