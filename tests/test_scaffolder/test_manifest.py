"""Tests for the directory/file manifest.

Covers:
- Directory list (root first, entity-specific directories)
- File list size, order and entity-derived destinations
- Determinism and destination uniqueness
- Entity names that collide with fixed files
"""

from __future__ import annotations

from pathlib import Path

import pytest

from readygo.config import ProjectConfig
from readygo.errors import ConfigValidationError
from readygo.scaffolder.manifest import build_directories, build_files, build_manifest

pytestmark = pytest.mark.unit


def _config(tmp_path: Path, entity: str = "Product") -> ProjectConfig:
    config = ProjectConfig.new("orders")
    config.output_dir = tmp_path
    config.sample_api_name = entity
    config.process()
    return config


class TestDirectories:
    def test_root_first(self, tmp_path):
        directories = build_directories(_config(tmp_path))
        assert directories[0] == tmp_path / "orders"

    def test_every_directory_under_root(self, tmp_path):
        root = tmp_path / "orders"
        for directory in build_directories(_config(tmp_path)):
            assert directory == root or root in directory.parents

    def test_entity_directories(self, tmp_path):
        directories = build_directories(_config(tmp_path))
        root = tmp_path / "orders" / "internal"
        assert root / "service" / "product" in directories
        assert root / "handler" / "product" in directories
        assert root / "handler" / "health" in directories

    def test_count(self, tmp_path):
        assert len(build_directories(_config(tmp_path))) == 13


class TestFiles:
    def test_count(self, tmp_path):
        assert len(build_files(_config(tmp_path))) == 30

    def test_first_and_last(self, tmp_path):
        files = build_files(_config(tmp_path))
        assert files[0].template == "project/main.go.tmpl"
        assert files[0].destination == tmp_path / "orders" / "cmd" / "server" / "main.go"
        assert files[-1].template == "internal/handler/sample/create_sample_handler.go.tmpl"

    def test_dotfiles(self, tmp_path):
        destinations = {entry.destination.name for entry in build_files(_config(tmp_path))}
        assert {".env.docker", ".env.example", ".gitignore"} <= destinations

    def test_entity_file_names(self, tmp_path):
        internal = tmp_path / "orders" / "internal"
        destinations = {entry.destination for entry in build_files(_config(tmp_path))}
        assert internal / "entity" / "product.go" in destinations
        assert internal / "dto" / "request" / "product_request.go" in destinations
        assert internal / "dto" / "response" / "product_response.go" in destinations
        assert internal / "repository" / "product_repository.go" in destinations
        assert internal / "database" / "query" / "product.sql" in destinations
        assert internal / "service" / "product" / "product.go" in destinations
        assert internal / "service" / "product" / "create_product_service.go" in destinations
        assert internal / "handler" / "product" / "product_handler.go" in destinations
        assert internal / "handler" / "product" / "create_product_handler.go" in destinations

    def test_migration_name(self, tmp_path):
        names = [entry.destination.name for entry in build_files(_config(tmp_path))]
        assert "001_create_initial_schema.sql" in names

    def test_every_file_inside_a_created_directory(self, tmp_path):
        config = _config(tmp_path)
        directories = build_directories(config)
        for entry in build_files(config):
            parent = entry.destination.parent
            assert any(parent == d or parent in d.parents for d in directories), entry.destination


class TestBuildManifest:
    def test_deterministic(self, tmp_path):
        assert build_manifest(_config(tmp_path)) == build_manifest(_config(tmp_path))

    def test_destinations_unique(self, tmp_path):
        files = build_manifest(_config(tmp_path)).files
        assert len({entry.destination for entry in files}) == len(files)

    def test_templates_property(self, tmp_path):
        manifest = build_manifest(_config(tmp_path))
        assert manifest.templates == [entry.template for entry in manifest.files]

    def test_does_not_touch_filesystem(self, tmp_path):
        build_manifest(_config(tmp_path))
        assert list(tmp_path.iterdir()) == []

    def test_entity_called_health_collides(self, tmp_path):
        with pytest.raises(ConfigValidationError, match="health_handler.go"):
            build_manifest(_config(tmp_path, "health"))

    def test_multiword_entity(self, tmp_path):
        manifest = build_manifest(_config(tmp_path, "orderItem"))
        names = {entry.destination.name for entry in manifest.files}
        assert "orderitem_request.go" in names

    @pytest.mark.parametrize("entity", ["../../x", "a/b", "order item", "order-item", "9lives", ".."])
    def test_entity_must_be_go_identifier(self, tmp_path, entity):
        config = ProjectConfig.new("orders")
        config.output_dir = tmp_path
        config.sample_api_name = entity
        config.process()
        with pytest.raises(ConfigValidationError, match="must be a Go identifier"):
            build_manifest(config)

    def test_underscore_entity_allowed(self, tmp_path):
        manifest = build_manifest(_config(tmp_path, "line_item"))
        assert tmp_path / "orders" / "internal" / "service" / "line_item" in manifest.directories
