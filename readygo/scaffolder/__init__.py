"""readygo scaffolder -- generates a Go service project from a ``ProjectConfig``.

Quick usage::

    from readygo.config import ProjectConfig
    from readygo.scaffolder import ProjectGenerator

    config = ProjectConfig.new("orders")
    config.sample_api_name = "order"
    config.process()
    config.validate()
    result = await ProjectGenerator(config).generate()
"""

from readygo.scaffolder.generator import GenerationResult, GenerationState, ProjectGenerator
from readygo.scaffolder.manifest import Manifest, ManifestEntry, build_manifest
from readygo.scaffolder.renderer import TemplateRenderer, parse_template
from readygo.scaffolder.templates import BundledTemplates, TemplateResolver

__all__ = [
    "BundledTemplates",
    "GenerationResult",
    "GenerationState",
    "Manifest",
    "ManifestEntry",
    "ProjectGenerator",
    "TemplateRenderer",
    "TemplateResolver",
    "build_manifest",
    "parse_template",
]
