"""Jinja2 template rendering for project scaffolding.

Templates are rendered against :meth:`ProjectConfig.template_context`:

* ``{{ field }}`` substitutes a configuration value; booleans render as
  ``true`` / ``false``.
* ``{{ helper('arg') }}`` calls a helper such as ``container_name``.
* ``{% if flag %}`` / ``{% if not flag %}`` / ``{% else %}`` / ``{% endif %}``
  include a region only when a boolean field holds.

Undefined names are errors (``StrictUndefined``), and every ``if`` keyed on a
single field must be keyed on a boolean one.  Jinja2 failures are re-raised
as :class:`RenderError` carrying the template name.
"""

from __future__ import annotations

import asyncio
from pathlib import Path, PurePath
from typing import Any, Mapping

from jinja2 import (
    BaseLoader,
    Environment,
    StrictUndefined,
    TemplateRuntimeError,
    TemplateSyntaxError,
    meta,
    nodes,
)

from readygo.config import ProjectConfig
from readygo.errors import RenderError

from .templates import TemplateResolver


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


def format_value(value: Any) -> str:
    """Format a configuration value for substitution into a template."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, PurePath):
        return value.as_posix()
    return str(value)


def create_environment(loader: BaseLoader | None = None) -> Environment:
    """Jinja2 environment shared by every scaffold template."""
    return Environment(
        loader=loader,
        autoescape=False,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
        finalize=format_value,
    )


# ---------------------------------------------------------------------------
# Syntax tree helpers
# ---------------------------------------------------------------------------


def parse_template(text: str, name: str = "<string>", env: Environment | None = None) -> nodes.Template:
    """Parse *text* into a Jinja2 node tree without rendering it.

    Literal text appears as ``nodes.TemplateData``, substitutions as
    ``nodes.Name`` / ``nodes.Call`` inside ``nodes.Output``, and conditional
    regions as ``nodes.If``.

    Raises:
        RenderError: If the text is not valid template syntax.
    """
    env = env or create_environment()
    try:
        return env.parse(text, name=name)
    except TemplateSyntaxError as exc:
        raise RenderError(name, exc.message or str(exc), exc.lineno) from exc


def referenced_fields(tree: nodes.Template) -> set[str]:
    """Names a template reads from its context, helpers included."""
    return meta.find_undeclared_variables(tree)


def conditional_flags(tree: nodes.Template) -> list[tuple[str, int]]:
    """``(field, line)`` for every ``if`` / ``if not`` keyed on one field."""
    flags: list[tuple[str, int]] = []
    for node in tree.find_all(nodes.If):
        test = node.test
        if isinstance(test, nodes.Not):
            test = test.node
        if isinstance(test, nodes.Name):
            flags.append((test.name, node.lineno))
    return flags


def _check_flags(name: str, tree: nodes.Template, context: Mapping[str, Any]) -> None:
    for flag, line in conditional_flags(tree):
        if flag in context and not isinstance(context[flag], bool):
            raise RenderError(name, f"'{flag}' is not a boolean field", line)


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders named templates against a ``ProjectConfig``.

    Templates are fetched through a :class:`TemplateResolver`; the
    configuration is only read.
    """

    def __init__(self, config: ProjectConfig, resolver: TemplateResolver | None = None) -> None:
        self.config = config
        self.resolver = resolver or TemplateResolver()
        self.env = create_environment(self.resolver.loader)

    def render(self, template_name: str) -> str:
        """Resolve and render *template_name*.

        Raises:
            TemplateNotFoundError: If the template cannot be resolved.
            RenderError: If the template is malformed or reads an unknown field.
        """
        text = self.resolver.resolve(template_name)
        return self.render_string(text, template_name)

    def render_string(self, text: str, name: str = "<string>") -> str:
        """Render inline template text."""
        context = self.config.template_context()
        tree = parse_template(text, name, self.env)
        _check_flags(name, tree, context)
        try:
            return self.env.from_string(tree).render(context)
        except (TemplateRuntimeError, TypeError) as exc:
            raise RenderError(name, str(exc)) from exc

    async def render_to_file(self, template_name: str, output_path: str | Path) -> Path:
        """Render a template and write the result to *output_path*.

        The file is created or truncated only after rendering succeeded, so a
        broken template never leaves a half-written file behind.
        """
        content = self.render(template_name)
        out = Path(output_path)
        await asyncio.to_thread(_write_bytes, out, content.encode("utf-8"))
        return out


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_bytes(path: Path, data: bytes) -> None:
    # No newline translation: generated files are LF on every platform.
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
