"""Exception hierarchy shared by the configuration model and the scaffolder.

Every failure raised by ``readygo`` derives from :class:`ScaffoldError` so
that the CLI can report it uniformly.  Fatal failures during a generation
run are surfaced as :class:`GenerationError`, chained to the specific error
that caused them.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for all readygo errors."""


class ConfigValidationError(ScaffoldError):
    """Raised when a ``ProjectConfig`` violates one of its invariants."""


class PreconditionError(ScaffoldError):
    """Raised when the generation target already exists."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"directory {path} already exists")


class TemplateNotFoundError(ScaffoldError):
    """Raised when a template is absent from the bundle and every disk path."""

    def __init__(self, name: str, searched: list[str] | None = None) -> None:
        self.name = name
        self.searched = searched or []
        super().__init__(f"template {name} not found in embedded bundle or on disk")


class RenderError(ScaffoldError):
    """Raised when a template cannot be parsed or evaluated."""

    def __init__(self, template: str, message: str, line: int | None = None) -> None:
        self.template = template
        self.line = line
        location = f"{template}:{line}" if line is not None else template
        super().__init__(f"{location}: {message}")


class ToolInvocationError(ScaffoldError):
    """Raised when an external command exits non-zero or cannot be started."""

    def __init__(self, command: list[str], returncode: int | None, output: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.output = output
        cmd_str = " ".join(command)
        if returncode is None:
            message = f"{cmd_str} could not be started"
        else:
            message = f"{cmd_str} failed (exit {returncode})"
        if output:
            message = f"{message}\n{output}"
        super().__init__(message)


class GenerationError(ScaffoldError):
    """Raised when a generation run aborts on a fatal step."""

    def __init__(self, step: str, message: str) -> None:
        self.step = step
        super().__init__(f"{step}: {message}")
