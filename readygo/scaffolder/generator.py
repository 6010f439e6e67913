"""Main scaffolding orchestrator.

Takes a processed ``ProjectConfig`` and generates a complete Go service
project: directory tree, rendered files, ``go mod init``, an optional
``git init`` and ``go mod tidy``.

Steps run strictly one after another.  Validation, the target-exists check,
directory creation, rendering and ``go mod init`` are fatal on failure; the
git and dependency steps only produce warnings.  Partial output of a failed
run is left on disk for the operator to inspect.
"""

from __future__ import annotations

import enum
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import NoReturn

from readygo.config import ProjectConfig
from readygo.errors import (
    GenerationError,
    PreconditionError,
    ScaffoldError,
    ToolInvocationError,
)
from readygo.utils import combine_output, print_step, print_warning, run_command

from .manifest import Manifest, build_manifest
from .renderer import TemplateRenderer
from .templates import TemplateResolver

CommandRunner = Callable[..., Awaitable[tuple[int, str, str]]]


class GenerationState(str, enum.Enum):
    """Progress of one generation run."""

    INIT = "init"
    DIRS_CREATED = "dirs_created"
    FILES_RENDERED = "files_rendered"
    MODULE_INITIALIZED = "module_initialized"
    GIT_INITIALIZED = "git_initialized"
    DEPENDENCIES_RESOLVED = "dependencies_resolved"
    DONE = "done"
    FAILED = "failed"


class Step:
    """Step names used in ``GenerationError.step``."""

    VALIDATE = "validate configuration"
    PRECONDITION = "check target directory"
    DIRECTORIES = "create directory structure"
    FILES = "generate files"
    MODULE = "initialize go module"


@dataclass
class GenerationResult:
    """Outcome of a successful run; ``warnings`` lists the non-fatal failures."""

    project_path: Path
    files: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    state: GenerationState = GenerationState.INIT

    @property
    def clean(self) -> bool:
        return not self.warnings


class ProjectGenerator:
    """Drives one generation run for a ``ProjectConfig``.

    Args:
        config: A config that has already been through ``process()``.  It is
            validated again before anything touches the filesystem but never
            modified.
        resolver: Template source.  Defaults to the bundled templates with
            the standard disk fallback.
        runner: Async callable ``(cmd, cwd=...) -> (returncode, stdout, stderr)``
            used for ``go`` and ``git``.  Defaults to ``run_command``.
    """

    def __init__(
        self,
        config: ProjectConfig,
        resolver: TemplateResolver | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        self.config = config
        self.renderer = TemplateRenderer(config, resolver)
        self.runner: CommandRunner = runner or run_command
        self.state = GenerationState.INIT

    # -- Public API --------------------------------------------------------

    async def generate(self) -> GenerationResult:
        """Generate the project.

        Returns:
            The result of the run, including any warnings.

        Raises:
            GenerationError: On any fatal step.  The specific error is
                available as ``__cause__``.
        """
        self.state = GenerationState.INIT
        project_path = self.config.project_path
        result = GenerationResult(project_path=project_path)

        try:
            self.config.validate()
            manifest = build_manifest(self.config)
        except ScaffoldError as exc:
            self._fail(Step.VALIDATE, str(exc), exc)

        if project_path.exists():
            error = PreconditionError(project_path)
            self._fail(Step.PRECONDITION, str(error), error)

        print_step("Creating directory structure...")
        self._create_directories(manifest)
        self.state = GenerationState.DIRS_CREATED

        print_step("Generating project files...")
        result.files = await self._render_files(manifest)
        self.state = GenerationState.FILES_RENDERED

        print_step("Initializing go module...")
        try:
            await self._run_tool(["go", "mod", "init", self.config.module_name])
        except ToolInvocationError as exc:
            self._fail(Step.MODULE, str(exc), exc)
        self.state = GenerationState.MODULE_INITIALIZED

        if not self.config.skip_git:
            print_step("Initializing git repository...")
            try:
                await self._run_tool(["git", "init"])
                self.state = GenerationState.GIT_INITIALIZED
            except ToolInvocationError as exc:
                self._warn(result, f"Warning: failed to initialize git: {exc}")

        print_step("Downloading dependencies...")
        try:
            await self._run_tool(["go", "mod", "tidy"])
            self.state = GenerationState.DEPENDENCIES_RESOLVED
        except ToolInvocationError as exc:
            self._warn(
                result,
                f"Warning: failed to download dependencies: {exc}\n"
                "Run 'go mod tidy' manually in the project directory",
            )

        self.state = GenerationState.DONE
        result.state = self.state
        return result

    # -- Steps -------------------------------------------------------------

    def _create_directories(self, manifest: Manifest) -> None:
        for directory in manifest.directories:
            try:
                directory.mkdir(mode=0o755, parents=True, exist_ok=True)
            except OSError as exc:
                self._fail(Step.DIRECTORIES, f"failed to create directory {directory}: {exc}", exc)

    async def _render_files(self, manifest: Manifest) -> list[Path]:
        written: list[Path] = []
        for entry in manifest.files:
            try:
                written.append(
                    await self.renderer.render_to_file(entry.template, entry.destination)
                )
            except (ScaffoldError, OSError) as exc:
                self._fail(
                    Step.FILES,
                    f"failed to generate {entry.destination} from {entry.template}: {exc}",
                    exc,
                )
        return written

    async def _run_tool(self, cmd: list[str]) -> None:
        """Run *cmd* inside the project root; raise on failure."""
        try:
            returncode, stdout, stderr = await self.runner(cmd, cwd=self.config.project_path)
        except OSError as exc:
            raise ToolInvocationError(cmd, None, str(exc)) from exc
        if returncode != 0:
            raise ToolInvocationError(cmd, returncode, combine_output(stdout, stderr))

    # -- Failure handling --------------------------------------------------

    def _fail(self, step: str, message: str, cause: BaseException) -> NoReturn:
        self.state = GenerationState.FAILED
        raise GenerationError(step, message) from cause

    @staticmethod
    def _warn(result: GenerationResult, message: str) -> None:
        result.warnings.append(message)
        print_warning(message)
