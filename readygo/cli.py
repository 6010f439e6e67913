"""Command-line entry point for ``readygo``.

Usage::

    readygo new my-service
    readygo new my-service -m github.com/acme/my-service --no-with-kafka
    readygo new my-service --interactive
    readygo new --config project.json
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt

from readygo import __version__
from readygo.config import ProjectConfig
from readygo.errors import ConfigValidationError, GenerationError, ScaffoldError
from readygo.scaffolder import ProjectGenerator
from readygo.scaffolder.generator import Step
from readygo.utils import console, print_error, print_success, print_summary_table


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="readygo",
        description="Scaffold production-ready Go projects with clean architecture",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  readygo new my-service\n"
            "  readygo new my-service -m github.com/acme/my-service --sample-api Product\n"
            "  readygo new my-service --no-with-kafka --skip-git\n"
            "  readygo new --config project.json\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    new = subparsers.add_parser("new", help="Create a new Go project")
    new.add_argument("project_name", nargs="?", help="Name of the project directory")
    new.add_argument("--module", "-m", help="Go module name")
    new.add_argument("--description", "-d", help="Project description")
    new.add_argument("--author", help="Author name")
    new.add_argument("--output", "-o", help="Output directory (default: .)")
    new.add_argument(
        "--with-redis",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Include Redis in docker-compose (default: yes)",
    )
    new.add_argument(
        "--with-kafka",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Include Kafka in docker-compose (default: yes)",
    )
    new.add_argument("--sample-api", help="Sample API entity name (default: User)")
    new.add_argument("--skip-git", action="store_true", default=None, help="Skip git initialization")
    new.add_argument("--config", "-c", type=Path, help="Load settings from a JSON file")
    new.add_argument(
        "--interactive", "-i", action="store_true", help="Interactive mode with prompts"
    )
    return parser


def config_from_args(args: argparse.Namespace) -> ProjectConfig:
    """Build a ``ProjectConfig`` from parsed ``new`` arguments.

    Precedence, lowest first: defaults, ``READYGO_*`` environment, the
    ``--config`` file, then explicit flags.
    """
    if args.config is not None:
        config = ProjectConfig.load(args.config, project_name=args.project_name)
    elif args.project_name:
        config = ProjectConfig.from_env(args.project_name)
    else:
        raise ConfigValidationError(
            "project name is required\nUsage: readygo new <project-name>"
        )

    if args.module:
        config.module_name = args.module
    if args.description:
        config.description = args.description
    if args.author:
        config.author = args.author
    if args.output:
        config.output_dir = Path(args.output)
    if args.with_redis is not None:
        config.with_redis = args.with_redis
    if args.with_kafka is not None:
        config.with_kafka = args.with_kafka
    if args.sample_api:
        config.sample_api_name = args.sample_api
    if args.skip_git is not None:
        config.skip_git = args.skip_git
    return config


# ---------------------------------------------------------------------------
# Interactive prompts
# ---------------------------------------------------------------------------


def prompt_for_config(config: ProjectConfig) -> None:
    """Ask the operator for each setting, keeping the current value on Enter."""
    console.print("\n[bold]Let's configure your project![/bold]\n")

    config.module_name = Prompt.ask("Module name", default=config.module_name, console=console)
    config.description = Prompt.ask(
        "Project description", default=config.description, console=console
    )
    config.author = Prompt.ask("Author name (optional)", default=config.author, console=console)
    config.sample_api_name = Prompt.ask(
        "Sample API entity name", default=config.sample_api_name, console=console
    )
    config.with_redis = Confirm.ask("Include Redis?", default=config.with_redis, console=console)
    config.with_kafka = Confirm.ask("Include Kafka?", default=config.with_kafka, console=console)
    config.skip_git = Confirm.ask(
        "Skip git initialization?", default=config.skip_git, console=console
    )
    console.print()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def run_new(args: argparse.Namespace) -> int:
    """Execute ``readygo new``; return the process exit code."""
    try:
        config = config_from_args(args)
        if args.interactive:
            prompt_for_config(config)
        config.process()
    except (ConfigValidationError, ValidationError, OSError) as exc:
        print_error(f"Error: invalid configuration: {exc}")
        return 1

    console.print(
        Panel(
            f"Project:    [bold]{escape(config.project_name)}[/bold]\n"
            f"Module:     {escape(config.module_name)}\n"
            f"Sample API: {escape(config.sample_api_name)}",
            title="Creating project",
            border_style="cyan",
        )
    )

    # The generator validates the config before touching the filesystem.
    try:
        result = asyncio.run(ProjectGenerator(config).generate())
    except GenerationError as exc:
        if exc.step == Step.VALIDATE:
            print_error(f"Error: invalid configuration: {exc.__cause__}")
        else:
            print_error(f"Error: failed to generate project: {exc}")
        return 1
    except ScaffoldError as exc:
        print_error(f"Error: failed to generate project: {exc}")
        return 1

    console.print()
    print_success(f"Project successfully created at {result.project_path}")
    print_summary_table(
        {
            "cd": str(result.project_path),
            "make up": "Start all services",
            "make migrate-up": "Run migrations",
            "make run": "Start the application",
            "Application": f"http://localhost:{config.app_port}",
            "Sample API": f"http://localhost:{config.app_port}/api/v1/{config.sample_table_name}",
        },
        title="Next steps",
    )
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``readygo`` and ``python -m readygo``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "new":
        sys.exit(run_new(args))
    parser.error(f"unknown command: {args.command}")


if __name__ == "__main__":
    main()
