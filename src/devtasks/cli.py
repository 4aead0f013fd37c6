"""devtasks CLI - resolve multi-target task config and manage sibling repositories."""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path

import typer
import yaml  # type: ignore[import-untyped]
from rich.console import Console
from rich.markup import escape

from devtasks import __version__
from devtasks.exec import CommandExecutionError
from devtasks.git.state import GIT_STATE
from devtasks.multitask import PreconditionViolation
from devtasks.repos import filter_dependencies, parse_reference
from devtasks.taskfile import DEFAULT_TASK_FILE, TaskFileError, configure_all, create_session, load_task_file
from devtasks.workspace import ManifestError, init_workspace, read_dependencies

cli = typer.Typer(
    name="devtasks",
    help="devtasks - multi-target task configuration helpers",
    no_args_is_help=True,
)
git_app = typer.Typer(name="git", help="Cached git state views", no_args_is_help=True)
cli.add_typer(git_app, name="git")
workspace_app = typer.Typer(name="workspace", help="Sibling repository workspace", no_args_is_help=True)
cli.add_typer(workspace_app, name="workspace")

console = Console()

FAILURES = (CommandExecutionError, ManifestError, PreconditionViolation, TaskFileError)


class OutputFormat(str, Enum):
    """Rendering of resolved config."""

    YAML = "yaml"
    JSON = "json"


def _fail(exc: Exception) -> typer.Exit:
    console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
    return typer.Exit(1)


def _version_option_callback(value: bool) -> None:
    """Handle eager --version option."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@cli.callback()
def _cli_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show devtasks version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
) -> None:
    """Configure logging for every invocation."""
    _ = version
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command("plan")
def plan(
    tasks: list[str] = typer.Argument(None, help="Tasks requested from the task runner (empty runs default)."),
    file: Path = typer.Option(Path(DEFAULT_TASK_FILE), "--file", "-f", help="Task file to load."),
    output_format: OutputFormat = typer.Option(OutputFormat.YAML, "--format", help="Output format."),
) -> None:
    """Print the config resolved for the requested tasks."""
    try:
        task_file = load_task_file(file)
        session = create_session(task_file, tasks or [])
        config = configure_all(session, task_file)
    except FAILURES as exc:
        raise _fail(exc) from exc

    if output_format is OutputFormat.JSON:
        typer.echo(json.dumps(config, indent=2))
    else:
        typer.echo(yaml.safe_dump(config, sort_keys=False).rstrip("\n"))


@cli.command("deps")
def deps(
    project_root: Path = typer.Option(Path("."), "--project-root", help="Directory holding package.json."),
) -> None:
    """List dependencies that resolve to sibling repositories."""
    try:
        dependencies = filter_dependencies(read_dependencies(project_root))
    except FAILURES as exc:
        raise _fail(exc) from exc

    if dependencies is None:
        console.print("No repository dependencies found.")
        return

    for name, reference in dependencies.items():
        parsed = parse_reference(reference)
        if parsed is None:
            continue
        ref = parsed.ref or "(default branch)"
        typer.echo(f"{name}\t{parsed.repo_path}\t{ref}")


@workspace_app.command("init")
def workspace_init(
    project_root: Path = typer.Option(Path("."), "--project-root", help="Directory holding package.json."),
    workspace_root: Path = typer.Option(Path(".."), "--workspace-root", help="Directory to clone siblings into."),
) -> None:
    """Clone missing sibling repositories and npm link them into the project."""
    try:
        report = init_workspace(project_root, workspace_root)
    except FAILURES as exc:
        raise _fail(exc) from exc

    console.print(f"[cyan]Workspace:[/cyan] {report.workspace_root}")
    for label, names in (("Cloned", report.cloned), ("Skipped", report.skipped), ("Linked", report.linked)):
        console.print(f"[cyan]{label}:[/cyan] {', '.join(names) or 'none'}")


@git_app.command("dirty")
def git_dirty() -> None:
    """List files that differ between the index and HEAD."""
    try:
        files = GIT_STATE.dirty_files()
    except FAILURES as exc:
        raise _fail(exc) from exc

    for path in files:
        typer.echo(path)


@git_app.command("ignores")
def git_ignores() -> None:
    """List entries of .gitignore."""
    try:
        entries = GIT_STATE.ignore_list()
    except OSError as exc:
        raise _fail(exc) from exc

    for entry in entries:
        typer.echo(entry)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
