"""Declarative task file loader.

A task file describes the multi-target tasks of a project::

    default: ["jshint:git"]
    config: {}
    tasks:
      jshint:
        options: {jshintrc: true}
        add_gitignore: ignores
        targets:
          git: {dirty_files: ["*.js"]}
          all: {value: {src: ["**/*.js"]}}

A target either carries a literal ``value`` or selects the ``dirty_files``
matching any of its glob patterns.
"""

from __future__ import annotations

import copy
import fnmatch
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from devtasks.git.state import GIT_STATE, GitStateCache
from devtasks.multitask import ALL_TARGET, MultiTaskOptions, TargetThunk, configure_multitask
from devtasks.runner import TaskSession
from devtasks.store import ConfigStore

DEFAULT_TASK_FILE = "devtasks.yaml"


class TaskFileError(RuntimeError):
    """Raised when a task file cannot be read or is malformed."""


@dataclass(frozen=True)
class TargetSpec:
    """One target of a task file task."""

    name: str
    value: Any = None
    dirty_files: tuple[str, ...] | None = None


@dataclass(frozen=True)
class TaskSpec:
    """One multi-target task of a task file."""

    name: str
    targets: tuple[TargetSpec, ...]
    options: dict[str, Any] = field(default_factory=dict)
    add_gitignore: str | None = None


@dataclass(frozen=True)
class TaskFile:
    """Parsed task file."""

    tasks: tuple[TaskSpec, ...]
    default_members: tuple[str, ...] = ()
    config: dict[str, Any] = field(default_factory=dict)


def _string_list(value: Any, where: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise TaskFileError(f"{where} must be a list of strings")
    return tuple(value)


def _parse_target(task: str, name: str, raw: Any) -> TargetSpec:
    where = f"tasks.{task}.targets.{name}"
    if not isinstance(raw, dict):
        raise TaskFileError(f"{where} must be a mapping")
    if ("value" in raw) == ("dirty_files" in raw):
        raise TaskFileError(f"{where} needs exactly one of `value` or `dirty_files`")
    if "dirty_files" in raw:
        return TargetSpec(name=name, dirty_files=_string_list(raw["dirty_files"], f"{where}.dirty_files"))
    return TargetSpec(name=name, value=raw["value"])


def _parse_task(name: str, raw: Any) -> TaskSpec:
    if not isinstance(raw, dict):
        raise TaskFileError(f"tasks.{name} must be a mapping")

    targets_raw = raw.get("targets")
    if not isinstance(targets_raw, dict) or ALL_TARGET not in targets_raw:
        raise TaskFileError(f"tasks.{name}.targets must be a mapping with an `{ALL_TARGET}` target")

    options = raw.get("options", {})
    if options is None:
        options = {}
    if not isinstance(options, dict):
        raise TaskFileError(f"tasks.{name}.options must be a mapping")

    add_gitignore = raw.get("add_gitignore")
    if add_gitignore is not None and not isinstance(add_gitignore, str):
        raise TaskFileError(f"tasks.{name}.add_gitignore must be a string")

    return TaskSpec(
        name=name,
        targets=tuple(_parse_target(name, str(target), spec) for target, spec in targets_raw.items()),
        options=options,
        add_gitignore=add_gitignore,
    )


def parse_task_file(raw: Any) -> TaskFile:
    """Validate a loaded task file document."""
    if not isinstance(raw, dict):
        raise TaskFileError("task file parse error: expected mapping at top level")

    tasks_raw = raw.get("tasks")
    if not isinstance(tasks_raw, dict) or not tasks_raw:
        raise TaskFileError("task file missing required non-empty `tasks` mapping")

    config = raw.get("config", {})
    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise TaskFileError("task file `config` must be a mapping")

    return TaskFile(
        tasks=tuple(_parse_task(str(name), spec) for name, spec in tasks_raw.items()),
        default_members=_string_list(raw.get("default", []), "default"),
        config=config,
    )


def load_task_file(path: Path) -> TaskFile:
    """Load and validate a YAML task file."""
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise TaskFileError(f"unable to read task file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise TaskFileError(f"task file parse error in {path}: {exc}") from exc
    return parse_task_file(raw)


def match_patterns(paths: Sequence[str], patterns: Sequence[str]) -> list[str]:
    """Keep the paths matching any of the glob patterns, in order."""
    return [path for path in paths if any(fnmatch.fnmatch(path, pattern) for pattern in patterns)]


def build_thunk(target: TargetSpec, git_state: GitStateCache) -> TargetThunk:
    """Turn a target description into a deferred config builder."""
    if target.dirty_files is not None:
        patterns = target.dirty_files
        return lambda: match_patterns(git_state.dirty_files(), patterns)

    value = target.value
    return lambda: copy.deepcopy(value)


def create_session(
    task_file: TaskFile,
    cli_tasks: Sequence[str],
    *,
    root: Path | None = None,
) -> TaskSession:
    """Create the runner session described by a task file."""
    return TaskSession(
        cli_tasks=tuple(cli_tasks),
        default_members=task_file.default_members,
        config=ConfigStore(task_file.config),
        root=(root or Path.cwd()).resolve(),
    )


def configure_all(
    session: TaskSession,
    task_file: TaskFile,
    *,
    git_state: GitStateCache = GIT_STATE,
) -> dict[str, Any]:
    """Configure every task of the file in order and return the resulting config."""
    for task in task_file.tasks:
        options = MultiTaskOptions(
            targets={target.name: build_thunk(target, git_state) for target in task.targets},
            default_options=copy.deepcopy(task.options),
            add_gitignore=task.add_gitignore,
        )
        configure_multitask(session, task.name, options, git_state=git_state)
    return session.config.as_dict()
