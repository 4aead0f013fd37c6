"""Configure multi-target tasks for the targets that are going to run."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from devtasks.git.state import GIT_STATE, GitStateCache
from devtasks.queue import is_queued
from devtasks.runner import TaskRunner

logger = logging.getLogger(__name__)

ALL_TARGET = "all"

TargetThunk = Callable[[], Any]


class PreconditionViolation(ValueError):
    """Raised when a multi-task is described incorrectly by its caller."""


@dataclass
class MultiTaskOptions:
    """Description of a multi-target task.

    ``targets`` maps target names to zero-argument callables building that
    target's config. The ``"all"`` target is required and is only used when no
    other target is queued. ``add_gitignore`` names an option (dotted path
    under ``<task>.options``) that receives the .gitignore entries.
    """

    targets: Mapping[str, TargetThunk]
    default_options: dict[str, Any] = field(default_factory=dict)
    add_gitignore: str | None = None


def configure_multitask(
    runner: TaskRunner,
    task: str,
    options: MultiTaskOptions,
    *,
    git_state: GitStateCache = GIT_STATE,
) -> dict[str, Any]:
    """Build config for the queued targets of ``task`` and merge it into the runner.

    Target callables run at most once, and only for targets that are queued.
    When none is queued the ``"all"`` target is configured instead.

    Returns the task config that was merged.
    """
    if ALL_TARGET not in options.targets:
        raise PreconditionViolation(f"multi-task {task!r} must define an {ALL_TARGET!r} target")

    config: dict[str, Any] = {"options": options.default_options}
    queue = runner.cli_tasks
    default_members = runner.default_task_members()
    used_all = True

    for target, build in options.targets.items():
        if target == ALL_TARGET:
            continue
        if is_queued(f"{task}:{target}", queue, default_members):
            logger.debug("configuring %s:%s", task, target)
            config[target] = build()
            used_all = False

    if used_all:
        logger.debug("no %s target queued, configuring %s:%s", task, task, ALL_TARGET)
        config[ALL_TARGET] = options.targets[ALL_TARGET]()

    if options.add_gitignore:
        ignore_path = f"{task}.options.{options.add_gitignore}"
        ignores = list(runner.config.get(ignore_path) or [])
        ignores.extend(git_state.ignore_list(runner.read_file))
        runner.config.set(ignore_path, ignores)

    task_config = {task: config}
    runner.config.merge(task_config)
    return task_config
