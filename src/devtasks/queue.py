"""Task queue membership checks."""

from __future__ import annotations

from collections.abc import Sequence

DEFAULT_TASK = "default"


def is_default_run(queue: Sequence[str]) -> bool:
    """An empty queue runs the default task, same as naming it."""
    return not queue or DEFAULT_TASK in queue


def is_queued(task_id: str, queue: Sequence[str], default_members: Sequence[str] = ()) -> bool:
    """Check whether ``task`` or ``task:target`` will be run for this queue.

    A task is queued when it was requested directly, or when the default task
    runs and lists it as a member.
    """
    if task_id in queue:
        return True
    return is_default_run(queue) and task_id in default_members
