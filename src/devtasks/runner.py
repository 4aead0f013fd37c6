"""Task runner contract consumed by the configuration helpers."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from devtasks.store import ConfigStore


class TaskRunner(Protocol):
    """What the helpers need from the task runner driving the build."""

    cli_tasks: Sequence[str]
    config: ConfigStore

    def default_task_members(self) -> Sequence[str]:
        """Task ids (``task`` or ``task:target``) run by the default task."""
        ...

    def read_file(self, path: str) -> str:
        ...


@dataclass
class TaskSession:
    """Task runner adapter for a single build invocation."""

    cli_tasks: tuple[str, ...] = ()
    default_members: tuple[str, ...] = ()
    config: ConfigStore = field(default_factory=ConfigStore)
    root: Path = field(default_factory=Path.cwd)

    def default_task_members(self) -> Sequence[str]:
        return self.default_members

    def read_file(self, path: str) -> str:
        return (self.root / path).read_text(encoding="utf-8")
