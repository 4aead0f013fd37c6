"""Shell command runners for devtasks."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecResult:
    """Result envelope for a shell invocation."""

    command: str
    cwd: Path
    returncode: int
    output: str


class CommandExecutionError(RuntimeError):
    """Raised when a command returns non-zero in check mode."""

    def __init__(self, result: ExecResult):
        super().__init__(f"Error while executing `{result.command}`:\n\n{result.output}")
        self.result = result

    @property
    def command(self) -> str:
        return self.result.command

    @property
    def output(self) -> str:
        return self.result.output


def run_command(
    command: str,
    *,
    cwd: Path | None = None,
    check: bool = True,
) -> ExecResult:
    """Run command through the shell with stdout and stderr combined."""
    workdir = (cwd or Path.cwd()).resolve()
    logger.debug("exec: %s (cwd=%s)", command, workdir)
    completed = subprocess.run(
        command,
        shell=True,
        cwd=workdir,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        check=False,
    )
    result = ExecResult(
        command=command,
        cwd=workdir,
        returncode=completed.returncode,
        output=completed.stdout or "",
    )
    if check and result.returncode != 0:
        raise CommandExecutionError(result)
    return result


def run_shell(command: str, *, cwd: Path | None = None) -> str:
    """Run command and return its captured output."""
    return run_command(command, cwd=cwd).output


def join_commands(commands: list[str]) -> str:
    """Chain commands so the first failure aborts the rest."""
    return " && ".join(commands)
