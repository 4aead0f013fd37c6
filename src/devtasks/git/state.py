"""Process-wide memoized views of repository state."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from pathlib import Path

from devtasks.exec import run_shell

logger = logging.getLogger(__name__)

GITIGNORE_PATH = ".gitignore"
DIRTY_FILES_COMMAND = "git diff-index --name-only HEAD"

_COMMENT_LINE = re.compile(r"^#.*$", re.MULTILINE)
_NEWLINES = re.compile(r"\n+")
_TRAILING_WHITESPACE = re.compile(r"\s*$")

ReadFile = Callable[[str], str]
RunShell = Callable[[str], str]


def _read_text(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def parse_gitignore(text: str) -> tuple[str, ...]:
    """Turn .gitignore contents into its list of entries."""
    stripped = _COMMENT_LINE.sub("", text)
    return tuple(entry for entry in _NEWLINES.split(stripped) if entry)


def parse_dirty_files(output: str) -> tuple[str, ...]:
    """Turn `git diff-index --name-only` output into a list of paths."""
    files = _TRAILING_WHITESPACE.sub("", output, count=1).split("\n")
    # No output splits into a single empty name.
    if len(files) == 1 and not files[0]:
        return ()
    return tuple(files)


class GitStateCache:
    """Lazily computed git views, each built at most once.

    Values are never invalidated while the process lives; ``reset`` exists for
    test isolation only.
    """

    def __init__(
        self,
        *,
        run: RunShell | None = None,
        gitignore_path: str = GITIGNORE_PATH,
    ) -> None:
        self._run = run
        self._gitignore_path = gitignore_path
        self._ignore_list: tuple[str, ...] | None = None
        self._dirty_files: tuple[str, ...] | None = None

    def ignore_list(self, read_file: ReadFile | None = None) -> tuple[str, ...]:
        """Return the .gitignore entries, reading the file on first use."""
        if self._ignore_list is None:
            reader = read_file or _read_text
            self._ignore_list = parse_gitignore(reader(self._gitignore_path))
            logger.debug("loaded %d entries from %s", len(self._ignore_list), self._gitignore_path)
        return self._ignore_list

    def dirty_files(self) -> tuple[str, ...]:
        """Return the files that differ between the index and HEAD."""
        if self._dirty_files is None:
            run = self._run or run_shell
            self._dirty_files = parse_dirty_files(run(DIRTY_FILES_COMMAND))
            logger.debug("found %d dirty files", len(self._dirty_files))
        return self._dirty_files

    def reset(self) -> None:
        self._ignore_list = None
        self._dirty_files = None


GIT_STATE = GitStateCache()
