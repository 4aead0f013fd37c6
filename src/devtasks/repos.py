"""Shorthand GitHub repository references for sibling packages.

Only short references under the ``ckeditor/`` organisation are resolved, e.g.
``ckeditor/ckeditor5-core#v0.4.0``. See
https://docs.npmjs.com/files/package.json#github-urls for the format.
"""

from __future__ import annotations

import logging
import re
import shlex
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from devtasks.exec import join_commands, run_shell

logger = logging.getLogger(__name__)

REPOSITORY_PATTERN = re.compile(r"^(?P<repo_path>ckeditor/[^#]+)(?:#(?P<ref>.*))?$")
DEPENDENCY_PREFIX = "ckeditor5-"
GITHUB_SSH_HOST = "git@github.com"


@dataclass(frozen=True)
class RepositoryReference:
    """Parsed ``owner/repo[#ref]`` reference."""

    repo_path: str
    ref: str = ""

    @property
    def clone_url(self) -> str:
        return f"{GITHUB_SSH_HOST}:{self.repo_path}"


def parse_reference(reference: str) -> RepositoryReference | None:
    """Parse a shorthand reference, or return None when it is not ours."""
    match = REPOSITORY_PATTERN.fullmatch(reference)
    if match is None:
        return None
    return RepositoryReference(repo_path=match["repo_path"], ref=match["ref"] or "")


def clone_commands(name: str, reference: str, location: Path | str) -> list[str]:
    """Build the commands that clone ``reference`` into ``location/name``.

    The clone directory is named after the package, not the repository. A
    commit-ish suffix adds a checkout inside the fresh clone.
    """
    parsed = parse_reference(reference)
    if parsed is None:
        return []

    commands = [
        f"cd {shlex.quote(str(location))}",
        f"git clone {shlex.quote(parsed.clone_url)} {shlex.quote(name)}",
    ]
    if parsed.ref:
        commands.append(f"cd {shlex.quote(name)}")
        commands.append(f"git checkout {shlex.quote(parsed.ref)}")
    return commands


def clone_repository(name: str, reference: str, location: Path | str) -> str | None:
    """Clone ``reference`` into ``location``; None when there is nothing to clone."""
    commands = clone_commands(name, reference, location)
    if not commands:
        logger.debug("skipping %s: %r is not a repository reference", name, reference)
        return None
    return run_shell(join_commands(commands))


def filter_dependencies(dependencies: Mapping[str, str] | None) -> dict[str, str] | None:
    """Keep ``ckeditor5-*`` dependencies that point at a repository reference.

    Returns None rather than an empty mapping when nothing matches.
    """
    if not dependencies:
        return None

    result = {
        name: reference
        for name, reference in dependencies.items()
        if name.startswith(DEPENDENCY_PREFIX)
        and isinstance(reference, str)
        and parse_reference(reference) is not None
    }
    return result or None
