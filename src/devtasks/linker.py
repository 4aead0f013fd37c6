"""Link a local package into another package's dependency tree with npm."""

from __future__ import annotations

import shlex
import sys
from pathlib import Path

from devtasks.exec import join_commands, run_shell

# Elevation is not used for npm link on Windows.
NO_SUDO_PLATFORMS = frozenset({"win32"})


def link_commands(
    source_path: Path | str,
    destination_path: Path | str,
    package_name: str,
    *,
    platform: str | None = None,
) -> list[str]:
    """Build the npm link sequence for ``package_name``."""
    platform = platform or sys.platform
    sudo = "" if platform in NO_SUDO_PLATFORMS else "sudo "
    return [
        f"cd {shlex.quote(str(source_path))}",
        f"{sudo}npm link",
        f"cd {shlex.quote(str(destination_path))}",
        f"npm link {shlex.quote(package_name)}",
    ]


def link_package(
    source_path: Path | str,
    destination_path: Path | str,
    package_name: str,
    *,
    platform: str | None = None,
) -> str:
    """Register the source package globally and link it into the destination."""
    commands = link_commands(source_path, destination_path, package_name, platform=platform)
    return run_shell(join_commands(commands))
