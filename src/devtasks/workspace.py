"""Clone sibling repositories next to a project and link them into it."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from devtasks.linker import link_package
from devtasks.repos import clone_repository, filter_dependencies

logger = logging.getLogger(__name__)

MANIFEST_NAME = "package.json"


class ManifestError(RuntimeError):
    """Raised when a package.json cannot be read or is malformed."""


@dataclass
class WorkspaceReport:
    """What a workspace init pass did, per package."""

    project_root: Path
    workspace_root: Path
    cloned: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    linked: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_root": str(self.project_root),
            "workspace_root": str(self.workspace_root),
            "cloned": list(self.cloned),
            "skipped": list(self.skipped),
            "linked": list(self.linked),
        }


def read_dependencies(project_root: Path) -> dict[str, str]:
    """Read the ``dependencies`` mapping of a project's package.json."""
    manifest = project_root / MANIFEST_NAME
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ManifestError(f"unable to read {manifest}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ManifestError(f"malformed JSON in {manifest}: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestError(f"malformed {manifest}: expected object at top level")

    dependencies = data.get("dependencies", {})
    if dependencies is None:
        dependencies = {}
    if not isinstance(dependencies, dict):
        raise ManifestError(f"malformed {manifest}: `dependencies` must be an object")
    return dependencies


def init_workspace(project_root: Path, workspace_root: Path) -> WorkspaceReport:
    """Clone every sibling dependency missing from the workspace, then link all of them.

    Each sibling lives in ``workspace_root/<package name>``.
    """
    project_root = project_root.resolve()
    workspace_root = workspace_root.resolve()
    report = WorkspaceReport(project_root=project_root, workspace_root=workspace_root)

    dependencies = filter_dependencies(read_dependencies(project_root))
    if dependencies is None:
        logger.debug("no repository dependencies in %s", project_root / MANIFEST_NAME)
        return report

    workspace_root.mkdir(parents=True, exist_ok=True)
    for name, reference in dependencies.items():
        repo_dir = workspace_root / name
        if repo_dir.exists():
            report.skipped.append(name)
        else:
            clone_repository(name, reference, workspace_root)
            report.cloned.append(name)

        link_package(repo_dir, project_root, name)
        report.linked.append(name)

    return report
