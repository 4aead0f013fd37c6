"""Git state views for devtasks."""

from devtasks.git.state import GIT_STATE, GitStateCache, parse_dirty_files, parse_gitignore

__all__ = ["GIT_STATE", "GitStateCache", "parse_dirty_files", "parse_gitignore"]
