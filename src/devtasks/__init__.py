"""Multi-target task configuration helpers for build task runners."""

__version__ = "0.3.0"
