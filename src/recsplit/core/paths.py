"""Workspace path management.

Tool-managed artifacts go under var/ (configurable via RECSPLIT_WORKDIR),
resolved against the current working directory.
"""

from pathlib import Path

from . import config


def workdir() -> Path:
    """Tool-managed workspace directory (default: var/)"""
    return Path(config.SETTINGS.RECSPLIT_WORKDIR)


def logs() -> Path:
    """Log files directory (default: var/logs/)"""
    return workdir() / "logs"
