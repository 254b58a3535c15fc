"""Default path resolution.

Resolves the settings file and the artifact output folder. Uses environment
variables when available, falls back to conventional defaults relative to the
current project directory.

Environment variables:
    VIEWBIND_SETTINGS: settings YAML (default: ./viewbind.yaml)
    VIEWBIND_OUTPUT_DIR: generated view folder (default: ./Assets/Scripts/GeneratedUI)
"""

from __future__ import annotations

import os
from pathlib import Path

_DEFAULT_SETTINGS_NAME = "viewbind.yaml"
_DEFAULT_OUTPUT_SUBPATH = "Assets/Scripts/GeneratedUI"


def project_root() -> Path:
    """Return the project directory generation runs against."""
    return Path.cwd()


def settings_path() -> Path:
    """Return the path to the settings YAML file."""
    env = os.environ.get("VIEWBIND_SETTINGS")
    if env:
        return Path(env)
    return project_root() / _DEFAULT_SETTINGS_NAME


def output_dir() -> Path:
    """Return the folder generated view classes are written to."""
    env = os.environ.get("VIEWBIND_OUTPUT_DIR")
    if env:
        return Path(env)
    return project_root() / _DEFAULT_OUTPUT_SUBPATH
