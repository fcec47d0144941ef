"""
Version information for the leafmint SDK.
"""
import importlib.metadata
import pathlib
from typing import Union

import tomli

DISTRIBUTION = "leafmint-sdk"
DEFAULT_VERSION = "0.1.0"
PYPROJECT_PATH = pathlib.Path(__file__).parent.parent / "pyproject.toml"


def get_version(pyproject: Union[str, pathlib.Path] = PYPROJECT_PATH) -> str:
    """
    Resolve the SDK version.

    Installed distribution metadata wins. A source checkout falls back to
    ``[project].version`` in ``pyproject``, and anything unreadable falls
    back to DEFAULT_VERSION.
    """
    try:
        return importlib.metadata.version(DISTRIBUTION)
    except importlib.metadata.PackageNotFoundError:
        pass

    try:
        with open(pyproject, "rb") as f:
            project = tomli.load(f).get("project", {})
    except (OSError, tomli.TOMLDecodeError):
        return DEFAULT_VERSION
    version = project.get("version")
    return version if isinstance(version, str) and version else DEFAULT_VERSION


__version__ = get_version()
