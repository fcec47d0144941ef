"""
Tests for SDK version resolution.
"""
import re
from importlib import metadata as importlib_metadata

import pytest

from leafmint_sdk import __version__
from leafmint_sdk.version import DEFAULT_VERSION, get_version


@pytest.fixture
def not_installed(monkeypatch):
    """Make the distribution metadata lookup fail, as in a source checkout"""
    def lookup(name):
        raise importlib_metadata.PackageNotFoundError(name)

    monkeypatch.setattr(importlib_metadata, "version", lookup)


def test_version_is_semver():
    assert re.match(r'^\d+\.\d+\.\d+', __version__)


def test_installed_metadata_wins(monkeypatch, tmp_path):
    monkeypatch.setattr(importlib_metadata, "version", lambda name: "2.3.4")
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text('[project]\nversion = "9.9.9"\n')

    assert get_version(pyproject) == "2.3.4"


def test_source_checkout_reads_pyproject(not_installed, tmp_path):
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text('[project]\nname = "leafmint-sdk"\nversion = "1.2.3"\n')

    assert get_version(pyproject) == "1.2.3"


def test_bundled_pyproject_matches_package(not_installed):
    assert get_version() == "0.1.0"


@pytest.mark.parametrize("content", [
    '[project]\nname = "leafmint-sdk"\n',
    '[tool.pytest]\n',
    '[project]\nversion = ""\n',
    'not toml [',
])
def test_unusable_pyproject_falls_back(not_installed, tmp_path, content):
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(content)

    assert get_version(pyproject) == DEFAULT_VERSION


def test_missing_pyproject_falls_back(not_installed, tmp_path):
    assert get_version(tmp_path / "absent.toml") == DEFAULT_VERSION
