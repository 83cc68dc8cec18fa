"""Packaging regression tests."""

import re
from pathlib import Path
from typing import Set

ROOT = Path(__file__).resolve().parent


def _read_setuptools_packages() -> Set[str]:
    pyproject = (ROOT / "pyproject.toml").read_text(encoding="utf-8")
    match = re.search(r"^packages\s*=\s*\[(.*?)\]", pyproject, flags=re.DOTALL | re.MULTILINE)
    assert match is not None, "packages is missing from pyproject.toml"
    return set(re.findall(r'"([^"]+)"', match.group(1)))


def test_whiteboard_package_is_declared():
    assert "whiteboard" in _read_setuptools_packages()


def test_qml_files_are_package_data():
    pyproject = (ROOT / "pyproject.toml").read_text(encoding="utf-8")
    assert 'whiteboard = ["qml_ui/*.qml"]' in pyproject
    assert list((ROOT / "whiteboard" / "qml_ui").glob("*.qml"))


def test_runtime_dependencies_are_declared():
    pyproject = (ROOT / "pyproject.toml").read_text(encoding="utf-8")
    for name in ("PySide6", "httpx", "pydantic"):
        assert f'"{name}' in pyproject, f"{name} missing from dependencies"
