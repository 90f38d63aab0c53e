"""Shared fixtures for host tests."""

import sys
from collections.abc import Callable, Generator
from pathlib import Path

import pytest


@pytest.fixture
def write_module(tmp_path: Path) -> Generator[Callable[[str, str], Path], None, None]:
    """Write handler sources to files and clean up sys.modules afterwards."""
    names: list[str] = []

    def _write(name: str, source: str) -> Path:
        path = tmp_path / f"{name}.py"
        path.write_text(source, encoding="utf-8")
        names.append(name)
        return path

    yield _write

    for name in names:
        sys.modules.pop(name, None)
