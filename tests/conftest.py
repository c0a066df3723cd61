"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from gladbuild.backends import InProcessBackend
from gladbuild.settings import BuildSettings


@pytest.fixture
def inprocess_backend() -> InProcessBackend:
    """Provide an in-process backend for tests that call generate()."""
    return InProcessBackend()


@pytest.fixture
def settings(tmp_path: Path) -> BuildSettings:
    return BuildSettings(
        binary_dir=tmp_path / "build",
        python_executable="/usr/bin/python3",
        dl_libraries=("dl",),
    )
