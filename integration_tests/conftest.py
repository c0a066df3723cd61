"""Shared helpers for integration tests."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest


def snapshot_tree(root: Path) -> dict[str, str]:
    """Capture every file under *root* as ``{relative_path: content}``."""
    tree: dict[str, str] = {}
    for path in sorted(root.rglob("*")):
        if path.is_file():
            try:
                tree[str(path.relative_to(root))] = path.read_text(encoding="utf-8")
            except UnicodeDecodeError:
                tree[str(path.relative_to(root))] = "<binary>"
    return tree


def require_host_tools() -> str:
    """Return the C compiler, skipping when the smoke-test toolchain is absent."""
    compiler = shutil.which("cc") or shutil.which("gcc")
    if compiler is None:
        pytest.skip("No C compiler on PATH.")
    if shutil.which("pkg-config") is None:
        pytest.skip("pkg-config is required to locate GLFW.")
    glfw = subprocess.run(["pkg-config", "--exists", "glfw3"], check=False)
    if glfw.returncode != 0:
        pytest.skip("GLFW development files are not installed.")
    return compiler
