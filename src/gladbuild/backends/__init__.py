"""Generator backend interfaces and implementations."""

from .base import GeneratorBackend
from .inprocess import InProcessBackend
from .venv import VenvGladBackend, expected_venv_python, generation_commands

__all__ = [
    "GeneratorBackend",
    "InProcessBackend",
    "VenvGladBackend",
    "expected_venv_python",
    "generation_commands",
]
