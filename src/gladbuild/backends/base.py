"""Protocol for generator execution backends."""

from __future__ import annotations

from typing import Protocol

from gladbuild.models import BuildRule, GenerationResult


class GeneratorBackend(Protocol):
    name: str

    def prepare(self, rule: BuildRule) -> None:
        """Prepare the environment glad runs in."""

    def execute(self, rule: BuildRule) -> GenerationResult:
        """Generate the rule's sources and write its args record."""

    def cleanup(self, rule: BuildRule) -> None:
        """Release backend runtime resources."""
