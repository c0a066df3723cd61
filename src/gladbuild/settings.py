"""Build settings passed explicitly into every planning and generation call."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, get_args

from gladbuild.errors import ConfigurationError
from gladbuild.models import LIBRARY_KINDS, LibraryKind

RegenerationPolicy = Literal["always", "if-changed"]

ENV_PREFIX = "GLADBUILD_"


def _default_dl_libraries() -> tuple[str, ...]:
    # Only glibc-style platforms ship dlopen in a separate library.
    if sys.platform.startswith("linux"):
        return ("dl",)
    return ()


@dataclass(frozen=True, slots=True)
class BuildSettings:
    binary_dir: Path = field(default_factory=lambda: Path("build"))
    default_kind: LibraryKind = "STATIC"
    python_executable: str = field(default_factory=lambda: sys.executable)
    venv_dir: Path | None = None
    glad_package: str = "glad2"
    glad_sources_dir: Path | None = None
    regeneration: RegenerationPolicy = "always"
    dl_libraries: tuple[str, ...] = field(default_factory=_default_dl_libraries)
    fail_fast: bool = False

    def __post_init__(self) -> None:
        if self.default_kind not in LIBRARY_KINDS:
            raise ConfigurationError(
                f"Unsupported default library kind: {self.default_kind}",
                hint="Use one of " + ", ".join(LIBRARY_KINDS) + ".",
                context={"setting": "default_kind"},
            )
        if self.regeneration not in get_args(RegenerationPolicy):
            raise ConfigurationError(
                f"Unsupported regeneration policy: {self.regeneration}",
                hint="Use 'always' or 'if-changed'.",
                context={"setting": "regeneration"},
            )

    def default_location(self, target: str) -> Path:
        return self.binary_dir / "gladsources" / target

    def venv_for(self, output_dir: Path) -> Path:
        """Return the venv directory, kept outside the cleaned output directory."""
        if self.venv_dir is not None:
            return self.venv_dir.absolute()
        return output_dir.absolute().parent / ".venv"

    def pip_requirement(self) -> str:
        if self.glad_sources_dir is not None:
            return str(self.glad_sources_dir.absolute())
        return self.glad_package

    def glad_working_dir(self) -> Path | None:
        """Directory the venv, pip and glad commands run from, if not the caller's."""
        if self.glad_sources_dir is None:
            return None
        return self.glad_sources_dir.absolute()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BuildSettings:
        """Build settings from ``GLADBUILD_*`` variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}

        if binary_dir := env.get(f"{ENV_PREFIX}BINARY_DIR"):
            values["binary_dir"] = Path(binary_dir)
        if shared := env.get(f"{ENV_PREFIX}SHARED_LIBS"):
            values["default_kind"] = "SHARED" if _parse_bool(shared, "SHARED_LIBS") else "STATIC"
        if python := env.get(f"{ENV_PREFIX}PYTHON"):
            values["python_executable"] = python
        if venv_dir := env.get(f"{ENV_PREFIX}VENV_DIR"):
            values["venv_dir"] = Path(venv_dir)
        if package := env.get(f"{ENV_PREFIX}GLAD_PACKAGE"):
            values["glad_package"] = package
        if sources := env.get(f"{ENV_PREFIX}GLAD_SOURCES_DIR"):
            values["glad_sources_dir"] = Path(sources)
        if regeneration := env.get(f"{ENV_PREFIX}REGENERATION"):
            values["regeneration"] = regeneration
        if fail_fast := env.get(f"{ENV_PREFIX}FAIL_FAST"):
            values["fail_fast"] = _parse_bool(fail_fast, "FAIL_FAST")
        return cls(**values)  # type: ignore[arg-type]


_TRUE = frozenset({"1", "on", "yes", "true"})
_FALSE = frozenset({"0", "off", "no", "false", ""})


def _parse_bool(raw: str, name: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigurationError(
        f"Invalid boolean for {ENV_PREFIX}{name}: {raw!r}",
        hint="Use one of 1/0, on/off, yes/no, true/false.",
        context={"variable": f"{ENV_PREFIX}{name}"},
    )
