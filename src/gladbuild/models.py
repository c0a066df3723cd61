"""Core typed dataclasses for library declarations, plans and build rules."""

from __future__ import annotations

import json
import os
import shlex
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Literal

import cbor2

from gladbuild.errors import ConfigurationError
from gladbuild.spec import ApiSpec

LibraryKind = Literal["SHARED", "STATIC", "MODULE", "INTERFACE"]
LIBRARY_KINDS: tuple[LibraryKind, ...] = ("SHARED", "STATIC", "MODULE", "INTERFACE")

# Extension list entry meaning "generate without any extension".
NO_EXTENSIONS = "NONE"

# Placeholder substituted for the output directory in portable renderings.
PORTABLE_DIR_TOKEN = "GLAD_DIRECTORY"

OutputFileSet = tuple[Path, ...]


@dataclass(frozen=True, slots=True)
class FeatureFlags:
    alias: bool = False
    debug: bool = False
    header_only: bool = False
    loader: bool = False
    mx: bool = False
    mx_global: bool = False
    on_demand: bool = False
    merge: bool = False
    reproducible: bool = False
    quiet: bool = False
    language: str = "c"
    # None selects every extension; a tuple holding NO_EXTENSIONS selects none.
    extensions: tuple[str, ...] | None = None

    @property
    def no_extensions(self) -> bool:
        return self.extensions is not None and NO_EXTENSIONS in self.extensions


@dataclass(frozen=True, slots=True)
class LibraryDecl:
    """One declared glad library target."""

    name: str
    apis: tuple[str, ...]
    kinds: tuple[LibraryKind, ...] = ()
    exclude_from_all: bool = False
    location: Path | None = None
    flags: FeatureFlags = field(default_factory=FeatureFlags)

    def select_kind(self, default: LibraryKind) -> LibraryKind:
        unique = tuple(dict.fromkeys(self.kinds))
        if len(unique) > 1:
            raise ConfigurationError(
                f"Library `{self.name}` selects more than one output kind.",
                hint="Pass at most one of SHARED, STATIC, MODULE or INTERFACE.",
                context={"target": self.name, "kinds": ",".join(unique)},
            )
        for kind in unique:
            if kind not in LIBRARY_KINDS:
                raise ConfigurationError(
                    f"Unknown library kind `{kind}`.",
                    context={"target": self.name},
                )
        return unique[0] if unique else default


@dataclass(frozen=True, slots=True)
class InvocationPlan:
    argument_vector: tuple[str, ...]
    expected_outputs: OutputFileSet
    cache_key_path: Path
    output_dir: Path
    specs: tuple[ApiSpec, ...] = ()
    flags: FeatureFlags = field(default_factory=FeatureFlags)
    schema_version: int = 1

    def rendered_args(self) -> str:
        """Render the argument vector the way the args record stores it."""
        return shlex.join(self.argument_vector)

    def portable_args(self) -> tuple[str, ...]:
        root = str(self.output_dir)
        nested = root.rstrip(os.sep) + os.sep
        portable: list[str] = []
        for arg in self.argument_vector:
            if arg == root:
                arg = PORTABLE_DIR_TOKEN
            elif arg.startswith(nested):
                arg = PORTABLE_DIR_TOKEN + os.sep + arg[len(nested):]
            portable.append(arg)
        return tuple(portable)

    def to_json(self, path: str | Path | None = None) -> str:
        payload = self._payload()
        encoded = json.dumps(payload, indent=2, sort_keys=True) + "\n"
        if path is not None:
            Path(path).write_text(encoded, encoding="utf-8")
        return encoded

    def to_cbor(self, path: str | Path | None = None) -> bytes:
        payload = self._payload()
        encoded = cbor2.dumps(payload, canonical=True)
        if path is not None:
            Path(path).write_bytes(encoded)
        return encoded

    def _payload(self) -> dict[str, object]:
        flags = asdict(self.flags)
        flags["extensions"] = list(self.flags.extensions) if self.flags.extensions is not None else None
        return {
            "schema_version": self.schema_version,
            "apis": [str(spec) for spec in self.specs],
            "arguments": list(self.argument_vector),
            "portable_arguments": list(self.portable_args()),
            "outputs": [str(path) for path in self.expected_outputs],
            "args_path": str(self.cache_key_path),
            "flags": flags,
        }


@dataclass(frozen=True, slots=True)
class BuildRule:
    """What a host build system needs to generate, compile and link one target."""

    target: str
    kind: LibraryKind
    plan: InvocationPlan
    exclude_from_all: bool = False
    include_dirs: tuple[Path, ...] = ()
    link_libraries: tuple[str, ...] = ()
    compile_definitions: tuple[str, ...] = ()
    define_symbol: str | None = None
    commands: tuple[tuple[str, ...], ...] = ()
    working_dir: Path | None = None

    @property
    def sources(self) -> OutputFileSet:
        return self.plan.expected_outputs

    @property
    def outputs(self) -> OutputFileSet:
        return (*self.plan.expected_outputs, self.plan.cache_key_path)

    @property
    def comment(self) -> str:
        return f"{self.target}-generate"

    def to_dict(self) -> dict[str, object]:
        return {
            "target": self.target,
            "kind": self.kind,
            "exclude_from_all": self.exclude_from_all,
            "sources": [str(path) for path in self.sources],
            "outputs": [str(path) for path in self.outputs],
            "include_dirs": [str(path) for path in self.include_dirs],
            "link_libraries": list(self.link_libraries),
            "compile_definitions": list(self.compile_definitions),
            "define_symbol": self.define_symbol,
            "commands": [list(command) for command in self.commands],
            "working_dir": str(self.working_dir) if self.working_dir is not None else None,
            "comment": self.comment,
            "arguments": list(self.plan.argument_vector),
        }


@dataclass(frozen=True, slots=True)
class GenerationResult:
    target: str
    generated: bool
    outputs: OutputFileSet
    args_path: Path
    skipped_reason: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "target": self.target,
            "generated": self.generated,
            "outputs": [str(path) for path in self.outputs],
            "args_path": str(self.args_path),
            "skipped_reason": self.skipped_reason,
        }
