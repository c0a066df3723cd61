"""Declarative glad library targets.

``add_library`` turns one declaration into a :class:`BuildRule`; ``Project``
collects several declarations, configures them and drives generation while
keeping a failing target from stopping the others::

    project = Project(settings=BuildSettings(binary_dir=Path("build")))
    project.library("glad_gl_core_33", api="gl:core=3.3", kind="SHARED")
    project.library("glad_vulkan_11", api="vulkan=1.1", kind="STATIC")
    configured = project.configure()
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Self

from gladbuild.backends import GeneratorBackend, VenvGladBackend, generation_commands
from gladbuild.errors import ConfigurationError, GladError
from gladbuild.models import (
    BuildRule,
    FeatureFlags,
    GenerationResult,
    LibraryDecl,
    LibraryKind,
)
from gladbuild.observability import StructuredLogger
from gladbuild.planner import plan
from gladbuild.record import is_fresh
from gladbuild.settings import BuildSettings
from gladbuild.spec import resolve_all

EXPORT_DEFINITION = "GLAD_API_CALL_EXPORT"
EXPORT_BUILD_SYMBOL = "GLAD_API_CALL_EXPORT_BUILD"


def declare_library(
    name: str,
    *,
    api: str | Sequence[str],
    kind: LibraryKind | Sequence[LibraryKind] | None = None,
    exclude_from_all: bool = False,
    merge: bool = False,
    reproducible: bool = False,
    quiet: bool = False,
    location: str | Path | None = None,
    language: str = "c",
    extensions: Sequence[str] | None = None,
    alias: bool = False,
    debug: bool = False,
    header_only: bool = False,
    loader: bool = False,
    mx: bool = False,
    mx_global: bool = False,
    on_demand: bool = False,
) -> LibraryDecl:
    if not name:
        raise ConfigurationError("A glad library requires a non-empty target name.")
    apis = (api,) if isinstance(api, str) else tuple(api)
    if isinstance(extensions, str):
        extensions = (extensions,)
    if kind is None:
        kinds: tuple[LibraryKind, ...] = ()
    elif isinstance(kind, str):
        kinds = (kind,)
    else:
        kinds = tuple(kind)
    flags = FeatureFlags(
        alias=alias,
        debug=debug,
        header_only=header_only,
        loader=loader,
        mx=mx,
        mx_global=mx_global,
        on_demand=on_demand,
        merge=merge,
        reproducible=reproducible,
        quiet=quiet,
        language=language,
        extensions=tuple(extensions) if extensions else None,
    )
    return LibraryDecl(
        name=name,
        apis=apis,
        kinds=kinds,
        exclude_from_all=exclude_from_all,
        location=Path(location) if location is not None else None,
        flags=flags,
    )


def build_rule(decl: LibraryDecl, settings: BuildSettings) -> BuildRule:
    specs = resolve_all(decl.apis)
    kind = decl.select_kind(settings.default_kind)
    # Paths handed to glad must stay valid when it runs from glad_sources_dir.
    location = decl.location if decl.location is not None else settings.default_location(decl.name)
    output_dir = location.absolute()
    invocation = plan(specs, decl.flags, output_dir)
    shared = kind == "SHARED"
    return BuildRule(
        target=decl.name,
        kind=kind,
        plan=invocation,
        exclude_from_all=decl.exclude_from_all,
        include_dirs=(output_dir / "include",),
        link_libraries=settings.dl_libraries,
        compile_definitions=(EXPORT_DEFINITION,) if shared else (),
        define_symbol=EXPORT_BUILD_SYMBOL if shared else None,
        commands=generation_commands(invocation, settings),
        working_dir=settings.glad_working_dir(),
    )


def add_library(
    name: str,
    *,
    settings: BuildSettings | None = None,
    **options: object,
) -> BuildRule:
    """Declare and plan a single glad library; see :func:`declare_library` for options."""
    decl = declare_library(name, **options)  # type: ignore[arg-type]
    return build_rule(decl, settings or BuildSettings())


@dataclass(frozen=True, slots=True)
class ConfigureResult:
    rules: dict[str, BuildRule] = field(default_factory=dict)
    errors: dict[str, GladError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True, slots=True)
class GenerateResult:
    results: dict[str, GenerationResult] = field(default_factory=dict)
    errors: dict[str, GladError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(slots=True)
class Project:
    """A set of glad library targets configured together."""

    settings: BuildSettings = field(default_factory=BuildSettings)
    logger: StructuredLogger = field(default_factory=StructuredLogger)
    _decls: dict[str, LibraryDecl] = field(init=False, default_factory=dict, repr=False)
    _configured: ConfigureResult | None = field(init=False, default=None, repr=False)

    @property
    def declarations(self) -> tuple[LibraryDecl, ...]:
        return tuple(self._decls.values())

    def library(self, name: str, **options: object) -> Self:
        return self.declare(declare_library(name, **options))  # type: ignore[arg-type]

    def declare(self, decl: LibraryDecl) -> Self:
        if decl.name in self._decls:
            raise ConfigurationError(
                f"Glad library `{decl.name}` is already declared.",
                hint="Use a distinct target name per library.",
                context={"target": decl.name},
            )
        self._decls[decl.name] = decl
        self._configured = None
        return self

    def configure(self) -> ConfigureResult:
        rules: dict[str, BuildRule] = {}
        errors: dict[str, GladError] = {}
        owners: dict[Path, str] = {}
        for decl in self._decls.values():
            self.logger.log(
                operation="configure_target",
                target=decl.name,
                phase="configure",
                backend=None,
                message="Configuring.",
            )
            try:
                rule = build_rule(decl, self.settings)
                owner = owners.get(rule.plan.output_dir)
                if owner is not None:
                    raise ConfigurationError(
                        f"Glad library `{decl.name}` shares its output directory with `{owner}`.",
                        hint="Give each library a distinct LOCATION.",
                        context={"target": decl.name, "location": str(rule.plan.output_dir)},
                    )
            except GladError as exc:
                self._record_failure(decl.name, "configure", None, exc)
                if self.settings.fail_fast:
                    raise
                errors[decl.name] = exc
                continue
            owners[rule.plan.output_dir] = decl.name
            rules[decl.name] = rule
            self.logger.log(
                operation="plan_target",
                target=decl.name,
                phase="configure",
                backend=None,
                message="Planned glad invocation.",
                extra={
                    "kind": rule.kind,
                    "arguments": list(rule.plan.argument_vector),
                    "outputs": len(rule.plan.expected_outputs),
                },
            )
        self._configured = ConfigureResult(rules=rules, errors=errors)
        return self._configured

    def generate(
        self,
        backend: GeneratorBackend | None = None,
        *,
        targets: Iterable[str] | None = None,
    ) -> GenerateResult:
        configured = self._configured or self.configure()
        runner = backend if backend is not None else VenvGladBackend(settings=self.settings)
        selected = self._select_rules(configured, targets)

        results: dict[str, GenerationResult] = {}
        errors: dict[str, GladError] = {}
        for rule in selected:
            if self.settings.regeneration == "if-changed" and is_fresh(rule.plan):
                results[rule.target] = GenerationResult(
                    target=rule.target,
                    generated=False,
                    outputs=rule.plan.expected_outputs,
                    args_path=rule.plan.cache_key_path,
                    skipped_reason="args record up to date",
                )
                self.logger.log(
                    operation="generate_skipped",
                    target=rule.target,
                    phase="generate",
                    backend=runner.name,
                    message="Args record matches, skipping generation.",
                )
                continue

            self.logger.log(
                operation="generate_start",
                target=rule.target,
                phase="generate",
                backend=runner.name,
                message=f"Generating with args {rule.plan.rendered_args()}",
            )
            try:
                runner.prepare(rule)
                try:
                    results[rule.target] = runner.execute(rule)
                finally:
                    runner.cleanup(rule)
            except GladError as exc:
                self._record_failure(rule.target, "generate", runner.name, exc)
                if self.settings.fail_fast:
                    raise
                errors[rule.target] = exc
                continue
            self.logger.log(
                operation="generate_complete",
                target=rule.target,
                phase="generate",
                backend=runner.name,
                message=f"Writing {rule.plan.cache_key_path}",
            )
        return GenerateResult(results=results, errors=errors)

    def _select_rules(
        self,
        configured: ConfigureResult,
        targets: Iterable[str] | None,
    ) -> list[BuildRule]:
        if targets is None:
            return list(configured.rules.values())
        selected: list[BuildRule] = []
        for name in targets:
            if name not in self._decls:
                raise ConfigurationError(
                    f"Unknown glad library `{name}`.",
                    hint="Declare it with Project.library() first.",
                    context={"target": name},
                )
            rule = configured.rules.get(name)
            if rule is not None:
                selected.append(rule)
        return selected

    def _record_failure(self, target: str, phase: str, backend: str | None, exc: GladError) -> None:
        self.logger.log(
            operation=f"{phase}_failed",
            target=target,
            phase=phase,
            backend=backend,
            message=exc.args[0] if exc.args else exc.code,
            level="error",
            extra={"code": exc.code},
        )
