"""Translate API specs and feature flags into a glad invocation plan.

The plan is a pure function of its inputs: nothing here touches the
filesystem, so calling :func:`plan` twice with the same arguments yields
byte-identical argument vectors. The argument order is fixed because the
rendered vector is persisted as the args record::

    --out-path <dir> --api <csv> [--extensions <csv|" ">]
    [--quiet] [--merge] [--reproducible]
    c [--alias] [--debug] [--header-only] [--loader] [--mx] [--mx-global] [--on-demand]
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from gladbuild.errors import ConfigurationError
from gladbuild.models import FeatureFlags, InvocationPlan, OutputFileSet
from gladbuild.spec import KNOWN_FAMILIES, ApiSpec

ARGS_RECORD_NAME = "args.txt"

# Headers each family produces, relative to the output directory.
FAMILY_HEADERS: dict[str, tuple[str, ...]] = {
    "egl": ("include/EGL/eglplatform.h", "include/KHR/khrplatform.h", "include/glad/egl.h"),
    "vulkan": ("include/vk_platform.h", "include/glad/vulkan.h"),
    "gl": ("include/KHR/khrplatform.h", "include/glad/gl.h"),
    "gles1": ("include/KHR/khrplatform.h", "include/glad/gles1.h"),
    "gles2": ("include/KHR/khrplatform.h", "include/glad/gles2.h"),
    "glsc2": ("include/KHR/khrplatform.h", "include/glad/glsc2.h"),
    "wgl": ("include/glad/wgl.h",),
    "glx": ("include/glad/glx.h",),
}

# Flag attribute -> generator option, in emission order.
GLOBAL_OPTIONS: tuple[tuple[str, str], ...] = (
    ("quiet", "--quiet"),
    ("merge", "--merge"),
    ("reproducible", "--reproducible"),
)

C_OPTIONS: tuple[tuple[str, str], ...] = (
    ("alias", "--alias"),
    ("debug", "--debug"),
    ("header_only", "--header-only"),
    ("loader", "--loader"),
    ("mx", "--mx"),
    ("mx_global", "--mx-global"),
    ("on_demand", "--on-demand"),
)


def plan(specs: Sequence[ApiSpec], flags: FeatureFlags, output_dir: str | Path) -> InvocationPlan:
    if not specs:
        raise ConfigurationError(
            "Need API",
            hint="Declare at least one API, e.g. gl:core=3.3.",
            context={"operation": "plan"},
        )
    root = Path(output_dir)
    language = flags.language.lower()
    language_planner = LANGUAGES.get(language)
    if language_planner is None:
        raise ConfigurationError(
            "Unknown LANGUAGE",
            hint="Supported languages: " + ", ".join(sorted(LANGUAGES)) + ".",
            context={"operation": "plan", "language": flags.language},
        )

    language_args, outputs = language_planner(specs, flags, root)

    argv: list[str] = ["--out-path", str(root), "--api", ",".join(str(spec) for spec in specs)]
    extensions = render_extensions(flags)
    if extensions is not None:
        argv.extend(["--extensions", extensions])
    argv.extend(option for attr, option in GLOBAL_OPTIONS if getattr(flags, attr))
    argv.append(language)
    argv.extend(language_args)

    return InvocationPlan(
        argument_vector=tuple(argv),
        expected_outputs=outputs,
        cache_key_path=root / ARGS_RECORD_NAME,
        output_dir=root,
        specs=tuple(specs),
        flags=flags,
    )


def render_extensions(flags: FeatureFlags) -> str | None:
    """Return the ``--extensions`` value, or None to let glad include all."""
    if flags.extensions is None:
        return None
    if flags.no_extensions:
        # glad reads a lone space as an explicitly empty list.
        return " "
    return ",".join(dict.fromkeys(flags.extensions))


def expected_outputs(specs: Iterable[ApiSpec], *, header_only: bool, output_dir: Path) -> OutputFileSet:
    paths: list[Path] = []
    for spec in specs:
        headers = FAMILY_HEADERS.get(spec.family)
        if headers is None:
            raise ConfigurationError(
                f"Unknown SPEC: '{spec.family}'",
                hint="Known APIs: " + ", ".join(KNOWN_FAMILIES) + ".",
                context={"operation": "plan", "api": str(spec)},
            )
        paths.extend(output_dir / header for header in headers)
        if not header_only:
            paths.append(output_dir / "src" / f"{spec.family}.c")
    return tuple(dict.fromkeys(paths))


def _c_library(
    specs: Sequence[ApiSpec],
    flags: FeatureFlags,
    output_dir: Path,
) -> tuple[tuple[str, ...], OutputFileSet]:
    outputs = expected_outputs(specs, header_only=flags.header_only, output_dir=output_dir)
    args = tuple(option for attr, option in C_OPTIONS if getattr(flags, attr))
    return args, outputs


LanguagePlanner = Callable[
    [Sequence[ApiSpec], FeatureFlags, Path],
    tuple[tuple[str, ...], OutputFileSet],
]

LANGUAGES: dict[str, LanguagePlanner] = {
    "c": _c_library,
}
