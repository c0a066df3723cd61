"""Command line interface for planning and generating glad libraries.

Usage:
    gladbuild plan glad_gl_core_33 --api gl:core=3.3 --shared
    gladbuild generate glad_vulkan_11 --api vulkan=1.1 --extensions NONE
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path

from gladbuild.errors import GladError
from gladbuild.library import Project
from gladbuild.models import LibraryKind
from gladbuild.observability import StructuredLogger
from gladbuild.settings import BuildSettings

# CLI option -> declaration keyword, for the plain boolean flags.
BOOLEAN_OPTIONS: tuple[tuple[str, str], ...] = (
    ("--exclude-from-all", "exclude_from_all"),
    ("--merge", "merge"),
    ("--reproducible", "reproducible"),
    ("--quiet", "quiet"),
    ("--alias", "alias"),
    ("--debug", "debug"),
    ("--header-only", "header_only"),
    ("--loader", "loader"),
    ("--mx", "mx"),
    ("--mx-global", "mx_global"),
    ("--on-demand", "on_demand"),
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gladbuild", description="Plan and generate glad libraries")
    sub = parser.add_subparsers(dest="command", required=True)

    plan_p = sub.add_parser("plan", help="Print the build rule for a glad library as JSON")
    _add_library_arguments(plan_p)

    generate_p = sub.add_parser("generate", help="Generate a glad library with glad in a venv")
    _add_library_arguments(generate_p)
    generate_p.add_argument(
        "--if-changed",
        action="store_true",
        help="Skip generation when the args record matches",
    )
    return parser


def _add_library_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("target", help="Name of the library target")
    parser.add_argument(
        "--api",
        nargs="+",
        required=True,
        help="API specs such as gl:core=3.3 or vulkan=1.1",
    )
    parser.add_argument(
        "--extensions",
        nargs="*",
        default=None,
        help="Extensions to include; pass NONE for no extensions",
    )
    kind = parser.add_mutually_exclusive_group()
    for option in ("shared", "static", "module", "interface"):
        kind.add_argument(
            f"--{option}",
            dest="kind",
            action="store_const",
            const=option.upper(),
            help=f"Build a {option.upper()} library",
        )
    for option, dest in BOOLEAN_OPTIONS:
        parser.add_argument(option, dest=dest, action="store_true")
    parser.add_argument("--location", type=Path, default=None, help="Output directory")
    parser.add_argument("--language", default="c", help="Generator language (default: c)")
    parser.add_argument(
        "--binary-dir",
        type=Path,
        default=None,
        help="Root for default locations (default: $GLADBUILD_BINARY_DIR or ./build)",
    )
    parser.add_argument("--verbose", action="store_true", help="Print status lines on stderr")


def _project_from_args(args: argparse.Namespace) -> Project:
    settings = BuildSettings.from_env()
    if args.binary_dir is not None:
        settings = replace(settings, binary_dir=args.binary_dir)
    if getattr(args, "if_changed", False):
        settings = replace(settings, regeneration="if-changed")
    kind: LibraryKind | None = args.kind
    options: dict[str, object] = {dest: getattr(args, dest) for _, dest in BOOLEAN_OPTIONS}
    logger = StructuredLogger(echo=sys.stderr if args.verbose else None)
    project = Project(settings=settings, logger=logger)
    project.library(
        args.target,
        api=tuple(args.api),
        kind=kind,
        location=args.location,
        language=args.language,
        extensions=args.extensions,
        **options,
    )
    return project


def cmd_plan(args: argparse.Namespace) -> int:
    project = _project_from_args(args)
    configured = project.configure()
    if not configured.ok:
        raise configured.errors[args.target]
    print(json.dumps(configured.rules[args.target].to_dict(), indent=2, sort_keys=True))
    return 0


def cmd_generate(args: argparse.Namespace) -> int:
    project = _project_from_args(args)
    configured = project.configure()
    if not configured.ok:
        raise configured.errors[args.target]
    generated = project.generate()
    if not generated.ok:
        raise generated.errors[args.target]
    print(json.dumps(generated.results[args.target].to_dict(), indent=2, sort_keys=True))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        if args.command == "plan":
            return cmd_plan(args)
        return cmd_generate(args)
    except GladError as exc:
        print(json.dumps(exc.to_dict(), indent=2, sort_keys=True), file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
