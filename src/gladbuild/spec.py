"""Parsing of ``name[:profile]=version`` API tokens."""

from __future__ import annotations

import warnings
from collections.abc import Iterable
from dataclasses import dataclass

from gladbuild.errors import MalformedSpecError

KNOWN_FAMILIES = ("gl", "gles1", "gles2", "glsc2", "glx", "wgl", "egl", "vulkan")

# Only desktop GL distinguishes core and compatibility profiles.
PROFILED_FAMILIES = frozenset({"gl"})


class ProfileIgnoredWarning(UserWarning):
    """Warning raised when a profile is given for a family that has none."""


@dataclass(frozen=True, slots=True)
class ApiSpec:
    family: str
    profile: str
    version: str

    def __str__(self) -> str:
        if self.profile:
            return f"{self.family}:{self.profile}={self.version}"
        return f"{self.family}={self.version}"


def resolve(token: str) -> ApiSpec:
    """Split *token* into family, profile and version.

    Examples::

        gl:core=3.3          => gl, core, 3.3
        gl:compatibility=4.0 => gl, compatibility, 4.0
        vulkan=1.1           => vulkan, "", 1.1

    Exactly one ``=`` is accepted. The version is an opaque token and only
    has to be non-empty.
    """
    token = token.strip()
    if token.count("=") != 1:
        raise MalformedSpecError(
            f"{token!r} is an invalid API spec.",
            hint="Use the form name[:profile]=version, e.g. gl:core=3.3.",
            context={"operation": "resolve", "token": token},
        )
    spec_profile, version = token.split("=", 1)
    family, _, profile = spec_profile.partition(":")
    if not family:
        raise MalformedSpecError(
            f"{token!r} has an empty API name.",
            hint="Start the token with one of: " + ", ".join(KNOWN_FAMILIES) + ".",
            context={"operation": "resolve", "token": token},
        )
    if not version:
        raise MalformedSpecError(
            f"{token!r} has an empty version.",
            hint="Append a version after '=', e.g. vulkan=1.1.",
            context={"operation": "resolve", "token": token},
        )
    if profile and family not in PROFILED_FAMILIES:
        warnings.warn(
            f"Profile `{profile}` is only meaningful for gl and is passed through as-is.",
            ProfileIgnoredWarning,
            stacklevel=2,
        )
    return ApiSpec(family=family, profile=profile, version=version)


def resolve_all(tokens: Iterable[str]) -> tuple[ApiSpec, ...]:
    """Resolve every token, also splitting comma-separated groups."""
    specs: list[ApiSpec] = []
    for group in tokens:
        for token in group.split(","):
            if token.strip():
                specs.append(resolve(token))
    return tuple(specs)
