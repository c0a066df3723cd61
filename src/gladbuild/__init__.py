"""Public package entrypoint for planning and generating glad libraries."""

from .backends import InProcessBackend, VenvGladBackend
from .errors import (
    ConfigurationError,
    ErrorCode,
    ExternalToolError,
    GladError,
    MalformedSpecError,
)
from .library import ConfigureResult, GenerateResult, Project, add_library, declare_library
from .models import (
    BuildRule,
    FeatureFlags,
    GenerationResult,
    InvocationPlan,
    LibraryDecl,
    LibraryKind,
)
from .observability import StructuredLogger
from .planner import plan
from .settings import BuildSettings
from .spec import KNOWN_FAMILIES, ApiSpec, ProfileIgnoredWarning, resolve, resolve_all

__all__ = [
    "KNOWN_FAMILIES",
    "ApiSpec",
    "BuildRule",
    "BuildSettings",
    "ConfigurationError",
    "ConfigureResult",
    "ErrorCode",
    "ExternalToolError",
    "FeatureFlags",
    "GenerateResult",
    "GenerationResult",
    "GladError",
    "InProcessBackend",
    "InvocationPlan",
    "LibraryDecl",
    "LibraryKind",
    "MalformedSpecError",
    "ProfileIgnoredWarning",
    "Project",
    "StructuredLogger",
    "VenvGladBackend",
    "add_library",
    "declare_library",
    "plan",
    "resolve",
    "resolve_all",
]
