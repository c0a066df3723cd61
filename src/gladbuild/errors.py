"""Typed error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import StrEnum

OUTPUT_LIMIT = 2000


class ErrorCode(StrEnum):
    """Stable error identifiers used across API surfaces."""

    CONFIGURATION = "E_CONFIGURATION"
    MALFORMED_SPEC = "E_MALFORMED_SPEC"
    EXTERNAL_TOOL = "E_EXTERNAL_TOOL"


class GladError(Exception):
    """Base error class that carries code, optional hint, and context."""

    code: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        if self.context:
            for k, v in self.context.items():
                if v:
                    parts.append(f"  {k}: {v}")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": str(self),
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class ConfigurationError(GladError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.CONFIGURATION, hint=hint, context=context)


class MalformedSpecError(GladError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.MALFORMED_SPEC, hint=hint, context=context)


class ExternalToolError(GladError):
    """A venv, pip or glad subprocess exited non-zero or could not be started."""

    returncode: int | None
    stdout: str
    stderr: str

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] = (),
        returncode: int | None = None,
        stdout: str = "",
        stderr: str = "",
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        merged = dict(context or {})
        if command:
            merged["command"] = " ".join(command)
        if returncode is not None:
            merged["returncode"] = str(returncode)
        merged["stdout"] = stdout[:OUTPUT_LIMIT]
        merged["stderr"] = stderr[:OUTPUT_LIMIT]
        super().__init__(message, code=ErrorCode.EXTERNAL_TOOL, hint=hint, context=merged)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


__all__ = [
    "ConfigurationError",
    "ErrorCode",
    "ExternalToolError",
    "GladError",
    "MalformedSpecError",
]
