"""In-memory build log for configure and generate steps.

Each step appends a :class:`LogRecord`. When ``echo`` is set, records are
also written as ``-- Glad Library '<target>': <message>`` status lines, the
way the configure log of a CMake build reports them.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Literal, TextIO

LogLevel = Literal["info", "error"]


@dataclass(frozen=True, slots=True)
class LogRecord:
    operation: str
    target: str | None
    phase: str | None
    backend: str | None
    message: str
    level: LogLevel = "info"
    extra: dict[str, Any] | None = None

    def status_line(self) -> str:
        prefix = "-- " if self.level == "info" else "!! "
        if self.target is None:
            return prefix + self.message
        return f"{prefix}Glad Library '{self.target}': {self.message}"

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        if payload["extra"] is None:
            del payload["extra"]
        return payload


@dataclass(slots=True)
class StructuredLogger:
    records: list[LogRecord] = field(default_factory=list)
    echo: TextIO | None = None

    def log(
        self,
        *,
        operation: str,
        target: str | None,
        phase: str | None,
        backend: str | None,
        message: str,
        level: LogLevel = "info",
        extra: dict[str, Any] | None = None,
    ) -> LogRecord:
        record = LogRecord(
            operation=operation,
            target=target,
            phase=phase,
            backend=backend,
            message=message,
            level=level,
            extra=extra,
        )
        self.records.append(record)
        if self.echo is not None:
            print(record.status_line(), file=self.echo)
        return record

    def records_for_target(self, target: str) -> list[LogRecord]:
        return [record for record in self.records if record.target == target]

    def operations(self, target: str) -> list[str]:
        return [record.operation for record in self.records_for_target(target)]

    def errors(self) -> list[LogRecord]:
        return [record for record in self.records if record.level == "error"]

    def to_json_lines(self, path: str | Path) -> Path:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        lines = [json.dumps(record.to_dict(), sort_keys=True) for record in self.records]
        output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return output_path
