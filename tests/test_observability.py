import io
import json
from pathlib import Path

from gladbuild.backends import InProcessBackend
from gladbuild.library import Project
from gladbuild.observability import LogRecord, StructuredLogger
from gladbuild.settings import BuildSettings


def test_structured_logs_include_target_phase_and_backend(
    settings: BuildSettings,
    inprocess_backend: InProcessBackend,
) -> None:
    project = Project(settings=settings).library("glad", api="gl:core=3.3")
    project.generate(inprocess_backend)

    assert project.logger.operations("glad") == [
        "configure_target",
        "plan_target",
        "generate_start",
        "generate_complete",
    ]
    records = project.logger.records_for_target("glad")
    assert [record.phase for record in records] == ["configure", "configure", "generate", "generate"]
    assert records[0].backend is None
    assert records[-1].backend == "inprocess"


def test_failed_targets_are_logged_as_errors(settings: BuildSettings) -> None:
    project = Project(settings=settings).library("glad", api="nope")
    project.configure()

    errors = project.logger.errors()
    assert len(errors) == 1
    assert errors[0].operation == "configure_failed"
    assert errors[0].extra == {"code": "E_MALFORMED_SPEC"}


def test_echo_writes_status_lines() -> None:
    stream = io.StringIO()
    logger = StructuredLogger(echo=stream)

    logger.log(operation="configure_target", target="glad", phase="configure", backend=None, message="Configuring.")
    logger.log(operation="setup", target=None, phase=None, backend=None, message="Using venv.")
    logger.log(
        operation="generate_failed",
        target="glad",
        phase="generate",
        backend="venv",
        message="generate failed.",
        level="error",
    )

    assert stream.getvalue().splitlines() == [
        "-- Glad Library 'glad': Configuring.",
        "-- Using venv.",
        "!! Glad Library 'glad': generate failed.",
    ]


def test_record_dict_omits_missing_extra() -> None:
    record = LogRecord(operation="op", target="glad", phase=None, backend=None, message="hello")

    assert record.to_dict() == {
        "operation": "op",
        "target": "glad",
        "phase": None,
        "backend": None,
        "message": "hello",
        "level": "info",
    }


def test_logger_writes_json_lines(tmp_path: Path) -> None:
    logger = StructuredLogger()
    logger.log(operation="op", target="glad", phase="configure", backend=None, message="hello")
    logger.log(operation="op", target="glad", phase="generate", backend="venv", message="done", extra={"n": 1})

    path = logger.to_json_lines(tmp_path / "logs" / "gladbuild.jsonl")

    lines = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert [line["message"] for line in lines] == ["hello", "done"]
    assert "extra" not in lines[0]
    assert lines[1]["extra"] == {"n": 1}
