"""Args record persisted beside generated sources."""

from __future__ import annotations

from pathlib import Path

from gladbuild.models import InvocationPlan


def write_args_record(plan: InvocationPlan) -> Path:
    record_path = plan.cache_key_path
    record_path.parent.mkdir(parents=True, exist_ok=True)
    record_path.write_text(plan.rendered_args() + "\n", encoding="utf-8")
    return record_path


def read_args_record(path: str | Path) -> str | None:
    record_path = Path(path)
    try:
        raw = record_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    return raw.rstrip("\n")


def is_fresh(plan: InvocationPlan) -> bool:
    """Whether the last generation used the same arguments and left every output."""
    if read_args_record(plan.cache_key_path) != plan.rendered_args():
        return False
    return all(path.exists() for path in plan.expected_outputs)
