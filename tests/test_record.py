from pathlib import Path

from gladbuild.models import FeatureFlags
from gladbuild.planner import plan
from gladbuild.record import is_fresh, read_args_record, write_args_record
from gladbuild.spec import resolve


def test_write_args_record_persists_rendered_args(tmp_path: Path) -> None:
    result = plan([resolve("gl:core=3.3")], FeatureFlags(quiet=True), tmp_path / "glad")

    path = write_args_record(result)

    assert path == tmp_path / "glad" / "args.txt"
    assert path.read_text(encoding="utf-8") == result.rendered_args() + "\n"
    assert read_args_record(path) == result.rendered_args()


def test_read_args_record_missing_returns_none(tmp_path: Path) -> None:
    assert read_args_record(tmp_path / "args.txt") is None


def test_is_fresh_requires_matching_record_and_outputs(tmp_path: Path) -> None:
    result = plan([resolve("vulkan=1.1")], FeatureFlags(), tmp_path / "glad")
    assert not is_fresh(result)

    write_args_record(result)
    assert not is_fresh(result)

    for output in result.expected_outputs:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text("", encoding="utf-8")
    assert is_fresh(result)


def test_is_fresh_detects_changed_arguments(tmp_path: Path) -> None:
    root = tmp_path / "glad"
    previous = plan([resolve("gl=3.3")], FeatureFlags(header_only=True), root)
    write_args_record(previous)
    for output in previous.expected_outputs:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text("", encoding="utf-8")

    current = plan([resolve("gl=3.3")], FeatureFlags(header_only=True, debug=True), root)

    assert is_fresh(previous)
    assert not is_fresh(current)
