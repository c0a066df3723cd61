import json
from pathlib import Path

import pytest

from gladbuild.cli import build_parser, main
from gladbuild.library import GenerateResult
from gladbuild.models import GenerationResult


def test_plan_prints_build_rule(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(
        [
            "plan",
            "glad_gl_core_33",
            "--api",
            "gl:core=3.3",
            "--shared",
            "--merge",
            "--loader",
            "--binary-dir",
            str(tmp_path),
        ],
    )

    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert payload["kind"] == "SHARED"
    assert payload["arguments"] == [
        "--out-path",
        str(tmp_path / "gladsources" / "glad_gl_core_33"),
        "--api",
        "gl:core=3.3",
        "--merge",
        "c",
        "--loader",
    ]


def test_plan_extensions_none(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["plan", "glad", "--api", "gl=3.3", "--extensions", "NONE", "--binary-dir", str(tmp_path)])

    payload = json.loads(capsys.readouterr().out)
    assert payload["arguments"][4:6] == ["--extensions", " "]


def test_plan_error_prints_json_and_exits_nonzero(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    code = main(["plan", "glad", "--api", "bogus", "--binary-dir", str(tmp_path)])

    captured = capsys.readouterr()
    assert code == 1
    assert json.loads(captured.err)["code"] == "E_MALFORMED_SPEC"


def test_kind_options_are_mutually_exclusive() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["plan", "glad", "--api", "gl=3.3", "--shared", "--static"])


def test_generate_if_changed_uses_policy(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    seen: list[str] = []

    def fake_generate(self: object, backend: object = None, *, targets: object = None) -> object:
        seen.append(self.settings.regeneration)  # type: ignore[attr-defined]
        return GenerateResult(
            results={
                "glad": GenerationResult(
                    target="glad",
                    generated=False,
                    outputs=(),
                    args_path=tmp_path / "args.txt",
                    skipped_reason="args record up to date",
                ),
            },
        )

    monkeypatch.setattr("gladbuild.cli.Project.generate", fake_generate)

    code = main(["generate", "glad", "--api", "gl=3.3", "--if-changed", "--binary-dir", str(tmp_path)])

    assert code == 0
    assert seen == ["if-changed"]
    assert json.loads(capsys.readouterr().out)["generated"] is False


def test_plan_verbose_prints_status_lines(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["plan", "glad", "--api", "gl=3.3", "--verbose", "--binary-dir", str(tmp_path)])

    captured = capsys.readouterr()
    assert code == 0
    assert captured.err.splitlines() == [
        "-- Glad Library 'glad': Configuring.",
        "-- Glad Library 'glad': Planned glad invocation.",
    ]
    assert json.loads(captured.out)["target"] == "glad"
