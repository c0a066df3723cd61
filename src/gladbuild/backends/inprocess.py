"""In-process generator backend for testing and dry runs.

Writes deterministic placeholder files for every expected output without
creating a venv or invoking glad, making it suitable for:
- Unit tests that verify the configure/generate pipeline
- Build trees that only need the file layout, e.g. IDE indexing
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from gladbuild.models import BuildRule, GenerationResult
from gladbuild.record import write_args_record


@dataclass(slots=True)
class InProcessBackend:
    """Backend that produces deterministic placeholder sources in-process."""

    name: str = "inprocess"

    def prepare(self, rule: BuildRule) -> None:
        rule.plan.output_dir.mkdir(parents=True, exist_ok=True)

    def execute(self, rule: BuildRule) -> GenerationResult:
        plan = rule.plan
        digest = hashlib.sha256(plan.rendered_args().encode("utf-8")).hexdigest()
        for path in plan.expected_outputs:
            path.parent.mkdir(parents=True, exist_ok=True)
            relative = path.relative_to(plan.output_dir).as_posix()
            path.write_text(
                f"/* glad placeholder: target={rule.target} file={relative} */\n"
                f"/* args-digest={digest} */\n",
                encoding="utf-8",
            )
        args_path = write_args_record(plan)
        return GenerationResult(
            target=rule.target,
            generated=True,
            outputs=plan.expected_outputs,
            args_path=args_path,
        )

    def cleanup(self, rule: BuildRule) -> None:
        pass
