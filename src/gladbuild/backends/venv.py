"""Run glad from an isolated virtual environment.

Every ``execute`` call cleans the output directory, installs glad into the
venv and runs the generator, regardless of any earlier args record. Skipping
up-to-date targets is decided by the caller (see ``Project.generate``).

``generation_commands`` describes the same steps as argv tuples for a host
build system that runs them itself, from ``BuildRule.working_dir``.
"""

from __future__ import annotations

import shutil
import subprocess
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from gladbuild.errors import ExternalToolError
from gladbuild.models import BuildRule, GenerationResult, InvocationPlan
from gladbuild.record import write_args_record
from gladbuild.settings import BuildSettings

# Interpreter locations inside a venv, in lookup order. ``bin/python.exe``
# covers a Windows host running under msys or cygwin.
VENV_PYTHON_CANDIDATES = (
    Path("bin") / "python",
    Path("bin") / "python.exe",
    Path("Scripts") / "python.exe",
)

# Inline scripts for the clean and record steps, run with ``python -c``.
CLEAN_SCRIPT = (
    "import os, shutil, sys; "
    "shutil.rmtree(sys.argv[1], ignore_errors=True); os.makedirs(sys.argv[1])"
)
RECORD_SCRIPT = (
    "import pathlib, sys; "
    "pathlib.Path(sys.argv[1]).write_text(sys.argv[2] + '\\n', encoding='utf-8')"
)


def expected_venv_python(venv_dir: Path) -> Path:
    if sys.platform == "win32":
        return venv_dir / "Scripts" / "python.exe"
    return venv_dir / "bin" / "python"


def generation_commands(plan: InvocationPlan, settings: BuildSettings) -> tuple[tuple[str, ...], ...]:
    """External steps of one generation, as argv tuples for a host build system.

    The steps create the venv, clean the output directory, install glad, run
    it and write the args record, so running them produces every path in
    ``BuildRule.outputs``.
    """
    venv_dir = settings.venv_for(plan.output_dir)
    python = str(expected_venv_python(venv_dir))
    return (
        (settings.python_executable, "-m", "venv", str(venv_dir)),
        (python, "-c", CLEAN_SCRIPT, str(plan.output_dir)),
        (python, "-m", "pip", "install", settings.pip_requirement()),
        (python, "-m", "glad", *plan.argument_vector),
        (python, "-c", RECORD_SCRIPT, str(plan.cache_key_path), plan.rendered_args()),
    )


@dataclass(slots=True)
class VenvGladBackend:
    settings: BuildSettings = field(default_factory=BuildSettings)
    name: str = "venv"
    # venv directory -> interpreter found after creating it
    _pythons: dict[Path, Path] = field(init=False, default_factory=dict, repr=False)

    def prepare(self, rule: BuildRule) -> None:
        self._python_for(rule.plan)

    def execute(self, rule: BuildRule) -> GenerationResult:
        plan = rule.plan
        python = self._python_for(plan)

        if plan.output_dir.exists():
            shutil.rmtree(plan.output_dir)
        plan.output_dir.mkdir(parents=True, exist_ok=True)

        self._run(
            [str(python), "-m", "pip", "install", self.settings.pip_requirement()],
            target=rule.target,
            operation="install_glad",
            hint="Check network access or point glad_sources_dir at a local glad checkout.",
        )
        self._run(
            [str(python), "-m", "glad", *plan.argument_vector],
            target=rule.target,
            operation="generate",
            hint="Check the API, extension and flag selection against glad --help.",
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

    def venv_python(self, venv_dir: Path) -> Path:
        for candidate in VENV_PYTHON_CANDIDATES:
            python = venv_dir / candidate
            if python.exists():
                return python
        raise ExternalToolError(
            "Python interpreter not found in the virtual environment.",
            hint="Delete the venv directory and configure again.",
            context={"backend": self.name, "venv": str(venv_dir)},
        )

    def _python_for(self, plan: InvocationPlan) -> Path:
        python = self._pythons.get(self.settings.venv_for(plan.output_dir))
        if python is not None and python.exists():
            return python
        return self._ensure_venv(plan)

    def _ensure_venv(self, plan: InvocationPlan) -> Path:
        venv_dir = self.settings.venv_for(plan.output_dir)
        self._run(
            [self.settings.python_executable, "-m", "venv", str(venv_dir)],
            target=None,
            operation="create_venv",
            hint="Failed to create virtual environment needed for glad.",
        )
        python = self.venv_python(venv_dir)
        self._pythons[venv_dir] = python
        return python

    def _run(
        self,
        command: Sequence[str],
        *,
        target: str | None,
        operation: str,
        hint: str,
    ) -> subprocess.CompletedProcess[str]:
        cwd = self.settings.glad_working_dir()
        context = {"backend": self.name, "operation": operation, "target": target or ""}
        try:
            result = subprocess.run(
                list(command),
                cwd=str(cwd) if cwd is not None else None,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise ExternalToolError(
                f"Could not start `{command[0]}`.",
                command=command,
                stderr=str(exc),
                hint=hint,
                context=context,
            ) from exc
        if result.returncode != 0:
            raise ExternalToolError(
                f"{operation} failed.",
                command=command,
                returncode=result.returncode,
                stdout=result.stdout or "",
                stderr=result.stderr or "",
                hint=hint,
                context=context,
            )
        return result
