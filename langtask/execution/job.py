"""
Job driver: stages one submission, compiles it and runs it.
"""

from __future__ import annotations

import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path, PurePath
from typing import Any

from ..core.config import ProjectConfig
from ..core.exceptions import CompileError, StagingError
from ..core.logging import get_logger
from ..languages.base import CompileInfo, overlay
from ..languages.registry import resolve_language
from ..sandbox.runtimes.base import SandboxRunner, SandboxStatus
from ..sandbox.runtimes.registry import create_runtime

logger = get_logger(__name__)


class Outcome(IntEnum):
    """Result codes reported back to submitters."""

    COMPILE_ERROR = 11
    RUNTIME_ERROR = 12
    TIME_LIMIT = 13
    SUCCESS = 15
    MEMORY_LIMIT = 17
    INTERNAL_ERROR = 20


@dataclass(slots=True)
class JobResult:
    """Outcome of one compile -> execute cycle."""

    language: str
    source_file_name: str
    outcome: Outcome
    cmpinfo: CompileInfo | None = None
    output: str = ""
    status: SandboxStatus | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        return {
            "language": self.language,
            "source_file_name": self.source_file_name,
            "outcome": int(self.outcome),
            "cmpinfo": self.cmpinfo.output if self.cmpinfo else "",
            "output": self.output,
            "exit_code": self.status.exit_code if self.status else None,
            "error": self.error,
        }


def outcome_for_status(status: SandboxStatus) -> Outcome:
    """Map a run-phase status to an outcome code."""
    if status.timed_out:
        return Outcome.TIME_LIMIT
    if status.memory_exceeded:
        return Outcome.MEMORY_LIMIT
    if status.exit_code != 0:
        return Outcome.RUNTIME_ERROR
    return Outcome.SUCCESS


def _check_file_name(file_name: str) -> str:
    name = PurePath(file_name).name
    if not name or name != file_name or name in {".", ".."}:
        raise ValueError(f"Invalid source file name: {file_name!r}")
    return name


def run_job(
    language_id: str,
    source_code: str,
    *,
    input: str | None = None,
    params: Mapping[str, Any] | None = None,
    file_name: str | None = None,
    runner: SandboxRunner | None = None,
    config: ProjectConfig | None = None,
) -> JobResult:
    """
    Run one submission through the compile -> execute protocol.

    Args:
        language_id: Declared language of the submission
        source_code: Program text
        input: Optional stdin for the program
        params: Caller parameters, overriding configured and variant defaults
        file_name: Name to stage the source under; derived from the code if omitted
        runner: Sandbox runner; built from ``config`` when omitted
        config: Service configuration supplying the default cputime and per-language overrides

    Returns:
        JobResult with the outcome code, compiler info and program output

    Raises:
        UnsupportedLanguageError: before any file is written
        ValueError: if ``file_name`` is not a plain file name
    """
    variant = resolve_language(language_id)
    source_file_name = _check_file_name(file_name or variant.default_file_name(source_code))

    configured: dict[str, Any] = {}
    if config is not None:
        configured = {
            "cputime": config.sandbox.default_timeout_seconds,
            **config.get_language_params(variant.language_id),
        }
    merged_params = overlay(params, configured)

    if runner is None:
        sandbox_config = config.sandbox if config is not None else None
        runner = create_runtime(getattr(sandbox_config, "runtime", "local"), sandbox_config)

    with tempfile.TemporaryDirectory(prefix="langtask_") as temp_dir:
        workdir = Path(temp_dir)
        result = JobResult(
            language=variant.language_id,
            source_file_name=source_file_name,
            outcome=Outcome.INTERNAL_ERROR,
        )
        try:
            (workdir / source_file_name).write_text(source_code, encoding="utf-8")
        except OSError as exc:
            logger.error(f"Could not stage {source_file_name}: {exc}")
            result.error = f"Staging failed: {exc}"
            return result

        task = variant(source_file_name, input, merged_params, runner=runner, workdir=workdir)
        try:
            task.compile()
        except CompileError as exc:
            result.outcome = Outcome.COMPILE_ERROR
            result.cmpinfo = exc.cmpinfo
            return result
        except StagingError as exc:
            logger.error(str(exc))
            result.error = str(exc)
            return result

        result.cmpinfo = task.cmpinfo
        run = task.execute()
        result.output = run.output
        result.status = run.status
        result.outcome = outcome_for_status(run.status)
        logger.debug(f"{variant.language_id} job finished with outcome {result.outcome.name}")
        return result
