"""
Language task contract shared by every language variant.

A task owns one submission in one language. The caller drives it through a
fixed protocol: ``compile()`` once, then run ``get_run_command()`` (built from
``get_executable_path()`` and ``get_target_file()``) through the sandbox
runner. Interpreted variants implement ``compile()`` as a no-op or as a file
staging step so the protocol is the same for every toolchain.
"""

from __future__ import annotations

import math
import shlex
import shutil
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, ClassVar

from ..core.exceptions import CompileError, ConfigurationError, StagingError, TaskStateError
from ..core.logging import get_logger
from ..sandbox.runtimes.base import SandboxResult, SandboxRunner, SandboxStatus
from ..sandbox.runtimes.local_runtime import LocalSandboxRuntime

logger = get_logger(__name__)

# Parameters holding ordered command-line flags
SEQUENCE_PARAMS = frozenset({"compileargs", "linkargs", "interpreterargs", "runargs"})


def _freeze(key: str, value: Any) -> Any:
    if key in SEQUENCE_PARAMS and isinstance(value, str):
        return tuple(shlex.split(value))
    if isinstance(value, (list, tuple)):
        return tuple(value)
    if isinstance(value, dict):
        return MappingProxyType(dict(value))
    return value


def overlay(
    caller_params: Mapping[str, Any] | None,
    defaults: Mapping[str, Any],
) -> Mapping[str, Any]:
    """
    Merge caller parameters over variant defaults.

    Caller values win on key collision. The result is a new read-only mapping;
    neither input is modified.
    """
    merged = {key: _freeze(key, value) for key, value in defaults.items()}
    for key, value in (caller_params or {}).items():
        merged[str(key)] = _freeze(str(key), value)
    return MappingProxyType(merged)


BASE_DEFAULT_PARAMS: Mapping[str, Any] = overlay(
    {
        "compileargs": (),
        "linkargs": (),
        "interpreterargs": (),
        "runargs": (),
        "cputime": 5,  # seconds
        "memorylimit": 200,  # MB, 0 disables the cap
    },
    {},
)


def extend_defaults(**overrides: Any) -> Mapping[str, Any]:
    """Build a variant's default parameters on top of the base defaults."""
    return overlay(overrides, BASE_DEFAULT_PARAMS)


@dataclass(slots=True, frozen=True)
class CompileInfo:
    """Captured compiler command, output and status."""

    command: str
    output: str
    status: SandboxStatus

    @property
    def ok(self) -> bool:
        return self.status.ok


class LanguageTask(ABC):
    """Base class for every language variant."""

    language_id: ClassVar[str]
    display_name: ClassVar[str]
    default_params: ClassVar[Mapping[str, Any]] = BASE_DEFAULT_PARAMS

    def __init__(
        self,
        source_file_name: str,
        input: str | None = None,
        params: Mapping[str, Any] | None = None,
        *,
        runner: SandboxRunner | None = None,
        workdir: Path | str | None = None,
    ):
        if not source_file_name:
            raise ValueError("source_file_name must be a non-empty file name")
        self._source_file_name = str(source_file_name)
        self.input = input
        self.params = overlay(params, self.default_params)
        self.runner = runner if runner is not None else LocalSandboxRuntime()
        self.workdir = Path(workdir) if workdir is not None else Path.cwd()
        self.cmpinfo: CompileInfo | None = None
        self._executable_file_name: str | None = None
        self._compile_started = False
        self._ready = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(source_file_name={self._source_file_name!r})"

    @property
    def source_file_name(self) -> str:
        return self._source_file_name

    @property
    def executable_file_name(self) -> str | None:
        """Artifact to execute; ``None`` until ``compile()`` has run."""
        return self._executable_file_name

    @executable_file_name.setter
    def executable_file_name(self, value: str) -> None:
        if self._executable_file_name is not None:
            raise TaskStateError(
                f"executable_file_name already set to '{self._executable_file_name}'"
            )
        self._executable_file_name = value

    # Variant contract

    @classmethod
    @abstractmethod
    def get_version_command(cls) -> tuple[str, str]:
        """Return the version command and a one-group regex for its output."""

    @classmethod
    @abstractmethod
    def default_file_name(cls, source_text: str) -> str:
        """Return the file name to stage ``source_text`` under."""

    @abstractmethod
    def _compile(self) -> None:
        """Build or stage the submission and set ``executable_file_name``."""

    @abstractmethod
    def get_executable_path(self) -> str:
        """Return the binary that starts the run phase."""

    @abstractmethod
    def get_target_file(self) -> str:
        """Return the file argument for the run command, or ``""``."""

    # Protocol

    def compile(self) -> None:
        """
        Compile or stage the submission.

        Raises:
            CompileError: the toolchain ran and reported failure
            StagingError: the source could not be copied to its toolchain name
            TaskStateError: compile() was already called on this task
        """
        if self._compile_started:
            raise TaskStateError(f"{self!r} has already been compiled")
        self._compile_started = True
        logger.debug(f"Compiling {self.source_file_name} as {self.language_id}")
        self._compile()
        self._ready = True

    def get_param(self, name: str, default: Any = None) -> Any:
        return self.params.get(name, default)

    def get_run_command(self) -> list[str]:
        """Build the run-phase argv from executable, interpreter args and target."""
        if not self._ready:
            raise TaskStateError(f"{self!r} must compile successfully before it can run")
        command = [self.get_executable_path()]
        command.extend(split_args(self.get_param("interpreterargs", ())))
        target = self.get_target_file()
        if target:
            command.append(target)
        command.extend(split_args(self.get_param("runargs", ())))
        return command

    def execute(self) -> SandboxResult:
        """Run the compiled or staged program with ``input`` on stdin."""
        command = shlex.join(self.get_run_command())
        return self.run_in_sandbox(
            command,
            stdin=self.input,
            timeout_seconds=self.numeric_param("cputime", float),
            memory_limit_mb=self.numeric_param("memorylimit", int),
        )

    def numeric_param(self, name: str, number_type: type[int] | type[float]) -> Any:
        """
        Return a limit parameter as a number, or None when it is unset.

        Raises:
            ConfigurationError: the value is not a non-negative number
        """
        value = self.get_param(name)
        if value is None:
            return None
        try:
            number = float(value)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Parameter '{name}' must be a number, got {value!r}") from exc
        if isinstance(value, bool) or not math.isfinite(number) or number < 0:
            raise ConfigurationError(f"Parameter '{name}' must be a non-negative number, got {value!r}")
        return number_type(number)

    # Helpers for variants

    def run_in_sandbox(
        self,
        command: str,
        stdin: str | None = None,
        *,
        timeout_seconds: float | None = None,
        memory_limit_mb: int | None = None,
    ) -> SandboxResult:
        return self.runner.run(
            command,
            stdin,
            workdir=self.workdir,
            timeout_seconds=timeout_seconds,
            memory_limit_mb=memory_limit_mb,
        )

    def run_compiler(self, command: str, *, memory_limit_mb: int | None = None) -> CompileInfo:
        """Run a compiler command, record ``cmpinfo`` and raise on failure."""
        logger.debug(f"Compile command: {command}")
        result = self.run_in_sandbox(command, memory_limit_mb=memory_limit_mb)
        self.cmpinfo = CompileInfo(command=command, output=result.output, status=result.status)
        if not self.cmpinfo.ok:
            logger.warning(
                f"{self.language_id} compile failed for {self.source_file_name} "
                f"(exit {result.status.exit_code})"
            )
            raise CompileError(self.cmpinfo)
        return self.cmpinfo

    def stage_copy(self, target_name: str) -> str:
        """Copy the source to ``target_name`` inside the working directory."""
        source = self.workdir / self.source_file_name
        target = self.workdir / target_name
        try:
            shutil.copyfile(source, target)
        except OSError as exc:
            raise StagingError(
                f"couldn't copy {self.source_file_name} to {target_name}: {exc}"
            ) from exc
        return target_name

    def stage_with_extension(self, extensions: tuple[str, ...]) -> str:
        """
        Make sure the program file ends with one of ``extensions``.

        The source is used as-is when its name already ends with an accepted
        extension; otherwise it is copied to ``<name><extensions[0]>``.
        """
        if self.source_file_name.endswith(extensions):
            return self.source_file_name
        return self.stage_copy(self.source_file_name + extensions[0])


def join_args(args: Any) -> str:
    """Render a parameter sequence as command-line words (entries may hold several flags)."""
    return " ".join(str(arg) for arg in args or ())


def split_args(args: Any) -> list[str]:
    """Expand a parameter sequence into individual argv words."""
    words: list[str] = []
    for arg in args or ():
        words.extend(shlex.split(str(arg)))
    return words
