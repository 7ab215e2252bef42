"""
Local subprocess runtime for sandbox execution.
"""

from __future__ import annotations

import os
import shlex
import signal
import subprocess
from pathlib import Path

from ...core.logging import get_logger
from .base import SandboxResult, SandboxStatus

try:
    import resource
except ImportError:  # pragma: no cover - non-POSIX hosts
    resource = None

logger = get_logger(__name__)

# Markers toolchains and runtimes print when an allocation fails under RLIMIT_AS
_MEMORY_MARKERS = (
    "MemoryError",
    "std::bad_alloc",
    "Cannot allocate memory",
    "out of memory",
    "OutOfMemoryError",
    "Allowed memory size",
)

EXIT_COMMAND_NOT_FOUND = 127


class LocalSandboxRuntime:
    """Executes commands as local subprocesses with a timeout and memory cap."""

    name = "local"

    def __init__(
        self,
        timeout_seconds: float = 30,
        memory_limit_mb: int = 512,
        env: dict[str, str] | None = None,
    ):
        self.timeout_seconds = timeout_seconds
        self.memory_limit_mb = memory_limit_mb
        self.env = env

    def run(
        self,
        command: str,
        stdin: str | None = None,
        *,
        workdir: Path | None = None,
        timeout_seconds: float | None = None,
        memory_limit_mb: int | None = None,
    ) -> SandboxResult:
        timeout = timeout_seconds if timeout_seconds is not None else self.timeout_seconds
        memory_mb = memory_limit_mb if memory_limit_mb is not None else self.memory_limit_mb
        try:
            argv = shlex.split(command)
        except ValueError as exc:
            return SandboxResult(
                output=f"Malformed command: {exc}",
                status=SandboxStatus(exit_code=2),
            )
        if not argv:
            return SandboxResult(output="Empty command", status=SandboxStatus(exit_code=2))

        logger.debug(f"Running locally: {command}")
        try:
            result = subprocess.run(
                argv,
                input=stdin,
                # No input means an empty stdin, never the service's own
                stdin=subprocess.DEVNULL if stdin is None else None,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=timeout,
                cwd=str(workdir) if workdir else None,
                env=self.env,
                preexec_fn=self._limit_memory(memory_mb),
                check=False,
            )
        except FileNotFoundError:
            return SandboxResult(
                output=f"{argv[0]}: command not found",
                status=SandboxStatus(exit_code=EXIT_COMMAND_NOT_FOUND),
            )
        except PermissionError as exc:
            return SandboxResult(
                output=f"{argv[0]}: {exc.strerror or exc}",
                status=SandboxStatus(exit_code=126),
            )
        except subprocess.TimeoutExpired as exc:
            logger.warning(f"Command timed out after {timeout}s: {command}")
            return SandboxResult(
                output=_decode(exc.stdout),
                status=SandboxStatus(exit_code=-int(signal.SIGKILL), timed_out=True),
            )

        output = result.stdout or ""
        memory_exceeded = bool(memory_mb) and self.looks_out_of_memory(result.returncode, output)
        return SandboxResult(
            output=output,
            status=SandboxStatus(exit_code=result.returncode, memory_exceeded=memory_exceeded),
        )

    @staticmethod
    def looks_out_of_memory(return_code: int, output: str) -> bool:
        """Guess whether a failed process died because of the memory cap."""
        if return_code == 0:
            return False
        if return_code == -int(signal.SIGKILL):
            return True
        return any(marker in output for marker in _MEMORY_MARKERS)

    @staticmethod
    def _limit_memory(memory_limit_mb: int | None):
        if resource is None or not memory_limit_mb or os.name != "posix":
            return None
        limit = int(memory_limit_mb) * 1024 * 1024

        def _apply() -> None:
            resource.setrlimit(resource.RLIMIT_AS, (limit, limit))

        return _apply


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode(errors="replace")
    return data
