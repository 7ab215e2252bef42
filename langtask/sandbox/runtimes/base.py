"""
Base types for sandbox execution runtimes.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass(slots=True, frozen=True)
class SandboxStatus:
    """Completion status of one sandboxed command."""

    exit_code: int
    timed_out: bool = False
    memory_exceeded: bool = False

    @property
    def ok(self) -> bool:
        return self.exit_code == 0 and not self.timed_out and not self.memory_exceeded


@dataclass(slots=True, frozen=True)
class SandboxResult:
    """Combined stdout/stderr and status of a sandboxed command."""

    output: str
    status: SandboxStatus


class SandboxRunner(Protocol):
    """Runtime contract for sandbox execution backends.

    Implementations must not raise for toolchain failures: a command that
    cannot be started, times out or runs out of memory is reported through
    the returned status.
    """

    name: str

    def run(
        self,
        command: str,
        stdin: str | None = None,
        *,
        workdir: Path | None = None,
        timeout_seconds: float | None = None,
        memory_limit_mb: int | None = None,
    ) -> SandboxResult:
        """Run ``command`` and return its captured output and status."""
