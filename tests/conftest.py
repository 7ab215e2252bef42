"""
Pytest configuration and fixtures for langtask tests.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import pytest
from hypothesis import Verbosity, settings

from langtask.sandbox.runtimes.base import SandboxResult, SandboxStatus

# Configure hypothesis settings for property-based testing
settings.register_profile(
    "default",
    max_examples=100,
    verbosity=Verbosity.normal,
    deadline=None,
)

settings.register_profile(
    "ci",
    max_examples=200,
    verbosity=Verbosity.normal,
    deadline=None,
)

settings.register_profile(
    "dev",
    max_examples=10,
    verbosity=Verbosity.verbose,
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "default"))


@dataclass
class RunnerCall:
    command: str
    stdin: str | None
    workdir: Path | None
    timeout_seconds: float | None
    memory_limit_mb: int | None


@dataclass
class FakeRunner:
    """In-memory sandbox runner returning scripted results by command prefix."""

    responses: dict[str, SandboxResult] = field(default_factory=dict)
    default: SandboxResult = field(
        default_factory=lambda: SandboxResult(output="", status=SandboxStatus(exit_code=0))
    )
    calls: list[RunnerCall] = field(default_factory=list)
    name: str = "fake"

    def run(
        self,
        command,
        stdin=None,
        *,
        workdir=None,
        timeout_seconds=None,
        memory_limit_mb=None,
    ):
        self.calls.append(RunnerCall(command, stdin, workdir, timeout_seconds, memory_limit_mb))
        for prefix, result in self.responses.items():
            if command.startswith(prefix):
                return result
        return self.default

    @property
    def commands(self) -> list[str]:
        return [call.command for call in self.calls]


def sandbox_result(output: str = "", exit_code: int = 0, **status) -> SandboxResult:
    return SandboxResult(output=output, status=SandboxStatus(exit_code=exit_code, **status))


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def make_runner():
    def _make(responses=None, default=None):
        return FakeRunner(responses=dict(responses or {}), default=default or sandbox_result())

    return _make


@pytest.fixture
def sample_c_program():
    return "int main(){return 0;}\n"


@pytest.fixture
def sample_java_program():
    return """import java.util.Scanner;

public class Greeter {
    public static void main(String[] args) {
        Scanner in = new Scanner(System.in);
        System.out.println("Hello " + in.nextLine());
    }
}

class Helper {
    int twice(int x) { return 2 * x; }
}
"""
