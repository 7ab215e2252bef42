"""Tests for sandbox runtime registry and the local/docker runtimes."""

import os
import shlex
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from langtask.core.config import SandboxConfig, SandboxDockerConfig
from langtask.core.exceptions import ConfigurationError
from langtask.sandbox.runtimes import (
    SUPPORTED_RUNTIMES,
    DockerSandboxRuntime,
    LocalSandboxRuntime,
    create_runtime,
    detect_runtime_health,
)


@dataclass
class _DockerCfg:
    image: str = "toolchains:test"
    memory_limit_mb: int = 256
    cpus: float | None = 0.5
    network_enabled: bool = True
    extra_args: list[str] = field(default_factory=lambda: ["--init"])


@dataclass
class _SandboxCfg:
    runtime: str = "local"
    compile_timeout_seconds: int = 7
    memory_limit_mb: int = 333
    env_allowlist: list[str] = field(default_factory=list)
    docker: _DockerCfg = field(default_factory=_DockerCfg)


PYTHON = shlex.quote(sys.executable)


def test_create_runtime_local():
    runtime = create_runtime("local", _SandboxCfg())
    assert runtime.name == "local"
    assert runtime.timeout_seconds == 7
    assert runtime.memory_limit_mb == 333


def test_create_runtime_defaults_to_local_without_config():
    runtime = create_runtime(None)
    assert isinstance(runtime, LocalSandboxRuntime)


def test_create_runtime_docker_config_applied():
    runtime = create_runtime("Docker", _SandboxCfg())
    assert runtime.name == "docker"
    assert runtime.image == "toolchains:test"
    assert runtime.memory_limit_mb == 256
    assert runtime.cpus == 0.5
    assert runtime.network_enabled is True
    assert runtime.extra_args == ["--init"]


def test_create_runtime_rejects_unknown_name():
    with pytest.raises(ConfigurationError):
        create_runtime("firecracker")


@pytest.mark.parametrize("flag", ["--privileged", "-v", "--volume=/:/host", "--mount=type=bind"])
def test_create_runtime_blocks_dangerous_docker_flags(flag):
    cfg = SandboxConfig(runtime="docker", docker=SandboxDockerConfig(extra_args=[flag]))
    with pytest.raises(ConfigurationError):
        create_runtime("docker", cfg)


def test_local_env_only_includes_allowlisted_vars(monkeypatch):
    monkeypatch.setenv("LANGTASK_TEST_TOKEN", "abc\n")
    monkeypatch.setenv("LANGTASK_SECRET", "nope")
    runtime = create_runtime("local", _SandboxCfg(env_allowlist=["LANGTASK_TEST_TOKEN", "MISSING"]))

    assert runtime.env["LANGTASK_TEST_TOKEN"] == "abc"
    assert "LANGTASK_SECRET" not in runtime.env
    assert "MISSING" not in runtime.env


def test_detect_runtime_health_includes_local(monkeypatch):
    monkeypatch.setattr(
        DockerSandboxRuntime, "check_health", staticmethod(lambda timeout_seconds=2.5: (False, "down"))
    )
    health = detect_runtime_health()
    assert set(health) == set(SUPPORTED_RUNTIMES)
    assert health["local"].available is True
    assert health["docker"].available is False
    assert health["docker"].detail == "down"


# Local runtime, using the test interpreter as the sandboxed program


def test_local_runtime_captures_output_and_stdin(tmp_path):
    runtime = LocalSandboxRuntime(timeout_seconds=10, memory_limit_mb=0)
    result = runtime.run(
        f"{PYTHON} -c \"import sys; print(sys.stdin.read().upper())\"",
        "hello",
        workdir=tmp_path,
    )
    assert result.status.ok
    assert result.output.strip() == "HELLO"


def test_local_runtime_without_input_gives_empty_stdin(tmp_path):
    read_end, write_end = os.pipe()
    os.write(write_end, b"host-data\n")
    os.close(write_end)
    host_stdin = os.dup(0)
    os.dup2(read_end, 0)
    try:
        runtime = LocalSandboxRuntime(timeout_seconds=10, memory_limit_mb=0)
        result = runtime.run(
            f"{PYTHON} -c \"import sys; print(repr(sys.stdin.read()))\"",
            None,
            workdir=tmp_path,
        )
    finally:
        os.dup2(host_stdin, 0)
        os.close(host_stdin)
        os.close(read_end)

    assert result.status.ok
    assert result.output.strip() == "''"


def test_local_runtime_merges_stderr_and_reports_exit_code(tmp_path):
    runtime = LocalSandboxRuntime(timeout_seconds=10, memory_limit_mb=0)
    result = runtime.run(
        f"{PYTHON} -c \"import sys; sys.stderr.write('boom'); sys.exit(3)\"",
        workdir=tmp_path,
    )
    assert result.status.exit_code == 3
    assert not result.status.ok
    assert "boom" in result.output


def test_local_runtime_runs_in_workdir(tmp_path):
    (tmp_path / "marker.txt").write_text("here", encoding="utf-8")
    runtime = LocalSandboxRuntime(timeout_seconds=10, memory_limit_mb=0)
    result = runtime.run(f"{PYTHON} -c \"print(open('marker.txt').read())\"", workdir=tmp_path)
    assert result.output.strip() == "here"


def test_local_runtime_timeout_is_reported(tmp_path):
    runtime = LocalSandboxRuntime(timeout_seconds=10, memory_limit_mb=0)
    result = runtime.run(
        f"{PYTHON} -c \"import time; time.sleep(5)\"",
        workdir=tmp_path,
        timeout_seconds=0.5,
    )
    assert result.status.timed_out
    assert not result.status.ok


def test_local_runtime_missing_command_does_not_raise(tmp_path):
    runtime = LocalSandboxRuntime()
    result = runtime.run("definitely-not-a-real-compiler --version", workdir=tmp_path)
    assert result.status.exit_code == 127
    assert "command not found" in result.output


def test_local_runtime_malformed_command_does_not_raise():
    result = LocalSandboxRuntime().run('gcc "unterminated')
    assert result.status.exit_code == 2


@pytest.mark.parametrize(
    "return_code, output, expected",
    [
        (0, "MemoryError", False),
        (1, "Traceback...\nMemoryError\n", True),
        (-9, "", True),
        (1, "terminate called after throwing an instance of 'std::bad_alloc'", True),
        (1, "SyntaxError", False),
    ],
)
def test_looks_out_of_memory(return_code, output, expected):
    assert LocalSandboxRuntime.looks_out_of_memory(return_code, output) is expected


# Docker runtime


def test_docker_build_command(tmp_path):
    runtime = DockerSandboxRuntime(image="img:1", memory_limit_mb=128, cpus=1.5, extra_args=["--init"])
    cmd = runtime.build_command(
        "./prog.c.exe --fast", workdir=tmp_path, memory_limit_mb=None, interactive=True
    )
    assert cmd[:4] == ["docker", "run", "--rm", "--interactive"]
    assert f"{Path(tmp_path).resolve()}:/workspace:rw" in cmd
    assert cmd[cmd.index("--network") + 1] == "none"
    assert cmd[cmd.index("--memory") + 1] == "128m"
    assert cmd[cmd.index("--cpus") + 1] == "1.5"
    assert cmd[-4:] == ["--init", "img:1", "./prog.c.exe", "--fast"]


def test_docker_memory_override_zero_disables_cap(tmp_path):
    runtime = DockerSandboxRuntime(memory_limit_mb=128)
    cmd = runtime.build_command("javac Main.java", workdir=tmp_path, memory_limit_mb=0, interactive=False)
    assert "--memory" not in cmd
    assert "--interactive" not in cmd


def test_docker_run_maps_oom_exit_code(monkeypatch, tmp_path):
    def _fake_run(cmd, **kwargs):
        assert kwargs["input"] == "data"
        return subprocess.CompletedProcess(cmd, 137, stdout="Killed\n")

    monkeypatch.setattr("langtask.sandbox.runtimes.docker_runtime.subprocess.run", _fake_run)
    result = DockerSandboxRuntime().run("./a.out", "data", workdir=tmp_path)
    assert result.status.exit_code == 137
    assert result.status.memory_exceeded


def test_docker_run_without_cli_reports_status(monkeypatch, tmp_path):
    def _fake_run(cmd, **kwargs):
        raise FileNotFoundError("docker")

    monkeypatch.setattr("langtask.sandbox.runtimes.docker_runtime.subprocess.run", _fake_run)
    result = DockerSandboxRuntime().run("./a.out", workdir=tmp_path)
    assert result.status.exit_code == 127


def test_docker_run_timeout_kills_named_container(monkeypatch, tmp_path):
    calls = []

    def _fake_run(cmd, **kwargs):
        calls.append(cmd)
        if cmd[:2] == ["docker", "run"]:
            raise subprocess.TimeoutExpired(cmd, kwargs["timeout"], output=b"partial")
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    monkeypatch.setattr("langtask.sandbox.runtimes.docker_runtime.subprocess.run", _fake_run)
    result = DockerSandboxRuntime().run("./a.out", workdir=tmp_path, timeout_seconds=1)

    assert result.status.timed_out
    assert result.output == "partial"
    run_cmd, kill_cmd = calls
    container_name = run_cmd[run_cmd.index("--name") + 1]
    assert container_name.startswith("langtask-")
    assert kill_cmd == ["docker", "kill", container_name]


def test_docker_run_uses_fresh_container_names(monkeypatch, tmp_path):
    names = []

    def _fake_run(cmd, **kwargs):
        names.append(cmd[cmd.index("--name") + 1])
        return subprocess.CompletedProcess(cmd, 0, stdout="")

    monkeypatch.setattr("langtask.sandbox.runtimes.docker_runtime.subprocess.run", _fake_run)
    runtime = DockerSandboxRuntime()
    runtime.run("./a.out", workdir=tmp_path)
    runtime.run("./a.out", workdir=tmp_path)

    assert len(set(names)) == 2


def test_docker_run_without_input_does_not_inherit_stdin(monkeypatch, tmp_path):
    seen = {}

    def _fake_run(cmd, **kwargs):
        seen.update(kwargs)
        return subprocess.CompletedProcess(cmd, 0, stdout="")

    monkeypatch.setattr("langtask.sandbox.runtimes.docker_runtime.subprocess.run", _fake_run)
    DockerSandboxRuntime().run("./a.out", workdir=tmp_path)

    assert seen["input"] is None
    assert seen["stdin"] is subprocess.DEVNULL
