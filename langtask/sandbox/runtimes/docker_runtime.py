"""
Docker runtime for sandbox execution.
"""

import shlex
import subprocess
import uuid
from pathlib import Path

from ...core.logging import get_logger
from .base import SandboxResult, SandboxStatus

logger = get_logger(__name__)

# docker reports a container killed by the OOM killer (SIGKILL) as 128 + 9
_EXIT_OOM_KILLED = 137

KILL_TIMEOUT_SECONDS = 10


class DockerSandboxRuntime:
    """Executes commands inside a throwaway Docker container."""

    name = "docker"

    def __init__(
        self,
        image: str = "langtask/toolchains:latest",
        timeout_seconds: float = 30,
        memory_limit_mb: int = 512,
        cpus: float | None = 1.0,
        network_enabled: bool = False,
        extra_args: list[str] | None = None,
    ):
        self.image = image
        self.timeout_seconds = timeout_seconds
        self.memory_limit_mb = memory_limit_mb
        self.cpus = cpus
        self.network_enabled = network_enabled
        self.extra_args = extra_args or []

    def build_command(
        self,
        command: str,
        *,
        workdir: Path | None,
        memory_limit_mb: int | None,
        interactive: bool,
        container_name: str | None = None,
    ) -> list[str]:
        """Wrap ``command`` in a ``docker run`` invocation."""
        cmd: list[str] = ["docker", "run", "--rm"]
        if interactive:
            cmd.append("--interactive")
        if container_name:
            cmd.extend(["--name", container_name])
        if workdir is not None:
            cmd.extend(
                [
                    "--workdir",
                    "/workspace",
                    "--volume",
                    f"{self.normalize_workdir(workdir)}:/workspace:rw",
                ]
            )

        if not self.network_enabled:
            cmd.extend(["--network", "none"])
        memory_mb = self.memory_limit_mb if memory_limit_mb is None else memory_limit_mb
        if memory_mb and memory_mb > 0:
            cmd.extend(["--memory", f"{memory_mb}m"])
        if self.cpus and self.cpus > 0:
            cmd.extend(["--cpus", f"{self.cpus}"])

        cmd.extend(self.extra_args)
        cmd.append(self.image)
        cmd.extend(shlex.split(command))
        return cmd

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
        container_name = f"langtask-{uuid.uuid4().hex}"
        try:
            cmd = self.build_command(
                command,
                workdir=workdir,
                memory_limit_mb=memory_limit_mb,
                interactive=stdin is not None,
                container_name=container_name,
            )
        except ValueError as exc:
            return SandboxResult(output=f"Malformed command: {exc}", status=SandboxStatus(exit_code=2))

        logger.debug(f"Running in docker ({self.image}): {command}")
        try:
            result = subprocess.run(
                cmd,
                input=stdin,
                stdin=subprocess.DEVNULL if stdin is None else None,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=timeout,
                check=False,
            )
        except FileNotFoundError:
            logger.error("Docker CLI not found")
            return SandboxResult(
                output="docker: command not found",
                status=SandboxStatus(exit_code=127),
            )
        except subprocess.TimeoutExpired as exc:
            logger.warning(f"Container command timed out after {timeout}s: {command}")
            # Killing the client leaves the container running
            self.kill_container(container_name)
            output = exc.stdout.decode(errors="replace") if isinstance(exc.stdout, bytes) else exc.stdout
            return SandboxResult(
                output=output or "",
                status=SandboxStatus(exit_code=-9, timed_out=True),
            )

        return SandboxResult(
            output=result.stdout or "",
            status=SandboxStatus(
                exit_code=result.returncode,
                memory_exceeded=result.returncode == _EXIT_OOM_KILLED,
            ),
        )

    @staticmethod
    def kill_container(container_name: str) -> bool:
        """Force-stop a named container; returns True if docker accepted the kill."""
        try:
            result = subprocess.run(
                ["docker", "kill", container_name],
                capture_output=True,
                text=True,
                timeout=KILL_TIMEOUT_SECONDS,
                check=False,
            )
        except (FileNotFoundError, subprocess.TimeoutExpired) as exc:
            logger.error(f"Could not kill container {container_name}: {exc}")
            return False
        if result.returncode != 0:
            logger.warning(
                f"docker kill {container_name} failed: {(result.stderr or '').strip()}"
            )
            return False
        return True

    @staticmethod
    def check_health(timeout_seconds: float = 2.5) -> tuple[bool, str]:
        """Return (healthy, detail) for docker runtime availability."""
        try:
            result = subprocess.run(
                ["docker", "info", "--format", "{{.ServerVersion}}"],
                capture_output=True,
                text=True,
                timeout=timeout_seconds,
                check=False,
            )
        except FileNotFoundError:
            return False, "docker CLI not found"
        except subprocess.TimeoutExpired:
            return False, "docker check timed out"

        if result.returncode != 0:
            detail = (result.stderr or result.stdout).strip() or "docker daemon unavailable"
            return False, detail

        version = result.stdout.strip() or "unknown"
        return True, f"docker daemon ready (server {version})"

    @staticmethod
    def normalize_workdir(workdir: Path) -> str:
        """Normalize host path for Docker mount commands."""
        return str(Path(workdir).resolve())
