"""
Runtime registry and health checks for sandbox execution.
"""

import os
from dataclasses import dataclass
from typing import Any

from ...core.exceptions import ConfigurationError
from ...core.logging import get_logger
from .base import SandboxRunner
from .docker_runtime import DockerSandboxRuntime
from .local_runtime import LocalSandboxRuntime

logger = get_logger(__name__)

SUPPORTED_RUNTIMES = frozenset({"local", "docker"})

_DANGEROUS_DOCKER_FLAGS = {
    "--privileged",
    "--pid=host",
    "--network=host",
    "--ipc=host",
    "--uts=host",
    "--cap-add=ALL",
    "--volume",
    "-v",
    "--mount",
}


@dataclass(slots=True)
class RuntimeHealth:
    """Availability information for a runtime backend."""

    runtime: str
    available: bool
    detail: str


def _safe_env(sandbox_config: Any) -> dict[str, str]:
    env = {"PATH": "/usr/local/bin:/usr/bin:/bin", "LANG": "C.UTF-8"}
    for key in list(getattr(sandbox_config, "env_allowlist", []) or []):
        normalized_key = str(key).strip()
        if not normalized_key:
            continue
        value = os.getenv(normalized_key)
        if value is None:
            continue
        # Prevent control chars from leaking into process env.
        env[normalized_key] = value.replace("\n", "").replace("\r", "")
    return env


def create_runtime(runtime_name: str | None, sandbox_config: Any = None) -> SandboxRunner:
    """Create a runtime backend from configured runtime name."""
    normalized = (runtime_name or "local").strip().lower()
    if normalized not in SUPPORTED_RUNTIMES:
        raise ConfigurationError(
            f"Unsupported sandbox runtime '{runtime_name}'. Supported: {', '.join(sorted(SUPPORTED_RUNTIMES))}"
        )

    timeout = float(getattr(sandbox_config, "compile_timeout_seconds", 30) or 30)
    memory_limit_mb = int(getattr(sandbox_config, "memory_limit_mb", 512) or 512)

    if normalized == "local":
        return LocalSandboxRuntime(
            timeout_seconds=timeout,
            memory_limit_mb=memory_limit_mb,
            env=_safe_env(sandbox_config),
        )

    docker_cfg = getattr(sandbox_config, "docker", None)
    extra_args = list(getattr(docker_cfg, "extra_args", []) or [])
    for arg in extra_args:
        normalized_arg = str(arg).strip()
        if normalized_arg in _DANGEROUS_DOCKER_FLAGS:
            raise ConfigurationError(
                f"Docker extra arg '{normalized_arg}' is blocked by sandbox policy."
            )
        if normalized_arg.startswith("--volume=") or normalized_arg.startswith("--mount="):
            raise ConfigurationError(
                f"Docker extra arg '{normalized_arg}' is blocked by sandbox policy."
            )

    return DockerSandboxRuntime(
        image=getattr(docker_cfg, "image", "langtask/toolchains:latest"),
        timeout_seconds=timeout,
        memory_limit_mb=int(getattr(docker_cfg, "memory_limit_mb", memory_limit_mb) or memory_limit_mb),
        cpus=getattr(docker_cfg, "cpus", 1.0),
        network_enabled=bool(getattr(docker_cfg, "network_enabled", False)),
        extra_args=extra_args,
    )


def detect_runtime_health() -> dict[str, RuntimeHealth]:
    """Probe runtime availability for diagnostics."""
    results = [RuntimeHealth(runtime="local", available=True, detail="always available")]

    docker_ok, docker_detail = DockerSandboxRuntime.check_health()
    results.append(RuntimeHealth(runtime="docker", available=docker_ok, detail=docker_detail))

    return {entry.runtime: entry for entry in results}
