"""
Sandbox runtime backends.
"""

from .base import SandboxResult, SandboxRunner, SandboxStatus
from .docker_runtime import DockerSandboxRuntime
from .local_runtime import LocalSandboxRuntime
from .registry import SUPPORTED_RUNTIMES, RuntimeHealth, create_runtime, detect_runtime_health

__all__ = [
    "DockerSandboxRuntime",
    "LocalSandboxRuntime",
    "RuntimeHealth",
    "SUPPORTED_RUNTIMES",
    "SandboxResult",
    "SandboxRunner",
    "SandboxStatus",
    "create_runtime",
    "detect_runtime_health",
]
