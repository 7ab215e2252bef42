"""
Sandbox runner abstraction for compile and run commands.
"""

from .runtimes import (
    SUPPORTED_RUNTIMES,
    DockerSandboxRuntime,
    LocalSandboxRuntime,
    RuntimeHealth,
    SandboxResult,
    SandboxRunner,
    SandboxStatus,
    create_runtime,
    detect_runtime_health,
)

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
