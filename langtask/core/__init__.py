"""
Core functionality for langtask.
"""

from .config import ConfigManager, ProjectConfig, SandboxConfig, SandboxDockerConfig
from .exceptions import (
    CompileError,
    ConfigurationError,
    LangTaskError,
    StagingError,
    TaskError,
    TaskStateError,
    UnsupportedLanguageError,
    format_error_message,
)
from .logging import get_logger, setup_logging

__all__ = [
    "CompileError",
    "ConfigManager",
    "ConfigurationError",
    "LangTaskError",
    "ProjectConfig",
    "SandboxConfig",
    "SandboxDockerConfig",
    "StagingError",
    "TaskError",
    "TaskStateError",
    "UnsupportedLanguageError",
    "format_error_message",
    "get_logger",
    "setup_logging",
]
