"""
Custom exceptions for langtask.

Provides specific exception types for better error handling and user feedback.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..languages.base import CompileInfo


class LangTaskError(Exception):
    """Base exception for langtask errors."""


class ConfigurationError(LangTaskError):
    """Error in configuration."""


class UnsupportedLanguageError(LangTaskError):
    """No language variant is registered for the requested id."""

    def __init__(self, language_id: str, supported: list[str] | None = None):
        supported_text = ", ".join(supported or [])
        super().__init__(f"Unsupported language '{language_id}'. Supported: {supported_text}")
        self.language_id = language_id
        self.supported = list(supported or [])
        self.user_message = f"Language '{language_id}' is not available on this server."
        self.recovery_hint = "Run 'langtask languages' to list supported languages."


# Task Errors


class TaskError(LangTaskError):
    """Base exception for language task errors."""


class StagingError(TaskError):
    """Copying or renaming the submission to its toolchain file name failed."""

    def __init__(self, message: str):
        super().__init__(f"Staging failed: {message}")
        self.user_message = "The submission could not be prepared for the toolchain."
        self.recovery_hint = "Check disk space and permissions of the working directory."


class CompileError(TaskError):
    """The toolchain ran and reported a failure."""

    def __init__(self, cmpinfo: CompileInfo):
        status = cmpinfo.status
        if status.timed_out:
            reason = "timed out"
        elif status.memory_exceeded:
            reason = "exceeded memory limit"
        else:
            reason = f"exit code {status.exit_code}"
        super().__init__(f"Compilation failed ({reason})")
        self.cmpinfo = cmpinfo
        self.user_message = "Your program failed to compile."
        self.recovery_hint = "See the compiler output for details."


class TaskStateError(TaskError):
    """A task was driven out of its compile -> execute order."""


def format_error_message(error: Exception) -> str:
    """
    Format an error message for display to user.

    Args:
        error: Exception to format

    Returns:
        Formatted error message with recovery hints
    """
    if isinstance(error, LangTaskError) and hasattr(error, "user_message"):
        message = error.user_message
        if hasattr(error, "recovery_hint"):
            message += f"\n\n{error.recovery_hint}"
        return message
    else:
        return str(error)
