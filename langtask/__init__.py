"""langtask: language-variant layer of a sandboxed code-execution service."""

from .core.exceptions import (
    CompileError,
    ConfigurationError,
    LangTaskError,
    StagingError,
    TaskStateError,
    UnsupportedLanguageError,
)
from .execution.job import JobResult, Outcome, run_job
from .languages import (
    SUPPORTED_LANGUAGES,
    LanguageTask,
    ToolchainVersion,
    UnknownVersion,
    create_task,
    probe_all_versions,
    probe_version,
    resolve_language,
)

__all__ = [
    "CompileError",
    "ConfigurationError",
    "JobResult",
    "LangTaskError",
    "LanguageTask",
    "Outcome",
    "SUPPORTED_LANGUAGES",
    "StagingError",
    "TaskStateError",
    "ToolchainVersion",
    "UnknownVersion",
    "UnsupportedLanguageError",
    "create_task",
    "probe_all_versions",
    "probe_version",
    "resolve_language",
    "run_job",
]
__version__ = "0.1.0"
