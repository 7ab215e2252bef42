"""
Language task variants and their registry.
"""

from .base import BASE_DEFAULT_PARAMS, CompileInfo, LanguageTask, overlay
from .bun_task import BunTask
from .c_task import CTask
from .cpp_task import CppTask
from .java_task import JavaTask
from .nodejs_task import NodejsTask
from .pascal_task import PascalTask
from .php_task import PhpTask
from .python3_task import Python3Task
from .registry import (
    LANGUAGE_VARIANTS,
    SUPPORTED_LANGUAGES,
    create_task,
    list_languages,
    resolve_language,
)
from .versions import (
    ToolchainVersion,
    UnknownVersion,
    extract_version,
    probe_all_versions,
    probe_version,
)

__all__ = [
    "BASE_DEFAULT_PARAMS",
    "BunTask",
    "CTask",
    "CompileInfo",
    "CppTask",
    "JavaTask",
    "LANGUAGE_VARIANTS",
    "LanguageTask",
    "NodejsTask",
    "PascalTask",
    "PhpTask",
    "Python3Task",
    "SUPPORTED_LANGUAGES",
    "ToolchainVersion",
    "UnknownVersion",
    "create_task",
    "extract_version",
    "list_languages",
    "overlay",
    "probe_all_versions",
    "probe_version",
    "resolve_language",
]
