"""
Language registry: maps language ids to task variants.
"""

from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from ..core.exceptions import UnsupportedLanguageError
from ..core.logging import get_logger
from ..sandbox.runtimes.base import SandboxRunner
from .base import LanguageTask
from .bun_task import BunTask
from .c_task import CTask
from .cpp_task import CppTask
from .java_task import JavaTask
from .nodejs_task import NodejsTask
from .pascal_task import PascalTask
from .php_task import PhpTask
from .python3_task import Python3Task

logger = get_logger(__name__)

LANGUAGE_VARIANTS: Mapping[str, type[LanguageTask]] = MappingProxyType(
    {
        variant.language_id: variant
        for variant in (
            CTask,
            CppTask,
            PascalTask,
            JavaTask,
            Python3Task,
            PhpTask,
            NodejsTask,
            BunTask,
        )
    }
)

SUPPORTED_LANGUAGES = frozenset(LANGUAGE_VARIANTS)


def list_languages() -> list[str]:
    return sorted(SUPPORTED_LANGUAGES)


def resolve_language(language_id: str | None) -> type[LanguageTask]:
    """Return the task class registered for ``language_id``."""
    normalized = (language_id or "").strip().lower()
    variant = LANGUAGE_VARIANTS.get(normalized)
    if variant is None:
        raise UnsupportedLanguageError(str(language_id), list_languages())
    return variant


def create_task(
    language_id: str,
    source_file_name: str,
    input: str | None = None,
    params: Mapping[str, Any] | None = None,
    *,
    runner: SandboxRunner | None = None,
    workdir: Path | str | None = None,
) -> LanguageTask:
    """Resolve ``language_id`` and construct a task for one submission."""
    variant = resolve_language(language_id)
    logger.debug(f"Creating {variant.__name__} for {source_file_name}")
    return variant(source_file_name, input, params, runner=runner, workdir=workdir)
