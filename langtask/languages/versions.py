"""
Toolchain version probes.

Each language declares a version command and a one-group pattern. Probing
runs the command through the sandbox runner; a pattern miss is reported as
``UnknownVersion`` and never stops the remaining probes.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from packaging import version

from ..core.exceptions import UnsupportedLanguageError
from ..core.logging import get_logger
from ..sandbox.runtimes.base import SandboxRunner
from .registry import list_languages, resolve_language

logger = get_logger(__name__)

DEFAULT_PROBE_TIMEOUT_SECONDS = 10


def parse_version(version_string: str) -> version.Version | None:
    """Parse a version string safely.

    Args:
        version_string: Version string to parse

    Returns:
        Parsed version or None if invalid
    """
    try:
        return version.parse(version_string)
    except version.InvalidVersion:
        return None


@dataclass(slots=True, frozen=True)
class ToolchainVersion:
    """A successfully extracted toolchain version."""

    language: str
    version: str
    command: str

    @property
    def parsed(self) -> version.Version | None:
        # Some toolchains report e.g. "21.0.2_1"; treat underscores as separators
        return parse_version(self.version.replace("_", "."))

    def at_least(self, minimum: str) -> bool:
        current = self.parsed
        required = parse_version(minimum)
        if current is None or required is None:
            return False
        return current >= required


@dataclass(slots=True, frozen=True)
class UnknownVersion:
    """The version command ran but its output did not match the pattern."""

    language: str
    command: str
    output: str
    reason: str = "version pattern did not match"

    @property
    def version(self) -> None:
        return None


VersionProbeResult = ToolchainVersion | UnknownVersion


def extract_version(pattern: str, output: str) -> str | None:
    """Return the first capture group of ``pattern`` in ``output``, if non-empty."""
    match = re.search(pattern, output or "")
    if match is None:
        return None
    captured = match.group(1)
    return captured or None


def probe_version(
    language_id: str,
    runner: SandboxRunner,
    timeout_seconds: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
) -> VersionProbeResult:
    """Ask one language's toolchain for its version."""
    variant = resolve_language(language_id)
    command, pattern = variant.get_version_command()
    result = runner.run(command, timeout_seconds=timeout_seconds)

    found = extract_version(pattern, result.output)
    if found is not None:
        return ToolchainVersion(language=variant.language_id, version=found, command=command)

    if result.status.timed_out:
        reason = "version command timed out"
    elif result.status.exit_code != 0 and not result.output.strip():
        reason = f"version command failed (exit {result.status.exit_code})"
    else:
        reason = "version pattern did not match"
    logger.warning(f"{variant.language_id}: version unknown ({reason})")
    return UnknownVersion(
        language=variant.language_id,
        command=command,
        output=result.output,
        reason=reason,
    )


def probe_all_versions(
    runner: SandboxRunner,
    languages: Iterable[str] | None = None,
    timeout_seconds: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
) -> dict[str, VersionProbeResult]:
    """Probe several languages; one failing probe does not abort the others."""
    results: dict[str, VersionProbeResult] = {}
    for language_id in languages if languages is not None else list_languages():
        try:
            results[language_id] = probe_version(language_id, runner, timeout_seconds)
        except UnsupportedLanguageError as exc:
            logger.warning(str(exc))
            results[language_id] = UnknownVersion(
                language=language_id,
                command="",
                output="",
                reason="unsupported language",
            )
    return results
