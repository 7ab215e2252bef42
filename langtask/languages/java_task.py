"""Java via javac and the JVM."""

import re
import shlex

from ..core.exceptions import CompileError, StagingError
from ..sandbox.runtimes.base import SandboxStatus
from .base import CompileInfo, LanguageTask, extend_defaults, join_args

_PUBLIC_CLASS_RE = re.compile(r"public\s+(?:(?:final|abstract)\s+)*class\s+([A-Za-z_$][\w$]*)")
_CLASS_RE = re.compile(r"\bclass\s+([A-Za-z_$][\w$]*)")
_MAIN_RE = re.compile(r"public\s+static\s+void\s+main\s*\(")

NO_MAIN_CLASS_MESSAGE = (
    "Error: no main class found, or multiple main classes. "
    "[Did you write a public class when asked for a non-class construct?]\n"
)


class JavaTask(LanguageTask):
    language_id = "java"
    display_name = "Java"
    # The JVM reserves far more address space than it uses; -Xmx caps the heap instead
    default_params = extend_defaults(
        interpreterargs=("-Xrs", "-Xss8m", "-Xmx200m"),
        memorylimit=0,
    )

    @classmethod
    def get_version_command(cls) -> tuple[str, str]:
        return "java -version", r'version "?([0-9._]*)'

    @classmethod
    def default_file_name(cls, source_text: str) -> str:
        match = _PUBLIC_CLASS_RE.search(source_text)
        if match:
            return f"{match.group(1)}.java"
        return "prog.java"

    @staticmethod
    def find_main_class(source_text: str) -> str | None:
        """Return the only class declaring ``main``, or None if there are zero or several."""
        declarations = list(_CLASS_RE.finditer(source_text))
        candidates = []
        for index, match in enumerate(declarations):
            end = declarations[index + 1].start() if index + 1 < len(declarations) else len(source_text)
            if _MAIN_RE.search(source_text, match.end(), end):
                candidates.append(match.group(1))
        if len(candidates) != 1:
            return None
        return candidates[0]

    def _compile(self) -> None:
        try:
            source_text = (self.workdir / self.source_file_name).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StagingError(f"couldn't read {self.source_file_name}: {exc}") from exc

        main_class = self.find_main_class(source_text)
        if main_class is None:
            self.cmpinfo = CompileInfo(
                command="",
                output=NO_MAIN_CLASS_MESSAGE,
                status=SandboxStatus(exit_code=1),
            )
            raise CompileError(self.cmpinfo)

        self.executable_file_name = main_class
        java_file = f"{main_class}.java"
        if self.source_file_name != java_file:
            self.stage_copy(java_file)

        compileargs = join_args(self.get_param("compileargs"))
        command = " ".join(part for part in ["javac", compileargs, shlex.quote(java_file)] if part)
        self.run_compiler(command, memory_limit_mb=0)

    def get_executable_path(self) -> str:
        return "/usr/bin/java"

    def get_target_file(self) -> str:
        return self.executable_file_name or ""
