"""
Shared behaviour for the three toolchain shapes: native compilers,
plain interpreters and interpreters that need a particular file extension.
"""

from __future__ import annotations

import shlex
from pathlib import PurePath
from typing import ClassVar

from .base import LanguageTask, join_args


class NativeCompiledTask(LanguageTask):
    """Compiles the source to ``<source>.exe`` and runs the binary directly."""

    compiler: ClassVar[str]
    source_extension: ClassVar[str]

    @classmethod
    def default_file_name(cls, source_text: str) -> str:
        return f"prog{cls.source_extension}"

    def build_compile_command(self, source: str, executable: str) -> str:
        compileargs = join_args(self.get_param("compileargs"))
        linkargs = join_args(self.get_param("linkargs"))
        # Flag entries may hold several words; file names are always one
        parts = [
            self.compiler,
            compileargs,
            "-o",
            shlex.quote(executable),
            shlex.quote(source),
            linkargs,
        ]
        return " ".join(part for part in parts if part)

    def _compile(self) -> None:
        source = PurePath(self.source_file_name).name
        self.executable_file_name = executable = f"{source}.exe"
        self.run_compiler(self.build_compile_command(source, executable))

    def get_executable_path(self) -> str:
        return f"./{self.executable_file_name}"

    def get_target_file(self) -> str:
        return ""


class InterpretedTask(LanguageTask):
    """Runs the source file as-is through an interpreter."""

    interpreter: ClassVar[str]
    source_extension: ClassVar[str]

    @classmethod
    def default_file_name(cls, source_text: str) -> str:
        return f"prog{cls.source_extension}"

    def _compile(self) -> None:
        self.executable_file_name = self.source_file_name

    def get_executable_path(self) -> str:
        return self.interpreter

    def get_target_file(self) -> str:
        return self.source_file_name


class StagedInterpretedTask(InterpretedTask):
    """Interpreter that only accepts programs whose name carries an extension.

    The first entry of ``accepted_extensions`` is appended when the source
    name does not already end with any of them.
    """

    accepted_extensions: ClassVar[tuple[str, ...]]

    def _compile(self) -> None:
        self.executable_file_name = self.stage_with_extension(self.accepted_extensions)
