"""Pascal via the Free Pascal compiler."""

import shlex

from .base import extend_defaults, join_args
from .families import NativeCompiledTask


class PascalTask(NativeCompiledTask):
    language_id = "pascal"
    display_name = "Pascal"
    compiler = "fpc"
    source_extension = ".pas"
    default_params = extend_defaults(compileargs=("-vew", "-Se"))

    @classmethod
    def get_version_command(cls) -> tuple[str, str]:
        return "fpc -iV", r"([0-9][0-9.]*)"

    def build_compile_command(self, source: str, executable: str) -> str:
        # fpc takes the output name glued to -o and has no separate link step
        compileargs = join_args(self.get_param("compileargs"))
        parts = [self.compiler, compileargs, "-o" + shlex.quote(executable), shlex.quote(source)]
        return " ".join(part for part in parts if part)
