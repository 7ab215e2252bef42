"""C++ via g++."""

from .base import extend_defaults
from .families import NativeCompiledTask


class CppTask(NativeCompiledTask):
    language_id = "cpp"
    display_name = "C++"
    compiler = "g++"
    source_extension = ".cpp"
    default_params = extend_defaults(
        compileargs=("-Wall", "-Werror"),
        linkargs=("-lm",),
    )

    @classmethod
    def get_version_command(cls) -> tuple[str, str]:
        return "g++ --version", r"g\+\+ \(.*\) ([0-9.]*)"
