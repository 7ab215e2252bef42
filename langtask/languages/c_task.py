"""C via gcc."""

from .base import extend_defaults
from .families import NativeCompiledTask


class CTask(NativeCompiledTask):
    language_id = "c"
    display_name = "C"
    compiler = "gcc"
    source_extension = ".c"
    default_params = extend_defaults(
        compileargs=("-Wall", "-Werror", "-std=c2x", "-x c"),
        linkargs=("-lm",),
    )

    @classmethod
    def get_version_command(cls) -> tuple[str, str]:
        return "gcc --version", r"gcc \(.*\) ([0-9.]*)"
