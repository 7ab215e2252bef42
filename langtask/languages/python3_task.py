"""Python 3."""

from .base import extend_defaults
from .families import InterpretedTask


class Python3Task(InterpretedTask):
    language_id = "python3"
    display_name = "Python 3"
    interpreter = "/usr/bin/python3"
    source_extension = ".py"
    default_params = extend_defaults(interpreterargs=("-BE",))

    @classmethod
    def get_version_command(cls) -> tuple[str, str]:
        return "python3 --version", r"Python ([0-9._]*)"
