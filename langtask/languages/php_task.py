"""PHP command-line interpreter."""

from .base import extend_defaults
from .families import InterpretedTask


class PhpTask(InterpretedTask):
    language_id = "php"
    display_name = "PHP"
    interpreter = "/usr/bin/php"
    source_extension = ".php"
    default_params = extend_defaults(interpreterargs=("--no-php-ini",))

    @classmethod
    def get_version_command(cls) -> tuple[str, str]:
        return "php --version", r"PHP ([0-9._]*)"
