"""JavaScript and TypeScript on Bun."""

from .families import StagedInterpretedTask


class BunTask(StagedInterpretedTask):
    language_id = "bun"
    display_name = "Bun (JavaScript/TypeScript)"
    interpreter = "/usr/local/bin/bun"
    source_extension = ".js"
    # Bun picks the loader from the suffix; plain names are treated as JavaScript
    accepted_extensions = (".js", ".ts")

    @classmethod
    def get_version_command(cls) -> tuple[str, str]:
        return "/usr/local/bin/bun --version", r"([0-9][0-9._]*)"
