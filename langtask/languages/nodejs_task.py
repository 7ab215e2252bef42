"""JavaScript on Node.js."""

from .families import StagedInterpretedTask


class NodejsTask(StagedInterpretedTask):
    language_id = "nodejs"
    display_name = "Node.js"
    interpreter = "/usr/bin/node"
    source_extension = ".js"
    accepted_extensions = (".js",)

    @classmethod
    def get_version_command(cls) -> tuple[str, str]:
        return "node --version", r"v([0-9._]*)"
