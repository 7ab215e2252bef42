"""
Command-line interface for langtask.

Lists languages, probes toolchain versions and sandbox runtimes, and runs a
single source file through the compile -> execute protocol. Output is
rendered with Rich.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .core.config import ConfigManager, ProjectConfig
from .core.exceptions import LangTaskError, format_error_message
from .core.logging import setup_logging
from .execution.job import Outcome, run_job
from .languages.registry import LANGUAGE_VARIANTS, list_languages
from .languages.versions import ToolchainVersion, parse_version, probe_all_versions
from .sandbox.runtimes.registry import SUPPORTED_RUNTIMES, create_runtime, detect_runtime_health

console = Console()


def _split_key_value(raw: str) -> tuple[str, str]:
    if "=" not in raw:
        raise argparse.ArgumentTypeError(f"expected key=value, got '{raw}'")
    key, value = raw.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError(f"missing name in '{raw}'")
    return key, value.strip()


def _parse_param(raw: str) -> tuple[str, object]:
    key, value = _split_key_value(raw)
    for number_type in (int, float):
        try:
            return key, number_type(value)
        except ValueError:
            continue
    return key, value


def _parse_minimum(raw: str) -> tuple[str, str]:
    language_id, minimum = _split_key_value(raw)
    if parse_version(minimum) is None:
        raise argparse.ArgumentTypeError(f"invalid version '{minimum}'")
    return language_id.lower(), minimum


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="langtask",
        description="Compile and run submissions for many languages in a sandbox.",
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to langtask.yaml")
    parser.add_argument("--log-level", default=None, help="Logging level (default from config)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("languages", help="List supported languages")

    versions = subparsers.add_parser("versions", help="Probe toolchain versions")
    versions.add_argument(
        "-l", "--language", action="append", dest="languages", help="Language to probe (repeatable)"
    )
    versions.add_argument(
        "-m",
        "--minimum",
        action="append",
        type=_parse_minimum,
        default=[],
        help="Required toolchain version as language=version (repeatable)",
    )

    subparsers.add_parser("runtimes", help="Show sandbox runtime health")

    run = subparsers.add_parser("run", help="Compile and run a source file")
    run.add_argument("source", type=Path, help="Source file to run")
    run.add_argument("-l", "--language", required=True, help="Language id")
    run.add_argument("--stdin", type=Path, default=None, help="File to feed on standard input")
    run.add_argument(
        "-p",
        "--param",
        action="append",
        type=_parse_param,
        default=[],
        help="Task parameter as key=value (list values are split on spaces)",
    )
    run.add_argument("--name", default=None, help="File name to stage the source under")
    return parser


def _load_config(config_path: Path | None) -> ProjectConfig:
    if config_path is not None:
        return ConfigManager(config_path=config_path).config
    return ConfigManager().config


def cmd_languages(config: ProjectConfig) -> int:
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Language", style="cyan", width=10)
    table.add_column("Name", width=28)
    table.add_column("Version command", style="dim")

    for language_id in list_languages():
        variant = LANGUAGE_VARIANTS[language_id]
        command, _pattern = variant.get_version_command()
        table.add_row(language_id, variant.display_name, escape(command))

    console.print(table)
    return 0


def cmd_versions(
    config: ProjectConfig,
    languages: list[str] | None,
    minimums: dict[str, str] | None = None,
) -> int:
    minimums = minimums or {}
    if languages is None and minimums:
        languages = list(minimums)
    runner = create_runtime(config.sandbox.runtime, config.sandbox)
    results = probe_all_versions(runner, languages)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Language", style="cyan", width=10)
    table.add_column("Version", width=16)
    if minimums:
        table.add_column("Minimum", width=16)
    table.add_column("Details", style="dim")

    below_minimum = []
    for language_id, result in results.items():
        if isinstance(result, ToolchainVersion):
            version_cell = f"[green]{escape(result.version)}[/green]"
            detail = result.command
        else:
            version_cell = "[yellow]unknown[/yellow]"
            detail = result.reason

        row = [escape(language_id), version_cell]
        minimum = minimums.get(language_id.lower())
        if minimums:
            if minimum is None:
                row.append("")
            elif isinstance(result, ToolchainVersion) and result.at_least(minimum):
                row.append(f"[green]>= {escape(minimum)}[/green]")
            else:
                below_minimum.append(language_id)
                row.append(f"[red]< {escape(minimum)}[/red]")
        row.append(escape(detail))
        table.add_row(*row)

    console.print(table)
    if below_minimum:
        console.print(
            f"[yellow]Below required version: {escape(', '.join(below_minimum))}[/yellow]"
        )
        return 1
    return 0


def cmd_runtimes(config: ProjectConfig) -> int:
    health_map = detect_runtime_health()

    console.print(f"Configured runtime: [cyan]{escape(config.sandbox.runtime)}[/cyan]")
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Runtime", style="cyan", width=16)
    table.add_column("Available", width=10)
    table.add_column("Details", style="dim")

    for runtime_name in sorted(SUPPORTED_RUNTIMES):
        entry = health_map.get(runtime_name)
        if entry is None:
            continue
        status = "[green]yes[/green]" if entry.available else "[red]no[/red]"
        table.add_row(runtime_name, status, escape(entry.detail))

    console.print(table)
    return 0


def cmd_run(config: ProjectConfig, args: argparse.Namespace) -> int:
    source_code = args.source.read_text(encoding="utf-8")
    stdin = args.stdin.read_text(encoding="utf-8") if args.stdin else None
    params = dict(args.param)

    result = run_job(
        args.language,
        source_code,
        input=stdin,
        params=params,
        file_name=args.name,
        config=config,
    )

    style = "green" if result.succeeded else "red"
    console.print(
        f"Outcome: [{style}]{result.outcome.name}[/{style}] ({int(result.outcome)})"
    )
    # Toolchain and program output is shown verbatim, never as markup
    if result.cmpinfo and result.cmpinfo.output.strip():
        console.print(
            Panel(Text(result.cmpinfo.output.rstrip()), title="Compiler output", border_style="yellow")
        )
    if result.error:
        console.print(Text(result.error, style="red"))
    if result.outcome is not Outcome.COMPILE_ERROR and result.output:
        console.print(Panel(Text(result.output.rstrip()), title="Program output", border_style=style))
    return 0 if result.succeeded else 1


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = _load_config(args.config)
        setup_logging(args.log_level or config.log_level)

        if args.command == "languages":
            return cmd_languages(config)
        if args.command == "versions":
            return cmd_versions(config, args.languages, dict(args.minimum))
        if args.command == "runtimes":
            return cmd_runtimes(config)
        return cmd_run(config, args)
    except LangTaskError as exc:
        console.print("[bold red]Error:[/bold red]", Text(format_error_message(exc)))
        return 2
    except (OSError, ValueError) as exc:
        console.print("[bold red]Error:[/bold red]", Text(str(exc)))
        return 2


if __name__ == "__main__":
    sys.exit(main())
