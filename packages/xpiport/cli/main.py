"""Command-line interface for xpiport."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

from rich.console import Console

from xpiport.core.config.loader import load_app_config
from xpiport.core.config.models import AppConfig, ConversionConfig
from xpiport.core.conversion.converter import convert_xpi
from xpiport.core.conversion.errors import ConversionError
from xpiport.core.conversion.models import ConversionResult
from xpiport.core.conversion.profiles import ProfileNotFoundError, get_profile, list_profiles
from xpiport.core.package.archive import is_xpi_like
from xpiport.core.utils.json import write_json
from xpiport.core.utils.logging import configure_logging, get_logger

console = Console()
logger = get_logger(__name__)


def _resolve_settings(args: argparse.Namespace, config: AppConfig) -> AppConfig:
    """Apply command-line overrides on top of the loaded config.

    Raises:
        ValidationError: If an override is not a valid conversion setting
    """
    updates = {
        key: value
        for key, value in {
            "profile": args.profile,
            "max_version": args.max_version,
            "output_dir": args.out,
            "filename_suffix": args.suffix,
        }.items()
        if value is not None
    }
    if not updates:
        return config
    conversion = ConversionConfig.model_validate({**config.conversion.model_dump(), **updates})
    return config.model_copy(update={"conversion": conversion})


def _print_result(result: ConversionResult) -> None:
    for message in result.messages:
        console.print(f"   {message}")
    if result.converted:
        console.print(f"[green]✅ Converted:[/green] {result.output_path}")
    else:
        console.print("[yellow]No conversion necessary[/yellow]")


def run_convert(args: argparse.Namespace) -> int:
    """Convert every package given on the command line.

    Returns:
        Exit code (0 if all packages were processed, 1 otherwise)
    """
    try:
        config = _resolve_settings(args, load_app_config(args.config))
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]ERROR: Invalid configuration: {e}[/red]")
        return 1

    configure_logging(
        level=args.log_level or config.logging.level,
        format_string=config.logging.format,
        filename=config.logging.filename,
        structured=config.logging.structured,
    )

    settings = config.conversion
    try:
        profile = get_profile(settings.profile)
    except ProfileNotFoundError as e:
        console.print(f"[red]ERROR: {e.args[0]}[/red]")
        return 1

    output_dir = Path(settings.output_dir).resolve()
    console.print(
        f"[bold]Converting for {profile.name}[/bold] (maxVersion {settings.max_version})"
    )
    console.print(f"[green]📁 Output directory:[/green] {output_dir}")

    results: list[ConversionResult] = []
    failures: dict[str, str] = {}

    for source in args.sources:
        source_path = Path(source).resolve()
        console.print(f"\n[bold]📦 {source_path.name}[/bold]")
        package_logger = get_logger(__name__, package=source_path.name)
        if not is_xpi_like(source_path):
            package_logger.warning(f"Unexpected package extension: {source_path.name}")

        try:
            result = convert_xpi(
                source_path,
                output_dir,
                settings.max_version,
                profile,
                filename_suffix=settings.filename_suffix,
                pretty_xml=settings.pretty_xml,
            )
        except ConversionError as e:
            package_logger.error(f"Conversion failed: {e}")
            console.print(f"[red]ERROR: {e.message}[/red]")
            failures[str(source_path)] = str(e)
            continue

        results.append(result)
        _print_result(result)

    converted = sum(1 for r in results if r.converted)
    console.print(
        f"\n[bold]Done:[/bold] {converted} converted, "
        f"{len(results) - converted} unchanged, {len(failures)} failed"
    )

    if args.report:
        write_json(
            args.report,
            {
                "results": [r.model_dump(mode="json") for r in results],
                "failures": failures,
            },
        )
        console.print(f"[green]📝 Report written:[/green] {args.report}")

    return 1 if failures else 0


def run_profiles(args: argparse.Namespace) -> int:
    """List the available target profiles."""
    for name in list_profiles():
        profile = get_profile(name)
        console.print(f"[bold]{name}[/bold]: {profile.name} {profile.app_id}")
        console.print(f"   minVersion {profile.min_version}")
        for source, target in profile.replacements:
            console.print(f"   {source} -> {target}")
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="xpiport",
        description="xpiport - make Firefox add-ons installable in SeaMonkey",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    convert = sub.add_parser("convert", help="Convert one or more .xpi packages")
    convert.add_argument("sources", nargs="+", help="Paths to .xpi packages")
    convert.add_argument("--out", default=None, help="Output directory (default from config)")
    convert.add_argument(
        "--max-version",
        dest="max_version",
        default=None,
        help="maxVersion for the target application (e.g. 2.53.*)",
    )
    convert.add_argument("--profile", default=None, help="Target profile (default: seamonkey)")
    convert.add_argument(
        "--suffix", default=None, help="Text inserted before the output file extension"
    )
    convert.add_argument(
        "--config", default=None, help="Path to config file (.json/.yaml; default xpiport.yaml)"
    )
    convert.add_argument(
        "--log-level",
        dest="log_level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override configured log level",
    )
    convert.add_argument("--report", default=None, help="Write a JSON summary to this path")

    sub.add_parser("profiles", help="List target application profiles")

    return p


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args(argv)

    if args.cmd == "convert":
        return run_convert(args)
    if args.cmd == "profiles":
        return run_profiles(args)
    return 2


if __name__ == "__main__":
    sys.exit(main())
