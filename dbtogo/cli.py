"""Command-line interface for dbtogo.

Introspects a database, renders Go code for its tables and writes the
result to stdout or a file. Diagnostics go to stderr so stdout carries
nothing but generated code.
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .codegen import (
    ConfigError,
    GenerationResult,
    GeneratorConfig,
    GoGenerator,
    build_metadata,
    generate_code,
    load_config,
    validate_config,
)
from .introspect import IntrospectionError, get_introspector, get_registry
from .logging_config import get_logger, setup_logging
from .utils import OutputError, quote_args, strip_dsn, write_output

logger = get_logger(__name__)

DSN_ENV = "DBTOGO_DSN"

EXAMPLE_DSNS = {
    "mysql": "mysqluser:pass@tcp(host:port)/db",
    "postgresql": "user=pqgotest dbname=pqgotest sslmode=verify-full",
    "sqlite3": "./foo.db",
}

console = Console(stderr=True)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    examples = "\n".join(
        f"  dbtogo {name} {dsn}" for name, dsn in EXAMPLE_DSNS.items()
    )
    parser = argparse.ArgumentParser(
        prog="dbtogo",
        description="Turns database tables into Go code.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            f"If you want to omit the DSN on the command line,\n"
            f"put it in the {DSN_ENV} environment variable.\n\n"
            f"Examples:\n{examples}"
        ),
    )

    parser.add_argument(
        "database",
        metavar="{" + ",".join(get_registry().list_backends()) + "}",
        help="Database kind to connect to",
    )
    parser.add_argument(
        "dsn",
        nargs="?",
        help=f"Data source name (default: ${DSN_ENV})",
    )

    template_group = parser.add_argument_group("templates")
    template_group.add_argument(
        "--tpl",
        dest="template_files",
        action="append",
        metavar="FILE",
        help="Template file to render with; repeat to load several",
    )
    template_group.add_argument(
        "--entry",
        dest="entry_template",
        metavar="NAME",
        help="Template to start rendering from (default: first --tpl file, or 'output')",
    )

    output_group = parser.add_argument_group("output")
    output_group.add_argument(
        "-o",
        "--output",
        dest="output_file",
        metavar="FILE",
        help="Where to write the code (default: stdout)",
    )
    output_group.add_argument(
        "--nofmt",
        action="store_true",
        help="Don't run gofmt on the generated code",
    )
    output_group.add_argument(
        "--tabwidth",
        dest="tab_width",
        type=int,
        metavar="N",
        help="Indentation width for formatted output (default: 4)",
    )
    output_group.add_argument(
        "--package",
        dest="package_name",
        metavar="NAME",
        help="Go package name (default: model)",
    )

    mapping_group = parser.add_argument_group("type and name mapping")
    mapping_group.add_argument(
        "--types",
        dest="null_policy",
        choices=["bare", "null", "pointer"],
        help="How nullable columns are typed (default: bare)",
    )
    mapping_group.add_argument(
        "--nounderscore",
        dest="strip_underscores",
        action="store_true",
        default=None,
        help="Remove underscores from generated identifiers",
    )
    mapping_group.add_argument(
        "--sqlstruct",
        dest="struct_tags",
        action="store_true",
        default=None,
        help='Add sql:"<column>" tags to struct fields',
    )
    mapping_group.add_argument(
        "--placeholder",
        choices=["qmark", "dollar", "named"],
        help="Placeholder style of generated statements (default: qmark)",
    )
    mapping_group.add_argument(
        "--on-collision",
        dest="collision_policy",
        choices=["error", "suffix"],
        help="What to do when two names map to the same identifier (default: error)",
    )

    misc_group = parser.add_argument_group("miscellaneous")
    misc_group.add_argument("--config", metavar="FILE", help="JSON configuration file")
    misc_group.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log verbosity on stderr (default: WARNING)",
    )
    misc_group.add_argument(
        "--log-file", metavar="FILE", help="Also write log records to FILE"
    )
    misc_group.add_argument(
        "--verbose",
        action="store_true",
        help="Show generation result metadata",
    )
    misc_group.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    return parser


def _resolve_dsn(args: argparse.Namespace) -> tuple[str, bool]:
    """Return the DSN and whether it was given on the command line."""
    if args.dsn:
        return args.dsn, True

    dsn = os.environ.get(DSN_ENV, "")
    if not dsn:
        raise CLIError(f"Missing DSN on the command line or the {DSN_ENV} env")
    return dsn, False


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Merge the config file with explicitly given flags."""
    overrides: dict[str, Any] = {
        "template_files": args.template_files,
        "entry_template": args.entry_template,
        "output_file": args.output_file,
        "tab_width": args.tab_width,
        "package_name": args.package_name,
        "null_policy": args.null_policy,
        "strip_underscores": args.strip_underscores,
        "struct_tags": args.struct_tags,
        "placeholder": args.placeholder,
        "collision_policy": args.collision_policy,
    }
    if args.nofmt:
        overrides["format_output"] = False

    config = load_config(custom_config=overrides, config_file=args.config)

    errors = validate_config(config)
    if errors:
        raise CLIError("Invalid configuration: " + "; ".join(errors))
    return config


def _print_report(result: GenerationResult, verbose: bool) -> None:
    if verbose and result.metadata:
        metadata_table = Table(
            title="📊 Generation Metadata",
            box=box.SIMPLE,
            show_header=True,
            header_style="bold cyan",
        )
        metadata_table.add_column("Property", style="bold")
        metadata_table.add_column("Value", style="green")

        for key, value in result.metadata.items():
            if isinstance(value, list):
                value = ", ".join(value) or "-"
            metadata_table.add_row(key.replace("_", " ").title(), escape(str(value)))

        console.print()
        console.print(metadata_table)

    if result.warnings:
        console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]•[/yellow] {escape(warning)}")
        console.print()


def run(args: argparse.Namespace, argv: list[str]) -> int:
    """Run one generation from parsed arguments."""
    if not get_registry().is_supported(args.database):
        raise CLIError(
            f"Unsupported database '{args.database}'. "
            f"Supported: {', '.join(get_registry().list_backends())}"
        )

    dsn, dsn_on_command_line = _resolve_dsn(args)
    config = _build_config(args)

    introspector = get_introspector(args.database, dsn)
    logger.info("Introspecting %s database", introspector.name)
    tables = introspector.introspect()

    quoted = quote_args(argv)
    metadata = build_metadata(
        tables,
        package=config.package_name,
        args=quoted,
        safe_args=strip_dsn(quoted, dsn) if dsn_on_command_line else quoted,
    )

    result = generate_code(GoGenerator(config), metadata)
    if not result.success:
        console.print(
            f"[red]✗ Code generation failed:[/red] {escape(result.error_message)}"
        )
        return 1

    path = write_output(result.code, config.output_file)
    if path is not None:
        console.print(f"[green]✓[/green] Generated Go code saved to [cyan]{escape(str(path))}[/cyan]")

    _print_report(result, args.verbose)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``dbtogo`` command.

    Args:
        argv: Arguments without the program name (defaults to ``sys.argv[1:]``).

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    argv = sys.argv[1:] if argv is None else list(argv)
    args = create_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    try:
        return run(args, argv)
    except (CLIError, ConfigError, IntrospectionError, OutputError) as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        logger.debug("Run failed", exc_info=True)
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
