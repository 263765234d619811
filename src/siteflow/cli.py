"""Main CLI entry point for siteflow."""

import argparse
import sys
from pathlib import Path

from siteflow import __version__
from siteflow.config.loader import ConfigLoader
from siteflow.lib.formatters import CapitalizedHelpFormatter
from siteflow.lib.logger import setup_logger
from siteflow.lib.output import error, set_color_enabled


def create_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser with all commands and subcommands.

    Returns
    -------
    argparse.ArgumentParser
        Configured argument parser with all commands registered.
    """
    parser = argparse.ArgumentParser(
        prog="siteflow",
        description="Inspect and watch workflows run on hosted sites",
        formatter_class=CapitalizedHelpFormatter,
    )

    # Global options
    parser.add_argument("--version", "-v", action="version", version=f"siteflow {__version__}")
    parser.add_argument("--config", "-c", type=Path, help="Config file path (default: auto-detect)")
    parser.add_argument(
        "--format",
        choices=["normal", "json"],
        default="normal",
        help="Output format for records: normal|json (default: normal)",
    )
    parser.add_argument("--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--quiet", "-q", action="store_true", help="Quiet mode (errors only)")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    parser._optionals.title = "Options"

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Monkey-patch add_parser to automatically set Options title and formatter
    original_add_parser = subparsers.add_parser

    def custom_add_parser(*args, **kwargs):
        if "formatter_class" not in kwargs:
            kwargs["formatter_class"] = CapitalizedHelpFormatter
        subparser = original_add_parser(*args, **kwargs)
        subparser._optionals.title = "Options"
        return subparser

    subparsers.add_parser = custom_add_parser

    from siteflow.commands import workflows

    workflows.register_parser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main CLI entry point for the siteflow command.

    Parses command-line arguments, loads configuration, creates command context,
    and routes execution to the appropriate command handler.

    Parameters
    ----------
    argv : list of str or None, optional
        Arguments to parse (default: sys.argv[1:]).

    Returns
    -------
    int
        Exit code: 0 for success, 1 for command failure, 2 for configuration error,
        130 for keyboard interrupt.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.no_color:
        set_color_enabled(False)

    setup_logger("siteflow", verbose=args.verbose)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = ConfigLoader(config_path=args.config).load()
    except Exception as e:
        if args.verbose:
            import traceback

            traceback.print_exc()
        error(f"Failed to load configuration: {e}")
        return 2

    ctx = {
        "config": config,
        "verbose": args.verbose,
        "quiet": args.quiet,
        "output_format": args.format,
        "args": args,
    }

    try:
        if args.command == "workflows":
            from siteflow.commands import workflows

            return workflows.handle(ctx)
        else:
            error(f"Command '{args.command}' not yet implemented")
            return 1

    except KeyboardInterrupt:
        print()
        return 130
    except Exception as e:
        error(f"Command failed: {e}")
        if ctx["verbose"]:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
