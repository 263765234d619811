"""Parser configuration for workflows command."""

import argparse

from siteflow.lib.formatters import create_subparsers


def _add_site_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--site",
        help="Site name or UUID (default: defaults.site from config)",
    )


def register_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the workflows command parser.

    Parameters
    ----------
    subparsers : argparse._SubParsersAction
        Subparser action from main parser
    """
    parser = subparsers.add_parser(
        "workflows",
        help="Inspect and watch site workflows",
        description="List, show, fetch logs for, and watch workflows run on a site",
    )

    # Store parser for help printing
    parser.set_defaults(_workflows_parser=parser)

    workflows_subparsers = create_subparsers(parser, "workflows_subcommand")

    # ========== workflows list ==========
    list_parser = workflows_subparsers.add_parser(
        "list",
        help="List workflows for a site",
    )
    _add_site_argument(list_parser)

    # ========== workflows show ==========
    show_parser = workflows_subparsers.add_parser(
        "show",
        help="Show a workflow and its operations",
    )
    _add_site_argument(show_parser)
    show_parser.add_argument(
        "workflow_id",
        help="Workflow ID",
    )

    # ========== workflows logs ==========
    logs_parser = workflows_subparsers.add_parser(
        "logs",
        help="Show operation logs from a workflow",
    )
    _add_site_argument(logs_parser)
    target = logs_parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "workflow_id",
        nargs="?",
        help="Workflow ID to fetch logs for",
    )
    target.add_argument(
        "--latest",
        action="store_true",
        help="Use the most recent workflow with logs",
    )

    # ========== workflows watch ==========
    watch_parser = workflows_subparsers.add_parser(
        "watch",
        help="Stream new and finished workflows to the console",
    )
    _add_site_argument(watch_parser)
