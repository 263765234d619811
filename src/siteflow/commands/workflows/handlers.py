"""Handler functions for workflows subcommands."""

import signal
import sys
import threading
from typing import Any

import requests

from siteflow.exceptions import ConfigError, ResourceNotFoundError, SiteflowError
from siteflow.lib.command_helpers import get_api_config, get_site_name, get_watch_interval
from siteflow.lib.output import error, info

from . import display
from .api import WorkflowRepository
from .models import find_latest_with_logs, find_workflow
from .watch import WATCH_INTERVAL, WorkflowWatcher


def handle(ctx: dict[str, Any]) -> int:
    """Handle workflows command.

    Parameters
    ----------
    ctx : dict[str, Any]
        Command context

    Returns
    -------
    int
        Exit code
    """
    args = ctx["args"]

    if not args.workflows_subcommand:
        # Print help instead of error message
        if hasattr(args, "_workflows_parser"):
            args._workflows_parser.print_help()
        else:
            error("No subcommand specified. Use 'siteflow workflows --help'")
        return 1

    # Validate configuration
    try:
        api_config = get_api_config(ctx)
        site = get_site_name(ctx)
    except ConfigError as e:
        error(str(e))
        return 2

    # Route to subcommand handler
    with WorkflowRepository(**api_config) as repository:
        if args.workflows_subcommand == "list":
            return handle_list(ctx, repository, site)
        elif args.workflows_subcommand == "show":
            return handle_show(ctx, repository, site)
        elif args.workflows_subcommand == "logs":
            return handle_logs(ctx, repository, site)
        elif args.workflows_subcommand == "watch":
            return handle_watch(ctx, repository, site)
        else:
            error(f"Unknown subcommand: {args.workflows_subcommand}")
            return 1


def handle_list(ctx: dict[str, Any], repository: WorkflowRepository, site: str) -> int:
    """Handle workflows list command.

    Parameters
    ----------
    ctx : dict[str, Any]
        Command context
    repository : WorkflowRepository
        Workflow API client
    site : str
        Site name or UUID

    Returns
    -------
    int
        Exit code
    """
    try:
        site_id = repository.resolve_site_id(site)
        workflows = repository.fetch_all(site_id)
    except (requests.RequestException, SiteflowError) as e:
        return _report_failure("list workflows", e, ctx["verbose"])

    display.display_workflow_list(workflows, site, ctx["output_format"])
    return 0


def handle_show(ctx: dict[str, Any], repository: WorkflowRepository, site: str) -> int:
    """Handle workflows show command.

    Parameters
    ----------
    ctx : dict[str, Any]
        Command context
    repository : WorkflowRepository
        Workflow API client
    site : str
        Site name or UUID

    Returns
    -------
    int
        Exit code
    """
    args = ctx["args"]

    try:
        site_id = repository.resolve_site_id(site)
        workflows = repository.fetch_with_operations(site_id)
        workflow = find_workflow(workflows, args.workflow_id)
    except (requests.RequestException, SiteflowError) as e:
        return _report_failure("show workflow", e, ctx["verbose"])

    display.display_workflow(workflow, ctx["output_format"])
    return 0


def handle_logs(ctx: dict[str, Any], repository: WorkflowRepository, site: str) -> int:
    """Handle workflows logs command.

    With --latest, picks the most recently finished workflow that has
    operation logs. Otherwise the workflow is selected by ID and then
    re-fetched with its logs.

    Parameters
    ----------
    ctx : dict[str, Any]
        Command context
    repository : WorkflowRepository
        Workflow API client
    site : str
        Site name or UUID

    Returns
    -------
    int
        Exit code
    """
    args = ctx["args"]

    try:
        site_id = repository.resolve_site_id(site)
        if args.latest:
            workflows = repository.fetch_with_operations_and_logs(site_id)
            workflow = find_latest_with_logs(workflows)
            if workflow is None:
                error("No recent workflows contain logs")
                return 1
        else:
            workflows = repository.fetch_with_operations(site_id)
            workflow = find_workflow(workflows, args.workflow_id)
            workflow = repository.fetch_workflow_with_logs(site_id, workflow.id)
    except (requests.RequestException, SiteflowError) as e:
        return _report_failure("fetch workflow logs", e, ctx["verbose"])

    display.display_workflow_logs(workflow, ctx["output_format"])
    return 0


def handle_watch(ctx: dict[str, Any], repository: WorkflowRepository, site: str) -> int:
    """Handle workflows watch command.

    Runs until interrupted with Ctrl+C or SIGTERM. A failed fetch ends the
    watch with a non-zero exit code.

    Parameters
    ----------
    ctx : dict[str, Any]
        Command context
    repository : WorkflowRepository
        Workflow API client
    site : str
        Site name or UUID

    Returns
    -------
    int
        Exit code
    """
    try:
        interval = get_watch_interval(ctx, WATCH_INTERVAL)
    except ConfigError as e:
        error(str(e))
        return 2

    try:
        site_id = repository.resolve_site_id(site)
    except (requests.RequestException, SiteflowError) as e:
        return _report_failure("watch workflows", e, ctx["verbose"])

    watcher = WorkflowWatcher(repository, site_id, interval=interval)

    if not ctx["quiet"]:
        info("Watching workflows...")

    previous_handler = _install_stop_handler(watcher)
    try:
        watcher.run()
    except KeyboardInterrupt:
        print()
    except (requests.RequestException, SiteflowError) as e:
        return _report_failure("watch workflows", e, ctx["verbose"])
    finally:
        _restore_stop_handler(previous_handler)

    if not ctx["quiet"]:
        info("Stopped watching workflows")
    return 0


def _install_stop_handler(watcher: WorkflowWatcher):
    """Stop the watcher on SIGTERM. Returns the handler it replaced."""
    if threading.current_thread() is not threading.main_thread():
        return None

    def stop(signum, frame):
        watcher.stop()

    return signal.signal(signal.SIGTERM, stop)


def _restore_stop_handler(previous_handler) -> None:
    if previous_handler is not None:
        signal.signal(signal.SIGTERM, previous_handler)


def _report_failure(action: str, exc: Exception, verbose: bool) -> int:
    """Print a failure message for an API or lookup error.

    Parameters
    ----------
    action : str
        What was being attempted (e.g. "list workflows")
    exc : Exception
        The error raised
    verbose : bool
        Print response bodies and tracebacks

    Returns
    -------
    int
        Exit code (always 1)
    """
    if isinstance(exc, ResourceNotFoundError):
        error(str(exc))
        return 1

    if isinstance(exc, requests.HTTPError) and exc.response is not None:
        error(f"Failed to {action}: HTTP {exc.response.status_code}")
        if verbose:
            print(exc.response.text, file=sys.stderr)
        return 1

    error(f"Failed to {action}: {exc}")
    if verbose:
        import traceback

        traceback.print_exc()
    return 1
