"""Display formatters for workflows command."""

from typing import Any

from siteflow.lib.formatters import format_timestamp
from siteflow.lib.output import info, output_record, output_record_list, warning

from .models import Workflow

LIST_TITLES = {
    "id": "ID",
    "env": "Env",
    "workflow": "Workflow",
    "user": "User",
    "status": "Status",
    "time": "Time",
    "finished_at": "Last update",
}


def _for_humans(record: dict[str, Any]) -> dict[str, Any]:
    record = dict(record)
    if "finished_at" in record:
        record["finished_at"] = format_timestamp(record["finished_at"])
    return record


def display_workflow_list(workflows: list[Workflow], site: str, output_format: str) -> None:
    """Display workflows without their operations.

    Parameters
    ----------
    workflows : list[Workflow]
        Workflows to display
    site : str
        Site name, used in the empty-list warning
    output_format : str
        "normal" or "json"
    """
    records = [w.serialize(include_operations=False) for w in workflows]

    if output_format != "normal":
        output_record_list(records, output_format)
        return

    if not records:
        warning(f"No workflows have been run on {site}.")

    records = [_for_humans(r) for r in records]
    output_record_list(records, output_format, titles=LIST_TITLES)


def display_workflow(workflow: Workflow, output_format: str) -> None:
    """Display a workflow and its operations.

    Parameters
    ----------
    workflow : Workflow
        Workflow to display
    output_format : str
        "normal" or "json"
    """
    record = workflow.serialize()

    if output_format != "normal":
        output_record(record, output_format)
        return

    operations = record.pop("operations")
    output_record(_for_humans(record))

    if operations:
        info("Workflow operations:")
        output_record_list(operations)
    else:
        info("Workflow has no operations")


def display_workflow_logs(workflow: Workflow, output_format: str) -> None:
    """Display the operations of a workflow that carry log output.

    Parameters
    ----------
    workflow : Workflow
        Workflow fetched with logs
    output_format : str
        "normal" or "json"
    """
    if output_format != "normal":
        output_record_list([op.serialize() for op in workflow.operations], output_format)
        return

    if not workflow.operations:
        info("Workflow has no operations")
        return

    operations = workflow.operations_with_logs()
    if not operations:
        info("Workflow has no operations with logs")
        return

    for operation in operations:
        output_record(operation.serialize())
