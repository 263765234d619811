"""Workflow and operation snapshots returned by the platform API.

Both types are read-only projections of server state. They are rebuilt
from the API payload on every fetch and never mutated locally.
"""

import time
from dataclasses import dataclass, field
from typing import Any

from siteflow.exceptions import ResourceNotFoundError

# Reported as the workflow user when the platform itself started the job
SYSTEM_USER = "system"


@dataclass(frozen=True)
class Operation:
    """One step within a workflow's execution.

    Attributes
    ----------
    id : str
        Operation ID.
    type : str
        Operation type reported by the platform (e.g. ``quicksilver``).
    description : str
        Human-readable step description.
    result : str
        Step result (e.g. ``succeeded``, ``failed``), empty while running.
    run_time : float or None
        Step duration in seconds, if reported.
    log_output : str or None
        Captured log output. ``None`` or empty means no log is attached.
    """

    id: str
    type: str = ""
    description: str = ""
    result: str = ""
    run_time: float | None = None
    log_output: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Operation":
        """Build an operation from an API record.

        Parameters
        ----------
        data : dict[str, Any]
            Operation record from the API

        Returns
        -------
        Operation
            Parsed operation
        """
        return cls(
            id=str(data.get("id", "")),
            type=data.get("type") or "",
            description=data.get("description") or "",
            result=data.get("result") or "",
            run_time=data.get("run_time"),
            log_output=data.get("log_output"),
        )

    @property
    def has_log(self) -> bool:
        return bool(self.log_output)

    def serialize(self) -> dict[str, Any]:
        """Serialize the operation for record output.

        Returns
        -------
        dict[str, Any]
            Record with id, type, description, result, duration and log_output
        """
        duration = None
        if self.run_time is not None:
            duration = f"{float(self.run_time):.2f}s"

        return {
            "id": self.id,
            "type": self.type,
            "description": self.description,
            "result": self.result,
            "duration": duration,
            "log_output": self.log_output,
        }


@dataclass(frozen=True)
class Workflow:
    """A server-tracked asynchronous job (deploy, clone, backup, ...).

    Timestamps are epoch seconds. ``created_at`` is ``None`` until the
    server has accepted the workflow, and ``finished_at`` is ``None`` (or
    zero) while it is still in progress.

    Attributes
    ----------
    id : str
        Workflow ID.
    description : str
        Human-readable workflow description.
    environment : str
        Environment label the workflow ran against (dev, test, live, ...).
    created_at : float or None
        Server-side creation time.
    finished_at : float or None
        Server-side completion time.
    operations : tuple[Operation, ...]
        Ordered operations. Empty unless fetched with operations.
    phase : str
        Workflow status text reported by the platform.
    user_email : str or None
        Email of the user that started the workflow.
    total_time : float or None
        Total run time in seconds, once finished.
    raw : dict[str, Any]
        Full API record the workflow was built from.
    """

    id: str
    description: str = ""
    environment: str = ""
    created_at: float | None = None
    finished_at: float | None = None
    operations: tuple[Operation, ...] = ()
    phase: str = ""
    user_email: str | None = None
    total_time: float | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Workflow":
        """Build a workflow from an API record.

        Parameters
        ----------
        data : dict[str, Any]
            Workflow record from the API

        Returns
        -------
        Workflow
            Parsed workflow, with operations parsed when present
        """
        user = data.get("user") or {}
        operations = tuple(Operation.from_dict(op) for op in data.get("operations") or [])

        return cls(
            id=str(data.get("id", "")),
            description=data.get("description") or "",
            environment=data.get("environment") or "",
            created_at=data.get("created_at") or None,
            finished_at=data.get("finished_at") or None,
            operations=operations,
            phase=data.get("phase") or "",
            user_email=user.get("email") if isinstance(user, dict) else None,
            total_time=data.get("total_time"),
            raw=data,
        )

    @property
    def is_started(self) -> bool:
        return bool(self.created_at)

    @property
    def is_finished(self) -> bool:
        return bool(self.finished_at)

    def operations_with_logs(self) -> list[Operation]:
        """Return operations that carry non-empty log output."""
        return [op for op in self.operations if op.has_log]

    def elapsed_seconds(self, now: float | None = None) -> int:
        """Return run time in whole seconds.

        Uses ``total_time`` when the platform reports it, otherwise the time
        since ``created_at``.

        Parameters
        ----------
        now : float or None
            Reference time in epoch seconds (default: current time)

        Returns
        -------
        int
            Elapsed seconds, or 0 if the workflow has not started
        """
        if self.total_time:
            return int(self.total_time)
        if not self.created_at:
            return 0
        if now is None:
            now = time.time()
        return max(int(now - self.created_at), 0)

    def serialize(self, include_operations: bool = True) -> dict[str, Any]:
        """Serialize the workflow for record output.

        Parameters
        ----------
        include_operations : bool
            Include the nested operation records

        Returns
        -------
        dict[str, Any]
            Record with id, env, workflow, user, status, time, finished_at
            and (optionally) operations
        """
        data = {
            "id": self.id,
            "env": self.environment,
            "workflow": self.description,
            "user": self.user_email or SYSTEM_USER,
            "status": self.phase,
            "time": f"{self.elapsed_seconds()}s",
            "finished_at": self.finished_at,
        }
        if include_operations:
            data["operations"] = [op.serialize() for op in self.operations]
        return data


def parse_workflows(records: list[dict[str, Any]]) -> list[Workflow]:
    """Parse a list of API workflow records, preserving order."""
    return [Workflow.from_dict(record) for record in records]


def find_workflow(workflows: list[Workflow], workflow_id: str) -> Workflow:
    """Select a workflow by ID.

    Parameters
    ----------
    workflows : list[Workflow]
        Workflows to search
    workflow_id : str
        Workflow ID to find

    Returns
    -------
    Workflow
        Matching workflow

    Raises
    ------
    ResourceNotFoundError
        If no workflow has the given ID
    """
    for workflow in workflows:
        if workflow.id == workflow_id:
            return workflow
    raise ResourceNotFoundError(f"No workflow found with ID {workflow_id}")


def find_latest_with_logs(workflows: list[Workflow]) -> Workflow | None:
    """Find the most recently finished workflow with operation logs.

    Parameters
    ----------
    workflows : list[Workflow]
        Workflows fetched with operations and logs

    Returns
    -------
    Workflow | None
        Newest finished workflow with at least one logged operation, or None
    """
    finished = [w for w in workflows if w.is_finished]
    finished.sort(key=lambda w: w.finished_at, reverse=True)

    for workflow in finished:
        if workflow.operations_with_logs():
            return workflow
    return None
