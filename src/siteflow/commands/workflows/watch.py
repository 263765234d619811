"""Polling watch for newly started and finished workflows.

The platform offers no push channel, so the watcher polls the full
workflow collection on a fixed interval and works out what changed in two
stages:

1. ``classify_transitions`` compares each workflow's server timestamps
   with the local time captured before the wait. It is stateless.
2. ``SeenSet`` remembers which workflow IDs were already reported for
   each transition kind. Clock drift between client and server can make a
   workflow classify as new on more than one tick; the seen-set keeps the
   output to one line per workflow and kind.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterable

from .api import WorkflowRepository
from .models import Workflow

logger = logging.getLogger(__name__)

WATCH_INTERVAL = 5  # seconds

STARTED = "started"
FINISHED = "finished"
TRANSITION_KINDS = (STARTED, FINISHED)


def emit_line(line: str) -> None:
    """Print a notification line to stdout without buffering it."""
    print(line, flush=True)


@dataclass(frozen=True)
class Transition:
    """A workflow crossing into the started or finished state."""

    kind: str
    workflow: Workflow

    def format(self) -> str:
        """Format as a single notification line.

        Returns
        -------
        str
            ``"<id> Started <description> (<environment>)"`` or the
            equivalent ``Finished`` line
        """
        return (
            f"{self.workflow.id} {self.kind.capitalize()} "
            f"{self.workflow.description} ({self.workflow.environment})"
        )


def classify(workflow: Workflow, last_checked: float) -> list[Transition]:
    """Classify one workflow against the last-checked time.

    Parameters
    ----------
    workflow : Workflow
        Workflow snapshot
    last_checked : float
        Local epoch time captured before the poll's wait began

    Returns
    -------
    list[Transition]
        Zero, one or two transitions (started before finished)
    """
    transitions = []
    if workflow.is_started and workflow.created_at > last_checked:
        transitions.append(Transition(STARTED, workflow))
    if workflow.is_finished and workflow.finished_at > last_checked:
        transitions.append(Transition(FINISHED, workflow))
    return transitions


def classify_transitions(workflows: Iterable[Workflow], last_checked: float) -> list[Transition]:
    """Classify every workflow in a snapshot.

    Parameters
    ----------
    workflows : Iterable[Workflow]
        Full workflow snapshot
    last_checked : float
        Local epoch time captured before the poll's wait began

    Returns
    -------
    list[Transition]
        Transitions in snapshot order
    """
    transitions = []
    for workflow in workflows:
        transitions.extend(classify(workflow, last_checked))
    return transitions


class SeenSet:
    """Per-session memory of reported transitions.

    Holds one set of workflow IDs per transition kind. IDs are added on
    first report and never removed.
    """

    def __init__(self):
        self._reported: dict[str, set[str]] = {kind: set() for kind in TRANSITION_KINDS}

    def should_report(self, kind: str, workflow_id: str) -> bool:
        """Check whether a transition is new, recording it if so.

        Parameters
        ----------
        kind : str
            Transition kind (``started`` or ``finished``)
        workflow_id : str
            Workflow ID

        Returns
        -------
        bool
            True the first time a (kind, workflow_id) pair is seen

        Raises
        ------
        ValueError
            If kind is not a known transition kind
        """
        if kind not in self._reported:
            raise ValueError(f"Unknown transition kind: {kind}")

        reported = self._reported[kind]
        if workflow_id in reported:
            return False
        reported.add(workflow_id)
        return True

    def __contains__(self, item: tuple[str, str]) -> bool:
        kind, workflow_id = item
        return workflow_id in self._reported.get(kind, ())

    def __len__(self) -> int:
        return sum(len(ids) for ids in self._reported.values())


class WorkflowWatcher:
    """Poll a site's workflows and emit started/finished notifications.

    Each tick captures the local time, waits ``interval`` seconds, fetches
    a full snapshot, classifies it and emits any transition the seen-set
    has not reported yet. Ticks never overlap. Fetch errors are not caught
    here; they end the watch.

    Parameters
    ----------
    repository : WorkflowRepository
        Source of workflow snapshots
    site_id : str
        Site UUID to watch
    interval : float
        Seconds to wait between polls
    emit : Callable[[str], None]
        Receives each notification line (default: emit_line)
    clock : Callable[[], float]
        Returns the current epoch time (default: time.time)
    stop_event : threading.Event | None
        Event whose setting ends the loop (default: a new event)
    """

    def __init__(
        self,
        repository: WorkflowRepository,
        site_id: str,
        interval: float = WATCH_INTERVAL,
        emit: Callable[[str], None] = emit_line,
        clock: Callable[[], float] = time.time,
        stop_event: threading.Event | None = None,
    ):
        self.repository = repository
        self.site_id = site_id
        self.interval = interval
        self.emit = emit
        self.clock = clock
        self.stop_event = stop_event or threading.Event()
        self.seen = SeenSet()

    def stop(self) -> None:
        """Request the loop to end at the next wait."""
        self.stop_event.set()

    @property
    def stopped(self) -> bool:
        return self.stop_event.is_set()

    def poll(self, last_checked: float) -> list[Transition]:
        """Fetch one snapshot and emit new transitions.

        Parameters
        ----------
        last_checked : float
            Local epoch time captured before the wait began

        Returns
        -------
        list[Transition]
            Transitions that were emitted
        """
        workflows = self.repository.fetch_with_operations(self.site_id)

        reported = []
        for transition in classify_transitions(workflows, last_checked):
            if self.seen.should_report(transition.kind, transition.workflow.id):
                self.emit(transition.format())
                reported.append(transition)

        logger.debug(
            "Polled %d workflow(s), reported %d transition(s)", len(workflows), len(reported)
        )
        return reported

    def tick(self) -> bool:
        """Run one wait-and-poll cycle.

        Returns
        -------
        bool
            False if a stop was requested during the wait, True otherwise
        """
        last_checked = self.clock()
        if self.stop_event.wait(self.interval):
            return False
        self.poll(last_checked)
        return True

    def run(self) -> None:
        """Poll until stopped."""
        logger.debug("Watching site %s every %ss", self.site_id, self.interval)
        while not self.stopped:
            if not self.tick():
                break
