"""Hierarchical progress tracking for long-running operations."""

from __future__ import annotations

import copy
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Status(Enum):
    """State of a tracked task."""

    WAITING = "waiting"
    ACTIVE = "active"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class Report:
    """A snapshot of one task and its subtasks."""

    id: int
    label: Optional[str]
    own_total: int
    own_completed: int = 0
    status: Status = Status.WAITING
    subreports: list[Report] = field(default_factory=list)

    def total(self) -> int:
        """Units of work of this task and all its subtasks."""
        return self.own_total + sum(r.total() for r in self.subreports)

    def completed(self) -> int:
        """Completed units of this task and all its subtasks."""
        return self.own_completed + sum(r.completed() for r in self.subreports)

    def percent_completed(self) -> float:
        """Fraction of work done, from 0.0 to 1.0; 0.0 when there is no work."""
        total = self.total()
        if total == 0:
            return 0.0
        return 1.0 / total * self.completed()

    def find(self, task_id: int) -> Optional[Report]:
        """Return the report of ``task_id`` in this tree, or None."""
        if task_id == self.id:
            return self
        for sub in self.subreports:
            found = sub.find(task_id)
            if found is not None:
                return found
        return None


class _Tracker:
    """Shared state between a progress observer and its tasks."""

    def __init__(self, report: Report) -> None:
        self.report = report
        self.version = 0
        self.next_id = report.id + 1
        self.condition = threading.Condition()

    def allocate_id(self) -> int:
        with self.condition:
            task_id = self.next_id
            self.next_id += 1
            return task_id

    def _publish(self) -> None:
        self.version += 1
        self.condition.notify_all()

    def add(self, task_id: int, parent_id: int, total: int, label: Optional[str]) -> None:
        with self.condition:
            parent = self.report.find(parent_id)
            if parent is None:
                return
            parent.subreports.append(Report(id=task_id, label=label, own_total=total))
            self._publish()

    def set_status(self, task_id: int, status: Status) -> None:
        with self.condition:
            report = self.report.find(task_id)
            if report is None or report.status is status:
                return
            report.status = status
            self._publish()

    def progress(self, task_id: int, newly_completed: int) -> None:
        with self.condition:
            report = self.report.find(task_id)
            if report is None or newly_completed <= 0:
                return
            report.status = Status.ACTIVE
            report.own_completed += newly_completed
            self._publish()


class Progress:
    """Observer side of a task tree: read snapshots and wait for changes."""

    def __init__(self, tracker: _Tracker) -> None:
        self._tracker = tracker
        with tracker.condition:
            self._seen = tracker.version

    @classmethod
    def create(cls, total: int, label: Optional[str] = None) -> tuple[Progress, Task]:
        """Create an observer together with the root task it watches."""
        if total < 0:
            raise ValueError("total must not be negative")
        tracker = _Tracker(Report(id=1, label=label, own_total=total))
        return cls(tracker), Task(tracker, 1)

    def latest(self) -> Report:
        """Return a snapshot of the current state and mark it as seen."""
        with self._tracker.condition:
            self._seen = self._tracker.version
            return copy.deepcopy(self._tracker.report)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the state changes after the last one seen.

        Returns True on a change, False if ``timeout`` seconds pass first.
        """
        tracker = self._tracker
        with tracker.condition:
            changed = tracker.condition.wait_for(
                lambda: tracker.version != self._seen, timeout
            )
            if changed:
                self._seen = tracker.version
            return changed


class Task:
    """A unit of work whose progress is reported to its observer."""

    def __init__(self, tracker: _Tracker, task_id: int) -> None:
        self._tracker = tracker
        self.id = task_id

    def child(self, total: int, label: Optional[str] = None) -> Task:
        """Create a subtask with ``total`` units of work."""
        if total < 0:
            raise ValueError("total must not be negative")
        child_id = self._tracker.allocate_id()
        self._tracker.add(child_id, self.id, total, label)
        return Task(self._tracker, child_id)

    def start(self) -> None:
        self._tracker.set_status(self.id, Status.ACTIVE)

    def stop(self) -> None:
        self._tracker.set_status(self.id, Status.WAITING)

    def complete(self) -> None:
        self._tracker.set_status(self.id, Status.SUCCESS)

    def failure(self) -> None:
        self._tracker.set_status(self.id, Status.FAILURE)

    def add(self, newly_completed: int) -> None:
        """Record ``newly_completed`` more units of work as done."""
        if newly_completed < 0:
            raise ValueError("newly_completed must not be negative")
        self._tracker.progress(self.id, newly_completed)

    def __iadd__(self, newly_completed: int) -> Task:
        self.add(newly_completed)
        return self