"""
Local task collection

TaskStore owns the ordered collection the presentation layer renders and the
display-order flag. Every write to the collection goes through one of its
methods; callers only ever see copies.
"""

import time
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple
from tasksync.config.constants import PROVISIONAL_ID_PREFIX
from tasksync.models.task import Task, TaskId
from tasksync.utils.logger import logger

Snapshot = Tuple[Task, ...]

_last_provisional_ns = 0


def next_provisional_id() -> str:
    """
    Generate a client-side id for a provisional task

    Clock derived and strictly increasing within the process. The string
    prefix keeps it apart from server ids.
    """
    global _last_provisional_ns
    now = max(time.time_ns(), _last_provisional_ns + 1)
    _last_provisional_ns = now
    return f"{PROVISIONAL_ID_PREFIX}{now}"


@dataclass(frozen=True)
class RecordSnapshot:
    """Prior state of a single id: the record and its position, or absence"""
    task_id: TaskId
    task: Optional[Task]
    index: int = -1


class TaskStore:
    """In-memory ordered task collection"""

    def __init__(self, tasks: Iterable[Task] = (), reversed_order: bool = False):
        self._tasks: List[Task] = []
        self.reversed = reversed_order
        self.logger = logger
        self.replace_all(tasks)

    # ---------- reads ----------
    @property
    def tasks(self) -> List[Task]:
        """Current collection in display order"""
        return list(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: TaskId) -> bool:
        return self._index_of(task_id) is not None

    def get(self, task_id: TaskId) -> Optional[Task]:
        index = self._index_of(task_id)
        return None if index is None else self._tasks[index]

    def _index_of(self, task_id: TaskId) -> Optional[int]:
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                return index
        return None

    # ---------- transitions ----------
    def replace_all(self, tasks: Iterable[Task]) -> None:
        """
        Replace the whole collection (after a fetch)

        Soft-deleted records must already be filtered out. Duplicate ids keep
        their first occurrence.
        """
        seen = set()
        fresh: List[Task] = []
        for task in tasks:
            if task.id in seen:
                self.logger.warning(f"Duplicate task id {task.id!r} in fetched list, keeping the first")
                continue
            seen.add(task.id)
            fresh.append(task)
        self._tasks = fresh

    def insert_provisional(self, task: Task, at_front: bool) -> None:
        """Insert a provisional task at the head or the tail"""
        if at_front:
            self._tasks.insert(0, task)
        else:
            self._tasks.append(task)

    def commit_provisional(self, provisional_id: TaskId, server_task: Task) -> bool:
        """
        Replace a provisional task with the record the server created

        Returns False (and changes nothing) when the provisional task is gone.
        If the server id is already present, the provisional entry is dropped
        and the existing entry takes the server record.
        """
        index = self._index_of(provisional_id)
        if index is None:
            self.logger.debug(f"Provisional task {provisional_id} is gone, dropping server task {server_task.id}")
            return False

        existing = self._index_of(server_task.id)
        if existing is not None and existing != index:
            self._tasks[existing] = server_task
            del self._tasks[index]
        else:
            self._tasks[index] = server_task
        return True

    def remove_by_id(self, task_id: TaskId) -> Optional[Task]:
        """Remove a task, returning it (None if absent)"""
        index = self._index_of(task_id)
        if index is None:
            return None
        return self._tasks.pop(index)

    def patch_by_id(self, task_id: TaskId, **fields) -> Optional[Task]:
        """Shallow-merge fields into a task, returning the new record (None if absent)"""
        index = self._index_of(task_id)
        if index is None:
            return None
        patched = self._tasks[index].model_copy(update=fields)
        self._tasks[index] = patched
        return patched

    def reverse_order(self) -> None:
        self._tasks.reverse()

    def set_reversed(self, value: bool) -> None:
        """Set the display-order flag, reversing the collection when it changes"""
        if value != self.reversed:
            self.reversed = value
            self.reverse_order()

    # ---------- rollback ----------
    def snapshot(self) -> Snapshot:
        """Capture the full collection (tasks are immutable, so a shallow copy suffices)"""
        return tuple(self._tasks)

    def restore(self, snapshot: Snapshot) -> None:
        """Total replace with a captured snapshot"""
        self._tasks = list(snapshot)

    def capture(self, task_id: TaskId) -> RecordSnapshot:
        """Capture the prior state of one id"""
        index = self._index_of(task_id)
        if index is None:
            return RecordSnapshot(task_id=task_id, task=None)
        return RecordSnapshot(task_id=task_id, task=self._tasks[index], index=index)

    def restore_record(self, record: RecordSnapshot) -> None:
        """
        Put one id back the way capture() saw it

        Absent before: the id is removed. Present before: the record replaces
        the current one in place, or is re-inserted at its old position
        (clamped to the current length) if it has since been removed.
        """
        index = self._index_of(record.task_id)
        if record.task is None:
            if index is not None:
                del self._tasks[index]
            return

        if index is not None:
            self._tasks[index] = record.task
        else:
            self._tasks.insert(min(record.index, len(self._tasks)), record.task)
