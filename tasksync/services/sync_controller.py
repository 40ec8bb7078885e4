"""
Optimistic synchronization between the local task collection and the service

Every network-bound intent follows the same sequence:

    validate -> capture rollback state -> optimistic mutation
             -> await the service -> commit, or roll back and record the error

Only the await is a suspension point, so each mutation runs to completion on
the event loop without locks. Rollback is scoped to the ids the operation
touched unless the controller is built with ``rollback="collection"``.
"""

from typing import List, Optional, Union
from tasksync.api.task_client import TaskClient
from tasksync.config.constants import (
    ACTION_ADD,
    ACTION_DELETE,
    ACTION_EDIT,
    ACTION_FETCH,
    ACTION_TOGGLE,
    ROLLBACK_COLLECTION,
    ROLLBACK_RECORD,
)
from tasksync.models.response import SyncResult
from tasksync.models.task import Task, TaskId
from tasksync.services.task_store import RecordSnapshot, Snapshot, TaskStore, next_provisional_id
from tasksync.utils.error_handler import ErrorKind, TaskSyncError, ValidationError, handle_error
from tasksync.utils.logger import logger

Rollback = Union[RecordSnapshot, Snapshot]


class SyncController:
    """Applies user intents to the TaskStore and reconciles them with the service"""

    def __init__(
        self,
        client: TaskClient,
        store: Optional[TaskStore] = None,
        rollback: str = ROLLBACK_RECORD,
    ):
        """
        Initialize sync controller

        Args:
            client: Task service client (already bound to a base URL)
            store: Task store to drive (a fresh empty one by default)
            rollback: "record" to undo only the affected id on failure,
                "collection" to restore the whole collection snapshot
        """
        if rollback not in (ROLLBACK_RECORD, ROLLBACK_COLLECTION):
            raise ValueError(f"Unknown rollback scope: {rollback!r}")

        self.client = client
        self.store = store if store is not None else TaskStore()
        self.rollback_scope = rollback
        self.loading = True
        self.error: Optional[str] = None
        self.error_kind: Optional[ErrorKind] = None
        self.title = ""
        self.logger = logger

    # ---------- state exposed to the presentation layer ----------
    @property
    def tasks(self) -> List[Task]:
        return self.store.tasks

    @property
    def reversed(self) -> bool:
        return self.store.reversed

    @property
    def can_add(self) -> bool:
        """Whether the add action should be enabled"""
        return bool(self.title.strip()) and not self.loading

    # ---------- helpers ----------
    def _set_error(self, result: SyncResult) -> SyncResult:
        self.error = result.message
        self.error_kind = ErrorKind(result.error_kind) if result.error_kind else None
        return result

    def _clear_error(self) -> None:
        self.error = None
        self.error_kind = None

    def _capture(self, task_id: TaskId) -> Rollback:
        if self.rollback_scope == ROLLBACK_COLLECTION:
            return self.store.snapshot()
        return self.store.capture(task_id)

    def _roll_back(self, state: Rollback) -> None:
        if isinstance(state, RecordSnapshot):
            self.store.restore_record(state)
        else:
            self.store.restore(state)

    def _fail(self, action: str, error: TaskSyncError, state: Rollback) -> SyncResult:
        self._roll_back(state)
        self.logger.info(f"Rolled back {action} after {error.kind.value} error")
        return self._set_error(handle_error(action, error))

    @staticmethod
    def _reject(action: str, message: str) -> SyncResult:
        return handle_error(action, ValidationError(message))

    # ---------- intents ----------
    async def fetch_tasks(self) -> SyncResult:
        """
        Load the collection from the service

        On failure the collection is cleared and the error is recorded.
        """
        self.loading = True
        self._clear_error()
        try:
            tasks = await self.client.list_tasks()
        except TaskSyncError as e:
            self.store.replace_all([])
            return self._set_error(handle_error(ACTION_FETCH, e, retry_hint=True))
        finally:
            self.loading = False

        active = [task for task in tasks if not task.deleted]
        if self.store.reversed:
            active.reverse()
        self.store.replace_all(active)
        self.logger.info(f"Loaded {len(active)} tasks ({len(tasks) - len(active)} deleted skipped)")
        return SyncResult()

    async def add_task(self, title: Optional[str] = None) -> SyncResult:
        """
        Create a task from ``title`` (or the held input text)

        A provisional task is shown immediately and the input text is
        cleared. On failure the provisional task is removed and the input
        text is restored.
        """
        name = (self.title if title is None else title).strip()
        if not name:
            return self._reject(ACTION_ADD, "Task title cannot be empty")

        self._clear_error()
        provisional = Task(id=next_provisional_id(), name=name)
        if self.rollback_scope == ROLLBACK_COLLECTION:
            state: Rollback = self.store.snapshot()
        else:
            state = RecordSnapshot(task_id=provisional.id, task=None)

        self.store.insert_provisional(provisional, at_front=self.store.reversed)
        self.title = ""
        self.logger.debug(f"Inserted provisional task {provisional.id}")

        try:
            created = await self.client.create_task(name)
        except TaskSyncError as e:
            self.title = name
            return self._fail(ACTION_ADD, e, state)

        if not self.store.commit_provisional(provisional.id, created):
            self.logger.info(f"Task {created.id} created but its provisional entry was removed meanwhile")
        return SyncResult(task=created)

    async def delete_task(self, task_id: TaskId) -> SyncResult:
        """
        Delete a task

        A not-found answer from the service counts as success.
        """
        if task_id not in self.store:
            return self._reject(ACTION_DELETE, f"Task {task_id} not found")

        self._clear_error()
        state = self._capture(task_id)
        removed = self.store.remove_by_id(task_id)

        try:
            await self.client.delete_task(task_id)
        except TaskSyncError as e:
            return self._fail(ACTION_DELETE, e, state)

        return SyncResult(task=removed)

    async def edit_task(self, task_id: TaskId, new_title: str) -> SyncResult:
        """Rename a task"""
        current = self.store.get(task_id)
        if current is None:
            return self._reject(ACTION_EDIT, f"Task {task_id} not found")

        name = (new_title or "").strip()
        if not name:
            return self._reject(ACTION_EDIT, "Task title cannot be empty")
        if name == current.name:
            return self._reject(ACTION_EDIT, "Task title is unchanged")

        return await self._update(ACTION_EDIT, task_id, name=name)

    async def toggle_complete(self, task_id: TaskId) -> SyncResult:
        """Flip the completed flag of a task"""
        current = self.store.get(task_id)
        if current is None:
            return self._reject(ACTION_TOGGLE, f"Task {task_id} not found")

        return await self._update(ACTION_TOGGLE, task_id, completed=not current.completed)

    async def _update(self, action: str, task_id: TaskId, **fields) -> SyncResult:
        self._clear_error()
        state = self._capture(task_id)
        patched = self.store.patch_by_id(task_id, **fields)

        try:
            await self.client.update_task(task_id, **fields)
        except TaskSyncError as e:
            return self._fail(action, e, state)

        # A 2xx is taken as confirmation; the optimistic record stands
        return SyncResult(task=patched)

    def toggle_order(self) -> None:
        """Flip newest-first / oldest-first display; purely local"""
        self.store.set_reversed(not self.store.reversed)
