"""
Task service API client

The service exposes one collection URL:
    GET    <base>       -> list of task records
    POST   <base>       -> created record
    PATCH  <base>/{id}  -> 2xx, body optional
    DELETE <base>/{id}  -> 2xx, or 404 when already gone
"""

from typing import Any, List, Optional
import httpx
from pydantic import ValidationError as PydanticValidationError
from tasksync.api.base_client import BaseAPIClient
from tasksync.config.constants import (
    COMPLETED_FIELD,
    DEFAULT_REQUEST_TIMEOUT,
    DELETED_FIELD,
    DELETED_FIELD_ALIAS,
)
from tasksync.models.task import Task, TaskCreate, TaskId, TaskUpdate
from tasksync.utils.error_handler import ServiceError
from tasksync.utils.logger import logger


def _parse_task(data: Any) -> Task:
    try:
        return Task.model_validate(data)
    except PydanticValidationError as e:
        logger.warning(f"Malformed task record from service: {data!r}")
        raise ServiceError(200, f"malformed task record ({e.error_count()} errors)") from e


def _is_soft_deleted(item: Any) -> bool:
    """Deleted flag of a raw record, read before any other field is trusted"""
    return isinstance(item, dict) and any(item.get(field) for field in (DELETED_FIELD, DELETED_FIELD_ALIAS))


class TaskClient(BaseAPIClient):
    """Client for the remote task collection"""

    def __init__(
        self,
        base_url: Optional[str],
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        completed_field: str = COMPLETED_FIELD,
    ):
        """
        Initialize task client

        Args:
            base_url: Collection URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
            completed_field: Name the service expects for the completed flag
                in PATCH bodies ("completed", or "iscompleted" for legacy services)
        """
        super().__init__(base_url, timeout=timeout, transport=transport)
        self.completed_field = completed_field
        self.logger = logger

    async def list_tasks(self) -> List[Task]:
        """
        Get the active task records

        Soft-deleted records are dropped on their raw deleted flag, whatever
        their other fields hold. An active record that does not parse is
        skipped with a warning.

        Returns:
            List of active tasks in service order
        """
        data = await self.get()
        if data is None:
            return []
        if not isinstance(data, list):
            raise ServiceError(200, "expected a list of tasks")

        tasks = []
        skipped = 0
        for item in data:
            if _is_soft_deleted(item):
                skipped += 1
                continue
            try:
                tasks.append(Task.model_validate(item))
            except PydanticValidationError as e:
                self.logger.warning(f"Skipping malformed task record ({e.error_count()} errors): {item!r}")

        self.logger.debug(f"Fetched {len(tasks)} tasks ({skipped} deleted skipped)")
        return tasks

    async def create_task(self, name: str) -> Task:
        """
        Create a new task

        Args:
            name: Task name (stripped before sending)

        Returns:
            Created task with its server-assigned id
        """
        payload = TaskCreate(name=name).model_dump()
        data = await self.post(json_data=payload)
        if data is None:
            raise ServiceError(200, "empty response to create")

        task = _parse_task(data)
        self.logger.info(f"Created task {task.id}")
        return task

    async def update_task(self, task_id: TaskId, **fields) -> None:
        """
        Update fields of a task

        Args:
            task_id: Task ID
            **fields: name and/or completed
        """
        payload = TaskUpdate(**fields).to_payload(completed_field=self.completed_field)
        await self.patch(endpoint=str(task_id), json_data=payload)
        self.logger.info(f"Updated task {task_id}: {payload}")

    async def delete_task(self, task_id: TaskId) -> bool:
        """
        Delete a task

        Args:
            task_id: Task ID

        Returns:
            True if the service deleted it, False if it was already gone (404)
        """
        response = await self.delete(endpoint=str(task_id), allow_statuses=(404,))
        if response.status_code == 404:
            self.logger.warning(f"Task {task_id} not found.")
            return False

        self.logger.info(f"Deleted task {task_id}")
        return True
