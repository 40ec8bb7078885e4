"""
Pytest configuration and fixtures
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from tasksync.api.task_client import TaskClient
from tasksync.models.task import Task
from tasksync.services.task_store import TaskStore
from tasksync.services.sync_controller import SyncController

API_URL = "http://tasks.test/api/task"


@pytest.fixture
def sample_tasks():
    """Three tasks as the service would return them"""
    return [
        Task(id=1, name="write report"),
        Task(id=2, name="buy milk", completed=True),
        Task(id=3, name="call the bank"),
    ]


@pytest.fixture
def mock_task_client():
    """Mock task service client"""
    client = MagicMock(spec=TaskClient)
    client.base_url = API_URL
    client.list_tasks = AsyncMock(return_value=[])
    client.create_task = AsyncMock(side_effect=lambda name: Task(id=101, name=name))
    client.update_task = AsyncMock(return_value=None)
    client.delete_task = AsyncMock(return_value=True)
    return client


@pytest.fixture
def task_store(sample_tasks):
    """Store pre-loaded with the sample tasks"""
    return TaskStore(sample_tasks)


@pytest.fixture
def controller(mock_task_client, task_store):
    """Controller over the sample tasks, initial fetch already done"""
    controller = SyncController(mock_task_client, store=task_store)
    controller.loading = False
    return controller
