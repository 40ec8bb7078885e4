"""
Tests for the task service client, against an in-process httpx transport
"""

import json
import httpx
import pytest
from tasksync.api.task_client import TaskClient
from tasksync.models.task import Task
from tasksync.utils.error_handler import ConfigurationError, NetworkError, ServiceError

API_URL = "http://tasks.test/api/task"


def make_client(handler) -> TaskClient:
    return TaskClient(API_URL, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_list_tasks_accepts_both_flag_spellings():
    def handler(request):
        assert request.method == "GET"
        assert str(request.url) == API_URL
        return httpx.Response(200, json=[
            {"id": 1, "name": "x", "iscompleted": True, "isdeleted": False},
            {"id": "a7", "name": "y", "completed": False, "deleted": False, "createdAt": "2024-01-01"},
            {"id": "b8", "name": "z", "deleted": True},
        ])

    async with make_client(handler) as client:
        tasks = await client.list_tasks()

    assert tasks == [
        Task(id=1, name="x", completed=True),
        Task(id="a7", name="y"),
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("deleted_record", [
    {"id": 2, "name": "", "isdeleted": True},
    {"id": 2, "name": None, "deleted": True},
    {"id": 2, "isdeleted": True},
    {"name": 42, "deleted": 1},
])
async def test_soft_deleted_records_are_dropped_before_parsing(deleted_record):
    """Only the deleted flag of a soft-deleted record is looked at"""
    payload = [{"id": 1, "name": "keep me", "isdeleted": False}, deleted_record]

    async with make_client(lambda request: httpx.Response(200, json=payload)) as client:
        tasks = await client.list_tasks()

    assert tasks == [Task(id=1, name="keep me")]


@pytest.mark.asyncio
async def test_create_task_posts_stripped_name():
    captured = {}

    def handler(request):
        captured["method"] = request.method
        captured["body"] = json.loads(request.content)
        return httpx.Response(201, json={"id": 7, "name": "buy milk", "iscompleted": False})

    async with make_client(handler) as client:
        task = await client.create_task("  buy milk ")

    assert captured == {"method": "POST", "body": {"name": "buy milk"}}
    assert task == Task(id=7, name="buy milk")


@pytest.mark.asyncio
async def test_update_task_uses_configured_completed_field():
    captured = {}

    def handler(request):
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"ok": True})

    client = TaskClient(API_URL, transport=httpx.MockTransport(handler), completed_field="iscompleted")
    async with client:
        await client.update_task(5, completed=False, name="renamed")

    assert captured["body"] == {"iscompleted": False, "name": "renamed"}


@pytest.mark.asyncio
async def test_update_task_sends_only_changed_fields():
    captured = {}

    def handler(request):
        captured["method"] = request.method
        captured["url"] = str(request.url)
        captured["body"] = json.loads(request.content)
        return httpx.Response(204)

    async with make_client(handler) as client:
        result = await client.update_task(5, completed=True)

    assert result is None
    assert captured == {
        "method": "PATCH",
        "url": f"{API_URL}/5",
        "body": {"completed": True},
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("status, expected", [(200, True), (204, True), (404, False)])
async def test_delete_task_treats_not_found_as_gone(status, expected):
    def handler(request):
        assert request.method == "DELETE"
        assert str(request.url) == f"{API_URL}/9"
        return httpx.Response(status)

    async with make_client(handler) as client:
        assert await client.delete_task(9) is expected


@pytest.mark.asyncio
@pytest.mark.parametrize("response, message", [
    (httpx.Response(500, json={"message": "database is down"}), "database is down"),
    (httpx.Response(400, json={"error": "bad name"}), '{"error": "bad name"}'),
    (httpx.Response(502, text="<html>Bad Gateway</html>"), "HTTP error! status: 502"),
])
async def test_error_status_raises_service_error(response, message):
    async with make_client(lambda request: response) as client:
        with pytest.raises(ServiceError) as exc_info:
            await client.list_tasks()

    assert exc_info.value.status_code == response.status_code
    assert exc_info.value.message == message


@pytest.mark.asyncio
async def test_delete_other_errors_still_raise():
    async with make_client(lambda request: httpx.Response(403)) as client:
        with pytest.raises(ServiceError):
            await client.delete_task(1)


@pytest.mark.asyncio
async def test_unreachable_service_raises_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with make_client(handler) as client:
        with pytest.raises(NetworkError) as exc_info:
            await client.create_task("x")

    assert exc_info.value.url == API_URL


@pytest.mark.asyncio
async def test_timeout_is_a_network_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    async with make_client(handler) as client:
        with pytest.raises(NetworkError):
            await client.update_task(1, name="y")


@pytest.mark.asyncio
async def test_malformed_active_record_is_skipped():
    payload = [{"name": "no id"}, {"id": 4, "name": "   "}, {"id": 5, "name": "fine"}]

    async with make_client(lambda request: httpx.Response(200, json=payload)) as client:
        tasks = await client.list_tasks()

    assert tasks == [Task(id=5, name="fine")]


@pytest.mark.asyncio
async def test_malformed_created_record_is_a_service_error():
    async with make_client(lambda request: httpx.Response(201, json={"name": "no id"})) as client:
        with pytest.raises(ServiceError):
            await client.create_task("x")


@pytest.mark.parametrize("base_url", [None, "", "   "])
def test_missing_base_url_fails_fast(base_url):
    with pytest.raises(ConfigurationError):
        TaskClient(base_url)


def test_trailing_slash_is_dropped():
    client = TaskClient(API_URL + "/")
    assert client.base_url == API_URL
