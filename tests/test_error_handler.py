"""
Tests for error classification and user messages
"""

import logging
import sys
import pytest
from tasksync.config.settings import Settings
from tasksync.utils.error_handler import (
    ConfigurationError,
    ErrorKind,
    NetworkError,
    ServiceError,
    TaskSyncError,
    ValidationError,
    format_error_message,
    handle_error,
)
from tasksync.utils.logger import setup_logger


def test_every_error_carries_its_kind():
    assert ConfigurationError("x").kind == ErrorKind.CONFIGURATION
    assert NetworkError("http://h").kind == ErrorKind.NETWORK
    assert ServiceError(500).kind == ErrorKind.SERVICE
    assert ValidationError("x").kind == ErrorKind.VALIDATION
    assert all(
        isinstance(error, TaskSyncError)
        for error in (ConfigurationError("x"), NetworkError("h"), ServiceError(1), ValidationError("x"))
    )


def test_service_error_falls_back_to_status_code():
    error = ServiceError(418)
    assert error.status_code == 418
    assert error.message == "HTTP error! status: 418"


def test_network_message_points_at_connectivity():
    message = format_error_message("add task", NetworkError("https://api.test/task", "refused"))

    assert message.startswith("Could not add task: unable to reach the server (https://api.test/task).")
    assert "CORS/HTTPS" in message


def test_service_message_with_retry_hint():
    error = ServiceError(500, "database is down")

    assert format_error_message("load tasks", error) == "Could not load tasks: database is down."
    assert format_error_message("load tasks", error, retry_hint=True) == (
        "Could not load tasks: database is down. Please try again later."
    )


def test_handle_error_returns_failed_result():
    result = handle_error("delete task", ServiceError(500, "boom"))

    assert result.success is False
    assert result.error_kind == "service"
    assert result.message == "Could not delete task: boom."


def test_handle_validation_error_keeps_plain_message():
    result = handle_error("edit task", ValidationError("Task title cannot be empty"))

    assert result.error_kind == "validation"
    assert result.message == "Task title cannot be empty"


def test_settings_validate_requires_api_url(monkeypatch):
    monkeypatch.setattr(Settings, "TASK_API_URL", "")
    with pytest.raises(ConfigurationError):
        Settings.validate()

    monkeypatch.setattr(Settings, "TASK_API_URL", "https://api.test/task")
    assert Settings.validate() is True


def test_log_output_goes_to_stderr():
    """Console output of the front end stays free of log lines"""
    test_logger = setup_logger("tasksync.test_stderr")
    stream_handlers = [h for h in test_logger.handlers if type(h) is logging.StreamHandler]

    assert stream_handlers
    assert all(h.stream is sys.stderr for h in stream_handlers)
