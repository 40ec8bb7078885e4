"""
Result model returned by sync controller intents
"""

from typing import Optional
from pydantic import BaseModel
from tasksync.models.task import Task


class SyncResult(BaseModel):
    """Outcome of one intent"""
    success: bool = True
    error_kind: Optional[str] = None
    message: Optional[str] = None
    task: Optional[Task] = None
