"""
Message formatting utilities
"""

from typing import List, Optional
from tasksync.models.task import Task


def format_task_line(task: Task) -> str:
    """
    Format one task as a list line

    Args:
        task: Task to format

    Returns:
        Line like "[x] 12  buy milk", with "(saving...)" on provisional tasks
    """
    mark = "x" if task.completed else " "
    line = f"[{mark}] {task.id}  {task.name}"
    if task.is_provisional:
        line += "  (saving...)"
    return line


def format_task_list(tasks: List[Task], reversed_order: bool = False) -> str:
    """
    Format the whole collection

    Args:
        tasks: Tasks in display order
        reversed_order: Current display-order flag

    Returns:
        Header plus one line per task
    """
    if not tasks:
        return "No tasks yet. Add one with: add <title>"

    header = "Order: Newest First" if reversed_order else "Order: Oldest First"
    return "\n".join([header] + [format_task_line(task) for task in tasks])


def format_status(loading: bool, error: Optional[str]) -> str:
    """Status line shown above the list (empty when there is nothing to say)"""
    if loading:
        return "Loading tasks..."
    if error:
        return f"Error: {error}"
    return ""
