"""
Main application entry point

A small console front end over SyncController: each input line is one intent.
"""

import asyncio
import sys
from typing import Optional
from tasksync.api.task_client import TaskClient
from tasksync.models.task import TaskId
from tasksync.services.sync_controller import SyncController
from tasksync.utils.error_handler import ConfigurationError, format_error_message
from tasksync.utils.formatters import format_status, format_task_list
from tasksync.utils.logger import logger
from tasksync.config.settings import settings
from tasksync.config.constants import ACTION_FETCH

HELP_TEXT = """Commands:
  list                 show tasks
  add <title>          add a task
  edit <id> <title>    rename a task
  done <id>            toggle completed
  rm <id>              delete a task
  reverse              toggle newest-first / oldest-first
  reload               fetch tasks from the service
  help                 show this help
  quit                 exit"""


class TaskListApp:
    """Console application"""

    def __init__(self, controller: SyncController):
        self.controller = controller
        self.logger = logger

    def resolve_id(self, raw: str) -> TaskId:
        """Match typed text against the ids on screen (ids may be ints or strings)"""
        raw = raw.strip()
        for task in self.controller.tasks:
            if str(task.id) == raw:
                return task.id
        return raw

    def render(self) -> str:
        status = format_status(self.controller.loading, self.controller.error)
        listing = format_task_list(self.controller.tasks, self.controller.reversed)
        return f"{status}\n{listing}" if status else listing

    async def handle_command(self, line: str) -> Optional[str]:
        """
        Run one command line

        Args:
            line: Raw input line

        Returns:
            Text to print, or None to exit
        """
        command, _, rest = line.strip().partition(" ")
        command = command.lower()
        rest = rest.strip()

        if command in ("quit", "exit"):
            return None
        if command in ("", "list"):
            return self.render()
        if command == "help":
            return HELP_TEXT
        if command == "reverse":
            self.controller.toggle_order()
            return self.render()
        if command == "reload":
            await self.controller.fetch_tasks()
            return self.render()
        if command == "add":
            result = await self.controller.add_task(rest)
        elif command in ("done", "rm") and rest:
            task_id = self.resolve_id(rest)
            if command == "done":
                result = await self.controller.toggle_complete(task_id)
            else:
                result = await self.controller.delete_task(task_id)
        elif command == "edit" and rest:
            raw_id, _, new_title = rest.partition(" ")
            result = await self.controller.edit_task(self.resolve_id(raw_id), new_title)
        else:
            return f"Unknown command: {line.strip()}\n{HELP_TEXT}"

        if not result.success and result.error_kind == "validation":
            return f"{result.message}\n{self.render()}"
        return self.render()

    async def run(self):
        """Initial fetch, then read commands until EOF or quit"""
        await self.controller.fetch_tasks()
        print(self.render())

        loop = asyncio.get_running_loop()
        while True:
            line = await loop.run_in_executor(None, sys.stdin.readline)
            if not line:
                break
            output = await self.handle_command(line)
            if output is None:
                break
            print(output)


async def main():
    """Main entry point"""
    try:
        settings.validate()
        client = TaskClient(
            settings.TASK_API_URL,
            timeout=settings.REQUEST_TIMEOUT,
            completed_field=settings.TASK_COMPLETED_FIELD,
        )
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        print(format_error_message(ACTION_FETCH, e))
        return 1

    try:
        await TaskListApp(SyncController(client)).run()
    finally:
        await client.close()
    return 0


def run():
    """Console script entry point"""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
