"""
Built-in task-management commands.

The command set recognised in inbound messages of the task tracker:

- create task <task description>
- view task <task number>
- view tasks
- view my tasks
- delete task <task number>

BLUEPRINTS is plain configuration; TASKS is the sealed catalog built from it
once, at import time.
"""
from .builder import Blueprint, build
from .catalog import Catalog
from .values import ValueType

BLUEPRINTS = (
    Blueprint(
        "create task",
        "Create a task: `create task <task description>`",
    ),
    Blueprint(
        "view task",
        "View a task: `view task <task number>`",
        type=ValueType.INTEGER,
        pattern=r"\d+",
    ),
    Blueprint(
        "view tasks",
        "View all tasks in this group",
        noargs=True,
    ),
    Blueprint(
        "view my tasks",
        "View all your tasks in this group",
        noargs=True,
    ),
    Blueprint(
        "delete task",
        "Delete a task: `delete task <task number>`",
        type=ValueType.INTEGER,
        pattern=r"\d+",
    ),
)

TASKS = Catalog(*map(build, BLUEPRINTS))


__all__ = (
    "BLUEPRINTS",
    "TASKS",
)
