"""Entrypoint for ``taskiq worker`` and ``taskiq scheduler``.

Importing the tasks module registers the subscription sync tasks and the
hourly schedule label on the broker.
"""

from src.taskiq_app.broker import broker, scheduler
from src.taskiq_app import tasks as _tasks  # noqa: F401

__all__ = ["broker", "scheduler"]
