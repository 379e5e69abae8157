"""
Task Registry for fire-and-forget background work.

The event loop only keeps weak references to tasks, so a task nobody awaits
can be garbage collected before it finishes. Tasks registered here are held
until they are done. There is no cancellation: a stuck store call keeps its
worker thread, never the UI.
"""

import asyncio
import threading

from nexus_library.logger import setup_logger

logger = setup_logger()

_registry_lock = threading.Lock()
_background_tasks: list[asyncio.Task] = []


def register_task(task: asyncio.Task, name: str = "") -> asyncio.Task:
    """Register a background task for tracking.

    Args:
        task: The asyncio.Task to track
        name: Optional name for logging

    Returns:
        The same task (for chaining)
    """
    with _registry_lock:
        # Clean up done tasks to prevent unbounded growth
        _background_tasks[:] = [t for t in _background_tasks if not t.done()]
        _background_tasks.append(task)
        logger.debug(f"Registered background task: {name or task.get_name()}")
    return task


def get_active_task_count() -> int:
    """Get count of active (non-done) tasks."""
    with _registry_lock:
        return sum(1 for t in _background_tasks if not t.done())


def reset():
    """Forget all tracked tasks (used by tests)"""
    with _registry_lock:
        _background_tasks.clear()
