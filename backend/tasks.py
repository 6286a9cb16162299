# backend/tasks.py
from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

from flask import current_app


class BackgroundTasks:
    """
    Fire-and-forget work that must never affect the response
    (seller contact backfill, media cleanup).

    Failures are logged, never raised to the caller.
    """

    def __init__(self, max_workers: int = 4, inline: bool = False, logger=None):
        self.inline = inline
        self.logger = logger
        self._executor: Optional[ThreadPoolExecutor] = None
        if not inline:
            self._executor = ThreadPoolExecutor(
                max_workers=max_workers, thread_name_prefix="nguza-bg"
            )

    def submit(self, fn: Callable[..., Any], *args, description: str = "", **kwargs) -> Optional[Future]:
        label = description or getattr(fn, "__name__", "task")

        if self.inline:
            try:
                fn(*args, **kwargs)
            except Exception as e:
                self._log_failure(label, e)
            return None

        future = self._executor.submit(fn, *args, **kwargs)
        future.add_done_callback(lambda f: self._on_done(label, f))
        return future

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)

    def _on_done(self, label: str, future: Future) -> None:
        exc = future.exception()
        if exc is not None:
            self._log_failure(label, exc)

    def _log_failure(self, label: str, exc: BaseException) -> None:
        if self.logger is not None:
            self.logger.warning("Background task %s failed: %s", label, exc)
        else:
            print(f"⚠️ Background task {label} failed: {exc}")


def init_background_tasks(app) -> BackgroundTasks:
    tasks = BackgroundTasks(
        max_workers=app.config.get("BACKGROUND_WORKERS", 4),
        inline=app.config.get("BACKGROUND_TASKS_INLINE", False),
        logger=app.logger,
    )
    app.extensions["background_tasks"] = tasks
    return tasks


def run_in_background(fn: Callable[..., Any], *args, description: str = "", **kwargs) -> None:
    tasks: Optional[BackgroundTasks] = current_app.extensions.get("background_tasks")
    if tasks is None:
        current_app.logger.warning("No background task runner; dropping %s", description or fn)
        return
    tasks.submit(fn, *args, description=description, **kwargs)
