"""Detached background tasks whose failures only reach the log."""

from __future__ import annotations

import threading
from typing import Any, Callable

from ..utils.logger import get_logger

logger = get_logger(__name__)


def run_detached(fn: Callable[..., Any], *args: Any, name: str = "background-task", **kwargs: Any) -> threading.Thread:
    """
    Run fn on a daemon thread and return the thread.

    Exceptions are logged and dropped; the caller never waits unless it joins
    the returned thread.
    """

    def _runner() -> None:
        try:
            fn(*args, **kwargs)
        except Exception as e:
            logger.warning("Background task failed", task=name, error=str(e))

    thread = threading.Thread(target=_runner, name=name, daemon=True)
    thread.start()
    return thread
