"""Runs blocking analytics calls off the event loop with a per-request timeout."""

import asyncio
from typing import Any, Callable, TypeVar

import duckdb

from api.config import get_settings
from api.services.database import DatabaseService
from config.logging_config import get_logger

logger = get_logger("api.analytics")

R = TypeVar("R")


class AnalysisTimeoutError(Exception):
    """An analytics call did not finish within the request timeout."""

    def __init__(self, operation: str, timeout: float):
        super().__init__(f"{operation} exceeded {timeout:g}s")
        self.operation = operation
        self.timeout = timeout


async def run_analysis(
    db: DatabaseService,
    func: Callable[..., R],
    *args: Any,
    **kwargs: Any,
) -> R:
    """
    Call ``func(*args, conn=<cursor>, **kwargs)`` in a worker thread.

    Each call gets its own cursor of the shared connection. When the timeout
    elapses the cursor is interrupted, which cancels the running query, and
    ``AnalysisTimeoutError`` is raised.
    """
    timeout = get_settings().request_timeout_seconds
    cursor = db.cursor()

    def call() -> R:
        try:
            return func(*args, conn=cursor, **kwargs)
        finally:
            cursor.close()

    try:
        return await asyncio.wait_for(asyncio.to_thread(call), timeout=timeout)
    except asyncio.TimeoutError:
        logger.error(f"{func.__name__} timed out after {timeout:g}s")
        try:
            cursor.interrupt()
        except duckdb.Error as e:
            logger.warning(f"Could not interrupt {func.__name__}: {e}")
        raise AnalysisTimeoutError(func.__name__, timeout)
