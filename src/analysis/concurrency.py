"""Fan-out/join for independent sub-queries of one operation."""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List

import duckdb

from config import config
from config.logging_config import get_logger

logger = get_logger("concurrency")

QueryFn = Callable[[duckdb.DuckDBPyConnection], Any]


def fan_out(conn: duckdb.DuckDBPyConnection, *queries: QueryFn) -> List[Any]:
    """
    Run independent query functions concurrently and return their results in order.

    Each function receives its own cursor of ``conn`` so the calls do not share
    connection state. Every result is awaited before returning; if any call
    raises, the first exception (in argument order) propagates and no partial
    result is returned.
    """
    if len(queries) == 1:
        return [queries[0](conn)]

    cursors = [conn.cursor() for _ in queries]
    workers = max(1, min(len(queries), config.analytics.max_parallel_queries))
    try:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [pool.submit(fn, cur) for fn, cur in zip(queries, cursors)]
        errors = [f.exception() for f in futures]
        for error in errors:
            if error is not None:
                logger.error(f"Sub-query failed: {error}")
                raise error
        return [f.result() for f in futures]
    finally:
        for cur in cursors:
            cur.close()
