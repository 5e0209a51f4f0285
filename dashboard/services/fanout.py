"""
Bounded fan-out/fan-in over a thread pool.

Results always come back in input order, whichever call finishes first.
"""

import concurrent.futures
import logging

from dashboard.config import config

logger = logging.getLogger(__name__)


def fan_out(func, items, max_workers=None, fallback=None):
    """
    Run func(item) for every item with at most max_workers calls in flight.

    If fallback is given, a failing item is replaced by fallback(item, exc)
    and the rest of the batch carries on. Without a fallback the first
    failure, in input order, is raised once all calls have settled.
    """
    items = list(items)
    if not items:
        return []

    workers = max(1, min(max_workers or config.max_fanout_workers, len(items)))
    results = []

    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(func, item) for item in items]

        for item, future in zip(items, futures):
            try:
                results.append(future.result())
            except Exception as e:
                if fallback is None:
                    raise
                logger.warning("Fan-out item failed, using fallback: %s", e)
                results.append(fallback(item, e))

    return results
