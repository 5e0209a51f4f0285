"""
Cursor pagination helpers.

A fetch function takes ``page_token`` and ``page_size`` keyword arguments and
returns a Page(items, next_cursor). Walking stops when the cursor comes back
empty. Pages are requested one after another because each cursor comes from
the previous response.

No page cap is enforced: an upstream that keeps handing back a
cursor keeps the walk going.
"""

import logging

logger = logging.getLogger(__name__)


def iter_items(fetch, page_size=None):
    """Yield every item of every page, in upstream order."""
    page_token = None
    pages = 0
    while True:
        page = fetch(page_token=page_token, page_size=page_size)
        pages += 1
        for item in page.items or []:
            yield item
        page_token = page.next_cursor
        if not page_token:
            logger.debug("Pagination finished after %d page(s)", pages)
            return


def collect_pages(fetch, page_size=None):
    """Concatenate all pages into one list. Any fetch error propagates and nothing is kept."""
    return list(iter_items(fetch, page_size=page_size))


def count_items(fetch, page_size=None):
    """Count items across all pages without holding on to them."""
    return sum(1 for _ in iter_items(fetch, page_size=page_size))
