import logging
from collections.abc import Callable
from typing import TypeVar

from bitbucket_server_client.models.bitbucket import PagedResult

logger = logging.getLogger(__name__)

# Guards against a server whose isLastPage flag never flips or whose
# nextPageStart stalls. Past this the result is silently truncated.
MAX_PAGES = 100

T = TypeVar("T")


def walk_pages(fetch_page: Callable[[int], PagedResult[T]], max_pages: int = MAX_PAGES) -> list[T]:
    """Collect the values of every page, in the order the server returned them.

    ``fetch_page`` receives the start offset of the page to request. At most
    ``max_pages`` requests are made, so the list may be incomplete for very
    large collections.
    """
    page = fetch_page(0)
    values: list[T] = list(page.values)
    fetched = 1
    while not page.isLastPage and fetched < max_pages:
        if page.nextPageStart is None:
            logger.warning("Page %d is not the last one but has no nextPageStart, stopping", fetched)
            break
        page = fetch_page(page.nextPageStart)
        values.extend(page.values)
        fetched += 1
    if not page.isLastPage and fetched >= max_pages:
        logger.warning("Stopped after %d pages, %d values collected; result is truncated", fetched, len(values))
    return values
