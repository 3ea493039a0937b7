"""
Pagination for ``startKey``/``nextKey`` listings.

Every SOLAPI listing returns ``nextKey``; ``None`` means the last page,
any other value is passed back unchanged as the next ``startKey``.

Usage:
    paginator = KeyPaginator(
        lambda key: service.get_kakao_channels(GetKakaoChannelsRequest(start_key=key))
    )
    async for page in paginator.paginate():
        for channel in page.items:
            process(channel)
"""

from typing import Any, AsyncIterator, Awaitable, Callable, List, Mapping, Optional, Union

from solapi.exceptions import SolapiDataError
from solapi.models import Page
from solapi.observability import get_logger

logger = get_logger(__name__)

PageResult = Union[Page, Mapping[str, Any]]


def next_key_of(page: PageResult) -> Optional[str]:
    """Continuation token of a page or raw listing response."""
    if isinstance(page, Page):
        return page.next_key
    if not isinstance(page, Mapping):
        raise SolapiDataError(
            "Invalid page type",
            expected="Page or dict",
            got=type(page).__name__
        )
    return page.get("nextKey") or None


class KeyPaginator:
    """
    Async paginator driven by ``nextKey``.

    Handles:
    - First request without a start key
    - Continuation with the previous ``nextKey``
    - Optional page cap
    - Detection of a server repeating the same key
    """

    def __init__(
        self,
        fetch_page: Callable[[Optional[str]], Awaitable[PageResult]],
        max_pages: Optional[int] = None,
    ):
        """
        Initialize paginator.

        Args:
            fetch_page: Async function fetching the page for a start key
            max_pages: Maximum pages to fetch (None = unlimited)
        """
        self.fetch_page = fetch_page
        self.max_pages = max_pages

    async def paginate(self, start_key: Optional[str] = None) -> AsyncIterator[PageResult]:
        """
        Iterate through pages until ``nextKey`` is None.

        Raises:
            SolapiDataError: If the API returns the same key twice
        """
        seen_keys = set()
        pages = 0

        while self.max_pages is None or pages < self.max_pages:
            page = await self.fetch_page(start_key)
            pages += 1
            yield page

            next_key = next_key_of(page)
            if next_key is None:
                break

            if next_key in seen_keys:
                raise SolapiDataError(
                    "Pagination did not advance",
                    details=f"nextKey {next_key!r} was already returned"
                )
            seen_keys.add(next_key)
            start_key = next_key

        logger.debug(f"Pagination finished after {pages} pages")

    async def fetch_all(
        self,
        items_key: Optional[str] = None,
        start_key: Optional[str] = None,
    ) -> List[Any]:
        """
        Fetch all pages and return the combined items.

        Args:
            items_key: Key of the item list for raw dict responses
                (e.g. "groupList"); not needed for Page results
            start_key: Key to resume from

        Returns:
            All items from all pages
        """
        items: List[Any] = []
        async for page in self.paginate(start_key):
            if isinstance(page, Page):
                items.extend(page.items)
                continue

            if items_key is None:
                raise SolapiDataError("items_key is required for raw listing responses")

            batch = page.get(items_key) or []
            if isinstance(batch, Mapping):
                batch = list(batch.values())
            items.extend(batch)
        return items
