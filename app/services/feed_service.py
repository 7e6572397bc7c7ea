import logging
from typing import List, Optional, Sequence

from app.errors import InvalidCursor
from app.schemas.blog import FeedPage, PostSummary
from app.services.content_parser import ContentParser
from app.settings import settings

logger = logging.getLogger(__name__)


class FeedLoader:
    def __init__(self, repo, parser: Optional[ContentParser] = None, page_size=None):
        self.repo = repo
        self.parser = parser or ContentParser()
        self.page_size = page_size or settings.FEED_PAGE_SIZE

    async def load_initial_page(self, ref: Optional[str] = None) -> FeedPage:
        response = await self.repo.get_page(1, self.page_size, ref=ref)
        return self._to_page(response)

    async def load_next_page(self, cursor: Optional[str]) -> FeedPage:
        if not cursor:
            raise InvalidCursor("load_next_page needs the cursor of a previous page")
        response = await self.repo.follow_cursor(cursor)
        return self._to_page(response)

    def _to_page(self, response: dict) -> FeedPage:
        return FeedPage(
            results=[self.parser.to_summary(doc) for doc in response["results"]],
            next_page=response.get("next_page") or None,
        )


def append_page(
    accumulated: Sequence[PostSummary], page: FeedPage
) -> List[PostSummary]:
    """Concatenate a freshly loaded page onto what the reader already sees.

    Pages from one cursor chain are disjoint, so no de-duplication happens
    here; replaying a consumed cursor would duplicate posts.
    """
    return [*accumulated, *page.results]


class FeedSession:
    """
    One reader's view of the feed: the posts shown so far plus the cursor
    for the next page. ``load_more`` allows a single request in flight.
    """

    def __init__(self, loader: FeedLoader, initial_page: FeedPage):
        self.loader = loader
        self.items: List[PostSummary] = list(initial_page.results)
        self.cursor: Optional[str] = initial_page.next_page or None
        self.loading = False
        self.consumed_cursors: set[str] = set()

    @property
    def has_more(self) -> bool:
        return self.cursor is not None

    @property
    def state(self) -> str:
        if self.loading:
            return "loading"
        return "idle" if self.has_more else "done"

    async def load_more(self) -> Optional[FeedPage]:
        """
        Fetch and apply the next page.
        Returns None when there is nothing to do: the feed is exhausted or
        another load for this session is still running.
        """
        if not self.has_more:
            return None
        if self.loading:
            logger.debug("Load already in flight, ignoring trigger")
            return None

        cursor = self.cursor
        self.loading = True
        try:
            page = await self.loader.load_next_page(cursor)
        finally:
            self.loading = False

        self.consumed_cursors.add(cursor)
        self.items = append_page(self.items, page)
        self.cursor = page.next_page
        if self.cursor in self.consumed_cursors:
            # Never replay a cursor; its posts are already in self.items.
            logger.warning(f"Repository repeated cursor {self.cursor}, ending feed")
            self.cursor = None
        return page
