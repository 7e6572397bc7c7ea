import asyncio
import logging
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from app.errors import ContentError
from app.schemas.blog import HomePage, PostDetail
from app.services.feed_service import FeedLoader
from app.services.post_resolver import PostResolver
from app.settings import settings

logger = logging.getLogger(__name__)


class GenerationResult(BaseModel):
    home: HomePage
    posts: Dict[str, PostDetail] = Field(default_factory=dict)
    failures: Dict[str, str] = Field(default_factory=dict)


class SiteGenerator:
    """
    Pre-renders the listing and every post page in one pass.
    A post that fails is recorded and skipped; the listing failing aborts.
    """

    def __init__(self, loader: FeedLoader, resolver: PostResolver):
        self.loader = loader
        self.resolver = resolver

    async def build_home(self, ref: Optional[str] = None) -> HomePage:
        page = await self.loader.load_initial_page(ref=ref)
        return HomePage(
            posts_pagination=page,
            revalidate=settings.REVALIDATE_SECONDS,
            preview=ref is not None,
        )

    async def list_post_paths(self, ref: Optional[str] = None) -> List[str]:
        return await self.resolver.list_uids(ref=ref)

    async def generate(
        self, ref: Optional[str] = None, uids: Optional[List[str]] = None
    ) -> GenerationResult:
        home = await self.build_home(ref=ref)
        if uids is None:
            uids = await self.list_post_paths(ref=ref)

        outcomes = await asyncio.gather(
            *(self.resolver.resolve(uid, ref=ref) for uid in uids),
            return_exceptions=True,
        )

        result = GenerationResult(home=home)
        for uid, outcome in zip(uids, outcomes):
            if isinstance(outcome, ContentError):
                logger.warning(f"Skipping post {uid}: {outcome}")
                result.failures[uid] = f"{type(outcome).__name__}: {outcome}"
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                result.posts[uid] = outcome

        logger.info(
            f"Generated {len(result.posts)} posts ({len(result.failures)} failed)"
        )
        return result
