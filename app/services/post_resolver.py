import asyncio
import logging
import math
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from app.errors import PostNotFound
from app.schemas.blog import AdjacentPost, BodySection, PostDetail
from app.services.content_parser import ContentParser, plain_text
from app.settings import settings

logger = logging.getLogger(__name__)

SortKey = Callable[[dict], object]


class CorpusCache:
    """
    Full-corpus reads shared by every post in one generation run.
    Concurrent callers for the same ref wait on a single fetch.
    """

    def __init__(self, repo):
        self.repo = repo
        self._docs: Dict[Optional[str], List[dict]] = {}
        self._locks: Dict[Optional[str], asyncio.Lock] = {}

    async def get(self, ref: Optional[str] = None) -> List[dict]:
        lock = self._locks.setdefault(ref, asyncio.Lock())
        async with lock:
            if ref not in self._docs:
                self._docs[ref] = await self.repo.list_post_docs(ref=ref)
            return self._docs[ref]

    def clear(self) -> None:
        self._docs.clear()


class PostResolver:
    def __init__(
        self,
        repo,
        parser: Optional[ContentParser] = None,
        corpus: Optional[CorpusCache] = None,
        sort_key: Optional[SortKey] = None,
        words_per_minute: Optional[int] = None,
    ):
        self.repo = repo
        self.parser = parser or ContentParser()
        self.corpus = corpus
        self.sort_key = sort_key
        self.words_per_minute = words_per_minute or settings.WORDS_PER_MINUTE

    async def resolve(self, uid: str, ref: Optional[str] = None) -> PostDetail:
        fetches = [
            asyncio.ensure_future(self.repo.get_post_doc(uid, ref=ref)),
            asyncio.ensure_future(self._load_corpus(ref)),
        ]
        try:
            doc, corpus = await asyncio.gather(*fetches)
        except BaseException:
            # stop whichever fetch is still running
            for fetch in fetches:
                fetch.cancel()
            raise
        previous_post, next_post = find_neighbors(corpus, uid, self.sort_key)
        sections = self.parser.get_sections(doc)
        return self.parser.to_detail(
            doc,
            reading_time=estimate_reading_time(sections, self.words_per_minute),
            previous_post=previous_post,
            next_post=next_post,
        )

    async def list_uids(self, ref: Optional[str] = None) -> List[str]:
        return [doc["uid"] for doc in await self._load_corpus(ref) if doc.get("uid")]

    async def _load_corpus(self, ref: Optional[str]) -> List[dict]:
        if self.corpus is not None:
            return await self.corpus.get(ref)
        return await self.repo.list_post_docs(ref=ref)


def find_neighbors(
    corpus: Sequence[dict], uid: str, sort_key: Optional[SortKey] = None
) -> Tuple[Optional[AdjacentPost], Optional[AdjacentPost]]:
    """Previous and next post around ``uid`` by corpus position."""
    ordered = sorted(corpus, key=sort_key) if sort_key else list(corpus)
    index = next(
        (i for i, doc in enumerate(ordered) if doc.get("uid") == uid), None
    )
    if index is None:
        raise PostNotFound(uid)

    previous_post = _adjacent(ordered[index - 1]) if index > 0 else None
    next_post = _adjacent(ordered[index + 1]) if index + 1 < len(ordered) else None
    return previous_post, next_post


def _adjacent(doc: dict) -> AdjacentPost:
    data = doc.get("data") or {}
    return AdjacentPost(uid=doc["uid"], title=plain_text(data.get("title")))


def estimate_reading_time(
    sections: Sequence[BodySection], words_per_minute: int = 200
) -> int:
    words = 0
    for section in sections:
        words += len(section.heading.split())
        words += sum(len(block.text.split()) for block in section.body)
    return math.ceil(words / words_per_minute)
