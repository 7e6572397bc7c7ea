import asyncio

import httpx

from app.errors import ContentUnavailable, PostNotFound
from app.settings import settings


def cursor_for(page: int, page_size: int) -> str:
    return f"{settings.CMS_API_URL}/documents/search?page={page}&pageSize={page_size}"


def make_doc(uid: str, title: str = None, content=None, **extra) -> dict:
    """Raw repository document in the shape the search API returns."""
    return {
        "id": f"id-{uid}",
        "uid": uid,
        "type": "ignite-blog",
        "first_publication_date": extra.pop(
            "first_publication_date", "2021-03-25T19:25:28+0000"
        ),
        "last_publication_date": extra.pop(
            "last_publication_date", "2021-03-26T14:05:00+0000"
        ),
        "data": {
            "title": title or uid.replace("-", " ").title(),
            "subtitle": f"About {uid}",
            "author": "Joseph Oliveira",
            "banner": {"url": f"https://images.example.com/{uid}.png"},
            "content": content or [],
            **extra,
        },
    }


class FakeRepo:
    """
    In-memory posts repo. Pages are cut from ``docs`` by page size and
    cursors are search URLs built by cursor_for.
    Set fail_on to a method name to make it raise ContentUnavailable.
    """

    def __init__(self, docs, fail_on: set[str] | None = None, delay: float = 0):
        self.docs = list(docs)
        self.fail_on = fail_on or set()
        self.delay = delay
        self.calls = []

    async def _maybe_fail(self, name):
        self.calls.append(name)
        if self.delay:
            await asyncio.sleep(self.delay)
        if name in self.fail_on:
            raise ContentUnavailable(f"{name} failed")

    def _page(self, page: int, page_size: int) -> dict:
        start = (page - 1) * page_size
        results = self.docs[start : start + page_size]
        has_more = start + page_size < len(self.docs)
        return {
            "results": results,
            "next_page": cursor_for(page + 1, page_size) if has_more else None,
        }

    async def get_page(self, page, page_size, ref=None):
        await self._maybe_fail("get_page")
        return self._page(page, page_size)

    async def follow_cursor(self, cursor):
        await self._maybe_fail("follow_cursor")
        params = httpx.URL(cursor).params
        return self._page(int(params["page"]), int(params["pageSize"]))

    async def get_post_doc(self, uid, ref=None):
        await self._maybe_fail("get_post_doc")
        for doc in self.docs:
            if doc["uid"] == uid:
                return doc
        raise PostNotFound(uid)

    async def list_post_docs(self, ref=None):
        await self._maybe_fail("list_post_docs")
        return list(self.docs)


class FakeContentClient:
    """
    Minimal ContentClient stand-in for repo and router tests.
    """

    def __init__(self, responses=None, preview_url="/"):
        self.responses = responses or []
        self.preview_url = preview_url
        self.calls = []

    async def query(self, document_type, predicates=None, *, page_size=None, page=1, ref=None):
        self.calls.append(("query", document_type, page_size, page, ref))
        return self.responses[page - 1]

    async def fetch_page(self, url):
        self.calls.append(("fetch_page", url))
        return self.responses[-1]

    async def get_by_uid(self, document_type, uid, ref=None):
        self.calls.append(("get_by_uid", document_type, uid, ref))
        return make_doc(uid)

    async def resolve_preview_url(self, token, document_id, link_resolver, default_url="/"):
        self.calls.append(("resolve_preview_url", token, document_id))
        return self.preview_url

    async def aclose(self):
        self.calls.append(("aclose",))
