import logging
from typing import List, Optional

from app.settings import settings

logger = logging.getLogger(__name__)

# Largest page the repository serves; keeps full-corpus reads to few requests.
CORPUS_PAGE_SIZE = 100


class PrismicPostsRepo:
    def __init__(self, client, document_type: Optional[str] = None):
        self.client = client
        self.document_type = document_type or settings.BLOG_DOCUMENT_TYPE

    async def get_page(
        self, page: int, page_size: int, ref: Optional[str] = None
    ) -> dict:
        return await self.client.query(
            self.document_type, page_size=page_size, page=page, ref=ref
        )

    async def follow_cursor(self, cursor: str) -> dict:
        return await self.client.fetch_page(cursor)

    async def get_post_doc(self, uid: str, ref: Optional[str] = None) -> dict:
        return await self.client.get_by_uid(self.document_type, uid, ref=ref)

    async def list_post_docs(self, ref: Optional[str] = None) -> List[dict]:
        """Every blog document, all pages merged in repository order."""
        docs: List[dict] = []
        page = 1
        while True:
            response = await self.get_page(page, CORPUS_PAGE_SIZE, ref=ref)
            docs.extend(response["results"])
            if not response.get("next_page"):
                break
            page += 1

        logger.debug(f"Loaded {len(docs)} {self.document_type} documents")
        return docs
