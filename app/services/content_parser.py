import logging
from datetime import datetime
from typing import Any, List, Optional

from dateutil import parser as date_parser

from app.schemas.blog import BodySection, PostDetail, PostSummary, RichTextBlock

logger = logging.getLogger(__name__)


class ContentParser:
    """Projects raw repository documents onto the blog models."""

    def to_summary(self, doc: dict) -> PostSummary:
        data = doc.get("data") or {}
        return PostSummary(
            uid=doc["uid"],
            first_publication_date=parse_date(doc.get("first_publication_date")),
            title=plain_text(data.get("title")),
            subtitle=plain_text(data.get("subtitle")),
            author=plain_text(data.get("author")),
        )

    def to_detail(self, doc: dict, **computed: Any) -> PostDetail:
        """Build a PostDetail; neighbors and reading time arrive via ``computed``."""
        data = doc.get("data") or {}
        banner = data.get("banner") or {}
        return PostDetail(
            uid=doc["uid"],
            first_publication_date=parse_date(doc.get("first_publication_date")),
            last_publication_date=parse_date(doc.get("last_publication_date")),
            title=plain_text(data.get("title")),
            subtitle=plain_text(data.get("subtitle")),
            author=plain_text(data.get("author")),
            banner_url=banner.get("url") or "",
            content=self.get_sections(doc),
            **computed,
        )

    def get_sections(self, doc: dict) -> List[BodySection]:
        data = doc.get("data") or {}
        sections = []
        for raw in data.get("content") or []:
            blocks = [
                RichTextBlock(**block)
                for block in raw.get("body") or []
                if isinstance(block, dict)
            ]
            sections.append(
                BodySection(heading=plain_text(raw.get("heading")), body=blocks)
            )
        return sections


def parse_date(value) -> Optional[datetime]:
    """Parse repository timestamps such as ``2021-03-25T19:25:28+0000``."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return date_parser.isoparse(value)
    except ValueError:
        logger.warning(f"Unparseable publication date: {value!r}")
        return None


def plain_text(value) -> str:
    # Title-like fields may come back as rich text instead of key text.
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(
            block.get("text", "") for block in value if isinstance(block, dict)
        )
    return str(value)
