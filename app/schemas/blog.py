from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from app.utils import format_date, format_edited_at


class RichTextBlock(BaseModel):
    # paragraph, heading2, list-item... plus whatever the editor adds
    model_config = ConfigDict(frozen=True, extra="allow")

    type: str = "paragraph"
    text: str = ""
    spans: List[Dict[str, Any]] = Field(default_factory=list)


class BodySection(BaseModel):
    model_config = ConfigDict(frozen=True)

    heading: str = ""
    body: List[RichTextBlock] = Field(default_factory=list)


class AdjacentPost(BaseModel):
    model_config = ConfigDict(frozen=True)

    uid: str
    title: str


class PostSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    uid: str
    first_publication_date: Optional[datetime] = None
    title: str = ""
    subtitle: str = ""
    author: str = ""

    @computed_field
    @property
    def published_label(self) -> str:
        return format_date(self.first_publication_date)


class PostDetail(BaseModel):
    model_config = ConfigDict(frozen=True)

    uid: str
    first_publication_date: Optional[datetime] = None
    last_publication_date: Optional[datetime] = None
    title: str = ""
    subtitle: str = ""
    author: str = ""
    banner_url: str = ""
    content: List[BodySection] = Field(default_factory=list)
    reading_time: int = 0
    previous_post: Optional[AdjacentPost] = None
    next_post: Optional[AdjacentPost] = None

    @computed_field
    @property
    def published_label(self) -> str:
        return format_date(self.first_publication_date)

    @computed_field
    @property
    def edited_label(self) -> str:
        return format_edited_at(self.last_publication_date)


class FeedPage(BaseModel):
    model_config = ConfigDict(frozen=True)

    results: List[PostSummary] = Field(default_factory=list)
    next_page: Optional[str] = None

    @property
    def is_last(self) -> bool:
        return not self.next_page


class HomePage(BaseModel):
    """Props for the pre-rendered post listing."""

    posts_pagination: FeedPage
    revalidate: int
    preview: bool = False


class PreviewState(BaseModel):
    model_config = ConfigDict(frozen=True)

    active: bool = False
    ref: Optional[str] = None
