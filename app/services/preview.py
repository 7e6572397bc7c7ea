from typing import Mapping

from app.schemas.blog import PreviewState
from app.settings import settings


def link_resolver(doc: dict) -> str:
    """Public path of a repository document."""
    if doc.get("type") == settings.BLOG_DOCUMENT_TYPE and doc.get("uid"):
        return f"/post/{doc['uid']}"
    return "/"


def preview_state_from_cookies(cookies: Mapping[str, str]) -> PreviewState:
    token = cookies.get(settings.PREVIEW_COOKIE_NAME)
    if not token:
        return PreviewState()
    return PreviewState(active=True, ref=token)
