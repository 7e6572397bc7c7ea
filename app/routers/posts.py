import logging
from typing import List

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query

from app import dependencies as deps
from app.errors import ContentUnavailable, InvalidCursor, PostNotFound
from app.schemas.blog import FeedPage, PostDetail, PreviewState
from app.services.feed_service import FeedLoader
from app.services.post_resolver import PostResolver
from app.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/posts", response_model=FeedPage)
async def first_page(
    loader: FeedLoader = Depends(deps.get_feed_loader),
    preview: PreviewState = Depends(deps.get_preview_state),
):
    """First page of the post listing."""
    try:
        return await loader.load_initial_page(ref=preview.ref)
    except ContentUnavailable as e:
        logger.error(f"Content unavailable while listing posts: {e}")
        raise HTTPException(status_code=502, detail="Failed to retrieve posts")


@router.get("/posts/more", response_model=FeedPage)
async def next_page(
    cursor: str = Query("", description="next_page value of the previous page"),
    loader: FeedLoader = Depends(deps.get_feed_loader),
):
    """Follow a next-page cursor."""
    if cursor and not _is_repository_url(cursor):
        raise HTTPException(status_code=400, detail="Unknown cursor origin")
    try:
        return await loader.load_next_page(cursor)
    except InvalidCursor:
        raise HTTPException(status_code=400, detail="Missing cursor")
    except ContentUnavailable as e:
        logger.error(f"Content unavailable while loading more posts: {e}")
        raise HTTPException(status_code=502, detail="Failed to retrieve posts")


@router.get("/posts/paths", response_model=List[str])
async def post_paths(
    resolver: PostResolver = Depends(deps.get_post_resolver),
    preview: PreviewState = Depends(deps.get_preview_state),
):
    try:
        return await resolver.list_uids(ref=preview.ref)
    except ContentUnavailable as e:
        logger.error(f"Content unavailable while listing post paths: {e}")
        raise HTTPException(status_code=502, detail="Failed to retrieve posts")


@router.get("/posts/{uid}", response_model=PostDetail)
async def get_post(
    uid: str,
    resolver: PostResolver = Depends(deps.get_post_resolver),
    preview: PreviewState = Depends(deps.get_preview_state),
):
    """Get a single post with its neighbors."""
    try:
        return await resolver.resolve(uid, ref=preview.ref)
    except PostNotFound:
        raise HTTPException(status_code=404, detail="Post not found")
    except ContentUnavailable as e:
        logger.error(f"Content unavailable while resolving post {uid}: {e}")
        raise HTTPException(status_code=502, detail="Failed to retrieve post")


def _is_repository_url(url: str) -> bool:
    """Only follow cursors pointing back at the content repository."""
    try:
        candidate = httpx.URL(url)
    except httpx.InvalidURL:
        return False
    repository = httpx.URL(settings.CMS_API_URL)
    return candidate.scheme == repository.scheme and candidate.host == repository.host
