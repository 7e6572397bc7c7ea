from fastapi import Depends, Request

from app.repos.posts_repo import PrismicPostsRepo
from app.schemas.blog import PreviewState
from app.services.feed_service import FeedLoader
from app.services.post_resolver import PostResolver
from app.services.preview import preview_state_from_cookies


def get_content_client(request: Request):
    return request.app.state.content_client


def get_posts_repo(client=Depends(get_content_client)):
    return PrismicPostsRepo(client)


def get_feed_loader(repo=Depends(get_posts_repo)):
    return FeedLoader(repo)


def get_post_resolver(repo=Depends(get_posts_repo)):
    return PostResolver(repo)


def get_preview_state(request: Request) -> PreviewState:
    return preview_state_from_cookies(request.cookies)
