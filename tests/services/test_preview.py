from app.services.preview import link_resolver, preview_state_from_cookies
from app.settings import settings


def test_preview_state_inactive_without_cookie():
    state = preview_state_from_cookies({})

    assert state.active is False
    assert state.ref is None


def test_preview_state_uses_cookie_as_ref():
    state = preview_state_from_cookies({settings.PREVIEW_COOKIE_NAME: "preview-token"})

    assert state.active is True
    assert state.ref == "preview-token"


def test_link_resolver_points_blog_posts_to_post_page():
    assert link_resolver({"type": settings.BLOG_DOCUMENT_TYPE, "uid": "hello"}) == "/post/hello"


def test_link_resolver_falls_back_to_home():
    assert link_resolver({"type": "homepage", "uid": "home"}) == "/"
    assert link_resolver({"type": settings.BLOG_DOCUMENT_TYPE}) == "/"
