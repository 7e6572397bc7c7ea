class ContentError(Exception):
    """Base class for failures raised while reading blog content."""


class ContentUnavailable(ContentError):
    """The content repository could not be reached or returned garbage."""


class PostNotFound(ContentError):
    def __init__(self, uid: str):
        super().__init__(f"No post with uid {uid!r}")
        self.uid = uid


class InvalidCursor(ContentError):
    """A next-page load was requested without a cursor.

    Callers must check ``FeedPage.next_page`` first, so this signals a bug
    rather than something to retry.
    """
