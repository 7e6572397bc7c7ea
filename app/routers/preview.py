import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse

from app import dependencies as deps
from app.errors import ContentUnavailable
from app.services.preview import link_resolver
from app.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/preview")
async def enter_preview(
    token: str = Query(...),
    documentId: str = Query(...),
    client=Depends(deps.get_content_client),
):
    """Start previewing a draft and jump to the document's page."""
    try:
        url = await client.resolve_preview_url(token, documentId, link_resolver)
    except ContentUnavailable as e:
        logger.error(f"Could not resolve preview for {documentId}: {e}")
        raise HTTPException(status_code=502, detail="Failed to start preview")

    response = RedirectResponse(url=url, status_code=307)
    response.set_cookie(settings.PREVIEW_COOKIE_NAME, token, httponly=True)
    return response


@router.get("/exit-preview")
async def exit_preview():
    response = RedirectResponse(url="/", status_code=307)
    response.delete_cookie(settings.PREVIEW_COOKIE_NAME)
    return response
