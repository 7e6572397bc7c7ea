import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.db.prismic import create_content_client
from app.routers import posts, preview
from app.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Ignite Blog API", description="Post feed and reading view")


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.content_client = create_content_client()
    logger.info(f"Content client ready for {settings.CMS_API_URL}")

    try:
        yield
    finally:
        await app.state.content_client.aclose()
        logger.info("Content client closed")


app.router.lifespan_context = lifespan

app.include_router(posts.router)
app.include_router(preview.router)


@app.get("/")
async def root():
    return {"message": "Ignite Blog API is running"}
