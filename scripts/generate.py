import argparse
import asyncio
import logging
import re
from pathlib import Path

from app.db.prismic import create_content_client
from app.repos.posts_repo import PrismicPostsRepo
from app.services.feed_service import FeedLoader
from app.services.generation import SiteGenerator
from app.services.post_resolver import CorpusCache, PostResolver
from app.settings import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

SAFE_UID = re.compile(r"[A-Za-z0-9][A-Za-z0-9_-]*")


async def run(out_dir: Path, ref: str | None = None) -> int:
    client = create_content_client()
    try:
        repo = PrismicPostsRepo(client)
        generator = SiteGenerator(
            FeedLoader(repo), PostResolver(repo, corpus=CorpusCache(repo))
        )
        result = await generator.generate(ref=ref)
    finally:
        await client.aclose()

    (out_dir / "post").mkdir(parents=True, exist_ok=True)
    (out_dir / "index.json").write_text(result.home.model_dump_json(indent=2))
    failures = dict(result.failures)
    for uid, post in result.posts.items():
        if not SAFE_UID.fullmatch(uid):
            failures[uid] = "uid is not a safe file name"
            continue
        (out_dir / "post" / f"{uid}.json").write_text(post.model_dump_json(indent=2))

    for uid, reason in failures.items():
        logger.error(f"Post {uid} was not generated: {reason}")
    return 1 if failures else 0


if __name__ == "__main__":
    arg_parser = argparse.ArgumentParser(description="Pre-render blog pages to JSON")
    arg_parser.add_argument("--out", default="out", help="output directory")
    arg_parser.add_argument("--ref", default=None, help="content version to render")
    args = arg_parser.parse_args()

    try:
        raise SystemExit(asyncio.run(run(Path(args.out), args.ref)))
    except Exception as e:
        logger.error(f"Generation failed: {e}", exc_info=True)
        raise SystemExit(2)
