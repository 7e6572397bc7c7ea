import logging
import time
from typing import Callable, Iterable, Optional

import httpx

from app.errors import ContentUnavailable, PostNotFound
from app.settings import Settings, settings

logger = logging.getLogger(__name__)


def at(path: str, value: str) -> str:
    """Render an equality predicate in the repository query syntax."""
    return f'[at({path}, "{value}")]'


def _build_query(predicates: Iterable[str]) -> str:
    return "[" + "".join(predicates) + "]"


class ContentClient:
    """
    Async client for the headless content repository.
    Every failure on the wire surfaces as ContentUnavailable.
    """

    def __init__(
        self,
        api_url: str,
        access_token: str = "",
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
        master_ref_ttl: float = 5.0,
    ):
        self.api_url = api_url.rstrip("/")
        self.access_token = access_token
        self.http = http_client or httpx.AsyncClient(timeout=timeout)
        self.master_ref_ttl = master_ref_ttl
        self._master_ref: Optional[str] = None
        self._master_ref_at = 0.0

    async def aclose(self) -> None:
        await self.http.aclose()

    async def get_master_ref(self) -> str:
        """Current published ref; re-read once it is older than master_ref_ttl."""
        now = time.monotonic()
        if self._master_ref and now - self._master_ref_at < self.master_ref_ttl:
            return self._master_ref

        payload = await self._get_json(self.api_url, self._auth_params())
        for ref in payload.get("refs", []):
            if ref.get("isMasterRef"):
                self._master_ref = ref["ref"]
                self._master_ref_at = now
                return self._master_ref
        raise ContentUnavailable("Repository did not advertise a master ref")

    async def query(
        self,
        document_type: str,
        predicates: Optional[Iterable[str]] = None,
        *,
        page_size: Optional[int] = None,
        page: int = 1,
        ref: Optional[str] = None,
    ) -> dict:
        """
        Query documents of one type.
        Returns the raw search response; ``results`` and ``next_page`` are
        the fields callers rely on.
        """
        all_predicates = [at("document.type", document_type), *(predicates or [])]
        params = {
            **self._auth_params(),
            "ref": ref or await self.get_master_ref(),
            "q": _build_query(all_predicates),
            "page": page,
        }
        if page_size is not None:
            params["pageSize"] = page_size

        logger.debug(f"Querying {document_type} page {page} (ref={params['ref']})")
        return _check_search_response(
            await self._get_json(f"{self.api_url}/documents/search", params)
        )

    async def get_by_uid(
        self, document_type: str, uid: str, ref: Optional[str] = None
    ) -> dict:
        response = await self.query(
            document_type,
            [at(f"my.{document_type}.uid", uid)],
            page_size=1,
            ref=ref,
        )
        if not response["results"]:
            raise PostNotFound(uid)
        return response["results"][0]

    async def fetch_page(self, url: str) -> dict:
        """Follow a ``next_page`` cursor exactly as the repository issued it."""
        return _check_search_response(await self._get_json(url))

    async def resolve_preview_url(
        self,
        token: str,
        document_id: str,
        link_resolver: Callable[[dict], str],
        default_url: str = "/",
    ) -> str:
        """Find where a previewed document lives, using the preview token as ref."""
        params = {
            **self._auth_params(),
            "ref": token,
            "q": _build_query([at("document.id", document_id)]),
            "pageSize": 1,
        }
        response = _check_search_response(
            await self._get_json(f"{self.api_url}/documents/search", params)
        )
        if not response["results"]:
            logger.info(f"Preview document {document_id} not found, using default")
            return default_url
        return link_resolver(response["results"][0])

    def _auth_params(self) -> dict:
        return {"access_token": self.access_token} if self.access_token else {}

    async def _get_json(self, url: str, params: Optional[dict] = None) -> dict:
        try:
            response = await self.http.get(url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Content request to {url} failed: {e}")
            raise ContentUnavailable(str(e)) from e
        except ValueError as e:
            logger.error(f"Content response from {url} is not JSON: {e}")
            raise ContentUnavailable("Malformed response from repository") from e

        if not isinstance(payload, dict):
            raise ContentUnavailable("Unexpected response shape from repository")
        return payload


def _check_search_response(payload: dict) -> dict:
    if not isinstance(payload.get("results"), list):
        raise ContentUnavailable("Search response has no results list")
    payload.setdefault("next_page", None)
    return payload


def create_content_client(
    current_settings: Settings = settings,
    http_client: Optional[httpx.AsyncClient] = None,
) -> ContentClient:
    """
    Build a client from settings.
    Called at startup to avoid import-time connections.
    """
    return ContentClient(
        api_url=current_settings.CMS_API_URL,
        access_token=current_settings.CMS_ACCESS_TOKEN,
        http_client=http_client,
        timeout=current_settings.HTTP_TIMEOUT_SECONDS,
        master_ref_ttl=current_settings.MASTER_REF_TTL_SECONDS,
    )
