from __future__ import annotations

import logging

import httpx
from app.services.catalog.types import CatalogPage
from app.services.errors import UpstreamError

logger = logging.getLogger(__name__)


class ImdbApiProvider:
    """Search against imdbapi.dev (`GET /search/titles`)."""

    name = "imdbapi"

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 15.0,
        user_agent: str = "Moovy/0.1",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent
        self._transport = transport

    async def search_page(
        self,
        *,
        query: str,
        page_token: str | None = None,
        page_size: int | None = None,
    ) -> CatalogPage:
        params: dict[str, str | int] = {"query": query}
        if page_size:
            params["pageSize"] = page_size
        if page_token:
            params["pageToken"] = page_token

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent},
                transport=self._transport,
            ) as client:
                res = await client.get("/search/titles", params=params)
                res.raise_for_status()
                data = res.json()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(
                f"Catalog search failed with status {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Catalog search unreachable: {exc}") from exc
        except ValueError as exc:
            raise UpstreamError("Catalog returned an invalid response") from exc

        if not isinstance(data, dict):
            raise UpstreamError("Catalog returned an invalid response")

        titles = data.get("titles") or []
        if not isinstance(titles, list):
            titles = []
        logger.debug("catalog page", extra={"query": query, "count": len(titles)})
        return CatalogPage(
            titles=[t for t in titles if isinstance(t, dict)],
            next_page_token=data.get("nextPageToken") or None,
        )
