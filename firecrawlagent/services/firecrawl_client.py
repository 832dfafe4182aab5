from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import requests

from firecrawlagent.config import FirecrawlConfig
from firecrawlagent.errors import ConfigurationError, RemoteServiceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemoteScrapeResult:
    """Scrape payload as reported by Firecrawl; any field may be absent."""

    success: bool
    markdown: str | None = None
    links: list[str] | None = None
    error: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RemoteSearchResult:
    success: bool
    data: list[dict[str, Any]] | None = None
    error: str | None = None


class FirecrawlClient:
    def __init__(self, cfg: FirecrawlConfig) -> None:
        self._cfg = cfg
        self._api_key = (cfg.api_key or "").strip() or None
        self._base_url = (cfg.api_base_url or "").strip().rstrip("/")
        self._timeout_seconds = max(1, int(cfg.timeout_seconds))

    @property
    def is_configured(self) -> bool:
        return self._cfg.has_credential

    def scrape(self, url: str, formats: list[str]) -> RemoteScrapeResult:
        payload = self._post("/v1/scrape", {"url": url, "formats": list(formats)})
        return parse_scrape_payload(payload)

    def search(self, query: str) -> RemoteSearchResult:
        payload = self._post("/v1/search", {"query": query})
        return parse_search_payload(payload)

    def _post(self, path: str, body: dict[str, Any]) -> Any:
        if self._api_key is None:
            raise ConfigurationError(
                "FIRECRAWL_API_KEY is not configured; Firecrawl tools are unavailable."
            )
        try:
            response = requests.post(
                f"{self._base_url}{path}",
                headers=self._headers(),
                json=body,
                timeout=self._timeout_seconds,
            )
        except requests.Timeout as exc:
            raise RemoteServiceError(
                f"Firecrawl request to {path} timed out after {self._timeout_seconds}s"
            ) from exc
        except requests.RequestException as exc:
            raise RemoteServiceError(f"Firecrawl request to {path} failed: {exc}") from exc

        if response.status_code in {401, 403}:
            raise RemoteServiceError(
                f"Firecrawl authentication failed ({response.status_code}): "
                f"{_error_message(response)}"
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise RemoteServiceError(
                f"Firecrawl returned a non-JSON response ({response.status_code})."
            ) from exc
        if not response.ok and not isinstance(payload, dict):
            raise RemoteServiceError(
                f"Firecrawl request failed ({response.status_code}): {_error_message(response)}"
            )
        return payload

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }


def parse_scrape_payload(payload: Any) -> RemoteScrapeResult:
    if not isinstance(payload, dict):
        return RemoteScrapeResult(success=False, error="Unexpected scrape payload shape.")
    # v1 nests page content under "data"; older shapes are flat.
    data = payload.get("data")
    body = data if isinstance(data, dict) else payload
    markdown = body.get("markdown")
    links = body.get("links")
    error = payload.get("error")
    return RemoteScrapeResult(
        success=bool(payload.get("success")),
        markdown=markdown if isinstance(markdown, str) else None,
        links=[str(link) for link in links] if isinstance(links, list) else None,
        error=str(error) if error else None,
        extra={
            key: value
            for key, value in body.items()
            if key not in {"markdown", "links", "success", "error"}
        },
    )


def parse_search_payload(payload: Any) -> RemoteSearchResult:
    if not isinstance(payload, dict):
        return RemoteSearchResult(success=False, error="Unexpected search payload shape.")
    data = payload.get("data")
    error = payload.get("error")
    return RemoteSearchResult(
        success=bool(payload.get("success")),
        data=data if isinstance(data, list) else None,
        error=str(error) if error else None,
    )


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return (response.text or "").strip()[:500]
    if isinstance(payload, dict):
        error = payload.get("error") or payload.get("message")
        if error:
            return str(error)
    return str(payload)[:500]
