"""
Gist Relay — GitHub Gist Service Implementation
================================================

What:  Concrete GistService talking to GitHub over httpx.
Why:   Shared notebooks live as secret gists owned by the publishing bot.
How:   Two calls, each made exactly once per request:
         GET  {raw_base}/{GIST_OWNER}/{id}/raw      (unauthenticated)
         POST {api}/gists                           (Bearer GITHUB_TOKEN)
Who:   Built by the application factory from Settings; called by the routes.

Failure Policy:
    No retries and no circuit breaker. A failed fetch becomes NotFoundError,
    a failed create becomes GistServiceError. Both are contained to the
    request by the exception handlers in main.py.
"""

import logging
import time
from typing import Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError as PydanticValidationError

from gist_relay import __version__
from gist_relay.config import Settings
from gist_relay.exceptions import (
    ConfigurationError,
    GistServiceError,
    NotFoundError,
    SerializationError,
)
from gist_relay.middleware.request_id import request_id_var
from gist_relay.schemas.gist import (
    Gist,
    GistCreateRequest,
    GistFileContent,
    RawGist,
)
from gist_relay.services.gist_base import GistService

logger = logging.getLogger(__name__)

# ── Contract Constants ────────────────────────────────────────────────────
# Changing any of these breaks links to notebooks that were already shared.
GIST_OWNER = "percival-bot"
GIST_DESCRIPTION = "Code shared from a Percival notebook - https://percival.ink"
GIST_FILENAME = "notebook.percival"
GIST_PUBLIC = False

GITHUB_API_VERSION = "2022-11-28"

DOT_SEGMENTS = frozenset({".", ".."})


class GitHubGistService(GistService):
    """
    GitHub implementation of the gist provider.

    The credential is passed in at construction and only checked when a gist
    is created, so a server without GITHUB_TOKEN keeps serving reads.
    """

    def __init__(
        self,
        token: Optional[str],
        api_url: str = "https://api.github.com",
        raw_base_url: str = "https://gist.githubusercontent.com",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._token = token
        self.api_url = api_url.rstrip("/")
        self.raw_base_url = raw_base_url.rstrip("/")

        # One pooled client for the process; closed in aclose()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

        logger.info(
            "GitHubGistService initialized with owner=%s, api=%s, gist creation %s",
            GIST_OWNER,
            self.api_url,
            "enabled" if token else "disabled (GITHUB_TOKEN missing)",
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, client: Optional[httpx.AsyncClient] = None
    ) -> "GitHubGistService":
        return cls(
            token=settings.github_token,
            api_url=settings.github_api_url,
            raw_base_url=settings.gist_raw_base_url,
            timeout=settings.gist_timeout_seconds,
            client=client,
        )

    def raw_url(self, gist_id: str) -> str:
        """Canonical raw-content URL for a gist owned by GIST_OWNER."""
        # Escapes "/" and friends; "." and ".." are rejected in fetch_raw()
        return f"{self.raw_base_url}/{GIST_OWNER}/{quote(gist_id, safe='')}/raw"

    async def fetch_raw(self, gist_id: str) -> RawGist:
        rid = request_id_var.get("")

        # Dot segments are resolved by the URL parser and would escape GIST_OWNER
        if gist_id in DOT_SEGMENTS:
            logger.info("[%s] Refusing dot-segment gist id %r", rid, gist_id)
            raise NotFoundError(resource_id=gist_id, reason="dot_segment")

        url = self.raw_url(gist_id)
        start_time = time.perf_counter()

        try:
            response = await self._client.get(url, follow_redirects=True)
        except httpx.HTTPError as e:
            logger.warning(
                "[%s] Transport error fetching gist %s: %s (%s)",
                rid,
                gist_id,
                str(e),
                type(e).__name__,
            )
            raise NotFoundError(resource_id=gist_id, reason="transport_error")

        duration_ms = (time.perf_counter() - start_time) * 1000

        if response.status_code != httpx.codes.OK:
            logger.info(
                "[%s] Gist %s not available upstream: HTTP %d in %.0fms",
                rid,
                gist_id,
                response.status_code,
                duration_ms,
            )
            raise NotFoundError(
                resource_id=gist_id,
                reason="upstream_status",
                context={"upstream_status": response.status_code},
            )

        logger.info(
            "[%s] Fetched gist %s (%d bytes) in %.0fms",
            rid,
            gist_id,
            len(response.content),
            duration_ms,
        )
        return RawGist(
            content=response.content,
            media_type=response.headers.get("content-type"),
        )

    def _resolve_token(self) -> str:
        if not self._token:
            raise ConfigurationError(
                message="Sharing notebooks is not configured on this server.",
                context={"missing": "GITHUB_TOKEN"},
            )
        return self._token

    def _headers(self, token: str) -> dict:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {token}",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
            "User-Agent": f"gist-relay/{__version__}",
        }

    async def create_gist(self, content: str) -> Gist:
        rid = request_id_var.get("")

        # Resolve the credential first: without it nothing is sent upstream
        token = self._resolve_token()

        payload = GistCreateRequest(
            description=GIST_DESCRIPTION,
            public=GIST_PUBLIC,
            files={GIST_FILENAME: GistFileContent(content=content)},
        )

        start_time = time.perf_counter()
        try:
            response = await self._client.post(
                f"{self.api_url}/gists",
                json=payload.model_dump(),
                headers=self._headers(token),
            )
        except httpx.HTTPError as e:
            logger.error(
                "[%s] Transport error creating gist: %s (%s)",
                rid,
                str(e),
                type(e).__name__,
            )
            raise GistServiceError(
                message="Could not reach GitHub to create the gist.",
                context={"error_type": type(e).__name__},
            )

        duration_ms = (time.perf_counter() - start_time) * 1000

        if not response.is_success:
            logger.error(
                "[%s] GitHub rejected gist creation: HTTP %d in %.0fms: %s",
                rid,
                response.status_code,
                duration_ms,
                _upstream_message(response),
            )
            raise GistServiceError(
                message="GitHub failed to create the gist.",
                status_code=response.status_code,
            )

        try:
            gist = Gist.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            logger.error(
                "[%s] Could not decode created gist: %s",
                rid,
                str(e),
                exc_info=True,
            )
            raise SerializationError(context={"error_type": type(e).__name__})

        logger.info(
            "[%s] Created gist %s (%d chars) in %.0fms",
            rid,
            gist.id,
            len(content),
            duration_ms,
        )
        return gist

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def _upstream_message(response: httpx.Response) -> str:
    """GitHub error bodies carry a `message` field; fall back to raw text."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict) and "message" in body:
        return str(body["message"])
    return response.text[:200]
