import asyncio
import logging
from typing import Optional

import aiohttp
from pydantic import ValidationError

from ogp_verify.core.config import config
from ogp_verify.core.errors import MalformedResponse, RemoteError, TransportError
from ogp_verify.core.models import HealthStatus, VerificationRequest, VerificationResponse

logger = logging.getLogger(__name__)


class VerificationClient:
    """
    Transport adapter for the OGP verification endpoint.

    Turns a VerificationRequest into a VerificationResponse or raises one of
    TransportError, RemoteError or MalformedResponse. Each call issues exactly
    one request; nothing is retried or cached.

    The underlying aiohttp session is created on first use and reused for the
    lifetime of the client. A session passed in by the caller is used as is
    and left open on close().
    """

    VERIFY_PATH = "/api/v1/ogp/verify"
    HEALTH_PATH = "/health"

    def __init__(self, base_url: Optional[str] = None, session: Optional[aiohttp.ClientSession] = None):
        self.base_url = (base_url or config.API_BASE_URL).rstrip("/")
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "VerificationClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Release the aiohttp session if this client created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _request(self, method: str, path: str, **kwargs) -> str:
        url = f"{self.base_url}{path}"
        try:
            async with self._get_session().request(method, url, **kwargs) as response:
                body = await response.text(errors="replace")
                if not 200 <= response.status < 300:
                    logger.warning(f"{method} {url} failed with status {response.status}")
                    raise RemoteError(response.status, body)
                return body
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            logger.warning(f"{method} {url} failed: {e!r}")
            raise TransportError(e) from e

    async def call(self, request: VerificationRequest) -> VerificationResponse:
        """Submit one verification request and parse the reply."""
        body = await self._request(
            "POST",
            self.VERIFY_PATH,
            data=request.model_dump_json(),
            headers={"Content-Type": "application/json"},
        )
        try:
            return VerificationResponse.model_validate_json(body)
        except ValidationError as e:
            raise MalformedResponse(str(e), body) from e

    async def health(self) -> HealthStatus:
        """Query the service health endpoint."""
        body = await self._request("GET", self.HEALTH_PATH)
        try:
            return HealthStatus.model_validate_json(body)
        except ValidationError as e:
            raise MalformedResponse(str(e), body) from e
