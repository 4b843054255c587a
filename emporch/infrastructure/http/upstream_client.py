"""Concrete implementation of the EmployeeGateway interface over HTTP.

Wraps a single long-lived httpx.AsyncClient. Each method performs exactly
one round trip and either returns the decoded envelope or raises
UpstreamTransportError; interpretation and retries happen elsewhere.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from emporch.domain.errors import UpstreamTransportError
from emporch.domain.interfaces.employee_gateway import EmployeeGateway
from emporch.domain.models.common import EmployeeId, EmployeeName
from emporch.domain.models.employee import UpstreamEnvelope

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8112/api/v1/employee"
DEFAULT_TIMEOUT_S = 10.0


class UpstreamClient(EmployeeGateway):
    """httpx implementation of the upstream employee service gateway."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initializes the upstream client.

        Args:
            base_url: Root URL of the upstream employee resource.
            timeout_s: Per-request timeout in seconds.
            transport: Optional httpx transport (e.g. httpx.MockTransport in tests).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        logger.info(f"UpstreamClient initialized for: {self.base_url}")

    @property
    def client(self) -> httpx.AsyncClient:
        # Created on first use so it binds to the running event loop.
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout_s),
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("UpstreamClient connection closed.")

    async def __aenter__(self) -> "UpstreamClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # --- Endpoints ---

    async def read_all(self) -> UpstreamEnvelope:
        return await self._send("GET", self.base_url)

    async def read_one(self, employee_id: EmployeeId) -> UpstreamEnvelope:
        return await self._send("GET", self._url_for(employee_id))

    async def create(self, payload: Dict[str, Any]) -> UpstreamEnvelope:
        return await self._send("POST", self.base_url, json=payload)

    async def delete_by_name(self, name: EmployeeName) -> UpstreamEnvelope:
        return await self._send("DELETE", self._url_for(name), json={"name": name})

    # --- Helpers ---

    def _url_for(self, segment: str) -> str:
        return f"{self.base_url}/{quote(segment, safe='')}"

    async def _send(self, method: str, url: str, json: Optional[Dict[str, Any]] = None) -> UpstreamEnvelope:
        logger.debug(f"Upstream request: {method} {url}")
        try:
            response = await self.client.request(method, url, json=json)
        except httpx.TimeoutException as e:
            logger.warning(f"Upstream request timed out: {method} {url}")
            raise UpstreamTransportError(None, f"timeout: {e}") from e
        except httpx.RequestError as e:
            logger.warning(f"Upstream request failed: {method} {url}: {type(e).__name__}")
            raise UpstreamTransportError(None, f"{type(e).__name__}: {e}") from e

        logger.debug(f"Upstream response: {method} {url} -> {response.status_code}")
        if not response.is_success:
            raise UpstreamTransportError(response.status_code, response.text)

        if not response.content:
            return UpstreamEnvelope()
        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamTransportError(response.status_code, response.text) from e
        if not isinstance(payload, dict):
            raise UpstreamTransportError(response.status_code, response.text)
        return UpstreamEnvelope.from_json(payload)
