"""
Bubble Data API transport client.

Async httpx client with:
- Bearer token authentication
- Per-instance rate limiting (minimum spacing between requests)
- Retry with exponential backoff on 5xx responses
- Response envelope unwrapping ({"response": ...})
- Typed errors: ApiError for HTTP failures, NetworkError for no response
"""

import asyncio
import logging
import time
from typing import Any

import httpx

from core.config import (
    BUBBLE_API_TOKEN,
    BUBBLE_API_URL,
    BUBBLE_MAX_RETRIES,
    BUBBLE_MIN_REQUEST_INTERVAL_MS,
    BUBBLE_RETRY_DELAY_MS,
    BUBBLE_TIMEOUT_SECONDS,
)
from core.errors import ApiError, NetworkError, ValidationError

logger = logging.getLogger(__name__)

BODYLESS_METHODS = {"GET", "DELETE"}


class RateLimiter:
    """
    Enforces a minimum interval between requests issued by one client.

    The only state is next_slot, owned by this instance, so separate clients
    never wait on each other. Each caller reserves its slot before sleeping,
    which serializes concurrent coroutines on one event loop. A multi-threaded
    host would have to guard next_slot with a lock.
    """

    def __init__(self, min_interval_ms: float = 500):
        self.min_interval = min_interval_ms / 1000
        self.next_slot = 0.0

    async def wait_for_slot(self) -> None:
        now = time.monotonic()
        slot = max(now, self.next_slot)
        self.next_slot = slot + self.min_interval
        if slot > now:
            await asyncio.sleep(slot - now)


class BubbleClient:
    """
    Client for one Bubble app; every instance has its own rate limiter.

    Requests carry ``Authorization: Bearer <token>`` while a token is set.
    After clear_auth_token (or with no BUBBLE_API_TOKEN) requests go out
    without the header, so public data types stay readable and privacy
    rules on the store side reject the rest with a 401.
    """

    def __init__(
        self,
        base_url: str = BUBBLE_API_URL,
        token: str = BUBBLE_API_TOKEN,
        min_request_interval_ms: float = BUBBLE_MIN_REQUEST_INTERVAL_MS,
        max_retries: int = BUBBLE_MAX_RETRIES,
        retry_delay_ms: float = BUBBLE_RETRY_DELAY_MS,
        timeout: float = BUBBLE_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.max_retries = max_retries
        self.retry_delay_ms = retry_delay_ms
        self.rate_limiter = RateLimiter(min_request_interval_ms)
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> "BubbleClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def set_auth_token(self, token: str) -> None:
        """Set or replace the bearer token (e.g. after login)."""
        self.token = token

    def clear_auth_token(self) -> None:
        self.token = ""

    # -------------------------------------------------------------------------
    # Public verbs
    # -------------------------------------------------------------------------

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, body: Any = None) -> Any:
        return await self.request("POST", path, body=body)

    async def patch(self, path: str, body: Any = None) -> Any:
        return await self.request("PATCH", path, body=body)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    # -------------------------------------------------------------------------
    # Core request loop
    # -------------------------------------------------------------------------

    def _headers(self, has_body: bool) -> dict[str, str]:
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
        unwrap: bool = True,
    ) -> Any:
        """
        Send a request, retrying 5xx responses with exponential backoff.

        Args:
            method: HTTP verb
            path: path relative to base_url, e.g. "/obj/project"
            body: JSON body (ignored for GET/DELETE)
            params: query string parameters
            unwrap: return payload["response"] when present

        Raises:
            ApiError: 4xx response, or 5xx after retries are exhausted
            NetworkError: no HTTP response at all
            ValidationError: 2xx response whose body is not JSON
        """
        method = method.upper()
        has_body = body is not None and method not in BODYLESS_METHODS
        attempt = 0

        while True:
            await self.rate_limiter.wait_for_slot()
            logger.debug("%s %s (attempt %d)", method, path, attempt + 1)

            try:
                response = await self._http.request(
                    method,
                    path,
                    params=params,
                    json=body if has_body else None,
                    headers=self._headers(has_body),
                )
            except httpx.TransportError as e:
                logger.error("Network error on %s %s: %s", method, path, e)
                raise NetworkError(f"Network request failed: {method} {path}", e) from e

            if response.is_success:
                return self._parse_success(response, unwrap)

            if response.status_code >= 500 and attempt < self.max_retries:
                delay_ms = self.retry_delay_ms * (2**attempt)
                logger.warning(
                    "%s %s returned %d. Retry %d/%d in %dms",
                    method,
                    path,
                    response.status_code,
                    attempt + 1,
                    self.max_retries,
                    delay_ms,
                )
                await asyncio.sleep(delay_ms / 1000)
                attempt += 1
                continue

            if response.status_code >= 500:
                logger.error("%s %s failed after %d attempts", method, path, attempt + 1)
            raise self._api_error(response)

    @staticmethod
    def _parse_success(response: httpx.Response, unwrap: bool) -> Any:
        if not response.content:
            return None
        try:
            payload = response.json()
        except ValueError as e:
            raise ValidationError(
                "Response body is not valid JSON",
                [f"status {response.status_code}: {response.text[:200]}"],
            ) from e
        if unwrap and isinstance(payload, dict) and "response" in payload:
            return payload["response"]
        return payload

    @staticmethod
    def _api_error(response: httpx.Response) -> ApiError:
        try:
            body = response.json()
        except ValueError:
            body = response.text or None

        if isinstance(body, dict) and body.get("message"):
            message = str(body["message"])
        else:
            message = f"HTTP {response.status_code} error"
        return ApiError(message, response.status_code, body)


_bubble_client: BubbleClient | None = None


def get_bubble_client() -> BubbleClient:
    """Get or create the default client (lazy initialization from config)."""
    global _bubble_client
    if _bubble_client is None:
        _bubble_client = BubbleClient()
    return _bubble_client


async def reset_bubble_client() -> None:
    """Close and drop the default client."""
    global _bubble_client
    if _bubble_client is not None:
        await _bubble_client.aclose()
        _bubble_client = None
