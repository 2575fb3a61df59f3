"""HTTP fetch capability used by the http action executor.

The executor only needs "send this request, give me status and body text",
so it depends on the small ``HttpFetcher`` protocol. ``HttpxFetcher`` is the
production implementation; tests pass a fake or an ``httpx.MockTransport``.
"""

import logging
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)


@dataclass
class HttpResponse:
    """Status and raw body of a completed request."""

    status: int
    text: str
    headers: dict[str, str] = field(default_factory=dict)


@runtime_checkable
class HttpFetcher(Protocol):
    """Anything that can perform one HTTP request."""

    async def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        content: str | None = None,
    ) -> HttpResponse: ...


class HttpxFetcher:
    """
    ``HttpFetcher`` backed by ``httpx.AsyncClient``.

    Args:
        timeout: Per-request deadline in seconds
        client: Pre-built client (e.g. with a MockTransport). When omitted a
            short-lived client is opened per request.
    """

    def __init__(self, timeout: float = 30.0, client: httpx.AsyncClient | None = None):
        self.timeout = timeout
        self._client = client

    async def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        content: str | None = None,
    ) -> HttpResponse:
        if self._client is not None:
            response = await self._client.request(
                method, url, headers=headers, content=content, timeout=self.timeout
            )
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(method, url, headers=headers, content=content)

        logger.debug(
            f"{method} {url} -> {response.status_code}",
            extra={"status_code": response.status_code},
        )
        return HttpResponse(
            status=response.status_code,
            text=response.text,
            headers=dict(response.headers),
        )
