"""HTTP transport for geocoding requests."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import aiohttp

from pygeocode._constants import USER_AGENT
from pygeocode._redact import redact_url
from pygeocode.exceptions import GeocodeTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the client.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get(self, url: str) -> bytes:
        ...


class HttpTransport:
    """aiohttp-backed transport: send a GET, return the body bytes."""

    def __init__(self, http_session: aiohttp.ClientSession, *, timeout: float | None = None) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout) if timeout is not None else None

    async def get(self, url: str) -> bytes:
        safe_url = redact_url(url)
        _logger.debug("GET %s", safe_url)

        kwargs: dict[str, Any] = {"headers": {"user-agent": USER_AGENT}}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout

        try:
            async with self._http.get(url, **kwargs) as resp:
                body = await resp.read()
                if resp.status != 200:
                    raise GeocodeTransportError(
                        f"HTTP {resp.status} from {safe_url}: {body[:200]!r}",
                        status_code=resp.status,
                        url=safe_url,
                    )
        except GeocodeTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise GeocodeTransportError(
                f"Request to {safe_url} failed: {exc!r}",
                url=safe_url,
            ) from exc

        return body
