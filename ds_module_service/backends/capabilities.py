"""
I/O capabilities injected into the backends.

- `FileProber`: existence check + text read for the filesystem backend.
- `HttpRequester`: a single GET for the web backend.

The defaults (`LocalFileProber`, `HttpxRequester`) do real I/O; tests swap
in fakes without touching the resolution code.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Union

import httpx

from ..errors import TransportFailure

logger = logging.getLogger(__name__)


@dataclass
class HttpResponse:
    status_code: int
    body: str
    url: str


class FileProber(Protocol):
    async def exists(self, path: str) -> bool: ...

    async def read_text(self, path: str, encoding: str) -> str: ...


class HttpRequester(Protocol):
    async def get(self, host: str, port: int, path: str, use_tls: bool) -> HttpResponse: ...


class LocalFileProber:
    """Filesystem prober running blocking calls in worker threads."""

    async def exists(self, path: str) -> bool:
        # os.path.exists returns False for missing paths and never raises.
        return await asyncio.to_thread(os.path.exists, path)

    async def read_text(self, path: str, encoding: str) -> str:
        return await asyncio.to_thread(Path(path).read_text, encoding=encoding)


def build_url(host: str, port: int, path: str, use_tls: bool) -> str:
    scheme = "https" if use_tls else "http"
    return f"{scheme}://{host}:{port}{path}"


class HttpxRequester:
    """
    `HttpRequester` backed by `httpx.AsyncClient`.

    Any status code is returned as-is; interpreting it is the backend's job.
    Network-level errors are raised as `TransportFailure`.

    Pass `client` to reuse a connection pool (or a mock transport); its own
    timeout settings then apply. Otherwise a short-lived client is opened per
    request with `timeout` (None waits indefinitely).
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Union[float, httpx.Timeout, None] = None,
    ) -> None:
        # Public so the app can attach a shared client for its lifetime.
        self.client = client
        self._timeout = timeout

    async def get(self, host: str, port: int, path: str, use_tls: bool) -> HttpResponse:
        url = build_url(host, port, path, use_tls)
        logger.debug("GET %s", url)
        try:
            if self.client is not None:
                response = await self.client.get(url)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(url)
        except httpx.HTTPError as exc:
            logger.error("GET %s failed: %s", url, exc)
            raise TransportFailure(url) from exc

        return HttpResponse(status_code=response.status_code, body=response.text, url=url)
