"""
HTTP-backed module lookup against an asset server.

The host URL takes the place of the prerequisite root: the server already
serves the webapps directory, so modules are requested as

    GET /<Short>/<Short>.js           (concatenated build)
    GET /<relative path>.js           (individual build)

There is no separate existence check: the GET that succeeds is the fetch.
A ``404`` means "not deployed this way, try the next candidate"; any other
non-``200`` status is a server problem and raises `TransportFailure`.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError

from ..errors import InvalidConfiguration, ModuleNotFound, TransportFailure
from ..resolution.locator import candidate_paths
from ..schemas import HostConfig, ModuleResponse
from .base import ModuleBackend
from .capabilities import HttpRequester, HttpResponse, HttpxRequester

logger = logging.getLogger(__name__)

HTTP_OK = 200
HTTP_NOT_FOUND = 404

_HOST_URL_RE = re.compile(r"(https?)://([^/:]+):(\d+)/?")


def parse_host_url(host_url: str) -> HostConfig:
    """
    Split ``scheme://host:port`` into a `HostConfig`.

    >>> parse_host_url("http://localhost:8176").port
    8176
    """
    match = _HOST_URL_RE.fullmatch(host_url.strip())
    if not match:
        raise InvalidConfiguration(host_url)
    try:
        return HostConfig(
            use_tls=match.group(1) == "https",
            host_name=match.group(2),
            port=int(match.group(3)),
        )
    except ValidationError as exc:
        raise InvalidConfiguration(host_url) from exc


def _join_url(*parts: str) -> str:
    return "/".join(part.strip("/") for part in parts if part)


class WebBackend(ModuleBackend):
    """
    Resolves DS module identifiers to URLs on one or more asset servers.

    Usually configured with a single host:

        backend = WebBackend().set_host_url("http://localhost:8176")
        data = await backend.get_module("DS/GEOCommonClient/Services/ServiceBase")
    """

    def __init__(
        self,
        config: Optional[HostConfig] = None,
        requester: Optional[HttpRequester] = None,
    ) -> None:
        super().__init__()
        self._hosts: Dict[str, HostConfig] = {}
        if config is not None:
            self._set_hosts({config.base_url: config})
        # Public so callers can swap transports mid-session.
        self.requester: HttpRequester = requester or HttpxRequester()

    def _set_hosts(self, hosts: Dict[str, HostConfig]) -> None:
        self._hosts = hosts
        self._asset_roots = {url: host.base_url for url, host in hosts.items()}

    @property
    def config(self) -> HostConfig:
        """Settings of the primary (first configured) host."""
        for host in self._hosts.values():
            return host
        return HostConfig()

    @property
    def host_name(self) -> str:
        return self.config.host_name

    @property
    def port(self) -> int:
        return self.config.port

    @property
    def is_https(self) -> bool:
        return self.config.use_tls

    def update_config(self, key: str, value: Any) -> "WebBackend":
        """
        Change one setting of the primary host (`use_tls`, `host_name` or
        `port`). Setting the host URL normally covers all three.
        """
        if key not in HostConfig.model_fields:
            raise InvalidConfiguration(key, reason="Unknown host setting")
        try:
            updated = HostConfig(**{**self.config.model_dump(), key: value})
        except ValidationError as exc:
            raise InvalidConfiguration(str(value), reason=f"Invalid {key}") from exc
        if not updated.host_name:
            raise InvalidConfiguration(key, reason="No host name configured for")

        hosts = list(self._hosts.values())
        self._set_hosts(
            {host.base_url: host for host in [updated] + hosts[1:]}
        )
        return self

    def set_host_url(self, host_url: str) -> "WebBackend":
        """Point the backend at a single server, e.g. ``http://localhost:8176``."""
        self._set_hosts({host_url: parse_host_url(host_url)})
        logger.debug("Host set to %s", host_url)
        return self

    async def configure_roots(self, roots: Sequence[str]) -> Dict[str, str]:
        """
        Configure the host URLs to search, in priority order.

        All URLs are validated before anything is applied.
        """
        hosts = {url: parse_host_url(url) for url in roots}
        self._set_hosts(hosts)
        logger.debug("Configured hosts: %s", list(hosts))
        return self.asset_roots

    def _hosts_for(self, roots: Optional[Sequence[str]]) -> List[HostConfig]:
        if roots is None:
            return list(self._hosts.values())
        return [parse_host_url(url) for url in self._search_roots(roots)]

    async def _request(self, host: HostConfig, path: str) -> HttpResponse:
        response = await self.requester.get(host.host_name, host.port, "/" + path, host.use_tls)
        if response.status_code not in (HTTP_OK, HTTP_NOT_FOUND):
            logger.error("GET %s returned HTTP %s", response.url, response.status_code)
            raise TransportFailure(response.url, response.status_code)
        return response

    async def _fetch(
        self, module_id: str, roots: Optional[Sequence[str]] = None
    ) -> Optional[ModuleResponse]:
        for host in self._hosts_for(roots):
            for candidate in candidate_paths(module_id, "", _join_url):
                response = await self._request(host, candidate.path)
                logger.debug(
                    "%s %s candidate %s: HTTP %s",
                    module_id,
                    candidate.tier.value,
                    response.url,
                    response.status_code,
                )
                if response.status_code == HTTP_OK:
                    return ModuleResponse(content=response.body, location=response.url)
        return None

    async def locate_module(self, module_id: str, roots: Optional[Sequence[str]] = None) -> str:
        """
        Find the URL serving `module_id`.

        This has to download the module to know; prefer `get_module`, which
        returns the URL together with the content.
        """
        result = await self._fetch(module_id, roots)
        return result.location if result else ""

    async def get_module(
        self, module_id: str, roots: Optional[Sequence[str]] = None
    ) -> ModuleResponse:
        result = await self._fetch(module_id, roots)
        if result is None:
            logger.info("Module %s not found", module_id)
            raise ModuleNotFound(module_id)
        return result
