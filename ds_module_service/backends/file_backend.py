"""
Filesystem-backed module lookup.

Each prerequisite root is expected to contain a webapps directory:

    <prerequisite>/win_b64/webapps      or
    <prerequisite>/linux_a64/webapps

and modules are looked up inside it as

    <webapps>/<Short>/<Short>.js              (concatenated build)
    <webapps>/<relative path>.js              (individual build)
"""

from __future__ import annotations

import logging
import ntpath
import posixpath
from pathlib import PurePath, PureWindowsPath
from typing import Dict, Optional, Sequence, Type

from ..errors import ModuleNotFound
from ..resolution.locator import locate
from ..resolution.roots import ResolvedRoot, resolve_asset_root, resolve_asset_roots
from ..schemas import ModuleResponse
from .base import ModuleBackend
from .capabilities import FileProber, LocalFileProber

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


class FileBackend(ModuleBackend):
    """
    Resolves DS module identifiers to files under prerequisite roots.

    `path_type` controls how paths are joined: the host flavour by default, or
    `pathlib.PureWindowsPath` when resolving Windows deployment trees
    (``D:\\Local``, ``\\\\srv\\BSF``) from another OS.
    """

    def __init__(
        self,
        prober: Optional[FileProber] = None,
        path_type: Type[PurePath] = PurePath,
    ) -> None:
        super().__init__()
        # Public so callers can swap probing mid-session.
        self.prober: FileProber = prober or LocalFileProber()
        self._path_type = path_type
        # PurePath() instantiates the host flavour.
        self._pathmod = ntpath if isinstance(path_type(), PureWindowsPath) else posixpath

    def _join(self, *parts: str) -> str:
        return str(self._path_type(*parts))

    async def _exists(self, path: str) -> bool:
        return await self.prober.exists(path)

    async def resolve_asset_root(self, prerequisite_root: str) -> ResolvedRoot:
        """Find the webapps directory of a single prerequisite root."""
        return await resolve_asset_root(prerequisite_root, self._exists, self._join)

    async def configure_roots(self, roots: Sequence[str]) -> Dict[str, str]:
        """
        Set the prerequisite roots, resolving all their webapps directories
        concurrently, and return the new mapping.
        """
        logger.debug("Configuring prerequisites: %s", list(roots))
        self._asset_roots = await resolve_asset_roots(roots, self._exists, self._join)
        return self.asset_roots

    async def locate_in_asset_root(self, module_id: str, asset_root: str) -> str:
        """
        Look for `module_id` in one webapps directory; ``""`` if absent.

        Identifiers that would resolve outside the directory are never found.
        """
        return await locate(module_id, asset_root, self._exists, self._join, self._pathmod)

    async def locate_module(self, module_id: str, roots: Optional[Sequence[str]] = None) -> str:
        for asset_root in self._search_roots(roots):
            location = await self.locate_in_asset_root(module_id, asset_root)
            if location:
                return location
        return ""

    async def get_module(
        self, module_id: str, roots: Optional[Sequence[str]] = None
    ) -> ModuleResponse:
        location = await self.locate_module(module_id, roots)
        if not location:
            logger.info("Module %s not found", module_id)
            raise ModuleNotFound(module_id)

        content = await self.prober.read_text(location, ENCODING)
        return ModuleResponse(content=content, location=location)
