"""
Common multi-root search shared by the file and web backends.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from ..schemas import ModuleResponse

logger = logging.getLogger(__name__)


class ModuleBackend(ABC):
    """
    Ordered search for a module across a set of roots.

    `configure_roots` resolves and caches the roots once per session; lookups
    then walk the cached asset roots in configuration order and stop at the
    first hit. A lookup may pass its own `roots`, which are taken as already
    resolved and bypass the cache for that call only.
    """

    def __init__(self) -> None:
        self._asset_roots: Dict[str, str] = {}

    @property
    def asset_roots(self) -> Dict[str, str]:
        """Configured root -> resolved asset root, in configuration order."""
        return dict(self._asset_roots)

    @abstractmethod
    async def configure_roots(self, roots: Sequence[str]) -> Dict[str, str]:
        """Resolve `roots` and replace the cached mapping."""

    @abstractmethod
    async def locate_module(self, module_id: str, roots: Optional[Sequence[str]] = None) -> str:
        """Return the location of `module_id`, or ``""`` if no root has it."""

    @abstractmethod
    async def get_module(
        self, module_id: str, roots: Optional[Sequence[str]] = None
    ) -> ModuleResponse:
        """Fetch `module_id`; raises `ModuleNotFound` if no root has it."""

    async def get_module_path(self, module_id: str, roots: Optional[Sequence[str]] = None) -> str:
        return await self.locate_module(module_id, roots)

    def _search_roots(self, roots: Optional[Sequence[str]]) -> List[str]:
        # Unresolved prerequisites map to "" and have nothing to search.
        search = list(roots) if roots is not None else list(self._asset_roots.values())
        return [root for root in search if root]

