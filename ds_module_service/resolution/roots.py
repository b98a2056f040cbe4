"""
Prerequisite root -> asset root resolution.

A prerequisite root is the top of a deployment tree, e.g.
``\\\\srv\\R422\\BSF``. The served ``.js`` files live in a platform-specific
``webapps`` directory beneath it:

    <root>/win_b64/webapps      (tried first)
    <root>/linux_a64/webapps    (fallback)

A root with neither layout resolves to the empty string; that is a normal
outcome, not an error.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Sequence

from .module_id import LINUX_A64, WEB_APPS, WIN_B64

logger = logging.getLogger(__name__)

ExistsFn = Callable[[str], Awaitable[bool]]
JoinFn = Callable[..., str]

PLATFORM_LAYOUTS = (
    (WIN_B64, WEB_APPS),
    (LINUX_A64, WEB_APPS),
)


@dataclass(frozen=True)
class ResolvedRoot:
    prerequisite_root: str
    asset_root: str


async def resolve_asset_root(
    prerequisite_root: str, exists: ExistsFn, join: JoinFn
) -> ResolvedRoot:
    """
    Find the webapps directory under `prerequisite_root`.

    Layouts are probed one after the other; the Linux layout is only probed
    when the Windows one is missing.
    """
    for layout in PLATFORM_LAYOUTS:
        candidate = join(prerequisite_root, *layout)
        if await exists(candidate):
            logger.debug("Asset root for %s: %s", prerequisite_root, candidate)
            return ResolvedRoot(prerequisite_root, candidate)

    logger.warning("No webapps directory found under prerequisite %s", prerequisite_root)
    return ResolvedRoot(prerequisite_root, "")


async def resolve_asset_roots(
    prerequisite_roots: Sequence[str], exists: ExistsFn, join: JoinFn
) -> Dict[str, str]:
    """
    Resolve every prerequisite root concurrently.

    Returns a fresh mapping keyed by the original root strings, in input
    order. Unresolved roots map to ``""``.
    """
    resolved = await asyncio.gather(
        *(resolve_asset_root(root, exists, join) for root in prerequisite_roots)
    )
    return {item.prerequisite_root: item.asset_root for item in resolved}
