"""
Two-tier module lookup inside a single asset root.

Release builds bundle a whole package into ``<root>/<Short>/<Short>.js``
("concatenated"); debug builds emit one file per module at
``<root>/<relative path>.js`` ("individual"). Concatenated builds are the
common deployment, so that candidate is always probed first.
"""

from __future__ import annotations

import enum
import logging
import posixpath
from types import ModuleType
from typing import Awaitable, Callable, List, NamedTuple

from .module_id import MODULE_EXTENSION, relative_path, short_name

logger = logging.getLogger(__name__)


class Tier(str, enum.Enum):
    CONCATENATED = "concatenated"
    INDIVIDUAL = "individual"


class Candidate(NamedTuple):
    tier: Tier
    path: str


def candidate_paths(
    module_id: str, asset_root: str, join: Callable[..., str]
) -> List[Candidate]:
    """
    Build the lookup candidates for `module_id`, in probe order.

    Identifiers without a short name (non-``DS`` ids, ``DS/Foo``) have no
    concatenated candidate; an empty relative path has no individual one.
    """
    candidates: List[Candidate] = []

    name = short_name(module_id)
    if name:
        candidates.append(
            Candidate(Tier.CONCATENATED, join(asset_root, name, name + MODULE_EXTENSION))
        )

    rel_path = relative_path(module_id)
    if rel_path:
        candidates.append(Candidate(Tier.INDIVIDUAL, join(asset_root, rel_path + MODULE_EXTENSION)))

    return candidates


def is_within(asset_root: str, path: str, pathmod: ModuleType = posixpath) -> bool:
    """
    True if `path` stays inside `asset_root` once ``..`` segments are folded.

    `pathmod` is `posixpath` or `ntpath`, matching how the paths were joined.
    """
    root = pathmod.normpath(asset_root)
    try:
        common = pathmod.commonpath([root, pathmod.normpath(path)])
    except ValueError:
        # Different drives, or absolute mixed with relative.
        return False
    return pathmod.normcase(common) == pathmod.normcase(root)


async def locate(
    module_id: str,
    asset_root: str,
    exists: Callable[[str], Awaitable[bool]],
    join: Callable[..., str],
    pathmod: ModuleType = posixpath,
) -> str:
    """
    Return the first existing candidate path for `module_id`, or ``""``.

    Candidates escaping `asset_root` (``..`` segments, absolute identifiers)
    are never probed.
    """
    for candidate in candidate_paths(module_id, asset_root, join):
        if not is_within(asset_root, candidate.path, pathmod):
            logger.warning("%s: candidate %s is outside %s, skipped", module_id, candidate.path, asset_root)
            continue
        found = await exists(candidate.path)
        logger.debug("%s %s candidate %s: %s", module_id, candidate.tier.value, candidate.path, found)
        if found:
            return candidate.path
    return ""
