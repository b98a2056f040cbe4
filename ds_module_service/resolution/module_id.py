"""
Helpers for DS (AMD) module identifiers.

A DS module identifier looks like::

    DS/GEOCommonClient/Services/ServiceBase

- ``DS`` is the managed namespace prefix;
- ``GEOCommonClient`` is the module (package) short name, which is also the
  name of the concatenated release build ``GEOCommonClient/GEOCommonClient.js``;
- ``GEOCommonClient/Services/ServiceBase`` is the relative file path used by
  debug builds (``.js`` appended).

All functions here are pure and total: malformed identifiers give empty
strings instead of raising.
"""

from __future__ import annotations

import re

DS_PREFIX = "DS"
MODULE_EXTENSION = ".js"

# Platform layouts under a prerequisite root, tried in this order.
WIN_B64 = "win_b64"
LINUX_A64 = "linux_a64"
WEB_APPS = "webapps"

_SHORT_NAME_RE = re.compile(r"^DS/(\w+)/.+")
_RELATIVE_PATH_RE = re.compile(r"^DS/(.+)")


def is_managed_module(module_id: str) -> bool:
    """Return True if `module_id` lives in the ``DS`` namespace."""
    return module_id == DS_PREFIX or module_id.startswith(DS_PREFIX + "/")


def short_name(module_id: str) -> str:
    """
    Extract the module short name (the segment right after ``DS/``).

    >>> short_name("DS/GEOExplorationCorpusClient/Services/dsexplorationService")
    'GEOExplorationCorpusClient'
    >>> short_name("DS/Lonely")
    ''
    """
    match = _SHORT_NAME_RE.match(module_id)
    return match.group(1) if match else ""


def relative_path(module_id: str) -> str:
    """
    Map a module identifier to its file path (without extension).

    Managed identifiers lose their ``DS/`` prefix; anything else is already a
    path and is returned unchanged.

    >>> relative_path("DS/GEOCommonClient/Services/ServiceBase")
    'GEOCommonClient/Services/ServiceBase'
    >>> relative_path("UWA/Core")
    'UWA/Core'
    """
    if not is_managed_module(module_id):
        return module_id
    match = _RELATIVE_PATH_RE.match(module_id)
    return match.group(1) if match else ""
