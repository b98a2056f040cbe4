"""
Configuration for the DS module service.

Everything comes from environment variables read at import time:

- DS_MODULE_BACKEND: ``file`` (prerequisite directories) or ``web`` (asset server)
- DS_MODULE_PREREQUISITES: prerequisite roots, separated by ``os.pathsep``
- DS_MODULE_HOST_URL: asset server URL for the web backend, e.g. ``http://localhost:8176``
- DS_MODULE_HTTP_TIMEOUT: seconds before an asset server request is abandoned
"""

from __future__ import annotations

import os
from typing import List, Optional

BACKEND: str = os.environ.get("DS_MODULE_BACKEND", "file").lower()

# Order matters: earlier prerequisites win.
PREREQUISITES: List[str] = [
    root for root in os.environ.get("DS_MODULE_PREREQUISITES", "").split(os.pathsep) if root
]

HOST_URL: Optional[str] = os.environ.get("DS_MODULE_HOST_URL") or None

HTTP_TIMEOUT: float = float(os.environ.get("DS_MODULE_HTTP_TIMEOUT", "30"))

LOG_LEVEL: str = os.environ.get("DS_MODULE_LOG_LEVEL", "INFO").upper()

SERVICE_HOST: str = os.environ.get("DS_MODULE_SERVICE_HOST", "0.0.0.0")
SERVICE_PORT: int = int(os.environ.get("DS_MODULE_SERVICE_PORT", "8080"))
