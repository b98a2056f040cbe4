"""
Top-level package for the DS module resolution service.

Resolves slash-delimited AMD module identifiers (``DS/<Package>/...``) to a
concrete ``.js`` file on disk or URL on an asset server:

- `resolution` holds the backend-agnostic lookup (identifier parsing,
  prerequisite root resolution, concatenated/individual candidates).
- `backends` wires filesystem and HTTP probing into that lookup.
- `main` exposes the resolver as a FastAPI app.
"""

from .backends.file_backend import FileBackend
from .backends.web_backend import WebBackend
from .errors import InvalidConfiguration, ModuleNotFound, TransportFailure
from .schemas import ModuleResponse

__all__ = [
    "FileBackend",
    "WebBackend",
    "ModuleResponse",
    "ModuleNotFound",
    "InvalidConfiguration",
    "TransportFailure",
]
