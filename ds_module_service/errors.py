"""
Exceptions raised by the module resolution service.

"Not found" is normally a plain value (an empty location string); only
`get_module` turns it into `ModuleNotFound`.
"""

from __future__ import annotations

from typing import Optional


class ModuleServiceError(Exception):
    """Base class for module service errors."""


class ModuleNotFound(ModuleServiceError):
    """No candidate file exists for the module in any configured root."""

    def __init__(self, module_id: str) -> None:
        super().__init__(f"Unable to find file for: {module_id}")
        self.module_id = module_id


class InvalidConfiguration(ModuleServiceError):
    """A host URL (or other backend setting) could not be parsed."""

    def __init__(self, value: str, reason: str = "Invalid Host URL") -> None:
        super().__init__(f"{reason}: {value}")
        self.value = value


class TransportFailure(ModuleServiceError):
    """
    An HTTP request failed for a reason other than ``404``.

    `status_code` is None when the request never produced a response
    (connection refused, timeout, ...).
    """

    def __init__(self, url: str, status_code: Optional[int] = None) -> None:
        if status_code is None:
            message = f"Request to {url} failed"
        else:
            message = f"Request to {url} returned HTTP {status_code}"
        super().__init__(message)
        self.url = url
        self.status_code = status_code
