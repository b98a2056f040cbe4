"""
Pydantic schemas shared by the backends and the FastAPI app.
"""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field


class ModuleResponse(BaseModel):
    """
    Result of a successful module lookup.

    - content: raw text of the ``.js`` file
    - location: file path or URL the content was read from
    """

    content: str
    location: str


class HostConfig(BaseModel):
    """
    Connection settings for one asset server.

    Built from a host URL such as ``http://localhost:8176``:

    - use_tls: ``https`` scheme
    - host_name: ``localhost``
    - port: ``8176``
    """

    use_tls: bool = False
    host_name: str = ""
    port: int = Field(default=8080, gt=0, lt=65536)

    @property
    def base_url(self) -> str:
        scheme = "https" if self.use_tls else "http"
        return f"{scheme}://{self.host_name}:{self.port}"


class PrerequisitesRequest(BaseModel):
    """Request payload for PUT /prerequisites."""

    roots: List[str]


class PrerequisitesResponse(BaseModel):
    """Prerequisite root -> resolved asset root ("" when unresolved)."""

    asset_roots: Dict[str, str]


class ModulePathResponse(BaseModel):
    module_id: str
    location: str


class HealthResponse(BaseModel):
    """Simple health check response."""

    status: str
