"""
FastAPI app serving DS modules from prerequisite trees or an asset server.

Endpoints:
- GET /health
- PUT /prerequisites
- GET /modules/{module_id}
- GET /module-paths/{module_id}
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

import httpx
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .backends.base import ModuleBackend
from .backends.capabilities import HttpxRequester
from .backends.file_backend import FileBackend
from .backends.web_backend import WebBackend
from .errors import InvalidConfiguration, ModuleNotFound, TransportFailure
from .schemas import (
    HealthResponse,
    ModulePathResponse,
    ModuleResponse,
    PrerequisitesRequest,
    PrerequisitesResponse,
)

logger = logging.getLogger(__name__)


def build_backend(backend: Optional[str] = None) -> ModuleBackend:
    """Create an (unconfigured) backend of the kind named in the config."""
    kind = backend or config.BACKEND
    if kind == "web":
        return WebBackend(requester=HttpxRequester(timeout=config.HTTP_TIMEOUT))
    if kind == "file":
        return FileBackend()
    raise InvalidConfiguration(kind, reason="Unknown backend")


def configured_roots(backend: ModuleBackend) -> List[str]:
    if isinstance(backend, WebBackend):
        return [config.HOST_URL] if config.HOST_URL else []
    return list(config.PREREQUISITES)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    backend: ModuleBackend = app.state.backend
    requester = getattr(backend, "requester", None)
    # One connection pool for the app lifetime.
    shared = isinstance(requester, HttpxRequester) and requester.client is None

    async with httpx.AsyncClient(timeout=config.HTTP_TIMEOUT) as client:
        if shared:
            requester.client = client
        try:
            roots = configured_roots(backend)
            if roots:
                asset_roots = await backend.configure_roots(roots)
                logger.info("Resolved roots: %s", asset_roots)
            yield
        finally:
            if shared:
                requester.client = None


app = FastAPI(
    title="DS Module Service",
    version="0.1.0",
    description="Resolves DS AMD module identifiers to concatenated or individual .js builds.",
    lifespan=lifespan,
)

# Permissive CORS for dev; loaders run in the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Attach the backend to app state for reuse.
app.state.backend = build_backend()


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Simple health-check endpoint."""
    return HealthResponse(status="ok")


@app.put("/prerequisites", response_model=PrerequisitesResponse)
async def set_prerequisites(req: PrerequisitesRequest) -> PrerequisitesResponse:
    """
    Replace the search roots (prerequisite directories, or host URLs for the
    web backend). Returns each root with its resolved asset root; an empty
    value means the root has no webapps directory.
    """
    backend: ModuleBackend = app.state.backend
    try:
        asset_roots = await backend.configure_roots(req.roots)
    except InvalidConfiguration as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return PrerequisitesResponse(asset_roots=asset_roots)


@app.get("/modules/{module_id:path}", response_model=ModuleResponse)
async def get_module(module_id: str) -> ModuleResponse:
    """Return the module source together with where it was found."""
    backend: ModuleBackend = app.state.backend
    try:
        return await backend.get_module(module_id)
    except ModuleNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except TransportFailure as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc


@app.get("/module-paths/{module_id:path}", response_model=ModulePathResponse)
async def get_module_path(module_id: str) -> ModulePathResponse:
    """
    Return the resolved location only. An empty location means the module
    was not found; this endpoint does not 404.
    """
    backend: ModuleBackend = app.state.backend
    try:
        location = await backend.get_module_path(module_id)
    except TransportFailure as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return ModulePathResponse(module_id=module_id, location=location)


def run() -> None:
    """
    Convenience entrypoint if you want to run via:

        python -m ds_module_service.main

    or via the `ds-module-service` console_script defined in pyproject.toml.
    """
    import uvicorn

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "ds_module_service.main:app",
        host=config.SERVICE_HOST,
        port=config.SERVICE_PORT,
        reload=False,
    )


if __name__ == "__main__":
    run()
