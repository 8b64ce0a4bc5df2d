"""Request dependencies for API endpoints."""

from __future__ import annotations

from fastapi import HTTPException, Request

from ..engine import ResolutionEngine
from ..github.base import GitHubDataSource


def get_engine(request: Request) -> ResolutionEngine:
    """Resolution engine built when the app was created."""
    return request.app.state.engine


def get_data_source(request: Request) -> GitHubDataSource:
    """
    Data source initialized by the application lifespan (or injected at creation).

    Raises:
        HTTPException: If the data source has not been initialized yet
    """
    data_source = getattr(request.app.state, "data_source", None)
    if data_source is None:
        raise HTTPException(status_code=503, detail="Data source not initialized")
    return data_source
