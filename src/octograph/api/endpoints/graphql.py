"""GraphQL endpoint: POST executes, GET serves the explorer or executes."""

from __future__ import annotations

import asyncio
import contextlib
import json
from collections.abc import Awaitable
from typing import Any, TypeVar

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import HTMLResponse, JSONResponse
from graphql import ExecutionResult
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from strawberry.http.ides import get_graphql_ide_html

from ...engine import ResolutionEngine
from ...github.base import GitHubDataSource
from ...graphql.context import create_context
from ...logging import get_logger
from ..dependencies import get_data_source, get_engine

logger = get_logger(__name__)

router = APIRouter()

T = TypeVar("T")

DISCONNECT_POLL_INTERVAL = 0.05
CLIENT_CLOSED_REQUEST = 499


class GraphQLRequest(BaseModel):
    """Request body for a GraphQL operation."""

    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(..., min_length=1, description="GraphQL document")
    variables: dict[str, Any] | None = Field(default=None, description="Variable values")
    operation_name: str | None = Field(
        default=None, alias="operationName", description="Operation to run"
    )


class ClientDisconnected(Exception):
    """The client went away before the response was ready."""


async def run_until_disconnected(
    request: Request, awaitable: Awaitable[T], poll_interval: float = DISCONNECT_POLL_INTERVAL
) -> T:
    """Await ``awaitable``, cancelling it if the client disconnects first.

    Raises:
        ClientDisconnected: If the client disconnected; the work was cancelled
    """
    task = asyncio.ensure_future(awaitable)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=poll_interval)
            if done:
                return task.result()
            if await request.is_disconnected():
                raise ClientDisconnected()
    finally:
        if not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task


def _error_response(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"data": None, "errors": [{"message": message}]},
    )


def _status_for(result: ExecutionResult) -> int:
    # Document-level failures carry no path and produce no data
    if result.data is None and result.errors and all(e.path is None for e in result.errors):
        return 400
    return 200


def _prefers_html(request: Request) -> bool:
    accept = request.headers.get("accept", "")
    return "text/html" in accept


async def _execute(
    request: Request,
    payload: GraphQLRequest,
    engine: ResolutionEngine,
    data_source: GitHubDataSource,
) -> Response:
    context = create_context(data_source, request=request)
    try:
        result = await run_until_disconnected(
            request,
            engine.execute(
                payload.query,
                variables=payload.variables,
                operation_name=payload.operation_name,
                context=context,
            ),
        )
    except ClientDisconnected:
        logger.info("Client disconnected, resolution cancelled")
        return Response(status_code=CLIENT_CLOSED_REQUEST)

    if result.errors:
        logger.info(
            "GraphQL request completed with errors",
            errors=[error.message for error in result.errors],
        )
    return JSONResponse(status_code=_status_for(result), content=result.formatted)


@router.post("/")
async def graphql_post(
    request: Request,
    engine: ResolutionEngine = Depends(get_engine),
    data_source: GitHubDataSource = Depends(get_data_source),
) -> Response:
    """Execute a GraphQL operation sent as a JSON body."""
    try:
        payload = GraphQLRequest.model_validate(await request.json())
    except (ValueError, ValidationError):
        return _error_response("POST body must be a JSON object with a non-empty 'query' string")
    return await _execute(request, payload, engine, data_source)


@router.get("/")
async def graphql_get(
    request: Request,
    query: str | None = None,
    variables: str | None = None,
    operationName: str | None = None,  # noqa: N803
    engine: ResolutionEngine = Depends(get_engine),
    data_source: GitHubDataSource = Depends(get_data_source),
) -> Response:
    """Serve GraphiQL to browsers, or execute an operation from query parameters."""
    if request.app.state.graphiql and (query is None or _prefers_html(request)):
        return HTMLResponse(get_graphql_ide_html(graphql_ide="graphiql"))
    if query is None:
        return _error_response("Must provide query string.")

    try:
        decoded_variables = json.loads(variables) if variables else None
        payload = GraphQLRequest(
            query=query, variables=decoded_variables, operation_name=operationName
        )
    except (ValueError, ValidationError):
        return _error_response("Variables are invalid JSON.")
    return await _execute(request, payload, engine, data_source)
