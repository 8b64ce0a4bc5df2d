"""
Request logging middleware for the GraphQL endpoint
"""

import json
import re
import time
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging import clear_request_context, get_logger, get_request_id, set_request_context

logger = get_logger(__name__)

GRAPHQL_PATH = "/"
REDACTED = "[REDACTED]"

SENSITIVE_PARAM_MARKERS = frozenset(
    {"password", "token", "secret", "auth", "key", "session", "cookie", "credential"}
)
# Query-string GraphQL payloads may embed user data and are never logged
GRAPHQL_PAYLOAD_PARAMS = ("query", "variables")

_OPERATION_RE = re.compile(r"\b(?:query|mutation|subscription)\s+(\w+)")


def sanitize_query_params(params: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``params`` with credential-like values redacted."""
    return {
        key: REDACTED
        if any(marker in key.lower() for marker in SENSITIVE_PARAM_MARKERS)
        else value
        for key, value in params.items()
    }


def operation_name_from_query(query: Any, operation_name: Any = None) -> str | None:
    """Derive a loggable operation name from a GraphQL payload.

    An explicit ``operationName`` wins. Introspection documents are grouped
    under ``__introspection`` and anonymous documents under
    ``unnamed_operation``.
    """
    if isinstance(operation_name, str) and operation_name:
        return operation_name
    if not isinstance(query, str) or not query:
        return None
    if "__schema" in query or "IntrospectionQuery" in query:
        return "__introspection"
    match = _OPERATION_RE.search(query)
    return match.group(1) if match else "unnamed_operation"


async def extract_graphql_operation_name(request: Request) -> str | None:
    if request.url.path != GRAPHQL_PATH:
        return None

    if request.method == "GET":
        params = request.query_params
        return operation_name_from_query(params.get("query"), params.get("operationName"))

    if request.method != "POST":
        return None

    body = await request.body()
    if not body:
        return None
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(payload, dict):
        return None
    return operation_name_from_query(payload.get("query"), payload.get("operationName"))


def loggable_query_params(request: Request) -> dict[str, Any] | None:
    if not request.query_params:
        return None
    params = sanitize_query_params(dict(request.query_params))
    if request.url.path == GRAPHQL_PATH:
        for name in GRAPHQL_PAYLOAD_PARAMS:
            if name in params:
                params[name] = REDACTED
    return params


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Bind a request id and GraphQL operation name to every log line of a request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        set_request_context(
            request_id=request.headers.get("x-request-id"),
            operation=await extract_graphql_operation_name(request),
        )
        started = time.perf_counter()

        try:
            logger.info(
                "Request started",
                method=request.method,
                path=request.url.path,
                query_params=loggable_query_params(request),
                user_agent=request.headers.get("user-agent"),
                remote_addr=request.client.host if request.client else None,
            )

            response = await call_next(request)

            response.headers["X-Request-ID"] = get_request_id() or ""
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            return response

        except Exception as e:
            logger.error(
                "Request failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise

        finally:
            clear_request_context()
