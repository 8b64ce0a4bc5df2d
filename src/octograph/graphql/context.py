"""
Per-request execution context handed to handlers and field resolvers
"""

from dataclasses import dataclass
from typing import Any

from ..github.base import GitHubDataSource
from .loaders import Loaders


@dataclass
class RequestContext:
    data_source: GitHubDataSource
    loaders: Loaders
    request: Any = None


def create_context(data_source: GitHubDataSource, request: Any = None) -> RequestContext:
    """Build a fresh context; loaders must not be shared between requests."""
    return RequestContext(data_source=data_source, loaders=Loaders(data_source), request=request)
