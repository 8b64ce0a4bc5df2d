"""GitHub data source."""

from .base import GitHubDataSource, Record
from .client import GitHubClient, create_http_client

__all__ = ["GitHubClient", "GitHubDataSource", "Record", "create_http_client"]
