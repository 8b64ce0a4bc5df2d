"""
Interface for the data source behind the root field handlers.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

# Plain data object tagged with a "type" key naming its object type
Record = dict[str, Any]


@runtime_checkable
class GitHubDataSource(Protocol):
    """Fetches GitHub entities as tagged records.

    Every method returns None when the entity does not exist and raises
    DataSourceError when the upstream call fails.
    """

    async def get_topic(self, name: str) -> Record | None:
        """Fetch a topic by name."""
        ...

    async def get_repository_owner(self, login: str) -> Record | None:
        """Fetch a user or organization by login."""
        ...

    async def get_repository(self, owner: str, name: str) -> Record | None:
        """Fetch a repository by owner login and repository name."""
        ...

    async def get_uniform_resource_locatable(self, url: str) -> Record | None:
        """Fetch whatever entity lives at a github.com URL."""
        ...
