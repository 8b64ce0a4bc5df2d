"""
Per-request data loaders over the GitHub data source.

Each loader batches the keys requested during one tick of the event loop
and caches results for the lifetime of the request, so a topic reached
through several paths of one query is fetched once.
"""

import asyncio
from typing import Any

from strawberry.dataloader import DataLoader

from ..github.base import GitHubDataSource, Record


async def load_topics(source: GitHubDataSource, keys: list[str]) -> list[Any]:
    """Batch load topics by name."""
    return await asyncio.gather(*(source.get_topic(name) for name in keys), return_exceptions=True)


async def load_owners(source: GitHubDataSource, keys: list[str]) -> list[Any]:
    """Batch load repository owners by login."""
    return await asyncio.gather(
        *(source.get_repository_owner(login) for login in keys), return_exceptions=True
    )


async def load_repositories(source: GitHubDataSource, keys: list[tuple[str, str]]) -> list[Any]:
    """Batch load repositories by (owner, name)."""
    return await asyncio.gather(
        *(source.get_repository(owner, name) for owner, name in keys), return_exceptions=True
    )


class Loaders:
    def __init__(self, source: GitHubDataSource):
        self.topic_loader: DataLoader[str, Record | None] = DataLoader(
            load_fn=lambda keys: load_topics(source, keys),
            cache_key_fn=str.lower,
        )
        self.owner_loader: DataLoader[str, Record | None] = DataLoader(
            load_fn=lambda keys: load_owners(source, keys),
            cache_key_fn=str.lower,
        )
        self.repository_loader: DataLoader[tuple[str, str], Record | None] = DataLoader(
            load_fn=lambda keys: load_repositories(source, keys),
            cache_key_fn=lambda key: (key[0].lower(), key[1].lower()),
        )
