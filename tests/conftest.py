"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import Generator
from typing import Any

import pytest

from octograph.engine import DataSourceError
from octograph.github.client import topic_record


class FakeDataSource:
    """In-memory GitHubDataSource recording every lookup."""

    def __init__(
        self,
        topics: dict[str, dict[str, Any]] | None = None,
        owners: dict[str, dict[str, Any]] | None = None,
        repositories: dict[tuple[str, str], dict[str, Any]] | None = None,
    ):
        self.topics = topics or {}
        self.owners = owners or {}
        self.repositories = repositories or {}
        self.failing: set[str] = set()
        self.calls: list[tuple[str, Any]] = []

    def _check(self, key: str) -> None:
        if key in self.failing:
            raise DataSourceError(f"upstream failure for {key}")

    async def get_topic(self, name: str) -> dict[str, Any] | None:
        self.calls.append(("topic", name))
        self._check(name)
        return self.topics.get(name.lower())

    async def get_repository_owner(self, login: str) -> dict[str, Any] | None:
        self.calls.append(("owner", login))
        self._check(login)
        return self.owners.get(login.lower())

    async def get_repository(self, owner: str, name: str) -> dict[str, Any] | None:
        self.calls.append(("repository", (owner, name)))
        self._check(f"{owner}/{name}")
        return self.repositories.get((owner.lower(), name.lower()))

    async def get_uniform_resource_locatable(self, url: str) -> dict[str, Any] | None:
        self.calls.append(("resource", url))
        path = [segment for segment in url.split("github.com", 1)[-1].split("/") if segment]
        if len(path) == 1:
            return self.owners.get(path[0].lower())
        if len(path) == 2:
            return self.repositories.get((path[0].lower(), path[1].lower()))
        return None


def make_user(login: str = "octocat", **overrides: Any) -> dict[str, Any]:
    record = {
        "type": "User",
        "id": f"U_{login}",
        "login": login,
        "name": "The Octocat",
        "bio": None,
        "company": "@github",
        "location": "San Francisco",
        "avatarUrl": f"https://avatars.githubusercontent.com/{login}",
        "url": f"https://github.com/{login}",
        "resourcePath": f"/{login}",
        "createdAt": "2011-01-25T18:44:36Z",
    }
    record.update(overrides)
    return record


def make_organization(login: str = "github", **overrides: Any) -> dict[str, Any]:
    record = {
        "type": "Organization",
        "id": f"O_{login}",
        "login": login,
        "name": "GitHub",
        "description": "How people build software.",
        "location": None,
        "avatarUrl": f"https://avatars.githubusercontent.com/{login}",
        "url": f"https://github.com/{login}",
        "resourcePath": f"/{login}",
        "createdAt": "2008-05-11T04:37:31Z",
    }
    record.update(overrides)
    return record


def make_repository(owner: dict[str, Any], name: str = "hello-world", **overrides: Any):
    full_name = f"{owner['login']}/{name}"
    record = {
        "type": "Repository",
        "id": f"R_{full_name}",
        "name": name,
        "nameWithOwner": full_name,
        "description": "My first repository on GitHub!",
        "owner": owner,
        "isPrivate": False,
        "isFork": False,
        "stargazerCount": 2500,
        "forkCount": 2100,
        "primaryLanguage": None,
        "homepageUrl": None,
        "createdAt": "2011-01-26T19:01:12Z",
        "url": f"https://github.com/{full_name}",
        "resourcePath": f"/{full_name}",
        "topicNames": ["graphql", "api"],
    }
    record.update(overrides)
    return record


@pytest.fixture
def data_source() -> FakeDataSource:
    """Fake data source seeded with a small GitHub graph."""
    octocat = make_user()
    github = make_organization()
    return FakeDataSource(
        topics={
            "graphql": topic_record("graphql", ["api", "rest"]),
            "api": topic_record("api", ["graphql", "rest"]),
            "rest": topic_record("rest", ["api"]),
        },
        owners={"octocat": octocat, "github": github},
        repositories={
            ("octocat", "hello-world"): make_repository(octocat),
            ("github", "docs"): make_repository(github, "docs", topicNames=[]),
        },
    )


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")
