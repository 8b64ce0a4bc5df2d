"""
Tests for the GitHub REST data source.
"""

import httpx
import pytest
import respx
from httpx import Response

from octograph.engine import DataSourceError, RateLimitError
from octograph.github import GitHubClient, GitHubDataSource
from octograph.github.client import (
    owner_record,
    parse_resource_url,
    repository_record,
    topic_node_id,
    topic_record,
)

API = "https://api.github.com"


@pytest.fixture
def user_payload() -> dict:
    """Sample GitHub /users/{login} response."""
    return {
        "login": "octocat",
        "node_id": "MDQ6VXNlcjU4MzIzMQ==",
        "type": "User",
        "name": "The Octocat",
        "company": "@github",
        "bio": None,
        "location": "San Francisco",
        "avatar_url": "https://avatars.githubusercontent.com/u/583231?v=4",
        "html_url": "https://github.com/octocat",
        "created_at": "2011-01-25T18:44:36Z",
    }


@pytest.fixture
def repository_payload(user_payload) -> dict:
    """Sample GitHub /repos/{owner}/{name} response."""
    return {
        "node_id": "MDEwOlJlcG9zaXRvcnkxMjk2MjY5",
        "name": "Hello-World",
        "full_name": "octocat/Hello-World",
        "owner": user_payload,
        "private": False,
        "fork": False,
        "description": "My first repository on GitHub!",
        "homepage": "",
        "language": None,
        "stargazers_count": 2500,
        "forks_count": 2100,
        "html_url": "https://github.com/octocat/Hello-World",
        "created_at": "2011-01-26T19:01:12Z",
        "topics": ["octocat", "api"],
    }


class TestRecordBuilders:
    """Tests for mapping REST payloads to schema records."""

    def test_topic_record(self):
        record = topic_record("graphql", ["api"])

        assert record == {
            "type": "Topic",
            "id": topic_node_id("graphql"),
            "name": "graphql",
            "relatedTopicNames": ["api"],
        }
        assert topic_node_id("graphql") != topic_node_id("rest")

    def test_owner_record(self, user_payload):
        record = owner_record(user_payload)

        assert record["type"] == "User"
        assert record["id"] == "MDQ6VXNlcjU4MzIzMQ=="
        assert record["avatarUrl"] == user_payload["avatar_url"]
        assert record["resourcePath"] == "/octocat"
        assert record["url"] == "https://github.com/octocat"

    def test_organization_record(self):
        record = owner_record({"login": "github", "type": "Organization", "bio": "hi"})

        assert record["type"] == "Organization"
        assert record["description"] == "hi"
        assert record["url"] == "https://github.com/github"

    def test_repository_record(self, repository_payload):
        record = repository_record(repository_payload)

        assert record["type"] == "Repository"
        assert record["nameWithOwner"] == "octocat/Hello-World"
        assert record["owner"]["login"] == "octocat"
        assert record["homepageUrl"] is None
        assert record["stargazerCount"] == 2500
        assert record["resourcePath"] == "/octocat/Hello-World"
        assert record["topicNames"] == ["octocat", "api"]


class TestParseResourceUrl:
    """Tests for parse_resource_url."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://github.com/octocat", ("octocat",)),
            ("https://github.com/octocat/Hello-World", ("octocat", "Hello-World")),
            ("https://www.github.com/octocat/Hello-World.git", ("octocat", "Hello-World")),
            ("/octocat/Hello-World", ("octocat", "Hello-World")),
            ("https://gitlab.com/octocat", None),
            ("https://github.com/topics/graphql", None),
            ("https://github.com/octocat/Hello-World/issues/1", None),
            ("https://github.com/", None),
        ],
    )
    def test_parse(self, url, expected):
        assert parse_resource_url(url) == expected


class TestGitHubClient:
    """Tests for GitHubClient against a mocked GitHub API."""

    def test_satisfies_protocol(self):
        client = GitHubClient(httpx.AsyncClient())

        assert isinstance(client, GitHubDataSource)

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_topic_exact_match(self):
        route = respx.get(f"{API}/search/topics").mock(
            return_value=Response(
                200,
                json={
                    "items": [
                        {"name": "graphql-js", "related": None},
                        {
                            "name": "graphql",
                            "related": [
                                {"topic_relation": {"name": "graphql-api"}},
                                {"topic_relation": {}},
                            ],
                        },
                    ]
                },
            )
        )

        async with httpx.AsyncClient() as http:
            topic = await GitHubClient(http, token="secret").get_topic("GraphQL")

        assert topic["name"] == "graphql"
        assert topic["relatedTopicNames"] == ["graphql-api"]
        request = route.calls.last.request
        assert request.url.params["q"] == "GraphQL"
        assert request.headers["Authorization"] == "Bearer secret"
        assert request.headers["Accept"] == "application/vnd.github+json"

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_topic_no_match(self):
        respx.get(f"{API}/search/topics").mock(
            return_value=Response(200, json={"items": [{"name": "graphql-js"}]})
        )

        async with httpx.AsyncClient() as http:
            assert await GitHubClient(http).get_topic("graphql") is None

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_repository_owner(self, user_payload):
        respx.get(f"{API}/users/octocat").mock(return_value=Response(200, json=user_payload))

        async with httpx.AsyncClient() as http:
            owner = await GitHubClient(http).get_repository_owner("octocat")

        assert owner["type"] == "User"
        assert owner["login"] == "octocat"

    @respx.mock
    @pytest.mark.asyncio
    async def test_missing_owner_is_none(self):
        respx.get(f"{API}/users/ghost").mock(return_value=Response(404))

        async with httpx.AsyncClient() as http:
            assert await GitHubClient(http).get_repository_owner("ghost") is None

    @respx.mock
    @pytest.mark.asyncio
    async def test_names_are_escaped_in_the_path(self):
        route = respx.get(url__startswith=API).mock(return_value=Response(404))

        async with httpx.AsyncClient() as http:
            client = GitHubClient(http)
            await client.get_repository_owner("octocat/repos?x=")
            await client.get_repository("octocat", "hello#world")

        paths = [call.request.url.raw_path for call in route.calls]
        assert paths == [b"/users/octocat%2Frepos%3Fx%3D", b"/repos/octocat/hello%23world"]

    @respx.mock
    @pytest.mark.asyncio
    async def test_dot_segments_are_not_requested(self):
        route = respx.get(url__startswith=API).mock(return_value=Response(200, json={}))

        async with httpx.AsyncClient() as http:
            client = GitHubClient(http)
            assert await client.get_repository_owner("..") is None
            assert await client.get_repository("octocat", "..") is None
            assert await client.get_repository(".", "docs") is None

        assert not route.called

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_repository(self, repository_payload):
        respx.get(f"{API}/repos/octocat/Hello-World").mock(
            return_value=Response(200, json=repository_payload)
        )

        async with httpx.AsyncClient() as http:
            repository = await GitHubClient(http).get_repository("octocat", "Hello-World")

        assert repository["nameWithOwner"] == "octocat/Hello-World"

    @respx.mock
    @pytest.mark.asyncio
    async def test_uniform_resource_locatable_dispatch(self, user_payload, repository_payload):
        respx.get(f"{API}/users/octocat").mock(return_value=Response(200, json=user_payload))
        respx.get(f"{API}/repos/octocat/Hello-World").mock(
            return_value=Response(200, json=repository_payload)
        )

        async with httpx.AsyncClient() as http:
            client = GitHubClient(http)
            owner = await client.get_uniform_resource_locatable("https://github.com/octocat")
            repository = await client.get_uniform_resource_locatable(
                "https://github.com/octocat/Hello-World"
            )
            elsewhere = await client.get_uniform_resource_locatable("https://example.com/x")

        assert owner["type"] == "User"
        assert repository["type"] == "Repository"
        assert elsewhere is None

    @respx.mock
    @pytest.mark.asyncio
    async def test_rate_limited(self):
        respx.get(f"{API}/users/octocat").mock(
            return_value=Response(
                403, headers={"x-ratelimit-remaining": "0", "x-ratelimit-reset": "1700000000"}
            )
        )

        async with httpx.AsyncClient() as http:
            with pytest.raises(RateLimitError, match="1700000000") as exc_info:
                await GitHubClient(http).get_repository_owner("octocat")

        assert exc_info.value.code == "RATE_LIMITED"
        assert isinstance(exc_info.value, DataSourceError)

    @respx.mock
    @pytest.mark.asyncio
    async def test_server_error(self):
        respx.get(f"{API}/users/octocat").mock(return_value=Response(502))

        async with httpx.AsyncClient() as http:
            with pytest.raises(DataSourceError, match="HTTP 502"):
                await GitHubClient(http).get_repository_owner("octocat")

    @respx.mock
    @pytest.mark.asyncio
    async def test_timeout(self):
        respx.get(f"{API}/users/octocat").mock(side_effect=httpx.ReadTimeout("slow"))

        async with httpx.AsyncClient() as http:
            with pytest.raises(DataSourceError, match="Timed out"):
                await GitHubClient(http).get_repository_owner("octocat")

    @respx.mock
    @pytest.mark.asyncio
    async def test_network_error(self):
        respx.get(f"{API}/users/octocat").mock(side_effect=httpx.ConnectError("refused"))

        async with httpx.AsyncClient() as http:
            with pytest.raises(DataSourceError, match="Network error"):
                await GitHubClient(http).get_repository_owner("octocat")

    @respx.mock
    @pytest.mark.asyncio
    async def test_invalid_json(self):
        respx.get(f"{API}/users/octocat").mock(return_value=Response(200, content=b"<html>"))

        async with httpx.AsyncClient() as http:
            with pytest.raises(DataSourceError, match="invalid JSON"):
                await GitHubClient(http).get_repository_owner("octocat")

    @respx.mock
    @pytest.mark.asyncio
    async def test_custom_base_url(self, user_payload):
        route = respx.get("https://ghe.example.com/api/v3/users/octocat").mock(
            return_value=Response(200, json=user_payload)
        )

        async with httpx.AsyncClient() as http:
            client = GitHubClient(http, base_url="https://ghe.example.com/api/v3/")
            await client.get_repository_owner("octocat")

        assert route.called
