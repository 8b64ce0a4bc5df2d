"""
Tests for the HTTP surface: GraphQL execution, GraphiQL and the legacy path.
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from octograph.api.app import create_app
from octograph.api.endpoints.graphql import ClientDisconnected, run_until_disconnected


@pytest.fixture
def app(data_source):
    return create_app(data_source=data_source, graphiql=True)


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


class TestGraphQLPost:
    """Tests for POST /."""

    @pytest.mark.asyncio
    async def test_execute_query(self, client):
        response = await client.post(
            "/", json={"query": '{ topic(name: "graphql") { name } }'}
        )

        assert response.status_code == 200
        assert response.json() == {"data": {"topic": {"name": "graphql"}}}

    @pytest.mark.asyncio
    async def test_variables_and_operation_name(self, client):
        response = await client.post(
            "/",
            json={
                "query": """
                    query Owner($login: String!) { repositoryOwner(login: $login) { login } }
                    query Other { __typename }
                """,
                "variables": {"login": "github"},
                "operationName": "Owner",
            },
        )

        assert response.status_code == 200
        assert response.json()["data"] == {"repositoryOwner": {"login": "github"}}

    @pytest.mark.asyncio
    async def test_partial_response_is_200(self, client):
        response = await client.post(
            "/",
            json={"query": '{ topic { name } repositoryOwner(login: "octocat") { login } }'},
        )

        body = response.json()
        assert response.status_code == 200
        assert body["data"] == {"topic": None, "repositoryOwner": {"login": "octocat"}}
        assert body["errors"][0]["path"] == ["topic"]
        assert body["errors"][0]["extensions"] == {"code": "ARGUMENT_VALIDATION_FAILED"}

    @pytest.mark.asyncio
    async def test_document_error_is_400(self, client):
        response = await client.post("/", json={"query": "{ viewer { login } }"})

        body = response.json()
        assert response.status_code == 400
        assert body["data"] is None
        assert body["errors"][0]["message"].startswith(
            "Cannot query field 'viewer' on type 'Query'."
        )

    @pytest.mark.asyncio
    async def test_syntax_error_is_400(self, client):
        response = await client.post("/", json={"query": "{ topic("})

        assert response.status_code == 400
        assert response.json()["data"] is None

    @pytest.mark.asyncio
    async def test_body_not_json(self, client):
        response = await client.post(
            "/", content=b"not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert "non-empty 'query'" in response.json()["errors"][0]["message"]

    @pytest.mark.asyncio
    async def test_body_without_query(self, client):
        response = await client.post("/", json={"variables": {}})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client):
        response = await client.post(
            "/", json={"query": "{ __typename }"}, headers={"X-Request-ID": "req-123"}
        )

        assert response.headers["X-Request-ID"] == "req-123"

    @pytest.mark.asyncio
    async def test_data_source_not_initialized(self):
        app = create_app(graphiql=True)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            response = await c.post("/", json={"query": "{ __typename }"})

        assert response.status_code == 503


class TestGraphQLGet:
    """Tests for GET /."""

    @pytest.mark.asyncio
    async def test_graphiql_without_query(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "graphiql" in response.text.lower()

    @pytest.mark.asyncio
    async def test_graphiql_for_browsers(self, client):
        response = await client.get(
            "/", params={"query": "{ __typename }"}, headers={"Accept": "text/html"}
        )

        assert response.headers["content-type"].startswith("text/html")

    @pytest.mark.asyncio
    async def test_execute_from_query_string(self, client):
        response = await client.get(
            "/",
            params={
                "query": "query ($name: String!) { topic(name: $name) { name } }",
                "variables": json.dumps({"name": "api"}),
            },
            headers={"Accept": "application/json"},
        )

        assert response.status_code == 200
        assert response.json() == {"data": {"topic": {"name": "api"}}}

    @pytest.mark.asyncio
    async def test_invalid_variables(self, client):
        response = await client.get(
            "/",
            params={"query": "{ __typename }", "variables": "{not json"},
            headers={"Accept": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["message"] == "Variables are invalid JSON."

    @pytest.mark.asyncio
    async def test_graphiql_disabled(self, data_source):
        app = create_app(data_source=data_source, graphiql=False)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            response = await c.get("/")

        assert response.status_code == 400
        assert response.json()["errors"][0]["message"] == "Must provide query string."


class TestRoutes:
    """Tests for the auxiliary routes."""

    @pytest.mark.asyncio
    async def test_legacy_path_redirects(self, client):
        get = await client.get("/graphql")
        post = await client.post("/graphql", json={"query": "{ __typename }"})

        assert get.status_code == 307
        assert get.headers["location"] == "/"
        assert post.status_code == 307

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestRunUntilDisconnected:
    """Tests for cancelling work when the client goes away."""

    @pytest.mark.asyncio
    async def test_returns_result(self):
        request = MagicMock()
        request.is_disconnected = AsyncMock(return_value=False)

        async def work():
            return 42

        assert await run_until_disconnected(request, work(), poll_interval=0.01) == 42

    @pytest.mark.asyncio
    async def test_cancels_on_disconnect(self):
        request = MagicMock()
        request.is_disconnected = AsyncMock(return_value=True)
        cancelled = asyncio.Event()

        async def work():
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        with pytest.raises(ClientDisconnected):
            await run_until_disconnected(request, work(), poll_interval=0.01)

        assert cancelled.is_set()
