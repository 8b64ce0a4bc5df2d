"""GitHub REST API client returning records tagged for the GraphQL schema."""

from __future__ import annotations

import base64
from typing import Any
from urllib.parse import quote, urlsplit

import httpx

from ..engine.errors import DataSourceError, RateLimitError
from ..logging import get_logger
from .base import Record

logger = get_logger(__name__)

GITHUB_WEB_HOSTS = frozenset({"github.com", "www.github.com"})

# Names that would collapse or empty a URL path segment
_DOT_SEGMENTS = frozenset({"", ".", ".."})

# Path prefixes on github.com that are site pages rather than owners
_RESERVED_OWNER_PATHS = frozenset(
    {
        "about",
        "explore",
        "features",
        "login",
        "marketplace",
        "notifications",
        "orgs",
        "settings",
        "topics",
        "trending",
    }
)


def topic_node_id(name: str) -> str:
    """Stable opaque ID for a topic; the REST API exposes none."""
    return base64.b64encode(f"Topic:{name}".encode()).decode("ascii")


def topic_record(name: str, related_names: list[str] | None = None) -> Record:
    """Build a Topic record; related names stay None until fetched."""
    return {
        "type": "Topic",
        "id": topic_node_id(name),
        "name": name,
        "relatedTopicNames": related_names,
    }


def owner_record(data: dict[str, Any]) -> Record:
    """Map a GitHub user/organization payload to a RepositoryOwner record."""
    login = data["login"]
    return {
        "type": data.get("type"),
        "id": data.get("node_id"),
        "login": login,
        "name": data.get("name"),
        "bio": data.get("bio"),
        "company": data.get("company"),
        "description": data.get("description") or data.get("bio"),
        "location": data.get("location"),
        "avatarUrl": data.get("avatar_url"),
        "url": data.get("html_url") or f"https://github.com/{login}",
        "resourcePath": f"/{login}",
        "createdAt": data.get("created_at"),
    }


def repository_record(data: dict[str, Any]) -> Record:
    """Map a GitHub repository payload to a Repository record."""
    full_name = data["full_name"]
    return {
        "type": "Repository",
        "id": data.get("node_id"),
        "name": data["name"],
        "nameWithOwner": full_name,
        "description": data.get("description"),
        "owner": owner_record(data["owner"]),
        "isPrivate": bool(data.get("private", False)),
        "isFork": bool(data.get("fork", False)),
        "stargazerCount": data.get("stargazers_count", 0),
        "forkCount": data.get("forks_count", 0),
        "primaryLanguage": data.get("language"),
        "homepageUrl": data.get("homepage") or None,
        "createdAt": data.get("created_at"),
        "url": data.get("html_url") or f"https://github.com/{full_name}",
        "resourcePath": f"/{full_name}",
        "topicNames": list(data.get("topics") or []),
    }


def parse_resource_url(url: str) -> tuple[str, ...] | None:
    """Split a github.com URL into its owner (and repository) path segments.

    Returns:
        ``(login,)`` for an owner page, ``(owner, name)`` for a repository,
        or None when the URL does not address one of those.
    """
    parts = urlsplit(url)
    if parts.netloc:
        if parts.scheme not in ("http", "https") or parts.hostname not in GITHUB_WEB_HOSTS:
            return None
    segments = [segment for segment in parts.path.split("/") if segment]
    if not segments or segments[0].lower() in _RESERVED_OWNER_PATHS:
        return None
    if len(segments) == 1:
        return (segments[0],)
    if len(segments) == 2:
        name = segments[1]
        if name.endswith(".git"):
            name = name[: -len(".git")]
        return (segments[0], name)
    return None


class GitHubClient:
    """GitHubDataSource backed by the GitHub v3 REST API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = "https://api.github.com",
        token: str | None = None,
        user_agent: str = "octograph/0.1",
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._headers: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "User-Agent": user_agent,
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    async def get_topic(self, name: str) -> Record | None:
        """GET /search/topics?q={name} → exact-name match or None."""
        data = await self._get_json("/search/topics", params={"q": name, "per_page": "10"})
        if data is None:
            return None
        for item in data.get("items", []):
            if item.get("name", "").lower() == name.lower():
                related = [
                    entry["topic_relation"]["name"]
                    for entry in item.get("related") or []
                    if entry.get("topic_relation", {}).get("name")
                ]
                return topic_record(item["name"], related)
        return None

    async def get_repository_owner(self, login: str) -> Record | None:
        """GET /users/{login} → User or Organization record."""
        if login in _DOT_SEGMENTS:
            return None
        data = await self._get_json(f"/users/{_path_segment(login)}")
        return owner_record(data) if data is not None else None

    async def get_repository(self, owner: str, name: str) -> Record | None:
        """GET /repos/{owner}/{name} → Repository record."""
        if owner in _DOT_SEGMENTS or name in _DOT_SEGMENTS:
            return None
        data = await self._get_json(f"/repos/{_path_segment(owner)}/{_path_segment(name)}")
        return repository_record(data) if data is not None else None

    async def get_uniform_resource_locatable(self, url: str) -> Record | None:
        """Dispatch a github.com URL to the owner or repository lookup."""
        segments = parse_resource_url(url)
        if segments is None:
            logger.debug("URL does not address a GitHub resource", url=url)
            return None
        if len(segments) == 1:
            return await self.get_repository_owner(segments[0])
        return await self.get_repository(*segments)

    async def _get_json(
        self, endpoint: str, params: dict[str, str] | None = None
    ) -> dict[str, Any] | None:
        """Perform a GitHub API GET, translating failures into DataSourceError.

        Returns:
            Decoded JSON body, or None for a 404
        """
        url = f"{self._base_url}{endpoint}"
        try:
            resp = await self._client.get(url, headers=self._headers, params=params)
        except httpx.TimeoutException as exc:
            logger.warning("GitHub request timed out", url=url)
            raise DataSourceError(f"Timed out fetching {endpoint} from GitHub") from exc
        except httpx.HTTPError as exc:
            logger.warning("GitHub request failed", url=url, error=str(exc))
            raise DataSourceError(f"Network error fetching {endpoint} from GitHub: {exc}") from exc

        if resp.status_code == 404:
            return None

        if resp.status_code in (403, 429) and resp.headers.get("x-ratelimit-remaining") == "0":
            reset = resp.headers.get("x-ratelimit-reset")
            logger.warning("GitHub rate limit exhausted", url=url, reset=reset)
            raise RateLimitError(
                "GitHub API rate limit exceeded"
                + (f"; resets at epoch {reset}" if reset else "")
            )

        if resp.status_code >= 400:
            logger.warning("GitHub returned an error", url=url, status_code=resp.status_code)
            raise DataSourceError(f"GitHub returned HTTP {resp.status_code} for {endpoint}")

        try:
            return resp.json()
        except ValueError as exc:
            raise DataSourceError(f"GitHub returned invalid JSON for {endpoint}") from exc


def _path_segment(value: str) -> str:
    # Caller-supplied names must not reach other API routes
    return quote(value, safe="")


def create_http_client(timeout: float = 10.0) -> httpx.AsyncClient:
    """Build the shared AsyncClient; every upstream call is bounded by ``timeout``."""
    return httpx.AsyncClient(timeout=httpx.Timeout(timeout), follow_redirects=True)
