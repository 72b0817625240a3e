"""
GitHub OAuth and REST API client.
"""
from typing import Any
import httpx
from fastapi import HTTPException, status

from codeclub.core import config
from codeclub.utils import get_logger


log = get_logger(__name__)

GITHUB_API = "https://api.github.com"
GITHUB_OAUTH = "https://github.com/login/oauth"


class GitHubClient:
    """Thin async wrapper over the endpoints the sign-in flow needs."""

    def __init__(self, http: httpx.AsyncClient | None = None):
        self._http = http

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        headers = {"Accept": "application/json", **kwargs.pop("headers", {})}
        if self._http is not None:
            return await self._http.request(method, url, headers=headers, **kwargs)
        async with httpx.AsyncClient(timeout=10.0) as client:
            return await client.request(method, url, headers=headers, **kwargs)

    async def exchange_code_for_token(self, code: str) -> str:
        """
        Trade an OAuth authorization code for an access token.

        Raises:
            HTTPException: 401 if GitHub refuses the code
        """
        try:
            response = await self._request(
                "POST",
                f"{GITHUB_OAUTH}/access_token",
                json={
                    "client_id": config.GITHUB_CLIENT_ID,
                    "client_secret": config.GITHUB_CLIENT_SECRET,
                    "code": code,
                    "redirect_uri": config.GITHUB_REDIRECT_URI,
                },
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            log.warning("GitHub token exchange failed: %s", e)
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="GitHub authentication failed")

        access_token = response.json().get("access_token")
        if not access_token:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="GitHub authentication failed")
        return access_token

    async def get_user(self, access_token: str) -> dict[str, Any]:
        """Profile of the token owner (``id``, ``login``, ``email``, ``avatar_url``, ``html_url``, ``name``)."""
        try:
            response = await self._request(
                "GET",
                f"{GITHUB_API}/user",
                headers={"Authorization": f"Bearer {access_token}"},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            log.warning("Fetching GitHub user failed: %s", e)
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Failed to fetch GitHub user data")
        return response.json()

    async def get_user_repos(self, username: str) -> list[dict[str, Any]]:
        try:
            response = await self._request(
                "GET",
                f"{GITHUB_API}/users/{username}/repos",
                params={"sort": "updated", "per_page": 100},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            log.warning("Fetching repos for %s failed: %s", username, e)
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to fetch GitHub repositories")
        return response.json()


def get_github_client() -> GitHubClient:
    return GitHubClient()
