"""GitHub REST API adapter.

Implements both core ports: reading pull requests and publishing check runs.
"""

from __future__ import annotations

import asyncio
import json
import logging
import urllib.error
import urllib.request
from typing import Any, Optional

from adapters.check_run_formatting import payload_from_request
from core.models import CheckRunRequest, PullRequestSnapshot

LOGGER = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"


class GitHubApiError(RuntimeError):
    """Raised when a GitHub API call fails."""

    def __init__(self, status: Optional[int], message: str) -> None:
        super().__init__(f"GitHub API error {status}: {message}" if status else f"GitHub API error: {message}")
        self.status = status
        self.message = message


class GitHubClient:
    """Adapter that talks to the GitHub REST API with a bearer token."""

    def __init__(self, token: str, api_url: str = DEFAULT_API_URL, timeout: int = 10) -> None:
        self._token = token
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout

    def _request(self, method: str, path: str, payload: Optional[dict[str, Any]] = None) -> Any:
        data = json.dumps(payload).encode("utf-8") if payload is not None else None
        request = urllib.request.Request(f"{self._api_url}{path}", data=data, method=method)
        request.add_header("Accept", "application/vnd.github+json")
        request.add_header("Authorization", f"Bearer {self._token}")
        request.add_header("X-GitHub-Api-Version", "2022-11-28")
        request.add_header("User-Agent", "boards-link-check")
        if data is not None:
            request.add_header("Content-Type", "application/json")
        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                raw = response.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="replace")
            raise GitHubApiError(e.code, _error_message(body)) from e
        except urllib.error.URLError as e:
            raise GitHubApiError(None, str(e.reason)) from e
        return json.loads(raw) if raw else {}

    async def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequestSnapshot:
        """Fetch a pull request and keep only its body and state."""

        data = await asyncio.to_thread(self._request, "GET", f"/repos/{owner}/{repo}/pulls/{number}")
        return PullRequestSnapshot(
            number=int(data.get("number", number)),
            body=data.get("body"),
            state=data.get("state"),
        )

    async def create_check_run(self, request: CheckRunRequest) -> Any:
        """Publish the check run for a validated head commit."""

        payload = payload_from_request(request)
        LOGGER.debug("POST check-runs for %s/%s: %s", request.owner, request.repo, payload["output"]["title"])
        path = f"/repos/{request.owner}/{request.repo}/check-runs"
        return await asyncio.to_thread(self._request, "POST", path, payload)


def _error_message(body: str) -> str:
    try:
        parsed = json.loads(body)
    except ValueError:
        return body
    if isinstance(parsed, dict) and parsed.get("message"):
        return str(parsed["message"])
    return body
