"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for the pull request source and the check
run sink so that the core can be reused with different GitHub clients.
"""

from __future__ import annotations

from typing import Any, Protocol

from core.models import CheckRunRequest, PullRequestSnapshot


class PullRequestPort(Protocol):
    """Read access to pull requests required by the validator."""

    async def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequestSnapshot:
        ...


class CheckRunPort(Protocol):
    """Check run publishing required by the event processor."""

    async def create_check_run(self, request: CheckRunRequest) -> Any:
        ...
