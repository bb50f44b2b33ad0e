"""Core webhook event processing.

This module is integration-agnostic. It only relies on ports for reading pull
requests and publishing check runs, so the webhook server, the CLI and tests
all drive the same filtering rules.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from core.config import EventFilterConfig, StrictnessPolicy
from core.models import CheckRunEvent, CheckRunRequest, EventResult, PullRequestEvent
from core.ports import CheckRunPort, PullRequestPort
from core.validator import OPEN_STATE, validate_pull_request

LOGGER = logging.getLogger(__name__)

COPILOT_LOGIN = "copilot"
PULL_REQUEST_ACTIONS = ("edited", "reopened", "synchronize")
CHECK_RUN_ACTIONS = ("rerequested",)


class EventProcessor:
    """Orchestrates filtering, validation and check run creation."""

    def __init__(
        self,
        pull_requests: PullRequestPort,
        check_runs: CheckRunPort,
        policy: StrictnessPolicy,
        filters: EventFilterConfig,
    ) -> None:
        self._pull_requests = pull_requests
        self._check_runs = check_runs
        self._policy = policy
        self._filters = filters

    @property
    def pull_request_actions(self) -> tuple[str, ...]:
        if self._filters.process_pr_opened:
            return ("opened",) + PULL_REQUEST_ACTIONS
        return PULL_REQUEST_ACTIONS

    def _ignored(self, reason: str) -> EventResult:
        LOGGER.info("Ignoring event: %s", reason)
        return EventResult(action="ignored", reason=reason)

    async def _publish(self, request: CheckRunRequest, outcome=None) -> EventResult:
        LOGGER.info(
            "Creating check run for %s/%s (conclusion=%s, head_sha=%s)",
            request.owner,
            request.repo,
            request.conclusion.value,
            request.head_sha,
        )
        await self._check_runs.create_check_run(request)
        return EventResult(action="created", reason=request.title, outcome=outcome, check_run=request)

    async def handle_pull_request(self, event: PullRequestEvent) -> EventResult:
        """Process one pull_request webhook event."""

        started_at = datetime.now(timezone.utc)

        if event.action not in self.pull_request_actions:
            return self._ignored(f"pull_request.{event.action} is not handled")

        # New commits are always validated, even when Copilot pushed them.
        if (
            self._filters.ignore_copilot
            and event.action != "synchronize"
            and event.sender_login == COPILOT_LOGIN
        ):
            return self._ignored(f"pull_request.{event.action} triggered by Copilot")

        if event.state and event.state != OPEN_STATE:
            return self._ignored(f"pull request #{event.number} is {event.state}")

        LOGGER.info(
            "Handling pull_request.%s for %s/%s#%s (always_fetch=%s)",
            event.action,
            event.owner,
            event.repo,
            event.number,
            self._filters.always_fetch_pr,
        )

        if self._filters.always_fetch_pr:
            outcome = await validate_pull_request(
                self._pull_requests, event.owner, event.repo, event.number, self._policy
            )
        else:
            outcome = await validate_pull_request(
                self._pull_requests,
                event.owner,
                event.repo,
                event.number,
                self._policy,
                body=event.body,
                pr_state=event.state,
            )

        if outcome.skipped:
            LOGGER.info("Skipping check run for #%s (state=%s)", event.number, outcome.pr_state)
            return EventResult(action="skipped", reason=f"pull request is {outcome.pr_state}", outcome=outcome)

        request = CheckRunRequest(
            owner=event.owner,
            repo=event.repo,
            head_branch=event.head_branch,
            head_sha=event.head_sha,
            conclusion=outcome.conclusion,
            title=outcome.title,
            summary=outcome.summary,
            started_at=started_at,
        )
        return await self._publish(request, outcome)

    async def handle_check_run(self, event: CheckRunEvent) -> EventResult:
        """Process one check_run webhook event."""

        started_at = datetime.now(timezone.utc)

        if event.action not in CHECK_RUN_ACTIONS:
            return self._ignored(f"check_run.{event.action} is not handled")

        if self._filters.ignore_copilot and event.sender_login == COPILOT_LOGIN:
            return self._ignored(f"check_run.{event.action} triggered by Copilot")

        if not event.owner or not event.repo:
            return self._ignored("check_run event has no repository")

        LOGGER.info("Handling check run request for %s/%s#%s", event.owner, event.repo, event.number)

        outcome = None
        request = CheckRunRequest(
            owner=event.owner,
            repo=event.repo,
            head_branch=event.head_branch,
            head_sha=event.head_sha,
            started_at=started_at,
        )
        # Without a pull request number there is nothing to validate, so the
        # default passing check run is published.
        if event.number:
            outcome = await validate_pull_request(
                self._pull_requests, event.owner, event.repo, event.number, self._policy
            )
            if outcome.skipped:
                LOGGER.info("Skipping check run for #%s (state=%s)", event.number, outcome.pr_state)
                return EventResult(action="skipped", reason=f"pull request is {outcome.pr_state}", outcome=outcome)
            request = CheckRunRequest(
                owner=event.owner,
                repo=event.repo,
                head_branch=event.head_branch,
                head_sha=event.head_sha,
                conclusion=outcome.conclusion,
                title=outcome.title,
                summary=outcome.summary,
                started_at=started_at,
            )

        return await self._publish(request, outcome)
