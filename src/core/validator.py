"""Pull request validation against the work item rules."""

from __future__ import annotations

import logging
from typing import Any, Optional

from core.config import StrictnessPolicy
from core.models import Conclusion, ValidationOutcome
from core.ports import PullRequestPort
from core.verdict import NO_WORK_ITEMS_TITLE, decide
from core.work_items import extract_work_items

LOGGER = logging.getLogger(__name__)

OPEN_STATE = "open"
SKIPPED_SUMMARY = "PR is closed; skipping validation."

# Distinguishes "no body supplied" from a supplied body of None.
_FETCH: Any = object()


def skipped_outcome(pr_state: str) -> ValidationOutcome:
    return ValidationOutcome(
        conclusion=Conclusion.NEUTRAL,
        summary=SKIPPED_SUMMARY,
        title=NO_WORK_ITEMS_TITLE,
        pr_state=pr_state,
        skipped=True,
    )


def evaluate_text(
    text: Optional[str],
    policy: StrictnessPolicy,
    pr_state: Optional[str] = None,
) -> ValidationOutcome:
    """Extract references from text and build the outcome, with no state gate."""

    extraction = extract_work_items(text)
    verdict = decide(extraction, policy)
    return ValidationOutcome(
        conclusion=verdict.conclusion,
        summary=verdict.summary,
        title=verdict.title,
        linked=extraction.linked,
        unlinked=extraction.unlinked,
        pr_state=pr_state,
    )


async def validate_pull_request(
    pull_requests: Optional[PullRequestPort],
    owner: str,
    repo: str,
    number: int,
    policy: StrictnessPolicy,
    body: Optional[str] = _FETCH,
    pr_state: Optional[str] = None,
) -> ValidationOutcome:
    """Validate one pull request body for Azure Boards references.

    When ``body`` is passed (``None`` counts as an empty body) the caller's
    copy and ``pr_state`` are trusted and no API call is made. Otherwise the
    pull request is fetched. Pull requests in any state other than ``open``
    are skipped with a neutral conclusion.
    """

    if body is _FETCH:
        if pull_requests is None:
            raise ValueError("A pull request source is required when no body is supplied")
        snapshot = await pull_requests.get_pull_request(owner, repo, number)
        text = snapshot.body or ""
        pr_state = snapshot.state
    else:
        text = body or ""

    if pr_state and pr_state != OPEN_STATE:
        LOGGER.info("Skipping validation for %s/%s#%s (state=%s)", owner, repo, number, pr_state)
        return skipped_outcome(pr_state)

    return evaluate_text(text, policy, pr_state=pr_state)
