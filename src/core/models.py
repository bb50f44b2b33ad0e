"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to GitHub payload shapes or any HTTP client types.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class Conclusion(str, Enum):
    """Check-run conclusions produced by the verdict builder."""

    SUCCESS = "success"
    FAILURE = "failure"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class WorkItemReference:
    """A single work item mention found in a pull request body."""

    work_item_id: str
    rendered: str
    linked: bool
    url: Optional[str] = None


@dataclass(frozen=True)
class ExtractionResult:
    """Linked and unlinked references, in first-occurrence order."""

    linked: Tuple[str, ...] = ()
    unlinked: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Verdict:
    conclusion: Conclusion
    title: str
    summary: str


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of validating one pull request."""

    conclusion: Conclusion
    summary: str
    title: str
    linked: Tuple[str, ...] = ()
    unlinked: Tuple[str, ...] = ()
    pr_state: Optional[str] = None
    skipped: bool = False


@dataclass(frozen=True)
class PullRequestSnapshot:
    """The subset of a pull request the validator needs."""

    number: int
    body: Optional[str]
    state: Optional[str]


@dataclass(frozen=True)
class PullRequestEvent:
    """Minimal pull_request webhook context used by the event processor."""

    action: str
    owner: str
    repo: str
    number: int
    state: Optional[str]
    body: Optional[str]
    head_branch: Optional[str]
    head_sha: Optional[str]
    sender_login: Optional[str] = None


@dataclass(frozen=True)
class CheckRunEvent:
    """Minimal check_run webhook context used by the event processor."""

    action: str
    owner: Optional[str]
    repo: Optional[str]
    number: Optional[int]
    head_branch: Optional[str]
    head_sha: Optional[str]
    sender_login: Optional[str] = None


@dataclass(frozen=True)
class CheckRunRequest:
    """Everything a check run adapter needs to publish one result."""

    owner: str
    repo: str
    head_branch: Optional[str]
    head_sha: Optional[str]
    conclusion: Conclusion = Conclusion.SUCCESS
    title: str = "Work item validation"
    summary: str = "The check has passed!"
    started_at: Optional[datetime] = None


@dataclass(frozen=True)
class EventResult:
    """What the event processor decided to do with one webhook event."""

    action: str
    reason: str
    outcome: Optional[ValidationOutcome] = None
    check_run: Optional[CheckRunRequest] = None
