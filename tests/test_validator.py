from __future__ import annotations

import asyncio
from typing import Optional

import pytest

from core.config import StrictnessPolicy
from core.models import Conclusion, PullRequestSnapshot
from core.validator import SKIPPED_SUMMARY, evaluate_text, validate_pull_request

LINK_123 = "[AB#123](https://dev.azure.com/org/project/_workitems/edit/123)"
LENIENT = StrictnessPolicy(require_all_linked=False)
STRICT = StrictnessPolicy(require_all_linked=True)


class FakePullRequests:
    def __init__(self, body: Optional[str], state: Optional[str] = "open") -> None:
        self.body = body
        self.state = state
        self.calls: list[tuple[str, str, int]] = []

    async def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequestSnapshot:
        self.calls.append((owner, repo, number))
        return PullRequestSnapshot(number=number, body=self.body, state=self.state)


def _validate(pull_requests, policy=LENIENT, **kwargs):
    return asyncio.run(validate_pull_request(pull_requests, "test", "repo", 1, policy, **kwargs))


@pytest.mark.parametrize("state", ["closed", "merged"])
def test_supplied_closed_state_is_skipped(state: str) -> None:
    outcome = _validate(None, body=LINK_123, pr_state=state)
    assert outcome.skipped is True
    assert outcome.conclusion is Conclusion.NEUTRAL
    assert outcome.pr_state == state
    assert outcome.summary == SKIPPED_SUMMARY
    assert outcome.title == "No work items found"
    assert outcome.linked == ()
    assert outcome.unlinked == ()


def test_supplied_body_skips_fetch() -> None:
    pull_requests = FakePullRequests(body="ignored")
    outcome = _validate(pull_requests, body=LINK_123, pr_state="open")
    assert pull_requests.calls == []
    assert outcome.skipped is False
    assert outcome.conclusion is Conclusion.SUCCESS
    assert outcome.pr_state == "open"
    assert outcome.linked == (LINK_123,)


def test_supplied_none_body_is_empty() -> None:
    outcome = _validate(None, body=None, pr_state="open")
    assert outcome.conclusion is Conclusion.FAILURE
    assert "No work item references found" in outcome.summary


def test_fetches_when_no_body_supplied() -> None:
    link = "[AB#999](https://dev.azure.com/org/project/_workitems/edit/999)"
    pull_requests = FakePullRequests(body=link)
    outcome = _validate(pull_requests)
    assert pull_requests.calls == [("test", "repo", 1)]
    assert outcome.conclusion is Conclusion.SUCCESS
    assert outcome.linked == (link,)


def test_fetched_null_body() -> None:
    outcome = _validate(FakePullRequests(body=None))
    assert outcome.conclusion is Conclusion.FAILURE
    assert outcome.linked == ()
    assert outcome.unlinked == ()


def test_fetched_closed_state_is_skipped() -> None:
    outcome = _validate(FakePullRequests(body=LINK_123, state="closed"))
    assert outcome.skipped is True
    assert outcome.conclusion is Conclusion.NEUTRAL


def test_strict_policy_fails_mixed_references() -> None:
    outcome = _validate(None, policy=STRICT, body=f"{LINK_123}\nAB#456", pr_state="open")
    assert outcome.conclusion is Conclusion.FAILURE
    assert "**All work items must be linked.**" in outcome.summary


def test_lenient_policy_passes_mixed_references() -> None:
    outcome = _validate(None, body=f"{LINK_123}\nAB#456", pr_state="open")
    assert outcome.conclusion is Conclusion.SUCCESS
    assert len(outcome.linked) == 1
    assert len(outcome.unlinked) == 1


def test_missing_source_without_body_is_an_error() -> None:
    with pytest.raises(ValueError):
        _validate(None)


def test_evaluate_text_has_no_state_gate() -> None:
    outcome = evaluate_text("Fixes AB#456 and AB#789", LENIENT)
    assert outcome.skipped is False
    assert outcome.unlinked == ("AB#456", "AB#789")
    assert outcome.conclusion is Conclusion.FAILURE
