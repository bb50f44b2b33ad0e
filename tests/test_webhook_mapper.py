from __future__ import annotations

import pytest

from adapters.webhook_mapper import PayloadError, build_check_run_event, build_pull_request_event

REPOSITORY = {"name": "testing-things", "owner": {"login": "thundering-mona"}}


def test_build_pull_request_event() -> None:
    payload = {
        "action": "edited",
        "number": 1,
        "pull_request": {
            "number": 1,
            "state": "open",
            "body": "AB#1",
            "head": {"ref": "feature", "sha": "abc123"},
        },
        "repository": REPOSITORY,
        "sender": {"login": "octocat"},
    }
    event = build_pull_request_event(payload)
    assert event.action == "edited"
    assert (event.owner, event.repo, event.number) == ("thundering-mona", "testing-things", 1)
    assert event.state == "open"
    assert event.body == "AB#1"
    assert (event.head_branch, event.head_sha) == ("feature", "abc123")
    assert event.sender_login == "octocat"


def test_pull_request_number_falls_back_to_top_level() -> None:
    payload = {"action": "edited", "number": 7, "pull_request": {"state": "open"}, "repository": REPOSITORY}
    event = build_pull_request_event(payload)
    assert event.number == 7
    assert event.head_sha is None
    assert event.sender_login is None


@pytest.mark.parametrize(
    "payload",
    [
        {"action": "edited", "repository": REPOSITORY},
        {"action": "edited", "pull_request": {"number": 1}},
        {"action": "edited", "pull_request": {}, "repository": REPOSITORY},
        {"action": "edited", "pull_request": {"number": "abc"}, "repository": REPOSITORY},
        {"action": "edited", "pull_request": {"number": [1]}, "repository": REPOSITORY},
    ],
)
def test_incomplete_pull_request_payloads(payload: dict) -> None:
    with pytest.raises(PayloadError):
        build_pull_request_event(payload)


def test_check_run_prefers_check_suite() -> None:
    payload = {
        "action": "rerequested",
        "check_suite": {"head_branch": "suite", "head_sha": "s1", "pull_requests": [{"number": 5}]},
        "check_run": {"head_branch": "run", "head_sha": "r1", "pull_requests": [{"number": 6}]},
        "repository": REPOSITORY,
    }
    event = build_check_run_event(payload)
    assert (event.head_branch, event.head_sha, event.number) == ("suite", "s1", 5)


def test_check_run_falls_back_to_check_run() -> None:
    payload = {
        "action": "rerequested",
        "check_run": {"head_sha": "r1", "pull_requests": [{"number": 121}]},
        "repository": REPOSITORY,
        "sender": {"login": "copilot"},
    }
    event = build_check_run_event(payload)
    assert event.head_sha == "r1"
    assert event.head_branch is None
    assert event.number == 121
    assert event.sender_login == "copilot"


def test_check_run_without_pull_requests() -> None:
    payload = {"action": "rerequested", "check_run": {"head_sha": "r1", "pull_requests": []}, "repository": REPOSITORY}
    assert build_check_run_event(payload).number is None


def test_check_run_with_non_numeric_pull_request_number() -> None:
    payload = {
        "action": "rerequested",
        "check_run": {"head_sha": "r1", "pull_requests": [{"number": "abc"}]},
        "repository": REPOSITORY,
    }
    with pytest.raises(PayloadError):
        build_check_run_event(payload)
