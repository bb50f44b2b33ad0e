"""GitHub webhook-to-core event mapping adapter.

This keeps GitHub payload details out of the core processor.
"""

from __future__ import annotations

from typing import Any, Optional

from core.models import CheckRunEvent, PullRequestEvent


class PayloadError(ValueError):
    """Raised when a webhook payload lacks a field the core needs."""


def _get(mapping: Any, *keys: str) -> Any:
    current = mapping
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def _repository(payload: dict) -> tuple[Optional[str], Optional[str]]:
    return _get(payload, "repository", "owner", "login"), _get(payload, "repository", "name")


def _pull_request_number(value: Any) -> int:
    if isinstance(value, bool):
        raise PayloadError(f"pull request number is not an integer: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise PayloadError(f"pull request number is not an integer: {value!r}") from e


def _first_pull_request_number(source: Any) -> Optional[int]:
    pull_requests = _get(source, "pull_requests")
    if not pull_requests or not isinstance(pull_requests, list):
        return None
    number = _get(pull_requests[0], "number")
    return _pull_request_number(number) if number is not None else None


def build_pull_request_event(payload: dict) -> PullRequestEvent:
    """Build a PullRequestEvent from a ``pull_request`` webhook payload."""

    pull_request = payload.get("pull_request")
    if not isinstance(pull_request, dict):
        raise PayloadError("pull_request payload has no pull_request object")

    owner, repo = _repository(payload)
    if not owner or not repo:
        raise PayloadError("pull_request payload has no repository")

    number = pull_request.get("number", payload.get("number"))
    if number is None:
        raise PayloadError("pull_request payload has no number")

    return PullRequestEvent(
        action=str(payload.get("action", "")),
        owner=owner,
        repo=repo,
        number=_pull_request_number(number),
        state=pull_request.get("state"),
        body=pull_request.get("body"),
        head_branch=_get(pull_request, "head", "ref"),
        head_sha=_get(pull_request, "head", "sha"),
        sender_login=_get(payload, "sender", "login"),
    )


def build_check_run_event(payload: dict) -> CheckRunEvent:
    """Build a CheckRunEvent from a ``check_run`` webhook payload.

    A top-level check suite wins over the check run for head and pull
    request details.
    """

    check_suite = payload.get("check_suite")
    check_run = payload.get("check_run")
    owner, repo = _repository(payload)

    head_branch = _get(check_suite, "head_branch") or _get(check_run, "head_branch")
    head_sha = _get(check_suite, "head_sha") or _get(check_run, "head_sha")
    number = _first_pull_request_number(check_suite) or _first_pull_request_number(check_run)

    return CheckRunEvent(
        action=str(payload.get("action", "")),
        owner=owner,
        repo=repo,
        number=number,
        head_branch=head_branch,
        head_sha=head_sha,
        sender_login=_get(payload, "sender", "login"),
    )
