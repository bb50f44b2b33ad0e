"""Check run payload formatting.

Keeping the payload shape here prevents drift between the webhook path and
the CLI, and keeps the published check consistent regardless of trigger.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional, Union

from core.models import CheckRunRequest, Conclusion

CHECK_NAME = "Azure Boards Link Check"


def format_timestamp(value: Optional[Union[datetime, str]]) -> str:
    """Return an ISO-8601 UTC timestamp in the form the Checks API expects."""

    if value is None:
        value = datetime.now(timezone.utc)
    if isinstance(value, str):
        return value
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_check_run_payload(
    head_branch: Optional[str],
    head_sha: Optional[str],
    conclusion: Union[Conclusion, str] = Conclusion.SUCCESS,
    summary: str = "The check has passed!",
    title: str = "Work item validation",
    started_at: Optional[Union[datetime, str]] = None,
    completed_at: Optional[Union[datetime, str]] = None,
) -> dict[str, Any]:
    """Create the JSON body for ``POST /repos/{owner}/{repo}/check-runs``."""

    return {
        "name": CHECK_NAME,
        "head_branch": head_branch,
        "head_sha": head_sha,
        "status": "completed",
        "started_at": format_timestamp(started_at),
        "conclusion": Conclusion(conclusion).value,
        "completed_at": format_timestamp(completed_at),
        "output": {
            "title": title,
            "summary": summary,
        },
    }


def payload_from_request(request: CheckRunRequest) -> dict[str, Any]:
    return build_check_run_payload(
        head_branch=request.head_branch,
        head_sha=request.head_sha,
        conclusion=request.conclusion,
        summary=request.summary,
        title=request.title,
        started_at=request.started_at,
    )


def format_report(title: str, conclusion: Union[Conclusion, str], summary: str) -> str:
    """Render a validation result as plain text for the command line."""

    return "\n".join(
        [
            f"{CHECK_NAME}: {Conclusion(conclusion).value}",
            title,
            "──────────────",
            summary,
        ]
    )
