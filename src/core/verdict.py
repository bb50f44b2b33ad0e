"""Conclusion, title and summary composition (core domain)."""

from __future__ import annotations

from typing import Sequence

from core.config import StrictnessPolicy
from core.models import Conclusion, ExtractionResult, Verdict

BOARDS_INTEGRATION_URL = (
    "https://learn.microsoft.com/en-us/azure/devops/boards/github/?view=azure-devops"
)

NO_REFERENCES_SUMMARY = (
    "No work item references found. Add AB#<id> or [AB#<id>](...). "
    "If work items are already linked, re-run this check from the Checks tab to refresh."
)
NO_WORK_ITEMS_TITLE = "No work items found"

_UNLINKED_CAUSES = (
    f"Unlinked references may mean the [Boards integration]({BOARDS_INTEGRATION_URL}) "
    "has not linked them yet, is misconfigured, or the work item number is invalid."
)
NOTHING_LINKED_GUIDANCE = (
    "No work items linked yet. Validate the referenced work item numbers or verify the "
    f"[Boards integration]({BOARDS_INTEGRATION_URL}) is working. "
    "Will revalidate once they are linked."
)
ALL_MUST_BE_LINKED_GUIDANCE = f"**All work items must be linked.** {_UNLINKED_CAUSES}"
REVIEW_UNLINKED_GUIDANCE = f"Review the unlinked references. {_UNLINKED_CAUSES}"


def pluralize(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


def determine_conclusion(has_linked: bool, has_unlinked: bool, require_all_linked: bool) -> Conclusion:
    """Apply the decision table.

    At least one linked work item is required under every policy; the strict
    policy also fails when any bare reference remains.
    """

    if not has_linked:
        return Conclusion.FAILURE
    if require_all_linked and has_unlinked:
        return Conclusion.FAILURE
    return Conclusion.SUCCESS


def build_title(linked: Sequence[str], unlinked: Sequence[str]) -> str:
    linked_count = len(linked)
    unlinked_count = len(unlinked)
    if linked_count == 0 and unlinked_count == 0:
        return NO_WORK_ITEMS_TITLE

    title = f"{linked_count} {pluralize(linked_count, 'work item', 'work items')} linked"
    if unlinked_count > 0:
        title += f" and {unlinked_count} {pluralize(unlinked_count, 'work item', 'work items')} unlinked"
    return title


def _bullet_list(entries: Sequence[str]) -> str:
    if not entries:
        return "- _None_"
    return "\n".join(f"- {entry}" for entry in entries)


def build_summary(linked: Sequence[str], unlinked: Sequence[str], require_all_linked: bool = False) -> str:
    """Render the Markdown report shown in the check run output."""

    if not linked and not unlinked:
        return NO_REFERENCES_SUMMARY

    parts = [
        f"**Linked work items ({len(linked)}):**",
        _bullet_list(linked),
        "",
        f"**Unlinked references ({len(unlinked)}):**",
        _bullet_list(unlinked),
    ]

    if unlinked:
        parts.append("")
        if not linked:
            parts.append(NOTHING_LINKED_GUIDANCE)
        elif require_all_linked:
            parts.append(ALL_MUST_BE_LINKED_GUIDANCE)
        else:
            parts.append(REVIEW_UNLINKED_GUIDANCE)

    return "\n".join(parts)


def decide(extraction: ExtractionResult, policy: StrictnessPolicy) -> Verdict:
    """Turn an extraction result into a conclusion, title and summary."""

    linked = extraction.linked
    unlinked = extraction.unlinked
    return Verdict(
        conclusion=determine_conclusion(
            has_linked=bool(linked),
            has_unlinked=bool(unlinked),
            require_all_linked=policy.require_all_linked,
        ),
        title=build_title(linked, unlinked),
        summary=build_summary(linked, unlinked, policy.require_all_linked),
    )
