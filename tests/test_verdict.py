from __future__ import annotations

import re

import pytest

from core.config import StrictnessPolicy
from core.models import Conclusion, ExtractionResult
from core.verdict import (
    NO_REFERENCES_SUMMARY,
    build_summary,
    build_title,
    decide,
    determine_conclusion,
)

LINK_123 = "[AB#123](https://dev.azure.com/org/project/_workitems/edit/123)"
LENIENT = StrictnessPolicy(require_all_linked=False)
STRICT = StrictnessPolicy(require_all_linked=True)


@pytest.mark.parametrize(
    "has_linked, has_unlinked, require_all_linked, expected",
    [
        (False, False, False, Conclusion.FAILURE),
        (False, True, False, Conclusion.FAILURE),
        (False, True, True, Conclusion.FAILURE),
        (True, True, True, Conclusion.FAILURE),
        (True, True, False, Conclusion.SUCCESS),
        (True, False, False, Conclusion.SUCCESS),
        (True, False, True, Conclusion.SUCCESS),
    ],
)
def test_decision_table(has_linked: bool, has_unlinked: bool, require_all_linked: bool, expected) -> None:
    assert determine_conclusion(has_linked, has_unlinked, require_all_linked) is expected


def test_titles() -> None:
    assert build_title([], []) == "No work items found"
    assert build_title([LINK_123], []) == "1 work item linked"
    assert build_title(["a", "b"], ["c"]) == "2 work items linked and 1 work item unlinked"
    assert build_title([], ["AB#1", "AB#2"]) == "0 work items linked and 2 work items unlinked"


def test_empty_extraction_uses_fixed_message() -> None:
    verdict = decide(ExtractionResult(), LENIENT)
    assert verdict.conclusion is Conclusion.FAILURE
    assert verdict.title == "No work items found"
    assert verdict.summary == NO_REFERENCES_SUMMARY
    assert verdict.summary.startswith("No work item references found")


def test_linked_only_summary_has_no_guidance() -> None:
    verdict = decide(ExtractionResult(linked=(LINK_123,)), STRICT)
    assert verdict.conclusion is Conclusion.SUCCESS
    assert verdict.title == "1 work item linked"
    assert verdict.summary == "\n".join(
        [
            "**Linked work items (1):**",
            f"- {LINK_123}",
            "",
            "**Unlinked references (0):**",
            "- _None_",
        ]
    )


def test_unlinked_only_summary_asks_to_verify_integration() -> None:
    summary = build_summary([], ["AB#456", "AB#789"])
    assert "**Linked work items (0):**\n- _None_" in summary
    assert "**Unlinked references (2):**\n- AB#456\n- AB#789" in summary
    assert "No work items linked yet." in summary
    assert "Boards integration" in summary


def test_mixed_lenient() -> None:
    verdict = decide(ExtractionResult(linked=(LINK_123,), unlinked=("AB#456",)), LENIENT)
    assert verdict.conclusion is Conclusion.SUCCESS
    assert verdict.title == "1 work item linked and 1 work item unlinked"
    assert re.search(
        r"Review the unlinked references\. Unlinked references may mean the \[Boards integration\]\([^)]*\) "
        r"has not linked them yet, is misconfigured, or the work item number is invalid\.",
        verdict.summary,
    )
    assert "All work items must be linked" not in verdict.summary


def test_mixed_strict() -> None:
    verdict = decide(ExtractionResult(linked=(LINK_123,), unlinked=("AB#456",)), STRICT)
    assert verdict.conclusion is Conclusion.FAILURE
    assert re.search(r"\*\*All work items must be linked\.\*\*", verdict.summary)


def test_decide_is_deterministic() -> None:
    extraction = ExtractionResult(linked=(LINK_123,), unlinked=("AB#456", "AB#789"))
    assert decide(extraction, STRICT) == decide(extraction, STRICT)
