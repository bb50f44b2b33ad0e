"""Work item reference extraction (core domain)."""

from __future__ import annotations

import re
from typing import Iterator, List, Optional

from core.models import ExtractionResult, WorkItemReference

# [AB#123](https://{host}/{org}/{project}/_workitems/edit/123) or
# [AB#123](https://{host}/{project}/_workitems/edit/123). Project may be a GUID.
LINKED_WORK_ITEM_PATTERN = re.compile(
    r"\[AB#([0-9]+)\]\((https?://[^/]+(?:/[^/]+)+/_workitems/edit/([0-9]+))\)",
    re.IGNORECASE,
)
UNLINKED_WORK_ITEM_PATTERN = re.compile(r"AB#([0-9]+)", re.IGNORECASE)

UNLINKED_PREFIX = "AB#"


def iter_references(text: Optional[str]) -> Iterator[WorkItemReference]:
    """Yield every work item mention in two passes.

    Linked references come first, in source order. Their spans are then
    stripped from the text and the remainder is scanned for bare mentions,
    so a link label is never counted twice and a link with a malformed URL
    falls through as a bare mention.
    """

    if not text:
        return

    for match in LINKED_WORK_ITEM_PATTERN.finditer(text):
        yield WorkItemReference(
            work_item_id=match.group(1),
            rendered=match.group(0),
            linked=True,
            url=match.group(2),
        )

    remainder = LINKED_WORK_ITEM_PATTERN.sub("", text)
    for match in UNLINKED_WORK_ITEM_PATTERN.finditer(remainder):
        work_item_id = match.group(1)
        yield WorkItemReference(
            work_item_id=work_item_id,
            rendered=f"{UNLINKED_PREFIX}{work_item_id}",
            linked=False,
        )


def extract_work_items(text: Optional[str]) -> ExtractionResult:
    """Return linked and unlinked references found in a pull request body.

    - Linked entries keep the source text verbatim and collapse on exact
      string equality.
    - Unlinked entries are rendered as ``AB#<id>``.
    - A bare mention of an id that is already linked is dropped.
    """

    linked: List[str] = []
    unlinked: List[str] = []
    linked_ids: set[str] = set()

    for reference in iter_references(text):
        if reference.linked:
            linked_ids.add(reference.work_item_id)
            linked.append(reference.rendered)
        elif reference.work_item_id not in linked_ids:
            unlinked.append(reference.rendered)

    return ExtractionResult(linked=_unique(linked), unlinked=_unique(unlinked))


def _unique(values: List[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))
