"""Core configuration dataclasses.

We keep environment parsing outside the core, but these dataclasses define
the shape the core expects so the settings and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StrictnessPolicy:
    """Whether every work item reference must be linked for a passing check."""

    require_all_linked: bool = False


@dataclass(frozen=True)
class EventFilterConfig:
    """Webhook filtering switches consumed by the event processor."""

    process_pr_opened: bool = False
    always_fetch_pr: bool = True
    ignore_copilot: bool = True
