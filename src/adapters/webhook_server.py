"""FastAPI webhook receiver.

A single route accepts GitHub deliveries and hands them to the core event
processor; all filtering happens there.
"""

from __future__ import annotations

import json
import logging

from fastapi import FastAPI, HTTPException, Request

from adapters.github_client import GitHubApiError
from adapters.webhook_mapper import PayloadError, build_check_run_event, build_pull_request_event
from core.processor import EventProcessor

LOGGER = logging.getLogger(__name__)

EVENT_HEADER = "X-GitHub-Event"
DELIVERY_HEADER = "X-GitHub-Delivery"


def create_app(processor: EventProcessor) -> FastAPI:
    """Build the webhook application around an event processor."""

    app = FastAPI(
        title="Azure Boards Link Check",
        description="Validates Azure Boards work item references in pull request descriptions",
    )
    app.state.processor = processor

    @app.get("/healthz")
    async def healthz() -> dict:
        return {"status": "ok"}

    @app.post("/webhook")
    async def webhook(request: Request) -> dict:
        event_name = request.headers.get(EVENT_HEADER, "")
        delivery = request.headers.get(DELIVERY_HEADER)

        try:
            payload = json.loads(await request.body())
        except ValueError as e:
            raise HTTPException(status_code=400, detail="Request body is not valid JSON") from e
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Request body must be a JSON object")

        LOGGER.info("Received %s.%s (delivery=%s)", event_name, payload.get("action"), delivery)

        try:
            if event_name == "pull_request":
                result = await processor.handle_pull_request(build_pull_request_event(payload))
            elif event_name == "check_run":
                result = await processor.handle_check_run(build_check_run_event(payload))
            else:
                return {"status": "ignored", "reason": f"event {event_name or '<none>'} is not handled"}
        except PayloadError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        except GitHubApiError as e:
            LOGGER.exception("GitHub API call failed for %s (delivery=%s)", event_name, delivery)
            raise HTTPException(status_code=502, detail=e.message) from e

        response = {"status": result.action, "reason": result.reason}
        if result.outcome is not None:
            response["conclusion"] = result.outcome.conclusion.value
        return response

    return app
