"""Application entry point for the Azure Boards link check."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Mapping, Optional

from art import tprint

import settings
from adapters.check_run_formatting import format_report
from adapters.github_client import GitHubClient
from core.models import Conclusion, ValidationOutcome
from core.processor import EventProcessor
from core.validator import evaluate_text, validate_pull_request

NAME = "BOARDS CHECK"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _RedactingFormatter(logging.Formatter):
    """Mask secret values (the GitHub token by default) in every log line."""

    def __init__(self, secrets: list[str], fmt: str = LOG_FORMAT, datefmt: Optional[str] = LOG_DATEFMT) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        # Longest first so a secret that contains another is masked whole.
        self._secrets = sorted({secret for secret in secrets if secret}, key=len, reverse=True)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _resolve_log_path(path: str) -> str:
    if not os.path.isabs(path):
        path = os.path.join(settings.PROJECT_ROOT, path)
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    return path


def _build_log_handlers(config: dict, environ: Optional[Mapping[str, str]] = None) -> list[logging.Handler]:
    """Create the console and rotating-file handlers described by ``settings.LOGGING``."""

    env = os.environ if environ is None else environ
    formatter = _RedactingFormatter([env.get(name, "") for name in config.get("redact", [])])

    handlers: list[logging.Handler] = []
    if config.get("console", True):
        handlers.append(logging.StreamHandler())

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        handlers.append(
            RotatingFileHandler(
                _resolve_log_path(file_cfg["path"]),
                maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
                backupCount=int(file_cfg.get("backup_count", 5)),
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def _configure_logging(config: Optional[dict] = None) -> None:
    config = settings.LOGGING if config is None else config
    level = getattr(logging, str(config.get("level", "INFO")).upper(), logging.INFO)
    handlers = _build_log_handlers(config)
    if handlers:
        logging.basicConfig(level=level, handlers=handlers, force=True)


def _build_github_client() -> GitHubClient:
    # Fail fast on a missing token to avoid a confusing 401 on the first event.
    if not settings.GITHUB_TOKEN:
        raise RuntimeError("Missing GITHUB_TOKEN in environment")
    return GitHubClient(
        token=settings.GITHUB_TOKEN,
        api_url=settings.GITHUB_API_URL,
        timeout=settings.GITHUB_TIMEOUT,
    )


def _serve(host: str, port: int) -> None:
    import uvicorn

    from adapters.webhook_server import create_app

    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    client = _build_github_client()
    processor = EventProcessor(
        pull_requests=client,
        check_runs=client,
        policy=settings.POLICY,
        filters=settings.FILTERS,
    )
    logger.info(
        "Starting webhook server on %s:%s (require_all_linked=%s, process_pr_opened=%s, always_fetch_pr=%s, ignore_copilot=%s)",
        host,
        port,
        settings.POLICY.require_all_linked,
        settings.FILTERS.process_pr_opened,
        settings.FILTERS.always_fetch_pr,
        settings.FILTERS.ignore_copilot,
    )
    uvicorn.run(create_app(processor), host=host, port=port, log_config=None)


def _parse_pull_reference(value: str) -> tuple[str, str, int]:
    """Parse ``owner/repo#123`` into its parts."""

    repo_part, _, number = value.partition("#")
    owner, _, repo = repo_part.partition("/")
    if not owner or not repo or not number.isdigit():
        raise argparse.ArgumentTypeError(f"expected OWNER/REPO#NUMBER, got {value!r}")
    return owner, repo, int(number)


def _check(path: Optional[str], pull: Optional[tuple[str, str, int]]) -> int:
    if pull is not None:
        owner, repo, number = pull
        outcome: ValidationOutcome = asyncio.run(
            validate_pull_request(_build_github_client(), owner, repo, number, settings.POLICY)
        )
    elif path and path != "-":
        with open(path, "r", encoding="utf-8") as handle:
            outcome = evaluate_text(handle.read(), settings.POLICY)
    else:
        outcome = evaluate_text(sys.stdin.read(), settings.POLICY)

    print(format_report(outcome.title, outcome.conclusion, outcome.summary))
    return 1 if outcome.conclusion == Conclusion.FAILURE else 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="boards-link-check")
    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser("serve", help="Start the webhook server")
    serve_parser.add_argument("--host", default=settings.HOST)
    serve_parser.add_argument("--port", type=int, default=settings.PORT)

    check_parser = subparsers.add_parser(
        "check",
        help="Validate a pull request description from a file, stdin, or GitHub.",
    )
    check_parser.add_argument("path", nargs="?", help="Text file to check; reads stdin when omitted")
    check_parser.add_argument(
        "--pull",
        type=_parse_pull_reference,
        metavar="OWNER/REPO#NUMBER",
        help="Fetch the pull request body from GitHub instead",
    )

    args = parser.parse_args(argv)
    if args.command == "check":
        return _check(args.path, args.pull)
    if args.command == "serve":
        _serve(args.host, args.port)
        return 0
    parser.print_help()
    return 2


if __name__ == "__main__":
    sys.exit(main())
