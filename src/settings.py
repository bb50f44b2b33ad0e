"""Static configuration for boards-link-check.

All settings come from environment variables (optionally via a local .env
file) and are read once at import, then handed to the core as explicit
config objects.
"""

import os
from typing import Mapping, Optional

from dotenv import load_dotenv

from core.config import EventFilterConfig, StrictnessPolicy

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

load_dotenv(os.path.join(PROJECT_ROOT, ".env"))


def read_flag(name: str, default: bool, environ: Optional[Mapping[str, str]] = None) -> bool:
    """Read a boolean switch.

    Switches that default off are enabled only by the literal "true";
    switches that default on are disabled only by the literal "false".
    """

    env = os.environ if environ is None else environ
    value = env.get(name)
    if default:
        return value != "false"
    return value == "true"


def build_policy(environ: Optional[Mapping[str, str]] = None) -> StrictnessPolicy:
    return StrictnessPolicy(
        require_all_linked=read_flag("PASS_REQUIRES_ALL_LINKED_WORKITEMS", False, environ),
    )


def build_filters(environ: Optional[Mapping[str, str]] = None) -> EventFilterConfig:
    return EventFilterConfig(
        process_pr_opened=read_flag("PROCESS_PR_OPENED", False, environ),
        always_fetch_pr=read_flag("ALWAYS_FETCH_PR", True, environ),
        ignore_copilot=read_flag("IGNORE_COPILOT", True, environ),
    )


# Strict linking: every AB# reference must be linked for the check to pass.
POLICY = build_policy()

# Webhook filtering:
# - PROCESS_PR_OPENED: also validate on pull_request.opened
# - ALWAYS_FETCH_PR: refetch the PR instead of trusting the payload body
# - IGNORE_COPILOT: skip events sent by the Copilot bot (except synchronize)
FILTERS = build_filters()

# GitHub REST access for reading pull requests and creating check runs.
GITHUB_TOKEN = os.getenv("GITHUB_TOKEN")
GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com")
GITHUB_TIMEOUT = int(os.getenv("GITHUB_TIMEOUT", "10"))

# Webhook server bind address.
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))

# Logging configuration.
LOGGING = {
    "level": os.getenv("LOG_LEVEL", "INFO"),
    "console": read_flag("LOG_CONSOLE", True),
    "file": {
        "enabled": bool(os.getenv("LOG_FILE")),
        "path": os.getenv("LOG_FILE", "logs/boards-link-check.log"),
        "max_bytes": int(os.getenv("LOG_MAX_BYTES", str(5 * 1024 * 1024))),
        "backup_count": int(os.getenv("LOG_BACKUP_COUNT", "5")),
    },
    "redact": [name.strip() for name in os.getenv("LOG_REDACT", "GITHUB_TOKEN").split(",") if name.strip()],
}
