"""Pull request number detection from CI environment variables."""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any

_U64_MAX = 2**64 - 1
_UNSIGNED = re.compile(r"\+?[0-9]+")


def _parse_u64(text: str) -> int | None:
    if not _UNSIGNED.fullmatch(text):
        return None
    value = int(text)
    return value if value <= _U64_MAX else None


def _json_u64(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if 0 <= value <= _U64_MAX else None


def _lookup(event: Any, section: str) -> Any:
    if not isinstance(event, dict):
        return None
    inner = event.get(section)
    if not isinstance(inner, dict):
        return None
    return inner.get("number")


def _from_event_file(path: str) -> int | None:
    try:
        content = Path(path).read_text(encoding="utf-8")
        event = json.loads(content)
    except (OSError, UnicodeDecodeError, ValueError):
        return None
    number = _json_u64(_lookup(event, "pull_request"))
    if number is None:
        number = _json_u64(_lookup(event, "issue"))
    return number


def detect_pr_number() -> int | None:
    """Find the pull request number of the current CI run.

    Sources, in order: ``REG_SUIT_PR_NUMBER``; the GitHub Actions event
    file named by ``GITHUB_EVENT_PATH`` (``pull_request.number`` or
    ``issue.number``); a ``refs/pull/<number>/...`` value in ``GITHUB_REF``.
    """
    direct = os.environ.get("REG_SUIT_PR_NUMBER")
    if direct is not None:
        number = _parse_u64(direct)
        if number is not None:
            return number

    event_path = os.environ.get("GITHUB_EVENT_PATH")
    if event_path is not None:
        number = _from_event_file(event_path)
        if number is not None:
            return number

    gh_ref = os.environ.get("GITHUB_REF")
    if gh_ref is not None:
        parts = gh_ref.split("/")
        if len(parts) >= 3 and parts[1] == "pull":
            return _parse_u64(parts[2])

    return None