"""Interactive creation of regconfig.json."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, Sequence

logger = logging.getLogger(__name__)

CONFIG_FILE = "regconfig.json"

KEYGEN_ITEMS = (
    "reg-keygen-git-hash-plugin (recommended)",
    "reg-simple-keygen-plugin",
    "None",
)
STORAGE_ITEMS = ("reg-publish-s3-plugin", "reg-publish-gcs-plugin", "None")
NOTIFIER_ITEMS = ("reg-notify-github-plugin", "reg-notify-slack-plugin")

KEYGEN_GIT_HASH = 0
KEYGEN_SIMPLE = 1
STORAGE_S3 = 0
STORAGE_GCS = 1
NOTIFIER_GITHUB = 0
NOTIFIER_SLACK = 1


class Prompt(Protocol):
    """The questions the wizard needs to ask."""

    def confirm(self, message: str, default: bool) -> bool: ...

    def text(self, message: str, default: str | None = None) -> str: ...

    def select(self, message: str, items: Sequence[str], default: int) -> int: ...

    def multi_select(self, message: str, items: Sequence[str]) -> list[int]: ...


class ConsolePrompt:
    """A prompt that reads answers from standard input."""

    def confirm(self, message: str, default: bool) -> bool:
        hint = "Y/n" if default else "y/N"
        while True:
            answer = input(f"{message} [{hint}] ").strip().lower()
            if not answer:
                return default
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False

    def text(self, message: str, default: str | None = None) -> str:
        suffix = f" ({default})" if default else ""
        while True:
            answer = input(f"{message}{suffix}: ").strip()
            if answer:
                return answer
            if default is not None:
                return default

    def _show(self, message: str, items: Sequence[str]) -> None:
        print(message)
        for number, item in enumerate(items):
            print(f"  {number}) {item}")

    def select(self, message: str, items: Sequence[str], default: int) -> int:
        self._show(message, items)
        while True:
            answer = input(f"Choice [{default}]: ").strip()
            if not answer:
                return default
            if answer.isdigit() and int(answer) < len(items):
                return int(answer)

    def multi_select(self, message: str, items: Sequence[str]) -> list[int]:
        self._show(message, items)
        while True:
            answer = input("Choices (comma separated, empty for none): ").strip()
            if not answer:
                return []
            parts = [part.strip() for part in answer.split(",") if part.strip()]
            if all(p.isdigit() and int(p) < len(items) for p in parts):
                return sorted({int(p) for p in parts})


@dataclass
class InitAnswers:
    """Everything the wizard collected."""

    actual_dir: str
    working_dir: str
    keygen_idx: int = 2
    expected_key: str | None = None
    storage_idx: int = 2
    s3_bucket: str | None = None
    s3_region: str | None = None
    s3_path_prefix: str | None = None
    s3_endpoint: str | None = None
    s3_acl: str | None = None
    gcs_bucket: str | None = None
    gcs_path_prefix: str | None = None
    notifier_idxs: list[int] = field(default_factory=list)
    slack_webhook: str | None = None


def _without_none(pairs: dict[str, str | None]) -> dict[str, str]:
    return {key: value for key, value in pairs.items() if value is not None}


def build_config_json(answers: InitAnswers) -> dict[str, Any]:
    """Turn the wizard's answers into a configuration document."""
    plugins: dict[str, Any] = {}

    if answers.keygen_idx == KEYGEN_GIT_HASH:
        plugins["reg-keygen-git-hash-plugin"] = {}
    elif answers.keygen_idx == KEYGEN_SIMPLE and answers.expected_key is not None:
        plugins["reg-simple-keygen-plugin"] = {"expectedKey": answers.expected_key}

    if answers.storage_idx == STORAGE_S3 and answers.s3_bucket is not None:
        plugins["reg-publish-s3-plugin"] = _without_none(
            {
                "bucketName": answers.s3_bucket,
                "region": answers.s3_region,
                "pathPrefix": answers.s3_path_prefix,
                "endpoint": answers.s3_endpoint,
                "acl": answers.s3_acl,
            }
        )
    elif answers.storage_idx == STORAGE_GCS and answers.gcs_bucket is not None:
        plugins["reg-publish-gcs-plugin"] = _without_none(
            {"bucketName": answers.gcs_bucket, "pathPrefix": answers.gcs_path_prefix}
        )

    for idx in answers.notifier_idxs:
        if idx == NOTIFIER_GITHUB:
            plugins["reg-notify-github-plugin"] = {}
        elif idx == NOTIFIER_SLACK and answers.slack_webhook is not None:
            plugins["reg-notify-slack-plugin"] = {"webhookUrl": answers.slack_webhook}

    return {
        "core": {"actualDir": answers.actual_dir, "workingDir": answers.working_dir},
        "plugins": plugins,
    }


def _optional(prompt: Prompt, message: str) -> str | None:
    answer = prompt.text(f"{message} (leave empty to skip)", "")
    return answer or None


def _collect(prompt: Prompt) -> InitAnswers:
    answers = InitAnswers(
        actual_dir=prompt.text(
            "Directory containing actual images", "directory_contains_actual_images"
        ),
        working_dir=prompt.text("Working directory", ".reg"),
    )

    answers.keygen_idx = prompt.select("Key generator plugin", KEYGEN_ITEMS, 0)
    if answers.keygen_idx == KEYGEN_SIMPLE:
        answers.expected_key = prompt.text("Expected key (branch name or commit hash)")

    answers.storage_idx = prompt.select("Storage plugin", STORAGE_ITEMS, 0)
    if answers.storage_idx == STORAGE_S3:
        answers.s3_bucket = prompt.text("S3 bucket name")
        answers.s3_region = _optional(prompt, "S3 region")
        answers.s3_path_prefix = _optional(prompt, "S3 path prefix")
        answers.s3_endpoint = _optional(prompt, "S3 custom endpoint")
        answers.s3_acl = _optional(prompt, "S3 ACL")
    elif answers.storage_idx == STORAGE_GCS:
        answers.gcs_bucket = prompt.text("GCS bucket name")
        answers.gcs_path_prefix = _optional(prompt, "GCS path prefix")

    answers.notifier_idxs = list(
        prompt.multi_select(
            "Notifier plugins (Space to select, Enter to confirm)", NOTIFIER_ITEMS
        )
    )
    if NOTIFIER_SLACK in answers.notifier_idxs:
        answers.slack_webhook = prompt.text("Slack webhook URL")

    return answers


def run_init_wizard(prompt: Prompt | None = None) -> bool:
    """Ask for settings and write regconfig.json in the current directory.

    Returns False: the wizard never reports comparison failures.
    """
    prompt = prompt if prompt is not None else ConsolePrompt()
    target = Path(CONFIG_FILE)

    if target.exists() and not prompt.confirm(
        f"{CONFIG_FILE} already exists. Overwrite?", False
    ):
        logger.info("aborted")
        return False

    config = build_config_json(_collect(prompt))
    target.write_text(
        json.dumps(config, indent=2, sort_keys=True, ensure_ascii=False), encoding="utf-8"
    )
    logger.info("created %s", CONFIG_FILE)
    return False