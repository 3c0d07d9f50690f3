"""Configuration validation and working directory preparation."""

from __future__ import annotations

import logging
from pathlib import Path

from kaiki.config import (
    ConfigError,
    GcsPluginConfig,
    RegSuitConfiguration,
    S3PluginConfig,
    SimpleKeygenConfig,
    SlackNotifyConfig,
    effective_threshold_rate,
    load_config,
)

logger = logging.getLogger(__name__)

_KEYGEN_PLUGINS = {
    "reg-keygen-git-hash-plugin": None,
    "reg-simple-keygen-plugin": SimpleKeygenConfig,
}
_STORAGE_PLUGINS = {
    "reg-publish-s3-plugin": S3PluginConfig,
    "reg-publish-gcs-plugin": GcsPluginConfig,
}
_NOTIFY_PLUGINS = {
    "reg-notify-github-plugin": None,
    "reg-notify-slack-plugin": SlackNotifyConfig,
}


class ValidationError(Exception):
    """Raised when a configuration is well-formed but not acceptable."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"validation error: {self.message}"


def _fmt(value: float) -> str:
    if value == value and value not in (float("inf"), float("-inf")) and value == int(value):
        return str(int(value))
    return repr(value)


def _ensure(condition: bool, message: str) -> None:
    if not condition:
        raise ValidationError(message)


def _check_unit_range(value: float | None, name: str) -> None:
    if value is not None:
        _ensure(0.0 <= value <= 1.0, f"{name} must be between 0.0 and 1.0, got {_fmt(value)}")


def _check_plugin(name: str, value: object, parser: type | None) -> None:
    if parser is None:
        return
    try:
        parser.from_dict(value)
    except ConfigError as exc:
        raise ValidationError(f"invalid {name} config: {exc}") from exc


def validate_config(config: RegSuitConfiguration) -> None:
    """Check core settings and plugin entries.

    Raises:
        ValidationError: the first problem found.
    """
    core = config.core
    _ensure(core.actual_dir != "", "actualDir must not be empty")
    _ensure(core.working_dir != "", "workingDir must not be empty")
    _check_unit_range(core.matching_threshold, "matchingThreshold")
    _check_unit_range(effective_threshold_rate(core), "thresholdRate")
    _check_unit_range(core.alpha, "alpha")

    keygen_count = 0
    storage_count = 0
    for name, value in config.plugins.items():
        if name in _KEYGEN_PLUGINS:
            keygen_count += 1
            _check_plugin(name, value, _KEYGEN_PLUGINS[name])
        elif name in _STORAGE_PLUGINS:
            storage_count += 1
            _check_plugin(name, value, _STORAGE_PLUGINS[name])
        elif name in _NOTIFY_PLUGINS:
            _check_plugin(name, value, _NOTIFY_PLUGINS[name])
        else:
            logger.warning("unknown plugin %s, skipping validation", name)

    _ensure(keygen_count <= 1, f"at most one keygen plugin allowed, found {keygen_count}")
    _ensure(storage_count <= 1, f"at most one storage plugin allowed, found {storage_count}")


def run_prepare(config_path: str | Path) -> bool:
    """Load and validate the configuration, then create the working directory.

    Returns False: preparation never reports comparison failures.

    Raises:
        ConfigError: the file cannot be read or parsed.
        ValidationError: the configuration is invalid.
    """
    config = load_config(config_path)
    validate_config(config)

    working = Path(config.core.working_dir)
    working.mkdir(parents=True, exist_ok=True)
    logger.info("working directory ready: %s", working)
    logger.info("configuration validated (%d plugins)", len(config.plugins))
    return False