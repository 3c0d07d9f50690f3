"""Reading and interpreting regconfig.json."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from kaiki.envexpand import expand_env_vars

DEFAULT_ACTUAL_DIR = "directory_contains_actual_images"
DEFAULT_WORKING_DIR = ".reg"

_U32_MAX = 2**32 - 1
_U64_MAX = 2**64 - 1


class ConfigError(Exception):
    """Raised when configuration cannot be read or parsed."""


def _parse_error(message: str) -> ConfigError:
    return ConfigError(f"failed to parse config: {message}")


def _require_object(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise _parse_error(f"invalid type for {what}: expected an object")
    return data


def _opt_float(data: Mapping[str, Any], key: str) -> float | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _parse_error(f"invalid type for `{key}`: expected a number")
    return float(value)


def _opt_uint(data: Mapping[str, Any], key: str, maximum: int) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise _parse_error(f"invalid type for `{key}`: expected an integer")
    if not 0 <= value <= maximum:
        raise _parse_error(f"invalid value for `{key}`: {value} is out of range")
    return value


def _opt_bool(data: Mapping[str, Any], key: str) -> bool | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise _parse_error(f"invalid type for `{key}`: expected a boolean")
    return value


def _opt_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise _parse_error(f"invalid type for `{key}`: expected a string")
    return value


def _str_or(data: Mapping[str, Any], key: str, default: str) -> str:
    if key not in data:
        return default
    value = data[key]
    if not isinstance(value, str):
        raise _parse_error(f"invalid type for `{key}`: expected a string")
    return value


def _bool_or(data: Mapping[str, Any], key: str, default: bool) -> bool:
    if key not in data:
        return default
    value = data[key]
    if not isinstance(value, bool):
        raise _parse_error(f"invalid type for `{key}`: expected a boolean")
    return value


def _required_str(data: Mapping[str, Any], key: str) -> str:
    if key not in data:
        raise _parse_error(f"missing field `{key}`")
    value = data[key]
    if not isinstance(value, str):
        raise _parse_error(f"invalid type for `{key}`: expected a string")
    return value


def _opt_color(data: Mapping[str, Any], key: str) -> tuple[int, int, int] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise _parse_error(f"invalid value for `{key}`: expected an array of 3 bytes")
    for channel in value:
        if isinstance(channel, bool) or not isinstance(channel, int) or not 0 <= channel <= 255:
            raise _parse_error(f"invalid value for `{key}`: expected an array of 3 bytes")
    return (value[0], value[1], value[2])


@dataclass
class XimgdiffConfig:
    """Settings for the in-browser ximgdiff viewer."""

    enabled: bool | None = None

    @classmethod
    def from_dict(cls, data: Any) -> XimgdiffConfig:
        data = _require_object(data, "ximgdiff")
        return cls(enabled=_opt_bool(data, "enabled"))


@dataclass
class CoreConfig:
    """Core comparison options."""

    actual_dir: str = DEFAULT_ACTUAL_DIR
    working_dir: str = DEFAULT_WORKING_DIR
    threshold: float | None = None
    threshold_rate: float | None = None
    threshold_pixel: int | None = None
    matching_threshold: float | None = None
    enable_antialias: bool | None = None
    ximgdiff: XimgdiffConfig | None = None
    concurrency: int | None = None
    diff_color: tuple[int, int, int] | None = None
    diff_color_alt: tuple[int, int, int] | None = None
    aa_color: tuple[int, int, int] | None = None
    alpha: float | None = None

    @classmethod
    def from_dict(cls, data: Any) -> CoreConfig:
        data = _require_object(data, "core")
        ximgdiff_raw = data.get("ximgdiff")
        return cls(
            actual_dir=_str_or(data, "actualDir", DEFAULT_ACTUAL_DIR),
            working_dir=_str_or(data, "workingDir", DEFAULT_WORKING_DIR),
            threshold=_opt_float(data, "threshold"),
            threshold_rate=_opt_float(data, "thresholdRate"),
            threshold_pixel=_opt_uint(data, "thresholdPixel", _U64_MAX),
            matching_threshold=_opt_float(data, "matchingThreshold"),
            enable_antialias=_opt_bool(data, "enableAntialias"),
            ximgdiff=None if ximgdiff_raw is None else XimgdiffConfig.from_dict(ximgdiff_raw),
            concurrency=_opt_uint(data, "concurrency", _U32_MAX),
            diff_color=_opt_color(data, "diffColor"),
            diff_color_alt=_opt_color(data, "diffColorAlt"),
            aa_color=_opt_color(data, "aaColor"),
            alpha=_opt_float(data, "alpha"),
        )

    def to_dict(self) -> dict[str, Any]:
        def color(value: tuple[int, int, int] | None) -> list[int] | None:
            return None if value is None else list(value)

        return {
            "actualDir": self.actual_dir,
            "workingDir": self.working_dir,
            "threshold": self.threshold,
            "thresholdRate": self.threshold_rate,
            "thresholdPixel": self.threshold_pixel,
            "matchingThreshold": self.matching_threshold,
            "enableAntialias": self.enable_antialias,
            "ximgdiff": None if self.ximgdiff is None else {"enabled": self.ximgdiff.enabled},
            "concurrency": self.concurrency,
            "diffColor": color(self.diff_color),
            "diffColorAlt": color(self.diff_color_alt),
            "aaColor": color(self.aa_color),
            "alpha": self.alpha,
        }


@dataclass
class RegSuitConfiguration:
    """The whole regconfig.json document."""

    core: CoreConfig
    plugins: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> RegSuitConfiguration:
        data = _require_object(data, "configuration")
        if "core" not in data:
            raise _parse_error("missing field `core`")
        plugins = data.get("plugins", {})
        if not isinstance(plugins, Mapping):
            raise _parse_error("invalid type for `plugins`: expected an object")
        return cls(core=CoreConfig.from_dict(data["core"]), plugins=dict(plugins))

    def to_dict(self) -> dict[str, Any]:
        return {"core": self.core.to_dict(), "plugins": dict(self.plugins)}


@dataclass
class S3PluginConfig:
    """Settings for the S3 publishing plugin."""

    bucket_name: str
    acl: str | None = None
    sse: bool | None = None
    sse_kms_key_id: str | None = None
    path_prefix: str | None = None
    endpoint: str | None = None
    region: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> S3PluginConfig:
        data = _require_object(data, "reg-publish-s3-plugin")
        if "sseKMSKeyId" in data and "sseKmsKeyId" in data:
            raise _parse_error("duplicate field `sseKMSKeyId`")
        kms_key = "sseKMSKeyId" if "sseKMSKeyId" in data else "sseKmsKeyId"
        return cls(
            bucket_name=_required_str(data, "bucketName"),
            acl=_opt_str(data, "acl"),
            sse=_opt_bool(data, "sse"),
            sse_kms_key_id=_opt_str(data, kms_key),
            path_prefix=_opt_str(data, "pathPrefix"),
            endpoint=_opt_str(data, "endpoint"),
            region=_opt_str(data, "region"),
        )


@dataclass
class GcsPluginConfig:
    """Settings for the GCS publishing plugin."""

    bucket_name: str
    path_prefix: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> GcsPluginConfig:
        data = _require_object(data, "reg-publish-gcs-plugin")
        return cls(
            bucket_name=_required_str(data, "bucketName"),
            path_prefix=_opt_str(data, "pathPrefix"),
        )


@dataclass
class GitHubNotifyConfig:
    """Settings for the GitHub notification plugin."""

    client_id: str | None = None
    owner: str | None = None
    repository: str | None = None
    pr_comment: bool = True
    pr_comment_behavior: str = "default"
    set_commit_status: bool = True

    @classmethod
    def from_dict(cls, data: Any) -> GitHubNotifyConfig:
        data = _require_object(data, "reg-notify-github-plugin")
        return cls(
            client_id=_opt_str(data, "clientId"),
            owner=_opt_str(data, "owner"),
            repository=_opt_str(data, "repository"),
            pr_comment=_bool_or(data, "prComment", True),
            pr_comment_behavior=_str_or(data, "prCommentBehavior", "default"),
            set_commit_status=_bool_or(data, "setCommitStatus", True),
        )


@dataclass
class SlackNotifyConfig:
    """Settings for the Slack notification plugin."""

    webhook_url: str

    @classmethod
    def from_dict(cls, data: Any) -> SlackNotifyConfig:
        data = _require_object(data, "reg-notify-slack-plugin")
        return cls(webhook_url=_required_str(data, "webhookUrl"))


@dataclass
class SimpleKeygenConfig:
    """Settings for the fixed-key generator plugin."""

    expected_key: str

    @classmethod
    def from_dict(cls, data: Any) -> SimpleKeygenConfig:
        data = _require_object(data, "reg-simple-keygen-plugin")
        return cls(expected_key=_required_str(data, "expectedKey"))


def parse_config(text: str) -> RegSuitConfiguration:
    """Parse configuration JSON text."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise _parse_error(str(exc)) from exc
    return RegSuitConfiguration.from_dict(data)


def load_config(path: str | Path) -> RegSuitConfiguration:
    """Read a regconfig.json file, expanding environment variables first."""
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"failed to read config file: {exc}") from exc
    try:
        expanded = expand_env_vars(content)
    except KeyError as exc:
        raise ConfigError(f"environment variable not found: {exc.args[0]}") from exc
    return parse_config(expanded)


def effective_matching_threshold(core: CoreConfig) -> float:
    """The matching threshold, 0.0 when unset."""
    return core.matching_threshold if core.matching_threshold is not None else 0.0


def effective_concurrency(core: CoreConfig) -> int:
    """The worker count, 4 when unset."""
    return core.concurrency if core.concurrency is not None else 4


def effective_threshold_rate(core: CoreConfig) -> float | None:
    """The threshold rate, falling back to the legacy ``threshold`` field."""
    return core.threshold_rate if core.threshold_rate is not None else core.threshold