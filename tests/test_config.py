import json

import pytest

from kaiki.config import (
    ConfigError,
    CoreConfig,
    GcsPluginConfig,
    GitHubNotifyConfig,
    RegSuitConfiguration,
    S3PluginConfig,
    SimpleKeygenConfig,
    SlackNotifyConfig,
    XimgdiffConfig,
    effective_concurrency,
    effective_matching_threshold,
    effective_threshold_rate,
    load_config,
    parse_config,
)


def test_load_minimal_config():
    config = parse_config('{ "core": {} }')
    assert config.core.actual_dir == "directory_contains_actual_images"
    assert config.core.working_dir == ".reg"
    assert config.plugins == {}


def test_load_full_config():
    text = """{
        "core": {
            "actualDir": "screenshots",
            "workingDir": ".regwork",
            "threshold": 0.05,
            "matchingThreshold": 0.1,
            "enableAntialias": true,
            "concurrency": 8
        },
        "plugins": {
            "reg-keygen-git-hash-plugin": {}
        }
    }"""
    config = parse_config(text)
    assert config.core.actual_dir == "screenshots"
    assert config.core.working_dir == ".regwork"
    assert config.core.threshold == 0.05
    assert config.core.matching_threshold == 0.1
    assert config.core.enable_antialias is True
    assert config.core.concurrency == 8
    assert "reg-keygen-git-hash-plugin" in config.plugins


def test_default_values():
    core = CoreConfig()
    assert core.actual_dir == "directory_contains_actual_images"
    assert core.working_dir == ".reg"
    assert core.threshold is None
    assert core.matching_threshold is None
    assert core.enable_antialias is None


def test_effective_matching_threshold():
    assert effective_matching_threshold(CoreConfig()) == 0.0
    assert effective_matching_threshold(CoreConfig(matching_threshold=0.05)) == 0.05


def test_effective_threshold_rate():
    assert effective_threshold_rate(CoreConfig()) is None
    assert effective_threshold_rate(CoreConfig(threshold_rate=0.1)) == 0.1
    assert effective_threshold_rate(CoreConfig(threshold=0.2)) == 0.2
    assert effective_threshold_rate(CoreConfig(threshold_rate=0.1, threshold=0.2)) == 0.1


def test_effective_concurrency():
    assert effective_concurrency(CoreConfig()) == 4
    assert effective_concurrency(CoreConfig(concurrency=16)) == 16


def test_plugin_config_deserialization():
    s3 = S3PluginConfig.from_dict({"bucketName": "my-bucket", "region": "us-east-1"})
    assert s3.bucket_name == "my-bucket"
    assert s3.region == "us-east-1"

    gcs = GcsPluginConfig.from_dict({"bucketName": "gcs-bucket"})
    assert gcs.bucket_name == "gcs-bucket"
    assert gcs.path_prefix is None

    github = GitHubNotifyConfig()
    assert github.pr_comment is True
    assert github.pr_comment_behavior == "default"
    assert github.set_commit_status is True

    slack = SlackNotifyConfig.from_dict({"webhookUrl": "https://hooks.example.com/services/xxx"})
    assert slack.webhook_url == "https://hooks.example.com/services/xxx"


def test_github_config_from_empty_dict_uses_defaults():
    github = GitHubNotifyConfig.from_dict({})
    assert github == GitHubNotifyConfig()


def test_github_config_overrides():
    github = GitHubNotifyConfig.from_dict(
        {"clientId": "abc", "prComment": False, "prCommentBehavior": "new"}
    )
    assert github.client_id == "abc"
    assert github.pr_comment is False
    assert github.pr_comment_behavior == "new"
    assert github.set_commit_status is True


def test_simple_keygen_config():
    assert SimpleKeygenConfig.from_dict({"expectedKey": "main"}).expected_key == "main"
    with pytest.raises(ConfigError, match="expectedKey"):
        SimpleKeygenConfig.from_dict({})


def test_slack_missing_webhook():
    with pytest.raises(ConfigError, match="webhookUrl"):
        SlackNotifyConfig.from_dict({})


def test_env_expansion_in_config(monkeypatch, tmp_path):
    monkeypatch.setenv("KAIKI_TEST_BUCKET", "test-bucket")
    path = tmp_path / "regconfig.json"
    path.write_text('{ "core": {}, "plugins": { "s3": { "bucketName": "${KAIKI_TEST_BUCKET}" } } }')
    config = load_config(path)
    assert config.plugins["s3"]["bucketName"] == "test-bucket"


def test_load_config_missing_env_var(monkeypatch, tmp_path):
    monkeypatch.delenv("KAIKI_NOT_SET_ANYWHERE", raising=False)
    path = tmp_path / "regconfig.json"
    path.write_text('{ "core": { "actualDir": "${KAIKI_NOT_SET_ANYWHERE}" } }')
    with pytest.raises(ConfigError, match="environment variable not found: KAIKI_NOT_SET_ANYWHERE"):
        load_config(path)


def test_load_config_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="failed to read config file"):
        load_config(tmp_path / "nonexistent_config_123.json")


def test_parse_invalid_json():
    with pytest.raises(ConfigError, match="failed to parse config"):
        parse_config("{ not valid json !!!")


def test_missing_core_rejected():
    with pytest.raises(ConfigError, match="core"):
        parse_config('{ "plugins": {} }')


def test_s3_bucket_name_required():
    with pytest.raises(ConfigError, match="bucketName"):
        S3PluginConfig.from_dict({"region": "us-east-1"})


def test_empty_plugins_object():
    config = parse_config('{ "core": {}, "plugins": {} }')
    assert config.plugins == {}
    assert config.core.actual_dir == "directory_contains_actual_images"
    assert config.core.working_dir == ".reg"


def test_s3_sse_kms_deserialization():
    upper = S3PluginConfig.from_dict(
        {"bucketName": "b", "sseKMSKeyId": "arn:aws:kms:us-east-1:000:key/abc"}
    )
    assert upper.sse_kms_key_id == "arn:aws:kms:us-east-1:000:key/abc"

    camel = S3PluginConfig.from_dict(
        {"bucketName": "b", "sseKmsKeyId": "arn:aws:kms:us-east-1:000:key/def"}
    )
    assert camel.sse_kms_key_id == "arn:aws:kms:us-east-1:000:key/def"

    plain = S3PluginConfig.from_dict({"bucketName": "b", "sse": True})
    assert plain.sse_kms_key_id is None
    assert plain.sse is True


def test_colors_and_ximgdiff():
    config = parse_config(
        json.dumps(
            {
                "core": {
                    "diffColor": [1, 2, 3],
                    "aaColor": [0, 128, 255],
                    "ximgdiff": {"enabled": True},
                    "thresholdPixel": 5,
                    "alpha": 0.5,
                }
            }
        )
    )
    assert config.core.diff_color == (1, 2, 3)
    assert config.core.aa_color == (0, 128, 255)
    assert config.core.diff_color_alt is None
    assert config.core.ximgdiff == XimgdiffConfig(enabled=True)
    assert config.core.threshold_pixel == 5
    assert config.core.alpha == 0.5


@pytest.mark.parametrize(
    "core",
    [
        {"diffColor": [1, 2]},
        {"diffColor": [1, 2, 300]},
        {"concurrency": -1},
        {"concurrency": 2.5},
        {"thresholdPixel": "5"},
        {"matchingThreshold": "high"},
        {"enableAntialias": 1},
        {"actualDir": 3},
    ],
)
def test_invalid_core_values_rejected(core):
    with pytest.raises(ConfigError, match="failed to parse config"):
        parse_config(json.dumps({"core": core}))


def test_integer_threshold_becomes_float():
    config = parse_config('{ "core": { "matchingThreshold": 1 } }')
    assert config.core.matching_threshold == 1.0
    assert isinstance(config.core.matching_threshold, float)


def test_round_trip_to_dict():
    original = RegSuitConfiguration(
        core=CoreConfig(
            actual_dir="shots",
            threshold_rate=0.1,
            diff_color=(10, 20, 30),
            ximgdiff=XimgdiffConfig(enabled=False),
        ),
        plugins={"reg-simple-keygen-plugin": {"expectedKey": "main"}},
    )
    data = original.to_dict()
    assert data["core"]["actualDir"] == "shots"
    assert data["core"]["diffColor"] == [10, 20, 30]
    assert data["core"]["threshold"] is None
    assert RegSuitConfiguration.from_dict(json.loads(json.dumps(data))) == original