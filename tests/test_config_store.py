from __future__ import annotations

import json
from pathlib import Path

import pytest

import config_store
from models import RunConfig


@pytest.fixture()
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "availability_config.json"


def test_missing_file_gives_defaults(config_path: Path) -> None:
    config = config_store.load_config(config_path)

    assert config.source_location == config_store.DEFAULT_SOURCE_LOCATION
    assert config.target_location == config_store.DEFAULT_TARGET_LOCATION
    assert config.days_offset == 5
    assert config.shop_base_url == config_store.DEFAULT_SHOP_BASE_URL
    assert len(config.cron_secret) == 24
    int(config.cron_secret, 16)


def test_save_then_load_round_trip(config_path: Path) -> None:
    original = RunConfig(
        source_location="https://shop.example/feed.xml",
        target_location="/srv/feeds/supplement.xml",
        days_offset=10,
        shop_base_url="https://shop.example/",
        cron_secret="abc123",
    )

    config_store.save_config(original, config_path)

    assert config_store.load_config(config_path) == original
    assert json.loads(config_path.read_text(encoding="utf-8"))["days_offset"] == 10


def test_partial_file_is_merged_with_defaults(config_path: Path) -> None:
    config_path.write_text(json.dumps({"days_offset": "2", "cron_secret": "fixed"}), encoding="utf-8")

    config = config_store.load_config(config_path)

    assert config.days_offset == 2
    assert config.cron_secret == "fixed"
    assert config.source_location == config_store.DEFAULT_SOURCE_LOCATION


def test_camel_case_keys_are_accepted(config_path: Path) -> None:
    config_path.write_text(
        json.dumps({
            "sourceFeed": "feed.csv",
            "targetFeed": "out.xml",
            "daysOffset": 4,
            "shopBaseUrl": "https://shop.example/",
            "cronSecret": "legacy",
        }),
        encoding="utf-8",
    )

    config = config_store.load_config(config_path)

    assert config == RunConfig("feed.csv", "out.xml", 4, "https://shop.example/", "legacy")


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
def test_invalid_file_falls_back_to_defaults(config_path: Path, content: str) -> None:
    config_path.write_text(content, encoding="utf-8")

    config = config_store.load_config(config_path)

    assert config.days_offset == config_store.DEFAULT_DAYS_OFFSET


def test_env_var_selects_config_file(config_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FEED_CONFIG_PATH", str(config_path))
    config_path.write_text(json.dumps({"cron_secret": "from-env-path"}), encoding="utf-8")

    assert config_store.load_config().cron_secret == "from-env-path"


def test_update_config_trims_and_coerces() -> None:
    config = config_store.default_config()

    updated = config_store.update_config(
        config,
        source_location="  feed.csv ",
        days_offset="7",
        shop_base_url=None,
    )

    assert updated.source_location == "feed.csv"
    assert updated.days_offset == 7
    assert updated.shop_base_url == config.shop_base_url
    assert config.source_location == config_store.DEFAULT_SOURCE_LOCATION


def test_update_config_ignores_bad_days_offset() -> None:
    config = config_store.default_config()
    assert config_store.update_config(config, days_offset="soon").days_offset == config.days_offset


def test_generate_secret_is_random() -> None:
    assert config_store.generate_secret() != config_store.generate_secret()


def test_verify_secret() -> None:
    config = RunConfig("feed.csv", "out.xml", 5, "https://shop.example/", "s3cret")

    assert config_store.verify_secret(config, "s3cret") is True
    assert config_store.verify_secret(config, "S3CRET") is False
    assert config_store.verify_secret(config, "") is False
    assert config_store.verify_secret(config, None) is False


def test_failed_save_removes_temp_file_and_keeps_old_config(
    config_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    original = RunConfig("feed.csv", "out.xml", 5, "https://shop.example/", "keep-me")
    config_store.save_config(original, config_path)

    def _deny(self: Path, target: Path) -> Path:
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(Path, "replace", _deny)

    with pytest.raises(PermissionError):
        config_store.save_config(config_store.update_config(original, days_offset=9), config_path)

    monkeypatch.undo()
    assert config_store.load_config(config_path) == original
    assert not (config_path.parent / f".{config_path.name}.tmp").exists()
