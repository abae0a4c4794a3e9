"""Tests for settings persistence and defaults."""

import json

import pytest

import config
from config import DEFAULT_LANGUAGE, DecryptNaming, apply_defaults, load_settings, save_settings


@pytest.fixture
def config_home(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "CONFIG_DIR", str(tmp_path))
    monkeypatch.setattr(config, "CONFIG_PATH", str(tmp_path / config.CONFIG_FILE_NAME))
    return tmp_path


class TestApplyDefaults:
    def test_fills_missing_keys(self):
        settings = apply_defaults({})
        assert settings == {
            "last_destination": "",
            "language": DEFAULT_LANGUAGE,
            "decrypt_naming": DecryptNaming.SUFFIX.value,
            "decrypt_preflight": False,
        }

    def test_invalid_values_are_replaced(self):
        settings = apply_defaults({"decrypt_naming": "weird", "language": "xx_XX", "decrypt_preflight": "yes"})
        assert settings["decrypt_naming"] == "suffix"
        assert settings["language"] == DEFAULT_LANGUAGE
        assert settings["decrypt_preflight"] is True

    def test_existing_values_are_kept(self):
        settings = apply_defaults({"decrypt_naming": "original", "language": "zh_CN"})
        assert settings["decrypt_naming"] == "original"
        assert settings["language"] == "zh_CN"


class TestPersistence:
    def test_missing_file_gives_empty(self, config_home):
        assert load_settings() == {}

    def test_round_trip_only_preset_keys(self, config_home):
        save_settings({"language": "zh_CN", "last_destination": "/tmp/out", "secret": "never saved"})
        with open(config.CONFIG_PATH, encoding="utf-8") as f:
            data = json.load(f)
        assert "secret" not in data
        assert load_settings() == {"language": "zh_CN", "last_destination": "/tmp/out"}

    def test_corrupt_file_gives_empty(self, config_home):
        (config_home / config.CONFIG_FILE_NAME).write_text("{not json", encoding="utf-8")
        assert load_settings() == {}
