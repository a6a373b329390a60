# Area: Shared Tests
"""Tests for configuration loading."""

import json

import pytest

from rankify_sdk.config import DEFAULT_CONFIG, ENV_MAPPINGS, load_config, validate_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for env_key in ENV_MAPPINGS:
        monkeypatch.delenv(env_key, raising=False)


class TestLoadConfig:
    """Tests for load_config()."""

    def test_defaults(self):
        config = load_config(use_dotenv=False)
        assert config == DEFAULT_CONFIG

    def test_json_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"chain_id": 97113, "contract_address": "0x" + "11" * 20}))
        config = load_config(str(path), use_dotenv=False)
        assert config["chain_id"] == 97113
        assert config["indexer_url"] == DEFAULT_CONFIG["indexer_url"]

    def test_missing_file_falls_back_to_defaults(self, tmp_path):
        config = load_config(str(tmp_path / "missing.json"), use_dotenv=False)
        assert config == DEFAULT_CONFIG

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"indexer_url": "http://file/v1/graphql"}))
        monkeypatch.setenv("INDEXER_URL", "http://env/v1/graphql")
        config = load_config(str(path), use_dotenv=False)
        assert config["indexer_url"] == "http://env/v1/graphql"

    def test_env_integers_coerced(self, monkeypatch):
        monkeypatch.setenv("CHAIN_ID", "97113")
        monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "5")
        config = load_config(use_dotenv=False)
        assert config["chain_id"] == 97113
        assert config["request_timeout_seconds"] == 5

    def test_instance_address_mapped(self, monkeypatch):
        monkeypatch.setenv("RANKIFY_INSTANCE_ADDRESS", "0x" + "22" * 20)
        assert load_config(use_dotenv=False)["contract_address"] == "0x" + "22" * 20

    def test_bad_integer(self, monkeypatch):
        monkeypatch.setenv("CHAIN_ID", "mainnet")
        with pytest.raises(ValueError):
            load_config(use_dotenv=False)


class TestValidateConfig:
    def test_complete(self):
        validate_config({"chain_id": 1, "contract_address": "0x" + "11" * 20})

    def test_missing_keys_listed(self):
        with pytest.raises(ValueError) as exc:
            validate_config({"chain_id": 1})
        assert "contract_address" in str(exc.value)
