"""
tests/test_config.py
Configuration defaults, validation, and file loading.
Run: pytest tests/test_config.py -v
"""

import json
from pathlib import Path

import pytest
import yaml

from ctlapi.core.config import ClientConfig, DEFAULT_CONFIG, RetryConfig, TableConfig
from ctlapi.core.exceptions import ConfigurationException


class TestDefaults:

    def test_defaults(self):
        assert DEFAULT_CONFIG.request.timeout == 30.0
        assert DEFAULT_CONFIG.request.verify_ssl is False
        assert DEFAULT_CONFIG.request.content_type == "text/xml"
        assert DEFAULT_CONFIG.retry.transient_retries == 5
        assert DEFAULT_CONFIG.retry.max_retries == 10
        assert DEFAULT_CONFIG.retry.pause == 0.0
        assert DEFAULT_CONFIG.table.page_size == 500
        assert DEFAULT_CONFIG.table.max_pages is None


class TestValidation:

    def test_transient_retries_bounded_by_max(self):
        with pytest.raises(ConfigurationException):
            ClientConfig(retry=RetryConfig(transient_retries=11))

    def test_negative_pause(self):
        with pytest.raises(ConfigurationException):
            ClientConfig(retry=RetryConfig(pause=-1))

    def test_page_size(self):
        with pytest.raises(ConfigurationException):
            ClientConfig(table=TableConfig(page_size=0))

    def test_timeout(self):
        with pytest.raises(ConfigurationException):
            ClientConfig.from_dict({"request": {"timeout": 0}})

    def test_unknown_key(self):
        with pytest.raises(ConfigurationException):
            ClientConfig.from_dict({"retry": {"attempts": 3}})


class TestLoading:

    def test_from_yaml(self, tmp_path: Path):
        path = tmp_path / "client.yaml"
        path.write_text(yaml.safe_dump({
            "retry": {"transient_retries": 3, "pause": 1.5},
            "table": {"page_size": 250},
        }))

        config = ClientConfig.from_file(path)
        assert config.retry.transient_retries == 3
        assert config.retry.pause == 1.5
        assert config.table.page_size == 250

    def test_from_json(self, tmp_path: Path):
        path = tmp_path / "client.json"
        path.write_text(json.dumps({"connection": {"port": 443}}))
        assert ClientConfig.from_file(path).connection.port == 443

    def test_empty_yaml(self, tmp_path: Path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert ClientConfig.from_file(path).retry.transient_retries == 5

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigurationException):
            ClientConfig.from_file(tmp_path / "absent.yaml")

    def test_to_dict_reloads(self):
        original = ClientConfig.from_dict({"retry": {"transient_retries": 2}, "table": {"max_pages": 4}})
        assert ClientConfig.from_dict(original.to_dict()).to_dict() == original.to_dict()

    @pytest.mark.parametrize("key", ["debug", "verbose", "log_file"])
    def test_logging_keys_rejected(self, key):
        with pytest.raises(ConfigurationException):
            ClientConfig.from_dict({key: True})

    def test_to_dict_sections(self):
        assert set(ClientConfig().to_dict()) == {"request", "retry", "table", "connection"}
