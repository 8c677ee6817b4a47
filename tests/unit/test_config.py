# -*- coding: utf-8 -*-
"""配置模块单元测试"""

import pytest
import yaml

import config as config_module
from config import AcceptanceConfig, get_config, load_config


class TestAcceptanceConfig:
    """配置测试"""

    def test_defaults(self):
        settings = AcceptanceConfig()

        assert settings.credentials_path == "secrets/credentials.json"
        assert settings.database_name == "test"
        assert settings.collection_name == "acceptance_test"
        assert settings.auth_source == "admin"
        assert settings.image_name == "airbyte/source-mongodb-strict-encrypt:dev"

    def test_env_override(self, monkeypatch):
        """测试环境变量覆盖凭据路径"""
        monkeypatch.setenv("MONGODB_ACCEPTANCE_CREDENTIALS_PATH", "/run/secrets/mongo.json")
        monkeypatch.setenv("MONGODB_ACCEPTANCE_CONNECTION__CONNECT_TIMEOUT_MS", "500")

        settings = AcceptanceConfig()

        assert settings.credentials_path == "/run/secrets/mongo.json"
        assert settings.connection.connect_timeout_ms == 500

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "acceptance.yaml"
        path.write_text(yaml.safe_dump({
            "collection_name": "other_collection",
            "logging": {"level": "DEBUG", "format": "console"}
        }))

        settings = AcceptanceConfig.from_yaml(str(path))

        assert settings.collection_name == "other_collection"
        assert settings.logging.format == "console"

    def test_from_yaml_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AcceptanceConfig.from_yaml(str(tmp_path / "missing.yaml"))

    def test_invalid_log_format(self):
        with pytest.raises(ValueError):
            AcceptanceConfig(logging={"format": "xml"})

    def test_validate_config(self):
        assert AcceptanceConfig().validate_config() == []
        assert AcceptanceConfig(database_name="a.b").validate_config() != []


class TestLoadConfig:
    """全局配置加载测试"""

    def test_load_and_get(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config_module, "config", None)
        path = tmp_path / "acceptance.yaml"
        path.write_text(yaml.safe_dump({"database_name": "integration"}))

        loaded = load_config(str(path))

        assert get_config() is loaded
        assert loaded.database_name == "integration"

    def test_invalid_config_rejected(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config_module, "config", None)
        path = tmp_path / "acceptance.yaml"
        path.write_text(yaml.safe_dump({"collection_name": " "}))

        with pytest.raises(ValueError, match="配置验证失败"):
            load_config(str(path))
