# -*- coding: utf-8 -*-
"""凭据加载单元测试"""

import json

import pytest

from acceptance.credentials import Credentials, load_credentials
from utils.error_handler import ConfigurationError, ErrorCategory


class TestLoadCredentials:
    """凭据加载测试"""

    def test_load_valid_file(self, credentials_file):
        """测试读取合法凭据文件"""
        credentials = load_credentials(credentials_file)

        assert credentials == Credentials(host="localhost", port=27017, user="u", password="p")

    def test_port_as_string_is_coerced(self, tmp_path):
        """测试字符串端口被转换为整数"""
        path = tmp_path / "credentials.json"
        path.write_text(json.dumps({"host": "db", "port": "27018", "user": "a", "password": "b"}))

        assert load_credentials(path).port == 27018

    def test_missing_file_names_expected_path(self, tmp_path):
        """测试文件缺失时错误信息包含期望路径"""
        missing = tmp_path / "secrets" / "credentials.json"

        with pytest.raises(ConfigurationError) as exc_info:
            load_credentials(missing)

        assert str(missing) in exc_info.value.message
        assert "MONGODB_ACCEPTANCE_CREDENTIALS_PATH" in exc_info.value.message
        assert exc_info.value.category == ErrorCategory.CONFIGURATION
        assert exc_info.value.details["credentials_path"] == str(missing)

    def test_malformed_json(self, tmp_path):
        """测试非法JSON"""
        path = tmp_path / "credentials.json"
        path.write_text("{host: ")

        with pytest.raises(ConfigurationError, match="not valid JSON"):
            load_credentials(path)

    def test_non_object_json(self, tmp_path):
        """测试JSON不是对象"""
        path = tmp_path / "credentials.json"
        path.write_text("[1, 2]")

        with pytest.raises(ConfigurationError, match="JSON object"):
            load_credentials(path)

    def test_missing_fields(self, tmp_path):
        """测试缺少字段"""
        path = tmp_path / "credentials.json"
        path.write_text(json.dumps({"host": "localhost", "port": 27017}))

        with pytest.raises(ConfigurationError) as exc_info:
            load_credentials(path)

        assert set(exc_info.value.details["fields"]) == {"user", "password"}

    @pytest.mark.parametrize("port", [65536, -1])
    def test_port_out_of_range(self, tmp_path, port):
        """测试端口超出TCP范围"""
        path = tmp_path / "credentials.json"
        path.write_text(json.dumps({"host": "localhost", "port": port, "user": "u", "password": "p"}))

        with pytest.raises(ConfigurationError) as exc_info:
            load_credentials(path)

        assert exc_info.value.details["fields"] == ["port"]

    def test_highest_port_is_accepted(self, tmp_path):
        """测试 65535 是合法端口"""
        path = tmp_path / "credentials.json"
        path.write_text(json.dumps({"host": "localhost", "port": 65535, "user": "u", "password": "p"}))

        assert load_credentials(path).port == 65535

    def test_credentials_are_immutable(self, credentials_file):
        """测试凭据只读"""
        credentials = load_credentials(credentials_file)

        with pytest.raises(Exception):
            credentials.host = "other"
