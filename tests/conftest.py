# -*- coding: utf-8 -*-
"""
Pytest配置文件
"""

import json
import sys
from pathlib import Path

import mongomock
import pytest

# 添加项目根目录到Python路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from acceptance.config_builder import build_connector_config
from acceptance.credentials import Credentials
from config import AcceptanceConfig
from utils.logger import setup_logging


def pytest_configure(config):
    """按配置初始化structlog"""
    settings = AcceptanceConfig()
    setup_logging(settings.logging.level, settings.logging.format)


TEST_CREDENTIALS = {
    "host": "localhost",
    "port": 27017,
    "user": "u",
    "password": "p"
}


@pytest.fixture
def credentials_file(tmp_path):
    """写入临时凭据文件"""
    path = tmp_path / "secrets" / "credentials.json"
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps(TEST_CREDENTIALS), encoding="utf-8")
    return path


@pytest.fixture
def connector_config():
    """由测试凭据生成的连接器配置"""
    return build_connector_config(Credentials(**TEST_CREDENTIALS), "test", "admin")


@pytest.fixture
def settings(credentials_file):
    """指向临时凭据文件的配置"""
    return AcceptanceConfig(credentials_path=str(credentials_file))


@pytest.fixture
def mongo_client():
    """内存MongoDB客户端"""
    return mongomock.MongoClient()


@pytest.fixture
def client_factory(mongo_client):
    """记录连接参数并总是返回同一个内存客户端的工厂"""
    calls = []

    def factory(*args, **kwargs):
        calls.append((args, kwargs))
        return mongo_client

    factory.calls = calls
    return factory
