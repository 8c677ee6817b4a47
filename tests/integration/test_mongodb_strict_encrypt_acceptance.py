# -*- coding: utf-8 -*-
"""MongoDB严格加密数据源验收测试

除规格检查外，需要 secrets/credentials.json（或 MONGODB_ACCEPTANCE_CREDENTIALS_PATH）指向一个开启TLS的MongoDB实例。
"""

from pathlib import Path

import pytest
from pymongo import MongoClient

from acceptance.config_builder import build_fixture_connection_string
from acceptance.mongodb_strict_encrypt import MongodbSourceStrictEncryptAcceptance
from acceptance.runner import SourceAcceptanceRunner
from config import AcceptanceConfig


SETTINGS = AcceptanceConfig()

requires_credentials = pytest.mark.skipif(
    not Path(SETTINGS.credentials_path).exists(),
    reason=f"MongoDB credentials file not found: {SETTINGS.credentials_path}"
)


@pytest.fixture
def suite():
    return MongodbSourceStrictEncryptAcceptance(settings=SETTINGS)


def test_spec(suite):
    """测试连接器规格与期望规格一致"""
    actual = suite.create_source().spec()
    expected = suite.get_spec()

    assert actual == expected


@requires_credentials
def test_fixture_documents(suite):
    """测试准备后集合中恰好有三条测试文档，清理后集合不存在"""
    context = suite.setup_environment()
    try:
        documents = list(context.get_collection().find({}, {"_id": 0}))
        assert sorted((d["id"], d["name"]) for d in documents) == [
            ("0001", "Test"), ("0002", "Mongo"), ("0003", "Source")
        ]
    finally:
        suite.tear_down(context)

    with MongoClient(build_fixture_connection_string(context.config)) as client:
        assert SETTINGS.collection_name not in client[SETTINGS.database_name].list_collection_names()


@requires_credentials
def test_source_acceptance(suite):
    """运行完整的验收检查"""
    report = SourceAcceptanceRunner(suite, suite.create_source()).run()

    assert report.passed, [(result.name, result.message) for result in report.failures]
