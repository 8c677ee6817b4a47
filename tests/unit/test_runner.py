# -*- coding: utf-8 -*-
"""验收执行器单元测试"""

from unittest.mock import MagicMock

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from acceptance.fixtures import FixtureManager
from acceptance.mongodb_strict_encrypt import MongodbSourceStrictEncryptAcceptance
from acceptance.runner import SourceAcceptanceRunner
from protocol.models import DestinationSyncMode, SyncMode
from source_mongodb.source import MongodbSource, MongodbSourceStrictEncrypt
from utils.error_handler import TeardownError


class RegexSuite(MongodbSourceStrictEncryptAcceptance):
    """带正则检查的套件"""

    def __init__(self, patterns, **kwargs):
        super().__init__(**kwargs)
        self.patterns = patterns

    def get_regex_tests(self):
        return self.patterns


class TestSourceAcceptanceRunner:
    """验收执行器测试"""

    @pytest.fixture
    def suite(self, settings, client_factory):
        return MongodbSourceStrictEncryptAcceptance(
            settings=settings,
            fixture_manager=FixtureManager(settings.collection_name, client_factory=client_factory)
        )

    @pytest.fixture
    def source(self, client_factory):
        return MongodbSourceStrictEncrypt(MongodbSource(client_factory=client_factory))

    def test_all_checks_pass(self, suite, source, mongo_client):
        """测试完整运行全部通过并清理环境"""
        report = SourceAcceptanceRunner(suite, source).run()

        assert report.passed, [(r.name, r.message) for r in report.failures]
        assert [result.name for result in report.results] == list(SourceAcceptanceRunner.CHECKS)
        assert report.image_name == "airbyte/source-mongodb-strict-encrypt:dev"
        assert "acceptance_test" not in mongo_client["test"].list_collection_names()

    def test_spec_mismatch_is_reported(self, suite, client_factory, mongo_client):
        """测试未移除 tls 的规格被判为失败"""
        report = SourceAcceptanceRunner(suite, MongodbSource(client_factory=client_factory)).run()

        assert not report.passed
        assert [result.name for result in report.failures] == ["check_spec"]
        assert "acceptance_test" not in mongo_client["test"].list_collection_names()

    def test_regex_checks(self, settings, client_factory, source):
        """测试正则必须匹配至少一条记录"""
        manager = FixtureManager(settings.collection_name, client_factory=client_factory)

        matching = RegexSuite(["\"name\": \"Mongo\""], settings=settings, fixture_manager=manager)
        assert SourceAcceptanceRunner(matching, source).run().passed

        missing = RegexSuite(["Cassandra"], settings=settings, fixture_manager=manager)
        report = SourceAcceptanceRunner(missing, source).run()
        assert [result.name for result in report.failures] == ["check_full_refresh_read"]

    def test_teardown_error_after_passing_checks_raises(self, suite, source):
        """测试检查通过后清理失败会抛出 TeardownError"""
        suite.tear_down = MagicMock(side_effect=TeardownError("drop failed"))

        with pytest.raises(TeardownError):
            SourceAcceptanceRunner(suite, source).run()

    def test_body_error_wins_over_teardown_error(self, suite):
        """测试检查异常时清理失败只记录日志"""
        broken_source = MagicMock()
        broken_source.spec.side_effect = RuntimeError("connector crashed")
        suite.tear_down = MagicMock(side_effect=TeardownError("drop failed"))

        with pytest.raises(RuntimeError, match="connector crashed"):
            SourceAcceptanceRunner(suite, broken_source).run()

        suite.tear_down.assert_called_once()

    def test_driver_error_fails_only_its_check(self, suite, source, mongo_client):
        """测试单个检查的数据库错误不会中断其余检查"""
        source.source.discover = MagicMock(side_effect=ServerSelectionTimeoutError("no servers"))

        report = SourceAcceptanceRunner(suite, source).run()

        assert [result.name for result in report.results] == list(SourceAcceptanceRunner.CHECKS)
        assert [result.name for result in report.failures] == ["check_discover"]
        failure = report.failures[0]
        assert "ServerSelectionTimeoutError" in failure.message
        assert "no servers" in failure.message
        assert failure.details == {"error_type": "ServerSelectionTimeoutError"}
        assert "acceptance_test" not in mongo_client["test"].list_collection_names()

    def test_full_refresh_read_uses_default_catalog(self, suite, source):
        """测试全量读取使用由声明目录生成的默认全量目录"""
        runner = SourceAcceptanceRunner(suite, source)

        catalog = runner._full_refresh_catalog()

        assert len(catalog.streams) == 1
        configured = catalog.streams[0]
        assert configured.stream == suite.get_configured_catalog().streams[0].stream
        assert configured.sync_mode == SyncMode.FULL_REFRESH
        assert configured.destination_sync_mode == DestinationSyncMode.OVERWRITE
        assert configured.cursor_field == ["_id"]

    def test_setup_failure_skips_teardown(self, tmp_path, source):
        """测试准备阶段失败时不会执行检查"""
        from config import AcceptanceConfig
        from utils.error_handler import ConfigurationError

        suite = MongodbSourceStrictEncryptAcceptance(
            settings=AcceptanceConfig(credentials_path=str(tmp_path / "missing.json"))
        )
        suite.tear_down = MagicMock()

        with pytest.raises(ConfigurationError):
            SourceAcceptanceRunner(suite, source).run()

        suite.tear_down.assert_not_called()
