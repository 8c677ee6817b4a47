# -*- coding: utf-8 -*-
"""数据源验收测试模块"""

from acceptance.config_builder import ConnectorConfig, build_connector_config, build_fixture_connection_string
from acceptance.context import FixtureContext
from acceptance.credentials import Credentials, load_credentials
from acceptance.fixtures import FixtureManager
from acceptance.interfaces import SourceAcceptanceHarness
from acceptance.mongodb_strict_encrypt import MongodbSourceStrictEncryptAcceptance
from acceptance.runner import AcceptanceReport, CheckResult, SourceAcceptanceRunner

__all__ = [
    "AcceptanceReport",
    "CheckResult",
    "ConnectorConfig",
    "Credentials",
    "FixtureContext",
    "FixtureManager",
    "MongodbSourceStrictEncryptAcceptance",
    "SourceAcceptanceHarness",
    "SourceAcceptanceRunner",
    "build_connector_config",
    "build_fixture_connection_string",
    "load_credentials",
]
