# -*- coding: utf-8 -*-
"""MongoDB严格加密数据源的验收测试套件"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import structlog
from pymongo import MongoClient

from acceptance.config_builder import build_connector_config
from acceptance.context import FixtureContext
from acceptance.credentials import load_credentials
from acceptance.fixtures import FixtureManager
from acceptance.interfaces import SourceAcceptanceHarness
from config import AcceptanceConfig, get_config as get_settings
from protocol.catalog_helpers import create_airbyte_stream
from protocol.models import (
    ConfiguredAirbyteCatalog,
    ConfiguredAirbyteStream,
    ConnectorSpecification,
    DestinationSyncMode,
    Field,
    JsonSchemaPrimitive,
    SyncMode,
)
from source_mongodb.source import MongodbSource, MongodbSourceStrictEncrypt
from utils.resources import read_model_resource


logger = structlog.get_logger(__name__)

RESOURCE_DIR = Path(__file__).parent / "resources"


class MongodbSourceStrictEncryptAcceptance(SourceAcceptanceHarness):
    """声明期望的规格、目录与状态，并负责测试集合的准备和清理"""

    def __init__(self, settings: Optional[AcceptanceConfig] = None,
                 fixture_manager: Optional[FixtureManager] = None):
        self.settings = settings or get_settings()
        self.fixture_manager = fixture_manager or FixtureManager(
            self.settings.collection_name,
            connection_config=self.settings.connection
        )

    @property
    def database_name(self) -> str:
        return self.settings.database_name

    @property
    def collection_name(self) -> str:
        return self.settings.collection_name

    def get_image_name(self) -> str:
        return self.settings.image_name

    def create_source(self, client_factory: Callable[..., Any] = MongoClient) -> MongodbSourceStrictEncrypt:
        """按当前连接配置构建被测连接器"""
        return MongodbSourceStrictEncrypt(
            MongodbSource(client_factory=client_factory, connection_config=self.settings.connection)
        )

    def setup_environment(self) -> FixtureContext:
        # 凭据缺失时在建立任何连接之前失败
        credentials = load_credentials(self.settings.credentials_path)
        config = build_connector_config(credentials, self.database_name, self.settings.auth_source)
        logger.info("开始准备测试环境", database=self.database_name, collection=self.collection_name)
        return self.fixture_manager.setup(config)

    def tear_down(self, context: FixtureContext) -> None:
        self.fixture_manager.teardown(context)

    def get_config(self, context: FixtureContext) -> Dict[str, Any]:
        return context.config.to_json()

    def get_spec(self) -> ConnectorSpecification:
        return read_model_resource(RESOURCE_DIR, "expected_spec.json", ConnectorSpecification)

    def get_configured_catalog(self) -> ConfiguredAirbyteCatalog:
        stream = create_airbyte_stream(
            f"{self.database_name}.{self.collection_name}",
            Field.of("_id", JsonSchemaPrimitive.STRING),
            Field.of("id", JsonSchemaPrimitive.STRING),
            Field.of("name", JsonSchemaPrimitive.STRING)
        ).model_copy(update={
            "supported_sync_modes": [SyncMode.INCREMENTAL],
            "default_cursor_field": ["_id"]
        })
        return ConfiguredAirbyteCatalog(streams=[
            ConfiguredAirbyteStream(
                stream=stream,
                sync_mode=SyncMode.INCREMENTAL,
                destination_sync_mode=DestinationSyncMode.APPEND,
                cursor_field=["_id"]
            )
        ])

    def get_state(self) -> Dict[str, Any]:
        return {}

    def get_regex_tests(self) -> List[str]:
        return []
