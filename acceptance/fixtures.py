# -*- coding: utf-8 -*-
"""测试数据的准备与清理"""

from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional

import structlog
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from acceptance.config_builder import ConnectorConfig, build_fixture_connection_string
from acceptance.context import FixtureContext
from config import ConnectionConfig
from utils.error_handler import FixtureSetupError, TeardownError


logger = structlog.get_logger(__name__)

FIXTURE_DOCUMENTS = (
    ("0001", "Test"),
    ("0002", "Mongo"),
    ("0003", "Source"),
)


def fixture_documents() -> List[Dict[str, Any]]:
    """每次返回新的文档列表，insert_many 会向文档写入 _id"""
    return [{"id": doc_id, "name": name} for doc_id, name in FIXTURE_DOCUMENTS]


class FixtureManager:
    """管理测试集合的生命周期"""

    def __init__(self, collection_name: str,
                 client_factory: Callable[..., Any] = MongoClient,
                 connection_config: Optional[ConnectionConfig] = None):
        self.collection_name = collection_name
        self.client_factory = client_factory
        self.connection_config = connection_config or ConnectionConfig()

    def setup(self, config: ConnectorConfig) -> FixtureContext:
        """建立连接、创建集合并批量插入测试文档

        任一步骤失败都会关闭已打开的连接并抛出 FixtureSetupError，不做重试。
        """
        connection_string = build_fixture_connection_string(config)
        context = FixtureContext(config=config, collection_name=self.collection_name)

        try:
            context.client = self.client_factory(
                connection_string,
                serverSelectionTimeoutMS=self.connection_config.server_selection_timeout_ms,
                connectTimeoutMS=self.connection_config.connect_timeout_ms
            )
            context.database = context.client[config.database]
            collection = context.database.create_collection(self.collection_name)
            result = collection.insert_many(fixture_documents())
        except PyMongoError as e:
            logger.error(
                "测试数据准备失败",
                database=config.database,
                collection=self.collection_name,
                error=str(e)
            )
            if context.client is not None:
                context.client.close()
            raise FixtureSetupError(
                f"Failed to set up fixture collection {config.database}.{self.collection_name}: {e}",
                details={"database": config.database, "collection": self.collection_name},
                cause=e
            )

        logger.info(
            "测试数据准备完成",
            database=config.database,
            collection=self.collection_name,
            inserted_count=len(result.inserted_ids)
        )
        return context

    def teardown(self, context: FixtureContext) -> None:
        """删除测试集合并关闭连接，重复调用无副作用"""
        if context.torn_down or context.client is None:
            return

        drop_error: Optional[Exception] = None
        try:
            context.database[context.collection_name].drop()
        except PyMongoError as e:
            drop_error = e
        finally:
            context.client.close()
            context.torn_down = True

        if drop_error is not None:
            logger.error("测试集合删除失败", collection=context.collection_name, error=str(drop_error))
            raise TeardownError(
                f"Failed to drop fixture collection {context.stream_name}: {drop_error}",
                details={"collection": context.collection_name},
                cause=drop_error
            )

        logger.info("测试环境已清理", collection=context.collection_name)

    @contextmanager
    def fixture(self, config: ConnectorConfig) -> Iterator[FixtureContext]:
        """setup 与无条件 teardown 的配对

        主体已失败时 teardown 的错误只记录日志，向上抛出主体的异常。
        """
        context = self.setup(config)
        try:
            yield context
        except BaseException:
            try:
                self.teardown(context)
            except TeardownError as e:
                logger.warning("主体失败后清理也失败", trace_id=e.trace_id, error=e.message)
            raise
        self.teardown(context)
