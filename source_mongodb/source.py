# -*- coding: utf-8 -*-
"""MongoDB数据源连接器"""

import copy
import time
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional

import structlog
from bson import Decimal128, ObjectId
from pymongo import ASCENDING, MongoClient
from pymongo.errors import PyMongoError

from config import ConnectionConfig
from protocol.models import (
    AirbyteCatalog,
    AirbyteConnectionStatus,
    AirbyteMessage,
    AirbyteRecordMessage,
    AirbyteStateMessage,
    AirbyteStream,
    ConfiguredAirbyteCatalog,
    ConfiguredAirbyteStream,
    ConnectorSpecification,
    Field,
    JsonSchemaPrimitive,
    Status,
    SyncMode,
    Type,
)
from protocol.catalog_helpers import field_to_json_schema
from protocol.source import Source
from source_mongodb.connection import MongoInstanceType, build_connection_string
from utils.error_handler import AcceptanceError, ConfigurationError
from utils.resources import read_model_resource


logger = structlog.get_logger(__name__)

RESOURCE_DIR = Path(__file__).parent
ID_FIELD = "_id"


def bson_type_to_primitive(value: Any) -> Optional[JsonSchemaPrimitive]:
    """BSON值到JSON Schema类型的映射，None 表示无法判断"""
    if value is None:
        return None
    # bool 是 int 的子类，必须先判断
    if isinstance(value, bool):
        return JsonSchemaPrimitive.BOOLEAN
    if isinstance(value, (int, float, Decimal, Decimal128)):
        return JsonSchemaPrimitive.NUMBER
    if isinstance(value, dict):
        return JsonSchemaPrimitive.OBJECT
    if isinstance(value, (list, tuple)):
        return JsonSchemaPrimitive.ARRAY
    return JsonSchemaPrimitive.STRING


def to_json_value(value: Any) -> Any:
    """把BSON值转换为可JSON序列化的值"""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Decimal128):
        return float(value.to_decimal())
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, dict):
        return {key: to_json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_value(item) for item in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def infer_fields(documents: Iterable[Mapping[str, Any]]) -> List[Field]:
    """根据样本文档推断顶层字段及类型

    同一字段出现多种类型时退化为 string，_id 始终为 string。
    """
    seen: Dict[str, set] = {}
    for document in documents:
        for name, value in document.items():
            primitive = bson_type_to_primitive(value)
            types = seen.setdefault(name, set())
            if primitive is not None:
                types.add(primitive)

    fields = [Field.of(ID_FIELD, JsonSchemaPrimitive.STRING)]
    for name in sorted(seen):
        if name == ID_FIELD:
            continue
        types = seen[name]
        primitive = types.pop() if len(types) == 1 else JsonSchemaPrimitive.STRING
        fields.append(Field.of(name, primitive))
    return fields


class MongodbSource(Source):
    """MongoDB数据源：spec / check / discover / read"""

    def __init__(self, client_factory: Callable[..., Any] = MongoClient,
                 connection_config: Optional[ConnectionConfig] = None):
        self.client_factory = client_factory
        self.connection_config = connection_config or ConnectionConfig()

    def spec(self) -> ConnectorSpecification:
        """读取连接器规格说明"""
        return read_model_resource(RESOURCE_DIR, "spec.json", ConnectorSpecification)

    def _open_client(self, config: Mapping[str, Any]):
        connection_string = build_connection_string(config)
        return self.client_factory(
            connection_string,
            serverSelectionTimeoutMS=self.connection_config.server_selection_timeout_ms,
            connectTimeoutMS=self.connection_config.connect_timeout_ms
        )

    def check(self, config: Mapping[str, Any]) -> AirbyteConnectionStatus:
        """检查能否连接并访问目标数据库"""
        client = None
        try:
            client = self._open_client(config)
            client.admin.command('ping')
            client[config["database"]].list_collection_names()
            logger.info("连接检查成功", database=config.get("database"))
            return AirbyteConnectionStatus(status=Status.SUCCEEDED)
        except (PyMongoError, AcceptanceError) as e:
            logger.warning("连接检查失败", database=config.get("database"), error=str(e))
            return AirbyteConnectionStatus(
                status=Status.FAILED,
                message=f"Could not connect with provided configuration. Error: {e}"
            )
        finally:
            if client is not None:
                client.close()

    def discover(self, config: Mapping[str, Any]) -> AirbyteCatalog:
        """发现数据库中的集合并推断字段"""
        database_name = config["database"]
        client = self._open_client(config)
        try:
            database = client[database_name]
            streams = []
            for collection_name in sorted(database.list_collection_names()):
                if collection_name.startswith("system."):
                    continue
                sample_size = self.connection_config.discover_sample_size
                sample = database[collection_name].find({}).limit(sample_size)
                fields = infer_fields(sample)
                streams.append(AirbyteStream(
                    name=f"{database_name}.{collection_name}",
                    json_schema=field_to_json_schema(fields),
                    supported_sync_modes=[SyncMode.FULL_REFRESH, SyncMode.INCREMENTAL],
                    source_defined_cursor=False,
                    default_cursor_field=[ID_FIELD],
                    source_defined_primary_key=[[ID_FIELD]]
                ))
            logger.info("目录发现完成", database=database_name, stream_count=len(streams))
            return AirbyteCatalog(streams=streams)
        finally:
            client.close()

    def read(self, config: Mapping[str, Any], catalog: ConfiguredAirbyteCatalog,
             state: Optional[Mapping[str, Any]] = None) -> Iterator[AirbyteMessage]:
        """按已配置目录读取记录

        增量同步的流在其记录之后输出一条包含所有流游标的状态消息。
        """
        database_name = config["database"]
        cursors = _cursors_from_state(state)
        client = self._open_client(config)
        try:
            database = client[database_name]
            for configured_stream in catalog.streams:
                collection_name = _collection_name(configured_stream.stream.name, database_name)
                collection = database[collection_name]
                if configured_stream.sync_mode == SyncMode.INCREMENTAL:
                    yield from self._read_incremental(collection, configured_stream, cursors)
                else:
                    yield from self._read_full_refresh(collection, configured_stream)
        finally:
            client.close()

    def _read_full_refresh(self, collection, configured_stream: ConfiguredAirbyteStream) -> Iterator[AirbyteMessage]:
        stream_name = configured_stream.stream.name
        count = 0
        for document in collection.find({}):
            count += 1
            yield _record_message(stream_name, document, configured_stream.stream)
        logger.info("全量读取完成", stream=stream_name, record_count=count)

    def _read_incremental(self, collection, configured_stream: ConfiguredAirbyteStream,
                          cursors: Dict[str, Dict[str, Any]]) -> Iterator[AirbyteMessage]:
        stream = configured_stream.stream
        cursor_field = configured_stream.cursor_field or stream.default_cursor_field
        if not cursor_field:
            raise ConfigurationError(
                f"Incremental stream {stream.name} has no cursor field",
                details={"stream": stream.name}
            )
        cursor_path = ".".join(cursor_field)

        query: Dict[str, Any] = {}
        previous = cursors.get(stream.name)
        if previous is not None and previous.get("cursor_field") == list(cursor_field) \
                and previous.get("cursor") is not None:
            query = {cursor_path: {"$gt": _cursor_to_bson(cursor_path, previous["cursor"])}}

        max_cursor = previous["cursor"] if query else None
        count = 0
        for document in collection.find(query).sort(cursor_path, ASCENDING):
            count += 1
            value = _get_path(document, cursor_field)
            if value is not None:
                max_cursor = to_json_value(value)
            yield _record_message(stream.name, document, stream)

        cursors[stream.name] = {
            "stream_name": stream.name,
            "cursor_field": list(cursor_field),
            "cursor": max_cursor
        }
        logger.info("增量读取完成", stream=stream.name, record_count=count, cursor=max_cursor)
        yield AirbyteMessage(
            type=Type.STATE,
            state=AirbyteStateMessage(data={"streams": list(copy.deepcopy(cursors).values())})
        )


def _collection_name(stream_name: str, database_name: str) -> str:
    prefix = f"{database_name}."
    if stream_name.startswith(prefix):
        return stream_name[len(prefix):]
    return stream_name


def _cursors_from_state(state: Optional[Mapping[str, Any]]) -> Dict[str, Dict[str, Any]]:
    cursors = {}
    for stream_state in (state or {}).get("streams", []):
        cursors[stream_state["stream_name"]] = dict(stream_state)
    return cursors


def _cursor_to_bson(cursor_path: str, cursor: Any) -> Any:
    if cursor_path == ID_FIELD and isinstance(cursor, str) and ObjectId.is_valid(cursor):
        return ObjectId(cursor)
    return cursor


def _get_path(document: Mapping[str, Any], path: List[str]) -> Any:
    value: Any = document
    for key in path:
        if not isinstance(value, Mapping):
            return None
        value = value.get(key)
    return value


def _record_message(stream_name: str, document: Mapping[str, Any], stream: AirbyteStream) -> AirbyteMessage:
    return AirbyteMessage(
        type=Type.RECORD,
        record=AirbyteRecordMessage(
            stream=stream_name,
            data=to_json_value(dict(document)),
            emitted_at=int(time.time() * 1000),
            namespace=stream.namespace
        )
    )


class MongodbSourceStrictEncrypt(Source):
    """只允许TLS连接的MongoDB数据源"""

    def __init__(self, source: Optional[MongodbSource] = None):
        self.source = source or MongodbSource()

    def spec(self) -> ConnectorSpecification:
        """去掉 standalone 实例的 tls 开关，使TLS无法被关闭"""
        spec_json = copy.deepcopy(self.source.spec().to_json())
        instance_types = spec_json["connectionSpecification"]["properties"]["instance_type"]["oneOf"]
        for instance_type in instance_types:
            instance_enum = instance_type["properties"]["instance"].get("enum", [])
            if MongoInstanceType.STANDALONE.value in instance_enum:
                instance_type["properties"].pop("tls", None)
        return ConnectorSpecification.model_validate(spec_json)

    @staticmethod
    def enforce_tls(config: Mapping[str, Any]) -> Dict[str, Any]:
        """返回强制开启TLS的配置副本"""
        secured = copy.deepcopy(dict(config))
        instance_config = dict(secured.get("instance_type") or {})
        instance = instance_config.get("instance", MongoInstanceType.STANDALONE.value)
        if instance == MongoInstanceType.STANDALONE.value:
            instance_config["tls"] = True
        secured["instance_type"] = instance_config
        return secured

    def check(self, config: Mapping[str, Any]) -> AirbyteConnectionStatus:
        return self.source.check(self.enforce_tls(config))

    def discover(self, config: Mapping[str, Any]) -> AirbyteCatalog:
        return self.source.discover(self.enforce_tls(config))

    def read(self, config: Mapping[str, Any], catalog: ConfiguredAirbyteCatalog,
             state: Optional[Mapping[str, Any]] = None) -> Iterator[AirbyteMessage]:
        return self.source.read(self.enforce_tls(config), catalog, state)
