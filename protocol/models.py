# -*- coding: utf-8 -*-
"""同步协议消息模型

只覆盖本连接器验收测试用到的消息，字段命名与协议的JSON表示保持一致。
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field as PydanticField


class SyncMode(str, Enum):
    """同步模式"""
    FULL_REFRESH = "full_refresh"
    INCREMENTAL = "incremental"


class DestinationSyncMode(str, Enum):
    """目标端写入模式"""
    APPEND = "append"
    OVERWRITE = "overwrite"
    APPEND_DEDUP = "append_dedup"


class JsonSchemaPrimitive(str, Enum):
    """JSON Schema基本类型"""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    NULL = "null"


class Status(str, Enum):
    """连接检查结果"""
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class Type(str, Enum):
    """消息类型"""
    RECORD = "RECORD"
    STATE = "STATE"
    LOG = "LOG"
    SPEC = "SPEC"
    CONNECTION_STATUS = "CONNECTION_STATUS"
    CATALOG = "CATALOG"


class Field(BaseModel):
    """流中的单个字段"""
    model_config = ConfigDict(frozen=True)

    name: str
    type: JsonSchemaPrimitive

    @classmethod
    def of(cls, name: str, type: JsonSchemaPrimitive) -> "Field":
        return cls(name=name, type=type)


class ConnectorSpecification(BaseModel):
    """连接器规格说明"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    documentation_url: Optional[str] = PydanticField(default=None, alias="documentationUrl")
    changelog_url: Optional[str] = PydanticField(default=None, alias="changelogUrl")
    connection_specification: Dict[str, Any] = PydanticField(alias="connectionSpecification")
    supports_incremental: Optional[bool] = PydanticField(default=None, alias="supportsIncremental")
    supports_normalization: Optional[bool] = PydanticField(default=None, alias="supportsNormalization")
    supports_dbt: Optional[bool] = PydanticField(default=None, alias="supportsDBT")
    supported_destination_sync_modes: Optional[List[DestinationSyncMode]] = PydanticField(
        default=None, alias="supported_destination_sync_modes"
    )

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AirbyteStream(BaseModel):
    """可被读取的数据流"""
    name: str
    json_schema: Dict[str, Any]
    namespace: Optional[str] = None
    supported_sync_modes: List[SyncMode] = PydanticField(default_factory=lambda: [SyncMode.FULL_REFRESH])
    source_defined_cursor: Optional[bool] = None
    default_cursor_field: List[str] = PydanticField(default_factory=list)
    source_defined_primary_key: List[List[str]] = PydanticField(default_factory=list)


class AirbyteCatalog(BaseModel):
    """discover 返回的目录"""
    streams: List[AirbyteStream] = PydanticField(default_factory=list)

    def get_stream(self, name: str) -> Optional[AirbyteStream]:
        for stream in self.streams:
            if stream.name == name:
                return stream
        return None


class ConfiguredAirbyteStream(BaseModel):
    """配置后的数据流"""
    stream: AirbyteStream
    sync_mode: SyncMode = SyncMode.FULL_REFRESH
    destination_sync_mode: DestinationSyncMode = DestinationSyncMode.APPEND
    cursor_field: List[str] = PydanticField(default_factory=list)
    primary_key: List[List[str]] = PydanticField(default_factory=list)


class ConfiguredAirbyteCatalog(BaseModel):
    """read 使用的已配置目录"""
    streams: List[ConfiguredAirbyteStream] = PydanticField(default_factory=list)


class AirbyteConnectionStatus(BaseModel):
    """check 的结果"""
    status: Status
    message: Optional[str] = None


class AirbyteRecordMessage(BaseModel):
    """单条记录"""
    stream: str
    data: Dict[str, Any]
    emitted_at: int
    namespace: Optional[str] = None


class AirbyteStateMessage(BaseModel):
    """同步状态"""
    data: Dict[str, Any]


class AirbyteMessage(BaseModel):
    """read 输出的消息"""
    type: Type
    record: Optional[AirbyteRecordMessage] = None
    state: Optional[AirbyteStateMessage] = None
