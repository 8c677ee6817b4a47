# -*- coding: utf-8 -*-
"""目录构造辅助函数"""

from typing import Any, Dict, Iterable

from protocol.models import (
    AirbyteCatalog,
    AirbyteStream,
    ConfiguredAirbyteCatalog,
    ConfiguredAirbyteStream,
    DestinationSyncMode,
    Field,
    SyncMode,
)


def field_to_json_schema(fields: Iterable[Field]) -> Dict[str, Any]:
    """把字段列表转换成对象类型的JSON Schema"""
    return {
        "type": "object",
        "properties": {
            field.name: {"type": field.type.value}
            for field in fields
        }
    }


def create_airbyte_stream(stream_name: str, *fields: Field) -> AirbyteStream:
    """创建只支持全量同步的数据流"""
    return AirbyteStream(
        name=stream_name,
        json_schema=field_to_json_schema(fields),
        supported_sync_modes=[SyncMode.FULL_REFRESH]
    )


def to_default_configured_catalog(catalog: AirbyteCatalog) -> ConfiguredAirbyteCatalog:
    """按每个流的默认设置生成全量同步目录"""
    return ConfiguredAirbyteCatalog(streams=[
        ConfiguredAirbyteStream(
            stream=stream,
            sync_mode=SyncMode.FULL_REFRESH,
            destination_sync_mode=DestinationSyncMode.OVERWRITE,
            cursor_field=list(stream.default_cursor_field)
        )
        for stream in catalog.streams
    ])


def field_names(stream: AirbyteStream) -> set:
    """流的JSON Schema中声明的顶层字段名"""
    return set(stream.json_schema.get("properties", {}).keys())
