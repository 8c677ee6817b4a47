# -*- coding: utf-8 -*-
"""同步协议模块"""

from protocol.catalog_helpers import create_airbyte_stream, field_to_json_schema, to_default_configured_catalog
from protocol.source import Source
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
    DestinationSyncMode,
    Field,
    JsonSchemaPrimitive,
    Status,
    SyncMode,
    Type,
)

__all__ = [
    "AirbyteCatalog",
    "AirbyteConnectionStatus",
    "AirbyteMessage",
    "AirbyteRecordMessage",
    "AirbyteStateMessage",
    "AirbyteStream",
    "ConfiguredAirbyteCatalog",
    "ConfiguredAirbyteStream",
    "ConnectorSpecification",
    "DestinationSyncMode",
    "Field",
    "JsonSchemaPrimitive",
    "Source",
    "Status",
    "SyncMode",
    "Type",
    "create_airbyte_stream",
    "field_to_json_schema",
    "to_default_configured_catalog",
]
