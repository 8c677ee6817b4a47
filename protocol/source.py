# -*- coding: utf-8 -*-
"""数据源连接器接口"""

from abc import ABC, abstractmethod
from typing import Any, Iterator, Mapping, Optional

from protocol.models import (
    AirbyteCatalog,
    AirbyteConnectionStatus,
    AirbyteMessage,
    ConfiguredAirbyteCatalog,
    ConnectorSpecification,
)


class Source(ABC):
    """数据源连接器"""

    @abstractmethod
    def spec(self) -> ConnectorSpecification:
        """连接器规格说明"""
        pass

    @abstractmethod
    def check(self, config: Mapping[str, Any]) -> AirbyteConnectionStatus:
        """检查配置能否连通，失败时返回 FAILED 而不是抛出异常"""
        pass

    @abstractmethod
    def discover(self, config: Mapping[str, Any]) -> AirbyteCatalog:
        pass

    @abstractmethod
    def read(self, config: Mapping[str, Any], catalog: ConfiguredAirbyteCatalog,
             state: Optional[Mapping[str, Any]] = None) -> Iterator[AirbyteMessage]:
        pass
