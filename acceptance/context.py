# -*- coding: utf-8 -*-
"""测试环境上下文"""

from dataclasses import dataclass
from typing import Any, Optional

from acceptance.config_builder import ConnectorConfig


@dataclass
class FixtureContext:
    """在 setup、测试主体与 teardown 之间传递的环境状态"""
    config: ConnectorConfig
    collection_name: str
    client: Any = None
    database: Any = None
    torn_down: bool = False

    @property
    def stream_name(self) -> str:
        return f"{self.config.database}.{self.collection_name}"

    def get_collection(self) -> Optional[Any]:
        if self.database is None:
            return None
        return self.database[self.collection_name]
