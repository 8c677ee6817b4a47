# -*- coding: utf-8 -*-
"""
验收测试接口定义

具体的测试套件实现这些钩子，由 SourceAcceptanceRunner 组合调用。
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from acceptance.context import FixtureContext
from protocol.models import ConfiguredAirbyteCatalog, ConnectorSpecification


class SourceAcceptanceHarness(ABC):
    """数据源验收测试套件接口"""

    @abstractmethod
    def get_image_name(self) -> str:
        """被测连接器的镜像名称"""
        pass

    @abstractmethod
    def setup_environment(self) -> FixtureContext:
        """准备测试环境并返回上下文"""
        pass

    @abstractmethod
    def tear_down(self, context: FixtureContext) -> None:
        """清理测试环境，无论测试结果如何都会被调用"""
        pass

    @abstractmethod
    def get_config(self, context: FixtureContext) -> Dict[str, Any]:
        """连接器输入配置"""
        pass

    @abstractmethod
    def get_spec(self) -> ConnectorSpecification:
        """期望的规格说明"""
        pass

    @abstractmethod
    def get_configured_catalog(self) -> ConfiguredAirbyteCatalog:
        """读取时使用的已配置目录"""
        pass

    @abstractmethod
    def get_state(self) -> Dict[str, Any]:
        """首次增量同步使用的状态"""
        pass

    @abstractmethod
    def get_regex_tests(self) -> List[str]:
        """每个正则都必须匹配至少一条记录"""
        pass
