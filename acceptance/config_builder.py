# -*- coding: utf-8 -*-
"""连接器配置构造"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from acceptance.credentials import Credentials
from source_mongodb.connection import MongoInstanceType
from utils.error_handler import ConfigurationError


class InstanceDescriptor(BaseModel):
    """实例描述"""
    model_config = ConfigDict(frozen=True)

    instance: MongoInstanceType = Field(default=MongoInstanceType.STANDALONE, description="实例类型")
    host: str = Field(..., description="主机地址")
    port: int = Field(..., description="端口")


class ConnectorConfig(BaseModel):
    """连接器输入配置"""
    model_config = ConfigDict(frozen=True)

    user: str
    password: str
    instance_type: InstanceDescriptor
    database: str
    auth_source: str

    def to_json(self) -> Dict[str, Any]:
        """转换为连接器接受的配置字典"""
        return self.model_dump(mode="json")


def build_connector_config(credentials: Credentials, database: str, auth_source: str) -> ConnectorConfig:
    """由凭据生成 standalone 实例的连接器配置"""
    return ConnectorConfig(
        user=credentials.user,
        password=credentials.password,
        instance_type=InstanceDescriptor(
            instance=MongoInstanceType.STANDALONE,
            host=credentials.host,
            port=credentials.port
        ),
        database=database,
        auth_source=auth_source
    )


def build_fixture_connection_string(config: ConnectorConfig) -> str:
    """生成准备测试数据用的连接字符串

    认证库固定为 admin 并开启 ssl。
    """
    values = {
        "user": config.user,
        "password": config.password,
        "host": config.instance_type.host,
        "port": config.instance_type.port,
        "database": config.database,
    }
    missing = [name for name, value in values.items() if value is None or value == ""]
    if missing:
        raise ConfigurationError(
            f"Connector config has empty fields: {', '.join(missing)}",
            details={"missing": missing}
        )

    return "mongodb://{user}:{password}@{host}:{port}/{database}?authSource=admin&ssl=true".format(**values)
