# -*- coding: utf-8 -*-
"""配置管理模块"""

import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings


class ConnectionConfig(BaseModel):
    """MongoDB连接配置"""
    server_selection_timeout_ms: int = Field(default=30000, description="服务器选择超时（毫秒）")
    connect_timeout_ms: int = Field(default=10000, description="连接超时（毫秒）")
    discover_sample_size: int = Field(default=10000, description="发现字段时的采样文档数")

    @field_validator('discover_sample_size')
    @classmethod
    def validate_sample_size(cls, v):
        if v <= 0:
            raise ValueError('采样文档数必须大于0')
        return v


class LoggingConfig(BaseModel):
    """日志配置"""
    level: str = Field(default="INFO", description="日志级别")
    format: str = Field(default="json", description="日志格式")

    @field_validator('format')
    @classmethod
    def validate_format(cls, v):
        if v not in ['json', 'console']:
            raise ValueError('日志格式必须是 json 或 console')
        return v


class AcceptanceConfig(BaseSettings):
    """验收测试主配置"""
    credentials_path: str = Field(default="secrets/credentials.json", description="凭据文件路径")
    database_name: str = Field(default="test", description="测试数据库名称")
    collection_name: str = Field(default="acceptance_test", description="测试集合名称")
    auth_source: str = Field(default="admin", description="认证数据库")
    image_name: str = Field(
        default="airbyte/source-mongodb-strict-encrypt:dev",
        description="被测连接器镜像名称"
    )
    connection: ConnectionConfig = Field(default_factory=ConnectionConfig, description="连接配置")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="日志配置")

    model_config = ConfigDict(
        env_prefix="MONGODB_ACCEPTANCE_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore"
    )

    @classmethod
    def from_yaml(cls, config_path: str) -> "AcceptanceConfig":
        """从YAML文件加载配置"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)

    def validate_config(self) -> List[str]:
        """验证配置有效性"""
        errors = []

        if not self.database_name.strip():
            errors.append("数据库名称不能为空")
        if not self.collection_name.strip():
            errors.append("集合名称不能为空")
        if '.' in self.database_name or '$' in self.collection_name:
            errors.append("数据库或集合名称包含非法字符")

        return errors


# 全局配置实例
config: Optional[AcceptanceConfig] = None


def load_config(config_path: Optional[str] = None) -> AcceptanceConfig:
    """加载配置

    未指定路径且 MONGODB_ACCEPTANCE_CONFIG_PATH 未设置时，只读取环境变量和默认值。
    """
    global config

    if config_path is None:
        config_path = os.getenv('MONGODB_ACCEPTANCE_CONFIG_PATH')

    if config_path:
        config = AcceptanceConfig.from_yaml(config_path)
    else:
        config = AcceptanceConfig()

    errors = config.validate_config()
    if errors:
        raise ValueError(f"配置验证失败: {', '.join(errors)}")

    return config


def get_config() -> AcceptanceConfig:
    """获取当前配置，未加载时按默认方式加载"""
    if config is None:
        return load_config()
    return config
