# -*- coding: utf-8 -*-
"""测试凭据加载"""

import json
from pathlib import Path
from typing import Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from utils.error_handler import ConfigurationError


logger = structlog.get_logger(__name__)


class Credentials(BaseModel):
    """MongoDB测试实例凭据"""
    model_config = ConfigDict(frozen=True)

    host: str = Field(..., min_length=1, description="主机地址")
    port: int = Field(..., ge=0, le=65535, description="端口")
    user: str = Field(..., min_length=1, description="用户名")
    password: str = Field(..., min_length=1, description="密码")


def load_credentials(path: Union[str, Path]) -> Credentials:
    """从JSON文件读取凭据

    文件不存在、不是合法JSON或缺少字段时抛出 ConfigurationError，此时不会发起任何网络连接。
    """
    credentials_path = Path(path)
    if not credentials_path.exists():
        raise ConfigurationError(
            "Must provide path to a MongoDB credentials file. "
            f"By default {{module-root}}/{credentials_path}. "
            "Override by setting MONGODB_ACCEPTANCE_CREDENTIALS_PATH.",
            details={"credentials_path": str(credentials_path)}
        )

    try:
        with open(credentials_path, 'r', encoding='utf-8') as f:
            credentials_json = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Credentials file is not valid JSON: {credentials_path}",
            details={"credentials_path": str(credentials_path)},
            cause=e
        )

    if not isinstance(credentials_json, dict):
        raise ConfigurationError(
            f"Credentials file must contain a JSON object: {credentials_path}",
            details={"credentials_path": str(credentials_path)}
        )

    try:
        credentials = Credentials.model_validate(credentials_json)
    except ValidationError as e:
        raise ConfigurationError(
            f"Credentials file has missing or invalid fields: {credentials_path}",
            details={
                "credentials_path": str(credentials_path),
                "fields": [".".join(str(loc) for loc in error["loc"]) for error in e.errors()]
            },
            cause=e
        )

    logger.info("凭据加载完成", credentials_path=str(credentials_path), host=credentials.host)
    return credentials
