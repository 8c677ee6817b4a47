# -*- coding: utf-8 -*-
"""包内资源文件读取"""

import json
from pathlib import Path
from typing import Any, Type, TypeVar, Union

import structlog
from pydantic import BaseModel, ValidationError

from utils.error_handler import ResourceError


logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def read_resource(resource_dir: Union[str, Path], name: str) -> str:
    """读取资源文件文本"""
    resource_path = Path(resource_dir) / name
    try:
        with open(resource_path, 'r', encoding='utf-8') as f:
            return f.read()
    except OSError as e:
        raise ResourceError(
            f"Resource not found: {resource_path}",
            resource=name,
            cause=e
        )


def read_json_resource(resource_dir: Union[str, Path], name: str) -> Any:
    """读取并解析JSON资源文件"""
    content = read_resource(resource_dir, name)
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ResourceError(
            f"Resource is not valid JSON: {name} ({e.msg} at line {e.lineno})",
            resource=name,
            cause=e
        )

    logger.debug("资源文件加载完成", resource=name)
    return data


def read_model_resource(resource_dir: Union[str, Path], name: str, model: Type[ModelT]) -> ModelT:
    """读取JSON资源并校验为指定的pydantic模型

    结构不符合模型时同样抛出 ResourceError。
    """
    data = read_json_resource(resource_dir, name)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ResourceError(
            f"Resource does not match {model.__name__}: {name}",
            resource=name,
            details={"fields": [".".join(str(loc) for loc in error["loc"]) for error in e.errors()]},
            cause=e
        )
