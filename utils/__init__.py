#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
工具包
提供错误定义、日志配置、资源读取等公共功能
"""

from .error_handler import (
    AcceptanceError,
    ConfigurationError,
    ContractViolation,
    ErrorCategory,
    ErrorSeverity,
    FixtureSetupError,
    ResourceError,
    TeardownError,
)
from .logger import setup_logging
from .resources import read_json_resource, read_model_resource, read_resource

__all__ = [
    'AcceptanceError',
    'ConfigurationError',
    'ContractViolation',
    'ErrorCategory',
    'ErrorSeverity',
    'FixtureSetupError',
    'ResourceError',
    'TeardownError',
    'setup_logging',
    'read_json_resource',
    'read_model_resource',
    'read_resource',
]

__version__ = '1.0.0'
