#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
统一错误定义
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCategory(Enum):
    """错误分类"""
    CONFIGURATION = "configuration"
    CONNECTION = "connection"
    RESOURCE = "resource"
    CONTRACT = "contract"
    CLEANUP = "cleanup"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """错误严重程度"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AcceptanceError(Exception):
    """验收测试基础异常类"""

    def __init__(self, message: str, category: ErrorCategory = ErrorCategory.UNKNOWN,
                 severity: ErrorSeverity = ErrorSeverity.MEDIUM,
                 details: Optional[dict] = None, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.details = details or {}
        self.cause = cause
        self.timestamp = datetime.now()
        self.trace_id = str(uuid.uuid4())[:8]
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict:
        """转换为字典格式"""
        return {
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "trace_id": self.trace_id,
            "cause": str(self.cause) if self.cause else None,
            "recovery_suggestions": self.get_recovery_suggestions()
        }

    def get_recovery_suggestions(self) -> List[str]:
        """获取错误恢复建议"""
        suggestions = []

        if self.category == ErrorCategory.CONFIGURATION:
            suggestions.extend([
                "检查凭据文件是否存在",
                "确认凭据文件包含 host、port、user、password",
                "通过 MONGODB_ACCEPTANCE_CREDENTIALS_PATH 指定凭据文件路径"
            ])
        elif self.category == ErrorCategory.CONNECTION:
            suggestions.extend([
                "检查网络连接是否正常",
                "验证MongoDB服务是否运行",
                "确认实例已开启TLS",
                "确认认证数据库是否正确"
            ])
        elif self.category == ErrorCategory.RESOURCE:
            suggestions.extend([
                "确认资源文件已随包安装",
                "检查资源文件是否为合法JSON"
            ])
        elif self.category == ErrorCategory.CLEANUP:
            suggestions.extend([
                "手动删除残留的测试集合"
            ])

        return suggestions


class ConfigurationError(AcceptanceError):
    """配置错误"""
    def __init__(self, message: str, details: Optional[dict] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCategory.CONFIGURATION, ErrorSeverity.CRITICAL, details, cause)


class ResourceError(AcceptanceError):
    """资源文件缺失或格式错误"""
    def __init__(self, message: str, resource: str, details: Optional[dict] = None,
                 cause: Optional[Exception] = None):
        details = details or {}
        details["resource"] = resource
        super().__init__(message, ErrorCategory.RESOURCE, ErrorSeverity.HIGH, details, cause)


class FixtureSetupError(AcceptanceError):
    """测试数据准备失败"""
    def __init__(self, message: str, details: Optional[dict] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCategory.CONNECTION, ErrorSeverity.HIGH, details, cause)


class TeardownError(AcceptanceError):
    """测试环境清理失败"""
    def __init__(self, message: str, details: Optional[dict] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCategory.CLEANUP, ErrorSeverity.MEDIUM, details, cause)


class ContractViolation(AcceptanceError):
    """验收检查未通过"""
    def __init__(self, message: str, check_name: str, details: Optional[Dict[str, Any]] = None):
        details = details or {}
        details["check_name"] = check_name
        super().__init__(message, ErrorCategory.CONTRACT, ErrorSeverity.HIGH, details)
        self.check_name = check_name
