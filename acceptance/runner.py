# -*- coding: utf-8 -*-
"""数据源验收测试执行器"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

import structlog
from pymongo.errors import PyMongoError

from acceptance.context import FixtureContext
from acceptance.interfaces import SourceAcceptanceHarness
from protocol.catalog_helpers import field_names, to_default_configured_catalog
from protocol.models import (
    AirbyteCatalog,
    AirbyteMessage,
    AirbyteRecordMessage,
    ConfiguredAirbyteCatalog,
    Status,
    SyncMode,
    Type,
)
from protocol.source import Source
from utils.error_handler import AcceptanceError, ContractViolation, TeardownError


logger = structlog.get_logger(__name__)


@dataclass
class CheckResult:
    """单项检查结果"""
    name: str
    passed: bool
    message: str = ""
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AcceptanceReport:
    """一次验收运行的结果"""
    image_name: str
    results: List[CheckResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(result.passed for result in self.results)

    @property
    def failures(self) -> List[CheckResult]:
        return [result for result in self.results if not result.passed]


def _records(messages: List[AirbyteMessage]) -> List[AirbyteRecordMessage]:
    return [message.record for message in messages if message.type == Type.RECORD]


def _states(messages: List[AirbyteMessage]) -> List[Dict[str, Any]]:
    return [message.state.data for message in messages if message.type == Type.STATE]


def _record_key(record: AirbyteRecordMessage) -> Tuple[str, str]:
    return record.stream, json.dumps(record.data, sort_keys=True, default=str)


def _cursor_value(record: AirbyteRecordMessage, cursor_field: List[str]) -> Any:
    value: Any = record.data
    for key in cursor_field:
        if not isinstance(value, Mapping):
            return None
        value = value.get(key)
    return value


class SourceAcceptanceRunner:
    """按套件声明驱动连接器完成通用验收检查"""

    CHECKS = (
        "check_spec",
        "check_connection",
        "check_discover",
        "check_full_refresh_read",
        "check_incremental_read",
    )

    def __init__(self, harness: SourceAcceptanceHarness, source: Source):
        self.harness = harness
        self.source = source
        self.logger = logger.bind(image_name=harness.get_image_name())

    def check_spec(self, context: FixtureContext) -> None:
        """连接器规格说明与期望一致"""
        expected = self.harness.get_spec()
        actual = self.source.spec()
        if actual != expected:
            raise ContractViolation(
                "Connector spec does not match the expected spec",
                check_name="check_spec",
                details={"expected": expected.to_json(), "actual": actual.to_json()}
            )

    def check_connection(self, context: FixtureContext) -> None:
        """使用测试配置检查连接"""
        status = self.source.check(self.harness.get_config(context))
        if status.status != Status.SUCCEEDED:
            raise ContractViolation(
                f"Connection check failed: {status.message}",
                check_name="check_connection"
            )

    def check_discover(self, context: FixtureContext) -> None:
        """discover 结果覆盖已配置目录中的每个流"""
        discovered = self.source.discover(self.harness.get_config(context))
        for configured_stream in self.harness.get_configured_catalog().streams:
            declared = configured_stream.stream
            stream = discovered.get_stream(declared.name)
            if stream is None:
                raise ContractViolation(
                    f"Stream {declared.name} was not discovered",
                    check_name="check_discover",
                    details={"discovered": [s.name for s in discovered.streams]}
                )
            missing_fields = field_names(declared) - field_names(stream)
            if missing_fields:
                raise ContractViolation(
                    f"Stream {declared.name} is missing fields: {sorted(missing_fields)}",
                    check_name="check_discover"
                )
            if configured_stream.sync_mode not in stream.supported_sync_modes:
                raise ContractViolation(
                    f"Stream {declared.name} does not support {configured_stream.sync_mode.value}",
                    check_name="check_discover"
                )

    def _read(self, context: FixtureContext, catalog: ConfiguredAirbyteCatalog,
              state: Optional[Mapping[str, Any]] = None) -> List[AirbyteMessage]:
        return list(self.source.read(self.harness.get_config(context), catalog, state))

    def _full_refresh_catalog(self) -> ConfiguredAirbyteCatalog:
        catalog = self.harness.get_configured_catalog()
        return to_default_configured_catalog(
            AirbyteCatalog(streams=[configured_stream.stream for configured_stream in catalog.streams])
        )

    def check_full_refresh_read(self, context: FixtureContext) -> None:
        """全量读取有记录、满足正则且两次结果相同"""
        catalog = self._full_refresh_catalog()
        first = _records(self._read(context, catalog))
        if not first:
            raise ContractViolation("Full refresh read produced no records", check_name="check_full_refresh_read")

        serialized = [json.dumps(record.data, sort_keys=True, default=str) for record in first]
        for pattern in self.harness.get_regex_tests():
            if not any(re.search(pattern, line) for line in serialized):
                raise ContractViolation(
                    f"No record matched regex {pattern!r}",
                    check_name="check_full_refresh_read"
                )

        second = _records(self._read(context, catalog))
        if sorted(map(_record_key, first)) != sorted(map(_record_key, second)):
            raise ContractViolation(
                "Two consecutive full refresh reads returned different records",
                check_name="check_full_refresh_read",
                details={"first_count": len(first), "second_count": len(second)}
            )

    def check_incremental_read(self, context: FixtureContext) -> None:
        """用首次同步输出的状态再次同步时不会重复已读取的记录"""
        catalog = self.harness.get_configured_catalog()
        incremental = [s for s in catalog.streams if s.sync_mode == SyncMode.INCREMENTAL]
        if not incremental:
            self.logger.info("没有增量流，跳过增量检查")
            return

        first_messages = self._read(context, catalog, self.harness.get_state())
        first_records = _records(first_messages)
        states = _states(first_messages)
        if not first_records:
            raise ContractViolation("Incremental read produced no records", check_name="check_incremental_read")
        if not states:
            raise ContractViolation("Incremental read emitted no state", check_name="check_incremental_read")

        second_records = _records(self._read(context, catalog, states[-1]))
        for configured_stream in incremental:
            cursor_field = configured_stream.cursor_field or configured_stream.stream.default_cursor_field
            seen = {
                json.dumps(_cursor_value(record, cursor_field), default=str)
                for record in first_records if record.stream == configured_stream.stream.name
            }
            repeated = [
                record for record in second_records
                if record.stream == configured_stream.stream.name
                and json.dumps(_cursor_value(record, cursor_field), default=str) in seen
            ]
            if repeated:
                raise ContractViolation(
                    f"Incremental read with state re-emitted {len(repeated)} records "
                    f"of stream {configured_stream.stream.name}",
                    check_name="check_incremental_read"
                )

    def _run_checks(self, context: FixtureContext) -> List[CheckResult]:
        results = []
        for name in self.CHECKS:
            try:
                getattr(self, name)(context)
            except AcceptanceError as e:
                self.logger.warning("验收检查失败", check=name, error=e.message, trace_id=e.trace_id)
                results.append(CheckResult(name=name, passed=False, message=e.message, details=e.details))
            except PyMongoError as e:
                # 驱动错误只影响当前检查
                self.logger.warning("验收检查出现数据库错误", check=name, error=str(e), error_type=type(e).__name__)
                results.append(CheckResult(
                    name=name,
                    passed=False,
                    message=f"{type(e).__name__}: {e}",
                    details={"error_type": type(e).__name__}
                ))
            else:
                self.logger.info("验收检查通过", check=name)
                results.append(CheckResult(name=name, passed=True))
        return results

    def run(self) -> AcceptanceReport:
        """准备环境、执行全部检查，并且总是清理环境

        检查过程抛出异常时清理失败只记录日志；检查正常结束后清理失败抛出 TeardownError。
        """
        report = AcceptanceReport(image_name=self.harness.get_image_name())
        context = self.harness.setup_environment()

        try:
            report.results = self._run_checks(context)
        except BaseException:
            try:
                self.harness.tear_down(context)
            except TeardownError as e:
                self.logger.warning("检查异常后清理也失败", error=e.message, trace_id=e.trace_id)
            raise

        self.harness.tear_down(context)
        self.logger.info(
            "验收运行结束",
            passed=report.passed,
            failed_checks=[result.name for result in report.failures]
        )
        return report
