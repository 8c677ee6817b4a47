# -*- coding: utf-8 -*-
"""MongoDB连接字符串构造"""

from enum import Enum
from typing import Any, Dict, Mapping
from urllib.parse import quote_plus

from utils.error_handler import ConfigurationError


class MongoInstanceType(str, Enum):
    """MongoDB实例类型"""
    STANDALONE = "standalone"
    REPLICA = "replica"
    ATLAS = "atlas"


DEFAULT_AUTH_SOURCE = "admin"


def _credentials_part(config: Mapping[str, Any]) -> str:
    user = config.get("user")
    password = config.get("password")
    if not user and not password:
        return ""
    if not user or not password:
        raise ConfigurationError(
            "Both user and password are required when one of them is set",
            details={"missing": "password" if user else "user"}
        )
    return f"{quote_plus(str(user))}:{quote_plus(str(password))}@"


def build_connection_string(config: Mapping[str, Any]) -> str:
    """根据连接器配置生成连接字符串

    standalone 的 TLS 取决于 instance_type.tls，replica 与 atlas 始终启用 TLS。
    """
    instance_config: Dict[str, Any] = dict(config.get("instance_type") or {})
    database = config.get("database")
    if not database:
        raise ConfigurationError("Connector config is missing 'database'")

    auth_source = config.get("auth_source") or DEFAULT_AUTH_SOURCE
    credentials = _credentials_part(config)

    try:
        instance = MongoInstanceType(instance_config.get("instance", MongoInstanceType.STANDALONE.value))
    except ValueError as e:
        raise ConfigurationError(
            f"Unsupported MongoDB instance type: {instance_config.get('instance')}",
            cause=e
        )

    if instance == MongoInstanceType.STANDALONE:
        host = instance_config.get("host")
        port = instance_config.get("port")
        if not host or port is None:
            raise ConfigurationError("Standalone instance requires 'host' and 'port'")
        tls = "true" if instance_config.get("tls") else "false"
        return f"mongodb://{credentials}{host}:{port}/{database}?authSource={auth_source}&ssl={tls}"

    if instance == MongoInstanceType.REPLICA:
        server_addresses = instance_config.get("server_addresses")
        if not server_addresses:
            raise ConfigurationError("Replica set instance requires 'server_addresses'")
        members = ",".join(address.strip() for address in server_addresses.split(",") if address.strip())
        connection_string = f"mongodb://{credentials}{members}/{database}?authSource={auth_source}&tls=true"
        if instance_config.get("replica_set"):
            connection_string += f"&replicaSet={instance_config['replica_set']}"
        return connection_string

    cluster_url = instance_config.get("cluster_url")
    if not cluster_url:
        raise ConfigurationError("Atlas instance requires 'cluster_url'")
    return (
        f"mongodb+srv://{credentials}{cluster_url}/{database}"
        f"?authSource={auth_source}&retryWrites=true&w=majority&tls=true"
    )
