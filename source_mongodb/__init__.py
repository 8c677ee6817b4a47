# -*- coding: utf-8 -*-
"""MongoDB数据源连接器模块"""

from source_mongodb.connection import MongoInstanceType, build_connection_string
from source_mongodb.source import MongodbSource, MongodbSourceStrictEncrypt

__all__ = [
    "MongoInstanceType",
    "MongodbSource",
    "MongodbSourceStrictEncrypt",
    "build_connection_string",
]
