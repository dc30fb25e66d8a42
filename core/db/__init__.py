"""
core.db: 数据服务查询相关的底层工具。

当前实现：
- HTTP 传输层（基于 requests），显式区分二进制 / JSON 响应；
- Arrow IPC 列式结果解码；
- QueryExecutor：执行 SQL 并返回 DecodedTable 或结构化 QueryError。

注意：
- 禁止引用 modules 下的任何内容；
- 不直接读取 configs/*.yaml，由 scripts 或 modules 负责配置注入。
"""

from __future__ import annotations

from .api_client import ApiClientConfig, HttpTransport, load_client_config
from .arrow_decoder import decode_arrow, decode_json_rows
from .models import (
    DecodedTable,
    DecodeError,
    QueryClientError,
    QueryError,
    QueryErrorKind,
    QueryRequest,
    RawResponse,
    ServerError,
    TransportError,
)
from .query_executor import QueryExecutor, QueryResult

__all__ = [
    "ApiClientConfig",
    "DecodeError",
    "DecodedTable",
    "HttpTransport",
    "QueryClientError",
    "QueryError",
    "QueryErrorKind",
    "QueryExecutor",
    "QueryRequest",
    "QueryResult",
    "RawResponse",
    "ServerError",
    "TransportError",
    "decode_arrow",
    "decode_json_rows",
    "load_client_config",
]
