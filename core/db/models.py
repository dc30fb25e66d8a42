"""
core.db.models
--------------

查询链路上的数据对象与异常体系。

对象流转：
    QueryRequest -> (transport) -> RawResponse -> (decoder) -> DecodedTable | QueryError

所有对象均为不可变值，仅在单次调用内存在，不做缓存。
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd


class QueryClientError(Exception):
    """查询客户端异常基类。"""


class TransportError(QueryClientError):
    """网络层失败：连接失败、超时、请求未能发出等。"""


class ServerError(QueryClientError):
    """服务端返回非 2xx 状态码。"""

    def __init__(self, message: str, status_code: int, body_excerpt: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body_excerpt = body_excerpt


class DecodeError(QueryClientError):
    """响应体无法解析为合法的列式结果（含矩形约束不满足）。"""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class QueryErrorKind(str, Enum):
    TRANSPORT = "transport_failure"
    SERVER = "server_error"
    DECODE = "malformed_payload"


@dataclass(frozen=True)
class QueryRequest:
    """
    单次查询请求。

    说明：
    - sql: 原样发送的 SQL 文本；空串或纯空白同样原样透传，校验交给服务端。
    """

    sql: str

    def __post_init__(self) -> None:
        if not isinstance(self.sql, str):
            raise TypeError(f"sql 必须为 str，当前类型为：{type(self.sql).__name__}")

    def encode(self) -> bytes:
        return self.sql.encode("utf-8")


@dataclass(frozen=True)
class RawResponse:
    """
    传输层返回的原始响应。

    说明：
    - body: 未经任何文本转码的原始字节；
    - status_code: HTTP 状态码；
    - content_type: 响应声明的 Content-Type，可能为空串。
    """

    body: bytes
    status_code: int
    content_type: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def excerpt(self, limit: int = 500) -> str:
        """返回响应体前 limit 个字符的文本预览，用于日志与报错。"""
        return self.body[:limit].decode("utf-8", errors="replace")

    def json(self) -> Any:
        try:
            return json.loads(self.body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as exc:
            raise DecodeError(f"响应内容不是合法 JSON：{exc!s}") from exc


@dataclass(frozen=True)
class DecodedTable:
    """
    解码后的表格结果（行式），供展示层直接渲染。

    说明：
    - columns: 列名，有序且不重复；
    - types: 与 columns 一一对应的类型名（Arrow 类型字符串），可为空元组；
    - rows: 行数据，每行与 columns 位置对齐；缺失值统一为 None。

    构造时校验矩形约束：每一行长度都等于列数，否则抛出 DecodeError。
    """

    columns: Tuple[str, ...]
    rows: Tuple[Tuple[Any, ...], ...] = ()
    types: Tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", tuple(self.columns))
        object.__setattr__(self, "types", tuple(self.types))
        object.__setattr__(self, "rows", tuple(tuple(row) for row in self.rows))

        if len(set(self.columns)) != len(self.columns):
            raise DecodeError(f"列名存在重复：{list(self.columns)}")
        if self.types and len(self.types) != len(self.columns):
            raise DecodeError(
                f"列类型数量（{len(self.types)}）与列数（{len(self.columns)}）不一致。"
            )
        width = len(self.columns)
        for idx, row in enumerate(self.rows):
            if len(row) != width:
                raise DecodeError(f"第 {idx} 行长度为 {len(row)}，与列数 {width} 不一致。")

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.columns)

    def column(self, name: str) -> List[Any]:
        """按列名取出整列数据。"""
        try:
            pos = self.columns.index(name)
        except ValueError as exc:
            raise KeyError(f"结果中不存在列：{name}") from exc
        return [row[pos] for row in self.rows]

    def to_records(self) -> List[Dict[str, Any]]:
        return [dict(zip(self.columns, row)) for row in self.rows]

    def to_dataframe(self) -> pd.DataFrame:
        """
        转为 pandas.DataFrame。

        输出：
            列顺序与 columns 一致；零行结果返回仅含表头的空 DataFrame。
        """
        return pd.DataFrame(list(self.rows), columns=list(self.columns))


@dataclass(frozen=True)
class QueryError:
    """
    查询失败的结构化结果，由 QueryExecutor 在边界处返回而非抛出。

    说明：
    - kind: 失败类别（传输失败 / 服务端错误 / 响应体无法解析）；
    - message: 面向用户的中文描述；
    - status_code: HTTP 状态码（若有）；
    - reason: 解码失败原因或服务端响应摘要（若有）。
    """

    kind: QueryErrorKind
    message: str
    status_code: Optional[int] = None
    reason: Optional[str] = None

    @classmethod
    def from_exception(cls, exc: QueryClientError) -> "QueryError":
        if isinstance(exc, ServerError):
            return cls(
                kind=QueryErrorKind.SERVER,
                message=str(exc),
                status_code=exc.status_code,
                reason=exc.body_excerpt or None,
            )
        if isinstance(exc, DecodeError):
            return cls(kind=QueryErrorKind.DECODE, message=str(exc), reason=exc.reason)
        return cls(kind=QueryErrorKind.TRANSPORT, message=str(exc))
