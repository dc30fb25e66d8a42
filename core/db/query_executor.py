"""
core.db.query_executor
----------------------

SQL 查询执行器：一次调用对应一次 HTTP 往返，返回 DecodedTable 或 QueryError。

约定：
- SQL 文本以 text/plain 原样作为请求体发送，不包 JSON，不在本地做任何校验；
- 传输失败、服务端错误、响应体无法解析三类失败都在此处收敛为 QueryError 返回，
  不向调用方抛出；
- 不做重试，重试策略（若有）属于传输层。
"""

from __future__ import annotations

import time
from typing import Optional, Union

from core.logger import get_logger

from .api_client import HttpTransport
from .arrow_decoder import decode_arrow, decode_json_rows
from .models import (
    DecodedTable,
    QueryClientError,
    QueryError,
    QueryRequest,
    RawResponse,
    ServerError,
)

_logger = get_logger(__name__)

QueryResult = Union[DecodedTable, QueryError]


def _raise_for_status(raw: RawResponse) -> None:
    if raw.ok:
        return
    excerpt = raw.excerpt()
    raise ServerError(
        f"查询接口返回异常状态码：{raw.status_code}。响应内容：{excerpt}",
        status_code=raw.status_code,
        body_excerpt=excerpt,
    )


class QueryExecutor:
    """
    对 /api/query 的查询执行器。

    Input:
        transport: HttpTransport，负责实际的网络往返。
    Output:
        无（构造器）。每次 execute() 返回 DecodedTable 或 QueryError 之一。

    同一个执行器可被多个调用方并发使用：每次调用独占自己的请求、响应与结果对象。
    """

    def __init__(self, transport: HttpTransport) -> None:
        self.transport = transport

    @property
    def query_path(self) -> str:
        return self.transport.config.query_path

    def execute(self, sql: str, timeout: Optional[float] = None) -> QueryResult:
        """
        执行一段 SQL，返回 Arrow 解码后的表格。

        输入：
            sql: SQL 文本，空串/纯空白原样发送；
            timeout: 本次调用的超时（秒），None 时使用传输层配置。
        输出：
            DecodedTable：查询成功且解码成功；
            QueryError：传输失败 / 服务端错误 / 响应体无法解析。
        逻辑：
            1. 构造 QueryRequest（非 str 时抛 TypeError）；
            2. POST 原始 SQL，声明期望二进制响应；
            3. 状态码非 2xx 记为服务端错误；
            4. 将原始字节交给 decode_arrow，失败记为 malformed payload。
        """
        request = QueryRequest(sql)
        started = time.perf_counter()
        try:
            raw = self.transport.send(
                "POST",
                self.query_path,
                data=request.encode(),
                headers={"Content-Type": "text/plain; charset=utf-8"},
                expect_binary=True,
                timeout=timeout,
            )
            _raise_for_status(raw)
            table = decode_arrow(raw.body)
        except QueryClientError as exc:
            return self._to_error(exc)

        _logger.info(
            f"查询完成：{table.column_count} 列 {table.row_count} 行，"
            f"耗时 {time.perf_counter() - started:.3f}s"
        )
        return table

    def execute_json(self, sql: str, timeout: Optional[float] = None) -> QueryResult:
        """
        以 format=json 方式执行 SQL（GET /api/query?sql=...&format=json）。

        错误约定与 execute 相同；列顺序取自 JSON 行对象的字段顺序。
        """
        request = QueryRequest(sql)
        try:
            raw = self.transport.send(
                "GET",
                self.query_path,
                params={"sql": request.sql, "format": "json"},
                timeout=timeout,
            )
            _raise_for_status(raw)
            table = decode_json_rows(raw.json())
        except QueryClientError as exc:
            return self._to_error(exc)

        _logger.info(f"JSON 查询完成：{table.column_count} 列 {table.row_count} 行")
        return table

    @staticmethod
    def _to_error(exc: QueryClientError) -> QueryError:
        error = QueryError.from_exception(exc)
        _logger.error(f"查询失败[{error.kind.value}]：{error.message}")
        return error
