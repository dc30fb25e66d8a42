"""测试公共夹具：构造 Arrow IPC 载荷、伪造传输层与 requests 响应。"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple
from unittest.mock import MagicMock

import pyarrow as pa
import pyarrow.ipc as ipc
import pytest
import requests

from core.db import ApiClientConfig, RawResponse


def _to_table(data: Any) -> pa.Table:
    if isinstance(data, pa.Table):
        return data
    if isinstance(data, pa.RecordBatch):
        return pa.Table.from_batches([data])
    return pa.table(data)


@pytest.fixture
def arrow_stream() -> Callable[..., bytes]:
    """将 dict / pa.Table 写成 Arrow IPC 流式格式字节（服务端实际输出的格式）。"""

    def _build(data: Any) -> bytes:
        table = _to_table(data)
        sink = pa.BufferOutputStream()
        with ipc.new_stream(sink, table.schema) as writer:
            writer.write_table(table)
        return sink.getvalue().to_pybytes()

    return _build


@pytest.fixture
def arrow_file() -> Callable[..., bytes]:
    """将 dict / pa.Table 写成 Arrow IPC 文件格式字节。"""

    def _build(data: Any) -> bytes:
        table = _to_table(data)
        sink = pa.BufferOutputStream()
        with ipc.new_file(sink, table.schema) as writer:
            writer.write_table(table)
        return sink.getvalue().to_pybytes()

    return _build


class FakeTransport:
    """按预设返回 RawResponse 或抛出异常的传输层替身，记录每次调用参数。"""

    def __init__(
        self,
        response: Optional[RawResponse] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.config = ApiClientConfig(base_url="http://testserver")
        self.response = response
        self.error = error
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []

    def send(self, method: str, path: str, **kwargs: Any) -> RawResponse:
        self.calls.append((method, path, kwargs))
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response


@pytest.fixture
def fake_transport() -> Callable[..., FakeTransport]:
    def _build(
        response: Optional[RawResponse] = None,
        error: Optional[Exception] = None,
    ) -> FakeTransport:
        return FakeTransport(response=response, error=error)

    return _build


@pytest.fixture
def mock_session() -> Callable[..., MagicMock]:
    """构造 MagicMock(spec=requests.Session)，request() 返回给定状态码与字节。"""

    def _build(
        status_code: int = 200,
        content: bytes = b"",
        content_type: str = "application/octet-stream",
    ) -> MagicMock:
        response = MagicMock(spec=requests.Response)
        response.status_code = status_code
        response.content = content
        response.headers = {"Content-Type": content_type}
        session = MagicMock(spec=requests.Session)
        session.request.return_value = response
        return session

    return _build
