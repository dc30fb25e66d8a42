from __future__ import annotations

from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar, Union

from core.db import DecodeError, HttpTransport, RawResponse, ServerError
from core.logger import get_logger

from .schemas import MetricInfo, TableDefinition

_logger = get_logger(__name__)

T = TypeVar("T")
ResourceId = Union[int, str]


class ResourceClient(Generic[T]):
    """
    通用 REST 资源客户端：一个逻辑操作对应一次 REST 调用。

    Input:
        transport: HttpTransport 传输层；
        base_path: 资源根路径，如 "/api/metrics"；
        from_dict: 将响应 JSON 对象转换为载荷对象的函数；
        to_dict: 将载荷对象转换为请求 JSON 的函数，默认调用载荷的 to_dict()。
    Output:
        无（构造器）。

    失败约定：
        非 2xx 状态码抛出 ServerError；网络失败由传输层抛出 TransportError。
    """

    def __init__(
        self,
        transport: HttpTransport,
        base_path: str,
        from_dict: Callable[[Dict[str, Any]], T],
        to_dict: Optional[Callable[[T], Dict[str, Any]]] = None,
    ) -> None:
        self.transport = transport
        self.base_path = "/" + base_path.strip("/")
        self._from_dict = from_dict
        self._to_dict = to_dict or (lambda item: item.to_dict())  # type: ignore[attr-defined]

    def _item_path(self, resource_id: ResourceId) -> str:
        return f"{self.base_path}/{resource_id}"

    def _check(self, raw: RawResponse, action: str) -> RawResponse:
        if raw.ok:
            return raw
        excerpt = raw.excerpt()
        msg = f"{action}失败，状态码：{raw.status_code}。响应内容：{excerpt}"
        _logger.error(msg)
        raise ServerError(msg, status_code=raw.status_code, body_excerpt=excerpt)

    def list(self) -> List[T]:
        raw = self._check(self.transport.send("GET", self.base_path), f"获取 {self.base_path} 列表")
        payload = raw.json()
        if not isinstance(payload, list):
            raise DecodeError(f"{self.base_path} 列表接口应返回 JSON 数组，当前为：{type(payload).__name__}")
        return [self._from_dict(item) for item in payload]

    def get(self, resource_id: ResourceId) -> T:
        path = self._item_path(resource_id)
        raw = self._check(self.transport.send("GET", path), f"获取 {path}")
        return self._from_dict(raw.json())

    def create(self, item: T) -> T:
        raw = self._check(
            self.transport.send("POST", self.base_path, json_body=self._to_dict(item)),
            f"创建 {self.base_path}",
        )
        return self._from_dict(raw.json())

    def update(self, resource_id: ResourceId, item: T) -> T:
        path = self._item_path(resource_id)
        raw = self._check(
            self.transport.send("PUT", path, json_body=self._to_dict(item)),
            f"更新 {path}",
        )
        return self._from_dict(raw.json())

    def delete(self, resource_id: ResourceId) -> None:
        path = self._item_path(resource_id)
        self._check(self.transport.send("DELETE", path), f"删除 {path}")
        _logger.info(f"已删除资源：{path}")


class MetricClient(ResourceClient[MetricInfo]):
    """指标管理接口 /api/metrics。"""

    BASE_PATH = "/api/metrics"

    def __init__(self, transport: HttpTransport) -> None:
        super().__init__(transport, self.BASE_PATH, MetricInfo.from_dict)


class TableClient(ResourceClient[TableDefinition]):
    """表定义管理接口 /api/tables。"""

    BASE_PATH = "/api/tables"

    def __init__(self, transport: HttpTransport) -> None:
        super().__init__(transport, self.BASE_PATH, TableDefinition.from_dict)
