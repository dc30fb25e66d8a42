"""
core.db.api_client
-------------------

基于 requests 的 HTTP 传输层，为查询执行器与资源客户端提供统一的请求入口。

设计原则：
- 仅依赖标准库与 requests；
- 不直接读取 configs/*.yaml，也不关心具体目录结构；
- 通过 ApiClientConfig 接收调用方注入的所有配置；
- 响应体始终以原始字节交付（不做文本转码），是否按二进制处理由调用方通过
  expect_binary 显式声明，而不是根据 Content-Type 推断；
- 不做重试与鉴权，失败直接以 TransportError 抛给上层。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import requests

from core.logger import get_logger

from .models import RawResponse, TransportError

_logger = get_logger(__name__)

# 显式声明期望 Arrow IPC 二进制流
BINARY_ACCEPT = "application/vnd.apache.arrow.stream, application/octet-stream"
JSON_ACCEPT = "application/json"


@dataclass
class ApiClientConfig:
    """
    HTTP 数据服务客户端配置对象。

    输入：
        base_url: 服务根地址，例如 "http://localhost:8080"。
        timeout: 默认请求超时时间（秒），可被单次调用覆盖。
        extra_headers: 每次请求都附带的固定请求头，可为空。
        query_path: SQL 查询接口路径，默认 "/api/query"。
        verify_ssl: 是否校验 HTTPS 证书。

    输出：
        无，作为 HttpTransport 的参数对象使用。
    """

    base_url: str
    timeout: float = 300
    extra_headers: Dict[str, str] = field(default_factory=dict)
    query_path: str = "/api/query"
    verify_ssl: bool = True


def load_client_config(raw_config: Mapping[str, Any]) -> ApiClientConfig:
    """
    从字典（通常由 YAML 解析而来）构建 ApiClientConfig，并做基础校验。

    期望的配置结构（示例）：

    api:
      base_url: "http://localhost:8080"
      timeout: 60
      query_path: "/api/query"
      verify_ssl: true
      extra_headers:
        X-Client: "ds_toolkit"

    缺少必填字段或取值非法时抛出 ValueError，错误信息为中文，方便排查。
    """
    api_cfg = raw_config.get("api") or {}

    base_url = api_cfg.get("base_url")
    if not base_url or not isinstance(base_url, str):
        raise ValueError("客户端配置缺少必填字段：api.base_url")
    if not base_url.startswith(("http://", "https://")):
        raise ValueError(f"api.base_url 必须以 http:// 或 https:// 开头，当前为：{base_url}")

    try:
        timeout = float(api_cfg.get("timeout", 300))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"api.timeout 必须为数字，当前为：{api_cfg.get('timeout')!r}") from exc
    if timeout <= 0:
        raise ValueError(f"api.timeout 必须大于 0，当前为：{timeout}")

    extra_headers = api_cfg.get("extra_headers") or {}
    if not isinstance(extra_headers, Mapping):
        raise ValueError("api.extra_headers 必须为键值对映射。")

    verify_ssl = api_cfg.get("verify_ssl", True)
    if not isinstance(verify_ssl, bool):
        raise ValueError(f"api.verify_ssl 必须为 true 或 false，当前为：{verify_ssl!r}")

    query_path = api_cfg.get("query_path", "/api/query")
    if not str(query_path).startswith("/"):
        raise ValueError(f"api.query_path 必须以 / 开头，当前为：{query_path}")

    return ApiClientConfig(
        base_url=base_url.rstrip("/"),
        timeout=timeout,
        extra_headers={str(k): str(v) for k, v in extra_headers.items()},
        query_path=str(query_path),
        verify_ssl=verify_ssl,
    )


class HttpTransport:
    """
    HTTP 传输层：每次 send 对应一次请求/响应往返。

    Input:
        config: ApiClientConfig 配置对象。
        session: 可选的 requests.Session；未传入时自行创建并在 close() 时关闭。
    Output:
        无（构造器）。实际响应通过 send() 以 RawResponse 返回。
    """

    def __init__(
        self,
        config: ApiClientConfig,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def url_for(self, path: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"

    def send(
        self,
        method: str,
        path: str,
        *,
        data: Optional[bytes] = None,
        json_body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        expect_binary: bool = False,
        timeout: Optional[float] = None,
    ) -> RawResponse:
        """
        发送一次 HTTP 请求，返回原始响应。

        输入：
            method: HTTP 方法（GET/POST/PUT/DELETE）；
            path: 相对 base_url 的路径；
            data: 原始请求体字节，与 json_body 二选一；
            json_body: 以 JSON 发送的请求体；
            params: URL 查询参数；
            headers: 本次请求额外附加的请求头；
            expect_binary: 为 True 时声明期望二进制响应（Accept 为 Arrow 流）；
            timeout: 本次请求超时（秒），None 时使用配置中的默认值。
        输出：
            RawResponse：body 为 requests 原始 content 字节，状态码非 2xx 时不抛异常。
        异常：
            TransportError: 连接失败、超时等网络层错误。
        """
        url = self.url_for(path)
        req_headers: Dict[str, str] = {}
        if self.config.extra_headers:
            req_headers.update(self.config.extra_headers)
        req_headers["Accept"] = BINARY_ACCEPT if expect_binary else JSON_ACCEPT
        if headers:
            req_headers.update(headers)

        effective_timeout = timeout if timeout is not None else self.config.timeout

        try:
            resp = self._session.request(
                method,
                url,
                data=data,
                json=json_body,
                params=params,
                headers=req_headers,
                timeout=effective_timeout,
                verify=self.config.verify_ssl,
            )
        except requests.Timeout as exc:
            msg = f"请求超时（{effective_timeout}s）：{method} {url}"
            _logger.error(msg)
            raise TransportError(msg) from exc
        except requests.RequestException as exc:
            msg = f"请求接口失败：{method} {url}，错误：{exc!s}"
            _logger.error(msg)
            raise TransportError(msg) from exc

        raw = RawResponse(
            body=resp.content or b"",
            status_code=resp.status_code,
            content_type=resp.headers.get("Content-Type", ""),
        )
        if not raw.ok:
            _logger.warning(f"接口返回异常状态码：{raw.status_code}，{method} {url}")
        return raw
