from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class Route:
    """页面路由：路径 -> 视图名称。"""

    path: str
    name: str
    view: str


ROUTES: Tuple[Route, ...] = (
    Route(path="/metrics", name="MetricManagement", view="metric_management"),
    Route(path="/tables", name="TableManagement", view="table_management"),
    Route(path="/query", name="SqlQuery", view="sql_query"),
)

REDIRECTS: Dict[str, str] = {"/": "/metrics"}

_MAX_REDIRECTS = 5


def _normalize(path: str) -> str:
    path = "/" + path.strip().lstrip("/")
    if len(path) > 1:
        path = path.rstrip("/")
    return path


def resolve(path: str) -> Route:
    """
    根据访问路径找到对应页面，先处理重定向（如 "/" -> "/metrics"）。

    输入：
        path: 访问路径，允许末尾斜杠。
    输出：
        Route 对象。
    异常：
        LookupError: 路径未注册，或重定向链过长。
    """
    current = _normalize(path)
    for _ in range(_MAX_REDIRECTS):
        if current not in REDIRECTS:
            break
        current = REDIRECTS[current]
    else:
        raise LookupError(f"路由重定向次数过多：{path}")

    for route in ROUTES:
        if route.path == current:
            return route
    raise LookupError(f"未注册的页面路径：{path}")


def path_for(name: str) -> str:
    """按路由名称反查路径。"""
    for route in ROUTES:
        if route.name == name:
            return route.path
    raise LookupError(f"未注册的路由名称：{name}")
