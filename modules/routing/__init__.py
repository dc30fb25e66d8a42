"""
modules.routing: 前端页面的静态路由表。

对外提供：
- ROUTES / REDIRECTS: 三个管理页面与根路径重定向；
- resolve: 访问路径 -> Route；
- path_for: 路由名称 -> 路径。
"""

from .routes import REDIRECTS, ROUTES, Route, path_for, resolve

__all__ = ["REDIRECTS", "ROUTES", "Route", "path_for", "resolve"]
