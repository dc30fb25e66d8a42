"""
modules.resources: 指标与表定义的 REST 资源客户端。

对外提供：
- ResourceClient: 通用 CRUD 客户端，按资源路径与载荷类型参数化；
- MetricClient / TableClient: /api/metrics 与 /api/tables 的具体客户端；
- MetricInfo / TableDefinition: 对应的载荷对象。
"""

from .resource_client import MetricClient, ResourceClient, TableClient
from .schemas import MetricInfo, TableDefinition

__all__ = [
    "MetricClient",
    "MetricInfo",
    "ResourceClient",
    "TableClient",
    "TableDefinition",
]
