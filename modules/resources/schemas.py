from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


@dataclass
class MetricInfo:
    """
    指标定义。

    说明：
    - id: 服务端主键，新建时为空；
    - name: 指标名称，服务端唯一；
    - data_source_type: 数据源类型（如 "JSON"、"CSV"）；
    - source_url: 拉取原始数据的地址；
    - data_path: JSON 数据源中数据数组所在路径，可为空；
    - field_mappings: 字段名 -> 数据类型（如 {"close": "DOUBLE"}）。
    """

    name: str
    data_source_type: str
    source_url: str
    id: Optional[int] = None
    data_path: Optional[str] = None
    field_mappings: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "MetricInfo":
        name = raw.get("name")
        if not name:
            raise ValueError(f"指标数据缺少 name 字段：{dict(raw)!r}")
        return cls(
            id=raw.get("id"),
            name=name,
            data_source_type=raw.get("dataSourceType") or "",
            source_url=raw.get("sourceUrl") or "",
            data_path=raw.get("dataPath"),
            field_mappings=dict(raw.get("fieldMappings") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "name": self.name,
            "dataSourceType": self.data_source_type,
            "sourceUrl": self.source_url,
            "dataPath": self.data_path,
            "fieldMappings": dict(self.field_mappings),
        }
        if self.id is not None:
            body["id"] = self.id
        return body


@dataclass
class TableDefinition:
    """
    逻辑表定义：一组指标（字段）的目录。

    说明：
    - table_name: 表名，服务端唯一；
    - primary_keys: 主键字段列表（如 ["stock_code", "trade_time"]）；
    - metric_fields: 字段名 -> 指标名，指标名可带参数（如 "close_price(adjust=post)"）；
    - field_mapping: 逻辑字段名 -> 物理字段名；
    - field_types: 逻辑字段名 -> 数据类型；
    - time_granularity: 时间粒度（如 "DAILY"），可为空。
    """

    table_name: str
    id: Optional[int] = None
    primary_keys: List[str] = field(default_factory=list)
    metric_fields: Dict[str, str] = field(default_factory=dict)
    field_mapping: Dict[str, str] = field(default_factory=dict)
    field_types: Dict[str, str] = field(default_factory=dict)
    time_granularity: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "TableDefinition":
        table_name = raw.get("tableName")
        if not table_name:
            raise ValueError(f"表定义数据缺少 tableName 字段：{dict(raw)!r}")
        return cls(
            id=raw.get("id"),
            table_name=table_name,
            primary_keys=list(raw.get("primaryKeys") or []),
            metric_fields=dict(raw.get("metricFields") or {}),
            field_mapping=dict(raw.get("fieldMapping") or {}),
            field_types=dict(raw.get("fieldTypes") or {}),
            time_granularity=raw.get("timeGranularity"),
        )

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "tableName": self.table_name,
            "primaryKeys": list(self.primary_keys),
            "metricFields": dict(self.metric_fields),
            "fieldMapping": dict(self.field_mapping),
            "fieldTypes": dict(self.field_types),
            "timeGranularity": self.time_granularity,
        }
        if self.id is not None:
            body["id"] = self.id
        return body
