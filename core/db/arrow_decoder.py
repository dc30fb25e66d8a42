"""
core.db.arrow_decoder
---------------------

将查询接口返回的列式结果解码为行式 DecodedTable。

支持两种载荷：
- Arrow IPC 二进制（流式格式为主，文件格式以 "ARROW1" 魔数识别）；
- JSON 结果（{"data": [...], "rowCount": n}），对应 format=json 查询。

解码是纯函数：相同输入总是得到相同的 DecodedTable 或相同的 DecodeError，
不读写任何外部状态。任何一处不满足矩形约束都视为整体失败，不返回部分结果。
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence, Tuple

import pyarrow as pa
import pyarrow.ipc as ipc

from .models import DecodedTable, DecodeError

_FILE_MAGIC = b"ARROW1"


def _read_ipc(payload: bytes) -> Tuple[pa.Schema, List[pa.RecordBatch]]:
    """读取 IPC 载荷，返回 schema 与全部 record batch。"""
    buf = pa.py_buffer(payload)
    if payload.startswith(_FILE_MAGIC):
        reader = ipc.open_file(buf)
        batches = [reader.get_batch(i) for i in range(reader.num_record_batches)]
        return reader.schema, batches
    reader = ipc.open_stream(buf)
    return reader.schema, list(reader)


def assemble_rows(
    names: Sequence[str],
    columns: Sequence[Sequence[Any]],
    num_rows: int,
) -> List[Tuple[Any, ...]]:
    """
    按列数据转置为行数据，并校验矩形约束。

    输入：
        names: 列名（schema 声明）；
        columns: 每列的值序列；
        num_rows: batch 声明的行数。
    输出：
        行元组列表。
    异常：
        DecodeError: 列数与列名数不一致，或任一列长度不等于 num_rows。
    """
    if len(columns) != len(names):
        raise DecodeError(
            f"schema 声明 {len(names)} 列，但数据部分只有 {len(columns)} 列。"
        )
    for name, values in zip(names, columns):
        if len(values) != num_rows:
            raise DecodeError(
                f"列 {name} 含 {len(values)} 个值，与声明行数 {num_rows} 不一致。"
            )
    return list(zip(*columns)) if columns else [() for _ in range(num_rows)]


def decode_arrow(payload: bytes) -> DecodedTable:
    """
    将 Arrow IPC 字节解码为 DecodedTable。

    输入：
        payload: 查询接口返回的原始字节。
    输出：
        DecodedTable：列名、列类型与行数据；空结果集返回带列名、零行的表。
    异常：
        DecodeError: 字节为空、不是合法的 IPC 载荷，或校验未通过。
    """
    if not payload:
        raise DecodeError("响应体为空，无法解析为 Arrow 数据。")

    try:
        schema, batches = _read_ipc(bytes(payload))
    except (pa.ArrowException, OSError, ValueError) as exc:
        raise DecodeError(f"无法读取 Arrow IPC 数据：{exc!s}") from exc

    names = list(schema.names)
    types = [str(f.type) for f in schema]

    rows: List[Tuple[Any, ...]] = []
    for batch_idx, batch in enumerate(batches):
        if batch.num_columns != len(names):
            raise DecodeError(
                f"第 {batch_idx} 个 batch 含 {batch.num_columns} 列，与 schema 的 {len(names)} 列不一致。"
            )
        try:
            batch.validate(full=True)
        except (pa.ArrowException, ValueError) as exc:
            raise DecodeError(f"第 {batch_idx} 个 batch 数据校验失败：{exc!s}") from exc

        try:
            columns = [col.to_pylist() for col in batch.columns]
        except (pa.ArrowException, ValueError, OverflowError) as exc:
            raise DecodeError(f"第 {batch_idx} 个 batch 的值无法转换为 Python 对象：{exc!s}") from exc
        rows.extend(assemble_rows(names, columns, batch.num_rows))

    return DecodedTable(columns=tuple(names), rows=tuple(rows), types=tuple(types))


def decode_json_rows(payload: Any) -> DecodedTable:
    """
    将 format=json 查询的响应解码为 DecodedTable。

    兼容两类结构：
    1) {"data": [...], "rowCount": n} -> 按 data 解析；
    2) {"data": {"rows": [...]}}      -> 取 rows 部分。

    列顺序按各行首次出现的字段名确定；某行缺失字段视为不满足矩形约束。
    """
    if not isinstance(payload, Mapping) or "data" not in payload:
        raise DecodeError("响应 JSON 中不包含 'data' 字段，无法解析结果。")

    data = payload["data"]
    if isinstance(data, Mapping) and "rows" in data:
        data = data["rows"]
    if data is None:
        data = []
    if not isinstance(data, list):
        raise DecodeError(f"data 字段应为列表，当前类型为：{type(data).__name__}")

    row_count = payload.get("rowCount")
    if row_count is not None and row_count != len(data):
        raise DecodeError(f"rowCount 为 {row_count}，但 data 实际包含 {len(data)} 行。")

    names: List[str] = []
    for idx, record in enumerate(data):
        if not isinstance(record, Mapping):
            raise DecodeError(f"第 {idx} 行不是对象：{record!r}")
        for key in record:
            if key not in names:
                names.append(key)

    columns: Dict[str, List[Any]] = {name: [] for name in names}
    for idx, record in enumerate(data):
        for name in names:
            if name not in record:
                raise DecodeError(f"第 {idx} 行缺少字段：{name}")
            columns[name].append(record[name])

    rows = assemble_rows(names, [columns[n] for n in names], len(data))
    return DecodedTable(columns=tuple(names), rows=tuple(rows))
