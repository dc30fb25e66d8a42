"""Arrow / JSON 结果解码测试。"""

from __future__ import annotations

from datetime import datetime, timezone

import pyarrow as pa
import pytest

from core.db import DecodedTable, DecodeError, decode_arrow, decode_json_rows
from core.db.arrow_decoder import assemble_rows


class TestDecodeArrow:
    def test_single_int_column(self, arrow_stream) -> None:
        payload = arrow_stream({"x": pa.array([1], pa.int64())})

        table = decode_arrow(payload)

        assert table.columns == ("x",)
        assert table.rows == ((1,),)
        assert table.types == ("int64",)

    def test_scalar_types_keep_order(self, arrow_stream) -> None:
        payload = arrow_stream(
            {
                "id": pa.array([3, 1, 2], pa.int32()),
                "price": pa.array([1.5, 2.25, -0.5], pa.float64()),
                "code": pa.array(["600000", "000001", "中文"], pa.string()),
                "active": pa.array([True, False, True], pa.bool_()),
            }
        )

        table = decode_arrow(payload)

        assert table.columns == ("id", "price", "code", "active")
        assert table.rows == (
            (3, 1.5, "600000", True),
            (1, 2.25, "000001", False),
            (2, -0.5, "中文", True),
        )
        assert table.row_count == 3
        assert table.column_count == 4

    def test_null_is_absent_not_zero(self, arrow_stream) -> None:
        payload = arrow_stream({"n": pa.array([0, None, 7], pa.int64())})

        table = decode_arrow(payload)

        assert table.column("n") == [0, None, 7]
        assert table.rows[0][0] == 0
        assert table.rows[1][0] is None

    def test_null_type_column(self, arrow_stream) -> None:
        payload = arrow_stream({"a": pa.array([1, 2]), "empty": pa.nulls(2)})

        table = decode_arrow(payload)

        assert table.rows == ((1, None), (2, None))
        assert table.types == ("int64", "null")

    def test_zero_rows_keeps_columns(self, arrow_stream) -> None:
        payload = arrow_stream(
            {"a": pa.array([], pa.int64()), "b": pa.array([], pa.string())}
        )

        table = decode_arrow(payload)

        assert table.columns == ("a", "b")
        assert table.rows == ()

    def test_multiple_batches_are_concatenated(self, arrow_stream) -> None:
        schema = pa.schema([("v", pa.int64())])
        batches = [
            pa.record_batch([pa.array([1, 2])], schema=schema),
            pa.record_batch([pa.array([3])], schema=schema),
        ]
        payload = arrow_stream(pa.Table.from_batches(batches))

        assert decode_arrow(payload).column("v") == [1, 2, 3]

    def test_file_format_is_accepted(self, arrow_file) -> None:
        payload = arrow_file({"x": pa.array([10, 20])})

        table = decode_arrow(payload)

        assert table.columns == ("x",)
        assert table.rows == ((10,), (20,))

    def test_decode_is_deterministic(self, arrow_stream) -> None:
        payload = arrow_stream({"a": [1, None], "b": ["x", "y"]})

        assert decode_arrow(payload) == decode_arrow(payload)

    @pytest.mark.parametrize("payload", [b"", b"not an arrow payload at all"])
    def test_garbage_raises_decode_error(self, payload: bytes) -> None:
        with pytest.raises(DecodeError):
            decode_arrow(payload)

    def test_truncated_payload_raises_decode_error(self, arrow_stream) -> None:
        payload = arrow_stream({"x": pa.array([1, 2, 3], pa.int64())})

        with pytest.raises(DecodeError):
            decode_arrow(payload[:-12])

    def test_utc_timestamp_column(self, arrow_stream) -> None:
        payload = arrow_stream({"ts": pa.array([0, None], pa.timestamp("ms", tz="UTC"))})

        table = decode_arrow(payload)

        assert table.types == ("timestamp[ms, tz=UTC]",)
        assert table.rows == ((datetime(1970, 1, 1, tzinfo=timezone.utc),), (None,))

    def test_out_of_range_timestamp_raises_decode_error(self, arrow_stream) -> None:
        payload = arrow_stream({"ts": pa.array([2**62], pa.timestamp("ms", tz="UTC"))})

        with pytest.raises(DecodeError, match="无法转换"):
            decode_arrow(payload)

    @pytest.mark.parametrize("occurrence", [0, 1])
    def test_row_count_disagreeing_with_column_length(self, arrow_stream, occurrence) -> None:
        payload = arrow_stream({"v": pa.array([10, 20, 30, 40, 50], pa.int64())})
        five = (5).to_bytes(8, "little")
        # batch 长度与列 field node 长度均以 8 字节对齐的 int64 存放
        positions = [i for i in range(0, len(payload) - 7, 8) if payload[i : i + 8] == five]
        assert len(positions) >= 2
        pos = positions[occurrence]
        patched = payload[:pos] + (4).to_bytes(8, "little") + payload[pos + 8 :]

        with pytest.raises(DecodeError):
            decode_arrow(patched)

    def test_duplicate_column_names_rejected(self, arrow_stream) -> None:
        table = pa.Table.from_arrays([pa.array([1]), pa.array([2])], names=["a", "a"])

        with pytest.raises(DecodeError):
            decode_arrow(arrow_stream(table))


class TestAssembleRows:
    def test_column_longer_than_declared_rows(self) -> None:
        with pytest.raises(DecodeError, match="声明行数 4"):
            assemble_rows(["a"], [[1, 2, 3, 4, 5]], 4)

    def test_column_shorter_than_declared_rows(self) -> None:
        with pytest.raises(DecodeError):
            assemble_rows(["a", "b"], [[1, 2], [1]], 2)

    def test_column_count_mismatch(self) -> None:
        with pytest.raises(DecodeError, match="2 列"):
            assemble_rows(["a", "b"], [[1]], 1)

    def test_transposes_columns(self) -> None:
        assert assemble_rows(["a", "b"], [[1, 2], ["x", "y"]], 2) == [(1, "x"), (2, "y")]


class TestDecodedTable:
    def test_ragged_rows_rejected(self) -> None:
        with pytest.raises(DecodeError):
            DecodedTable(columns=("a", "b"), rows=((1, 2), (3,)))

    def test_to_dataframe(self) -> None:
        table = DecodedTable(columns=("a", "b"), rows=((1, "x"), (2, None)))

        df = table.to_dataframe()

        assert list(df.columns) == ["a", "b"]
        assert df["a"].tolist() == [1, 2]
        assert df["b"].isna().tolist() == [False, True]

    def test_empty_dataframe_keeps_header(self) -> None:
        df = DecodedTable(columns=("a", "b")).to_dataframe()

        assert list(df.columns) == ["a", "b"]
        assert len(df) == 0

    def test_unknown_column(self) -> None:
        with pytest.raises(KeyError):
            DecodedTable(columns=("a",), rows=((1,),)).column("b")


class TestDecodeJsonRows:
    def test_rows_in_key_order(self) -> None:
        payload = {"data": [{"x": 1, "y": "a"}, {"x": 2, "y": None}], "rowCount": 2}

        table = decode_json_rows(payload)

        assert table.columns == ("x", "y")
        assert table.rows == ((1, "a"), (2, None))

    def test_nested_rows_structure(self) -> None:
        table = decode_json_rows({"data": {"rows": [{"x": 1}]}})

        assert table.rows == ((1,),)

    def test_empty_data(self) -> None:
        table = decode_json_rows({"data": [], "rowCount": 0})

        assert table.columns == ()
        assert table.rows == ()

    def test_missing_field_in_row(self) -> None:
        with pytest.raises(DecodeError, match="缺少字段"):
            decode_json_rows({"data": [{"x": 1, "y": 2}, {"x": 3}]})

    def test_row_count_mismatch(self) -> None:
        with pytest.raises(DecodeError, match="rowCount"):
            decode_json_rows({"data": [{"x": 1}], "rowCount": 2})

    def test_missing_data_key(self) -> None:
        with pytest.raises(DecodeError):
            decode_json_rows({"rows": []})
