"""Turns columnar or row-oriented wire results into canonical rows.

Both orientations go through the same per-field readers so that equivalent
blocks always produce identical output. A null scalar becomes ``None`` while a
null element inside an array becomes the string ``"NULL"``.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Sequence, Tuple

import mapd_pb2

from .datum_types import DatumType, FieldDescriptor, fields_from_row_desc
from .errors import MalformedResultError

NULL_ARRAY_ELEMENT = "NULL"

CanonicalRow = Dict[str, Any]


@dataclass(frozen=True)
class ScalarReader:
    """Where a type's values live on the wire and how to convert them."""

    slot: str
    convert: Callable[[Any], Any]

    @property
    def column_key(self) -> str:
        return f"{self.slot}_col"

    @property
    def datum_key(self) -> str:
        return f"{self.slot}_val"


def _to_bool(value: Any) -> bool:
    return int(value) != 0


def _seconds_to_millis(value: Any) -> int:
    return int(value) * 1000


READERS: Dict[DatumType, ScalarReader] = {
    DatumType.BOOL: ScalarReader("int", _to_bool),
    DatumType.SMALLINT: ScalarReader("int", int),
    DatumType.INT: ScalarReader("int", int),
    DatumType.BIGINT: ScalarReader("int", int),
    DatumType.FLOAT: ScalarReader("real", float),
    DatumType.DOUBLE: ScalarReader("real", float),
    DatumType.DECIMAL: ScalarReader("real", float),
    DatumType.STR: ScalarReader("str", str),
    DatumType.TIME: ScalarReader("int", _seconds_to_millis),
    DatumType.TIMESTAMP: ScalarReader("int", _seconds_to_millis),
    DatumType.DATE: ScalarReader("int", _seconds_to_millis),
}

_unmapped = set(DatumType) - set(READERS)
if _unmapped:
    raise RuntimeError(f"No scalar reader for datum types: {sorted(t.name for t in _unmapped)}")


@dataclass
class ResultOptions:
    """Per-query options that shape how a raw result is returned."""

    query: str = ""
    is_image: bool = False
    eliminate_null_rows: bool = False


class ResultNormalizer:
    """Converts raw result blocks into lists of canonical rows."""

    def __init__(self, log_queries: bool = False):
        self.log_queries = log_queries

    def normalize(
        self,
        fields: Sequence[FieldDescriptor],
        row_set: mapd_pb2.TRowSet,
        eliminate_null_rows: bool = False,
    ) -> List[CanonicalRow]:
        readers = [READERS[f.type] for f in fields]
        if row_set.is_columnar:
            materialized = self._columnar_rows(fields, readers, row_set)
        else:
            materialized = self._row_oriented_rows(fields, readers, row_set)

        if eliminate_null_rows:
            return [row for row, has_null in materialized if not has_null]
        return [row for row, _ in materialized]

    def process_result(self, options: ResultOptions, result):
        """Return a render result as-is, or the normalized rows of a query result."""
        if self.log_queries:
            print(
                f"[Normalizer] {options.query}: {result.execution_time_ms} ms "
                f"(total {result.total_time_ms} ms)",
                flush=True,
            )
        if options.is_image:
            return result

        fields = fields_from_row_desc(result.row_set.row_desc)
        return self.normalize(fields, result.row_set, options.eliminate_null_rows)

    def process_pixel_results(self, result: mapd_pb2.TPixelResult) -> List[Dict[str, Any]]:
        """Normalize the row set attached to each pixel row of a hit-test result."""
        processed = []
        for pixel_row in result.pixel_rows:
            fields = fields_from_row_desc(pixel_row.row_set.row_desc)
            processed.append({
                "pixel": {"x": pixel_row.pixel.x, "y": pixel_row.pixel.y},
                "vega_table_name": pixel_row.vega_table_name,
                "table_id": list(pixel_row.table_id),
                "row_id": list(pixel_row.row_id),
                "row_set": self.normalize(fields, pixel_row.row_set),
            })
        return processed

    @staticmethod
    def _columnar_rows(
        fields: Sequence[FieldDescriptor],
        readers: Sequence[ScalarReader],
        row_set: mapd_pb2.TRowSet,
    ) -> List[Tuple[CanonicalRow, bool]]:
        columns = row_set.columns
        _check_width(fields, len(columns), "columns")
        num_rows = len(columns[0].nulls) if columns else 0
        rows = []
        for r in range(num_rows):
            row: CanonicalRow = {}
            has_null = False
            for field, reader, column in zip(fields, readers, columns):
                if column.nulls[r]:
                    row[field.name] = None
                    has_null = True
                elif field.is_array:
                    values, element_null = _array_from_column(reader, column.data.arr_col[r])
                    row[field.name] = values
                    has_null = has_null or element_null
                else:
                    row[field.name] = reader.convert(getattr(column.data, reader.column_key)[r])
            rows.append((row, has_null))
        return rows

    @staticmethod
    def _row_oriented_rows(
        fields: Sequence[FieldDescriptor],
        readers: Sequence[ScalarReader],
        row_set: mapd_pb2.TRowSet,
    ) -> List[Tuple[CanonicalRow, bool]]:
        rows = []
        for raw_row in row_set.rows:
            _check_width(fields, len(raw_row.cols), "cells")
            row: CanonicalRow = {}
            has_null = False
            for field, reader, cell in zip(fields, readers, raw_row.cols):
                if cell.is_null:
                    row[field.name] = None
                    has_null = True
                elif field.is_array:
                    values, element_null = _array_from_datums(reader, cell.val.arr_val)
                    row[field.name] = values
                    has_null = has_null or element_null
                else:
                    row[field.name] = reader.convert(getattr(cell.val, reader.datum_key))
            rows.append((row, has_null))
        return rows


def _check_width(fields: Sequence[FieldDescriptor], width: int, unit: str) -> None:
    if width != len(fields):
        raise MalformedResultError(
            f"Result carries {width} {unit} but the descriptor lists {len(fields)} field(s)"
        )


def _array_from_column(reader: ScalarReader, column: mapd_pb2.TColumn) -> Tuple[List[Any], bool]:
    data = getattr(column.data, reader.column_key)
    values = []
    for idx, is_null in enumerate(column.nulls):
        values.append(NULL_ARRAY_ELEMENT if is_null else reader.convert(data[idx]))
    return values, any(column.nulls)


def _array_from_datums(reader: ScalarReader, datums: Sequence[mapd_pb2.TDatum]) -> Tuple[List[Any], bool]:
    values = []
    has_null = False
    for datum in datums:
        if datum.is_null:
            values.append(NULL_ARRAY_ELEMENT)
            has_null = True
        else:
            values.append(reader.convert(getattr(datum.val, reader.datum_key)))
    return values, has_null
