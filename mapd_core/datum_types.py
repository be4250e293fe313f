"""Datum type codes, column encodings and field descriptors."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Iterable, List

import mapd_pb2

from .errors import UnmappedTypeError


class DatumType(IntEnum):
    """Logical column types as numbered by the backend."""

    SMALLINT = 0
    INT = 1
    BIGINT = 2
    FLOAT = 3
    DECIMAL = 4
    DOUBLE = 5
    STR = 6
    TIME = 7
    TIMESTAMP = 8
    DATE = 9
    BOOL = 10


class EncodingType(IntEnum):
    """Column storage encodings. Only DICT matters on the client side."""

    NONE = 0
    FIXED = 1
    RL = 2
    DIFF = 3
    DICT = 4
    SPARSE = 5


def resolve_type(code: int, field_name: str) -> DatumType:
    """Map a wire type code onto DatumType."""
    try:
        return DatumType(code)
    except ValueError:
        raise UnmappedTypeError(code, field_name) from None


@dataclass(frozen=True)
class FieldDescriptor:
    """Immutable description of one result column."""

    name: str
    type: DatumType
    is_array: bool = False
    is_dict: bool = False

    @property
    def type_name(self) -> str:
        return self.type.name

    @classmethod
    def from_column_type(cls, column: mapd_pb2.TColumnType) -> "FieldDescriptor":
        col_type = column.col_type
        return cls(
            name=column.col_name,
            type=resolve_type(col_type.type, column.col_name),
            is_array=col_type.is_array,
            is_dict=col_type.encoding == EncodingType.DICT,
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "type": self.type_name,
            "is_array": self.is_array,
            "is_dict": self.is_dict,
        }


def fields_from_row_desc(row_desc: Iterable[mapd_pb2.TColumnType]) -> List[FieldDescriptor]:
    """Build the ordered field list from a row or table descriptor."""
    return [FieldDescriptor.from_column_type(column) for column in row_desc]
