# gdsio/protocol/core/types.py
from __future__ import annotations

from enum import IntEnum


class DataType(IntEnum):
    """Data-type tag carried in byte 3 of every record header."""
    NONE = 0
    BITARRAY = 1
    INT16 = 2
    INT32 = 3
    REAL32 = 4
    REAL64 = 5
    STRING = 6

    @classmethod
    def from_name(cls, name: str) -> "DataType":
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown data type '{name}'") from None


# Fixed element width per data type; strings are variable and carry 0 here.
DATA_TYPE_SIZES: dict[DataType, int] = {
    DataType.NONE: 0,
    DataType.BITARRAY: 2,
    DataType.INT16: 2,
    DataType.INT32: 4,
    DataType.REAL32: 4,
    DataType.REAL64: 8,
    DataType.STRING: 0,
}

HEADER_SIZE = 4
MAX_RECORD_SIZE = 0xFFFF


def data_size(data_type: int) -> int:
    return DATA_TYPE_SIZES.get(DataType(data_type), 0)
