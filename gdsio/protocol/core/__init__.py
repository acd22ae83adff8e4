# protocol/core/__init__.py

from .types import DataType
from .defs import RecordTable
from .record import Record
from .reader import RecordReader

__all__ = [
    "DataType",
    "RecordTable",
    "Record",
    "RecordReader",
]
