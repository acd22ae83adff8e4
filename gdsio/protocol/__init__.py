# protocol/__init__.py

from .core import DataType, RecordTable, Record, RecordReader

__all__ = [
    "DataType", "RecordTable", "Record", "RecordReader"]
