# gdsio/codec/layout.py
from __future__ import annotations

from typing import Dict, List

from gdsio.model.element import PARAMETER_TYPES, ElementType
from gdsio.protocol.core.defs import RecordTable
from gdsio.protocol.core.types import DataType

# Library and structure records the codec reads and writes directly.
STRUCTURAL_RECORDS: Dict[str, DataType] = {
    "HEADER": DataType.INT16,
    "BGNLIB": DataType.INT16,
    "LIBNAME": DataType.STRING,
    "UNITS": DataType.REAL64,
    "ENDLIB": DataType.NONE,
    "BGNSTR": DataType.INT16,
    "STRNAME": DataType.STRING,
    "ENDSTR": DataType.NONE,
    "ENDEL": DataType.NONE,
}


def expected_data_types() -> Dict[str, DataType]:
    """Record name -> data type, for every record the object model uses."""
    out = dict(STRUCTURAL_RECORDS)
    out.update({etype.record_name: DataType.NONE for etype in ElementType})
    out.update({name: kind.data_type for name, kind in PARAMETER_TYPES.items()})
    return out


def check_record_table(table: RecordTable) -> None:
    """
    Raise ValueError if ``table`` lacks a record the model uses or declares a
    data type other than the one the model reads and writes for it.
    """
    problems: List[str] = []
    for name, expected in expected_data_types().items():
        if name not in table.records:
            problems.append(f"{name}: missing")
            continue
        declared = table.data_type(name)
        if declared != expected:
            problems.append(
                f"{name}: table has {declared.name.lower()}, model uses {expected.name.lower()}"
            )
    if problems:
        raise ValueError("Record table does not match the object model: " + "; ".join(problems))
