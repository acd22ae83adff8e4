from __future__ import annotations

import pytest

from gdsio.codec.decoder import LibraryDecoder
from gdsio.errors import MissingTerminatorError, TruncatedStreamError
from gdsio.model.date import Date
from gdsio.model.element import XY, ColRow, ElementType, Layer, Width
from gdsio.protocol.core.defs import RecordTable
from gdsio.protocol.core.record import Record
from gdsio.protocol.core.types import DataType

TABLE = RecordTable.default()


def _rec(name: str, data_type: DataType = DataType.NONE, data=None) -> Record:
    if data_type == DataType.NONE:
        return Record.new_none(TABLE.code(name))
    return Record.new(TABLE.code(name), data_type, list(data or []))


def _lib_head(version: int = 5, name: str = "LIB1"):
    return [
        _rec("HEADER", DataType.INT16, [version]),
        _rec("BGNLIB", DataType.INT16, [2020, 1, 2, 3, 4, 5, 2021, 6, 7, 8, 9, 10]),
        _rec("LIBNAME", DataType.STRING, [name]),
        _rec("UNITS", DataType.REAL64, [0.001, 1e-9]),
    ]


def _structure(name: str, *element_records):
    return [
        _rec("BGNSTR", DataType.INT16, [2022] + [1] * 11),
        _rec("STRNAME", DataType.STRING, [name]),
        *element_records,
        _rec("ENDSTR"),
    ]


def test_library_header_fields():
    lib = LibraryDecoder().decode(_lib_head() + [_rec("ENDLIB")])

    assert lib.version == 5
    assert lib.name == "LIB1"
    assert lib.date_mod == Date(2020, 1, 2, 3, 4, 5)
    assert lib.date_acc == Date(2021, 6, 7, 8, 9, 10)
    assert lib.units_user == 0.001
    assert lib.units_m == 1e-9
    assert lib.structures == []


def test_structure_and_element_accumulation():
    records = _lib_head() + _structure(
        "TOP",
        _rec("BOUNDARY"),
        _rec("LAYER", DataType.INT16, [1]),
        _rec("XY", DataType.INT32, [0, 0, 100, 0, 100, 100, 0, 0]),
        _rec("ENDEL"),
        _rec("PATH"),
        _rec("WIDTH", DataType.INT32, [20]),
        _rec("ENDEL"),
    ) + _structure("EMPTY") + [_rec("ENDLIB")]

    lib = LibraryDecoder().decode(records)

    assert [s.name for s in lib.structures] == ["TOP", "EMPTY"]
    top = lib.structures[0]
    assert top.date_mod == Date(2022, 1, 1, 1, 1, 1)
    assert [e.element_type for e in top.elements] == [ElementType.BOUNDARY, ElementType.PATH]
    assert top.elements[0].parameters == [
        Layer(1),
        XY([(0, 0), (100, 0), (100, 100), (0, 0)]),
    ]
    assert top.elements[1].parameters == [Width(20)]
    assert lib.structures[1].elements == []


def test_mistyped_parameter_is_skipped_without_error():
    decoder = LibraryDecoder()
    records = _lib_head() + _structure(
        "TOP",
        _rec("BOUNDARY"),
        _rec("LAYER", DataType.INT32, [1]),
        _rec("DATATYPE", DataType.INT16, []),
        _rec("LAYER", DataType.INT16, [7]),
        _rec("ENDEL"),
    ) + [_rec("ENDLIB")]

    lib = decoder.decode(records)

    assert lib.structures[0].elements[0].parameters == [Layer(7)]
    assert [(s.record, s.reason) for s in decoder.skipped] == [
        ("LAYER", "expected int16, got int32"),
        ("DATATYPE", "no value"),
    ]
    assert decoder.skipped[0].record_index == 7


def test_xy_drops_odd_trailing_value():
    records = _lib_head() + _structure(
        "S",
        _rec("BOUNDARY"),
        _rec("XY", DataType.INT32, [1, 2, 3, 4, 5]),
        _rec("ENDEL"),
    ) + [_rec("ENDLIB")]

    lib = LibraryDecoder().decode(records)

    assert lib.structures[0].elements[0].parameters == [XY([(1, 2), (3, 4)])]


def test_colrow_keeps_all_values():
    records = _lib_head() + _structure(
        "S",
        _rec("AREF"),
        _rec("COLROW", DataType.INT16, [2, 3, 4]),
        _rec("ENDEL"),
    ) + [_rec("ENDLIB")]

    lib = LibraryDecoder().decode(records)

    assert lib.structures[0].elements[0].parameters == [ColRow([2, 3, 4])]


def test_unknown_records_are_ignored():
    decoder = LibraryDecoder()
    records = _lib_head() + _structure(
        "S",
        _rec("BOUNDARY"),
        _rec("PROPATTR", DataType.INT16, [1]),
        _rec("PROPVALUE", DataType.STRING, ["x"]),
        _rec("ENDEL"),
    ) + [Record.new_single(0x99, DataType.INT16, 0), _rec("ENDLIB")]

    lib = decoder.decode(records)

    assert decoder.ignored == 3
    assert lib.structures[0].elements[0].parameters == []


def test_mistyped_library_fields_default():
    records = [
        _rec("HEADER", DataType.INT32, [5]),
        _rec("BGNLIB", DataType.INT16, [2020, 1, 1, 0, 0, 0]),
        _rec("LIBNAME", DataType.INT16, [1]),
        _rec("UNITS", DataType.REAL64, [0.5]),
        _rec("ENDLIB"),
    ]

    lib = LibraryDecoder().decode(records)

    assert lib.version == 0
    assert lib.name == ""
    assert lib.date_mod == Date(2020, 1, 1, 0, 0, 0)
    assert lib.date_acc == Date(0, 0, 0, 0, 0, 0)
    assert (lib.units_user, lib.units_m) == (0.5, 0.0)


def test_element_without_type_is_dropped():
    decoder = LibraryDecoder()
    records = _lib_head() + _structure(
        "S",
        _rec("LAYER", DataType.INT16, [1]),
        _rec("ENDEL"),
    ) + [_rec("ENDLIB")]

    lib = decoder.decode(records)

    assert lib.structures[0].elements == []
    assert decoder.skipped[-1].reason == "element has no type"


def test_missing_endlib_raises_truncated():
    decoder = LibraryDecoder()
    records = _lib_head() + _structure("S")

    with pytest.raises(TruncatedStreamError) as ei:
        decoder.decode(records)

    assert ei.value.details["record_index"] == len(records)
    assert ei.value.details["offset"] == sum(r.size for r in records)


def test_endlib_inside_structure_raises():
    records = _lib_head() + [
        _rec("BGNSTR", DataType.INT16, [0] * 12),
        _rec("STRNAME", DataType.STRING, ["OPEN"]),
        _rec("ENDLIB"),
    ]

    with pytest.raises(MissingTerminatorError) as ei:
        LibraryDecoder().decode(records)

    assert ei.value.code == "missing_terminator"
    assert "OPEN" in str(ei.value)


def test_endstr_inside_element_raises():
    records = _lib_head() + _structure("S", _rec("TEXT"), _rec("STRING", DataType.STRING, ["hi"])) + [
        _rec("ENDLIB")
    ]

    with pytest.raises(MissingTerminatorError):
        LibraryDecoder().decode(records)


def test_nested_bgnstr_raises():
    records = _lib_head() + [
        _rec("BGNSTR", DataType.INT16, [0] * 12),
        _rec("BGNSTR", DataType.INT16, [0] * 12),
    ]

    with pytest.raises(MissingTerminatorError):
        LibraryDecoder().decode(records)


def test_decode_stops_at_endlib():
    consumed = []

    def records():
        for r in _lib_head() + [_rec("ENDLIB"), _rec("HEADER", DataType.INT16, [9])]:
            consumed.append(r)
            yield r

    lib = LibraryDecoder().decode(records())

    assert lib.version == 5
    assert len(consumed) == 5


def test_feed_and_finish():
    decoder = LibraryDecoder()
    for rec in _lib_head():
        assert decoder.feed(rec) is False
    with pytest.raises(TruncatedStreamError):
        decoder.finish()
    assert decoder.feed(_rec("ENDLIB")) is True
    assert decoder.finish().name == "LIB1"


def test_element_between_structures_raises():
    stray = [_rec("BOUNDARY"), _rec("LAYER", DataType.INT16, [9]), _rec("ENDEL")]
    records = _lib_head() + _structure("A") + stray + _structure("B") + [_rec("ENDLIB")]

    with pytest.raises(MissingTerminatorError) as ei:
        LibraryDecoder().decode(records)

    assert "BGNSTR missing" in str(ei.value)
    assert ei.value.details["record_index"] == len(_lib_head()) + 3


def test_element_without_any_structure_raises():
    records = [
        _rec("HEADER", DataType.INT16, [5]),
        _rec("BOUNDARY"),
        _rec("LAYER", DataType.INT16, [9]),
        _rec("ENDEL"),
        _rec("ENDLIB"),
    ]

    with pytest.raises(MissingTerminatorError) as ei:
        LibraryDecoder().decode(records)

    assert ei.value.details["record_index"] == 1


def test_endstr_without_bgnstr_raises():
    records = _lib_head() + [_rec("ENDSTR"), _rec("ENDLIB")]

    with pytest.raises(MissingTerminatorError):
        LibraryDecoder().decode(records)


def test_records_outside_structure_are_skipped():
    decoder = LibraryDecoder()
    records = _lib_head() + [
        _rec("STRNAME", DataType.STRING, ["STRAY"]),
        _rec("LAYER", DataType.INT16, [3]),
    ] + _structure("B", _rec("BOX"), _rec("ENDEL")) + [_rec("ENDLIB")]

    lib = decoder.decode(records)

    assert [s.name for s in lib.structures] == ["B"]
    assert lib.structures[0].elements[0].parameters == []
    assert [(s.record, s.reason) for s in decoder.skipped] == [
        ("STRNAME", "outside a structure"),
        ("LAYER", "outside a structure"),
    ]
