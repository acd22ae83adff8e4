from __future__ import annotations

import copy

from gdsio.model.element import (
    PARAMETER_TYPES,
    XY,
    ColRow,
    EFlags,
    Element,
    ElementType,
    Layer,
    Presentation,
    StrTransf,
    Width,
)


def test_parameter_registry_is_keyed_by_record_name():
    assert PARAMETER_TYPES["LAYER"] is Layer
    assert PARAMETER_TYPES["BGNEXTN"].__name__ == "BeginExt"
    assert len(PARAMETER_TYPES) == 16


def test_element_type_record_names():
    assert ElementType.STRUCTURE_REF.record_name == "SREF"


def test_new_element_is_unset():
    e = Element()
    assert e.element_type is None
    assert not e.is_complete
    assert e.parameters == []


def test_get_returns_first_match():
    e = Element(ElementType.PATH).add(Layer(1)).add(Width(10)).add(Layer(2))
    assert e.get(Layer) == Layer(1)
    assert e.get(XY) is None


def test_xy_normalizes_points_to_tuples():
    xy = XY([[0, 0], [10, 5]])
    assert xy.value == [(0, 0), (10, 5)]
    assert xy.to_data() == [0, 0, 10, 5]


def test_colrow_accessors():
    cr = ColRow([4, 3])
    assert (cr.columns, cr.rows) == (4, 3)
    assert ColRow([]).rows is None


def test_flag_accessors():
    p = Presentation(0b0000_0000_0010_0110)
    assert p.font == 2
    assert p.vertical == 1
    assert p.horizontal == 2

    assert EFlags(0x0001).template
    assert EFlags(0x0002).external

    st = StrTransf(0x8006)
    assert st.reflected and st.absolute_magnification and st.absolute_angle


def test_elements_deep_copy_independently():
    e = Element(ElementType.BOUNDARY, [XY([(0, 0), (1, 1)])])
    clone = copy.deepcopy(e)
    clone.parameters[0].value.append((2, 2))
    assert e != clone
    assert len(e.parameters[0].value) == 2
