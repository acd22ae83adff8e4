# gdsio/model/element.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Tuple, Type, TypeVar

from gdsio.protocol.core.record import Record, RecordValue
from gdsio.protocol.core.types import DataType


class ElementType(Enum):
    """Serializable element kinds; the value is the record that opens the element."""
    BOUNDARY = "BOUNDARY"
    PATH = "PATH"
    STRUCTURE_REF = "SREF"
    ARRAY_REF = "AREF"
    TEXT = "TEXT"
    NODE = "NODE"
    BOX = "BOX"

    @property
    def record_name(self) -> str:
        return self.value


# ---------------------------
# Parameters
# ---------------------------
@dataclass
class ElementParameter:
    """
    Base class for element parameters.

    Each subclass maps to exactly one record type and one wire data type.
    from_record() returns None when the record cannot produce the parameter
    (wrong data type or no value); the decoder treats that as a skip.
    """
    record_name: ClassVar[str]
    data_type: ClassVar[DataType]

    value: object

    def to_data(self) -> List[RecordValue]:
        return [self.value]  # type: ignore[list-item]

    @classmethod
    def accepts(cls, record: Record) -> Optional[str]:
        """Reason the record cannot be decoded, or None if it can."""
        if record.data_type != cls.data_type:
            return (
                f"expected {cls.data_type.name.lower()}, "
                f"got {DataType(record.data_type).name.lower()}"
            )
        if not record.data:
            return "no value"
        return None

    @classmethod
    def from_record(cls, record: Record) -> Optional["ElementParameter"]:
        if cls.accepts(record) is not None:
            return None
        return cls(record.data[0])


@dataclass
class Layer(ElementParameter):
    record_name = "LAYER"
    data_type = DataType.INT16
    value: int


@dataclass
class XY(ElementParameter):
    """Coordinate pairs in database units."""
    record_name = "XY"
    data_type = DataType.INT32
    value: List[Tuple[int, int]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.value = [(int(x), int(y)) for x, y in self.value]

    def to_data(self) -> List[RecordValue]:
        out: List[RecordValue] = []
        for x, y in self.value:
            out.append(x)
            out.append(y)
        return out

    @classmethod
    def accepts(cls, record: Record) -> Optional[str]:
        if record.data_type != cls.data_type:
            return f"expected int32, got {DataType(record.data_type).name.lower()}"
        return None

    @classmethod
    def from_record(cls, record: Record) -> Optional["XY"]:
        if cls.accepts(record) is not None:
            return None
        vals = [int(v) for v in record.data]
        # an odd trailing value has no partner and is dropped
        return cls(list(zip(vals[0::2], vals[1::2])))


@dataclass
class Datatype(ElementParameter):
    record_name = "DATATYPE"
    data_type = DataType.INT16
    value: int


@dataclass
class Width(ElementParameter):
    record_name = "WIDTH"
    data_type = DataType.INT32
    value: int


@dataclass
class StructureName(ElementParameter):
    """Name of the structure referenced by an SREF or AREF."""
    record_name = "SNAME"
    data_type = DataType.STRING
    value: str


@dataclass
class ColRow(ElementParameter):
    """Array dimensions, conventionally [columns, rows]."""
    record_name = "COLROW"
    data_type = DataType.INT16
    value: List[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.value = [int(v) for v in self.value]

    def to_data(self) -> List[RecordValue]:
        return list(self.value)

    @classmethod
    def accepts(cls, record: Record) -> Optional[str]:
        if record.data_type != cls.data_type:
            return f"expected int16, got {DataType(record.data_type).name.lower()}"
        return None

    @classmethod
    def from_record(cls, record: Record) -> Optional["ColRow"]:
        if cls.accepts(record) is not None:
            return None
        return cls([int(v) for v in record.data])

    @property
    def columns(self) -> Optional[int]:
        return self.value[0] if len(self.value) > 0 else None

    @property
    def rows(self) -> Optional[int]:
        return self.value[1] if len(self.value) > 1 else None


@dataclass
class TextType(ElementParameter):
    record_name = "TEXTTYPE"
    data_type = DataType.INT16
    value: int


@dataclass
class Presentation(ElementParameter):
    """
    Text presentation flags. Bits are numbered from the MSB (bit 0 = 0x8000):
    bits 10-11 select the font, bits 12-13 the vertical and bits 14-15 the
    horizontal justification.
    """
    record_name = "PRESENTATION"
    data_type = DataType.BITARRAY
    value: int

    @property
    def font(self) -> int:
        return (self.value >> 4) & 0x3

    @property
    def vertical(self) -> int:
        return (self.value >> 2) & 0x3

    @property
    def horizontal(self) -> int:
        return self.value & 0x3


@dataclass
class String(ElementParameter):
    """Text content of a TEXT element."""
    record_name = "STRING"
    data_type = DataType.STRING
    value: str


@dataclass
class StrTransf(ElementParameter):
    """Transformation flags: reflection (bit 0), absolute mag (13), absolute angle (14)."""
    record_name = "STRANS"
    data_type = DataType.BITARRAY
    value: int

    @property
    def reflected(self) -> bool:
        return bool(self.value & 0x8000)

    @property
    def absolute_magnification(self) -> bool:
        return bool(self.value & 0x0004)

    @property
    def absolute_angle(self) -> bool:
        return bool(self.value & 0x0002)


@dataclass
class Magnification(ElementParameter):
    record_name = "MAG"
    data_type = DataType.REAL64
    value: float


@dataclass
class Angle(ElementParameter):
    """Rotation in degrees, counterclockwise positive."""
    record_name = "ANGLE"
    data_type = DataType.REAL64
    value: float


@dataclass
class Pathtype(ElementParameter):
    """
    Path end style:
      * 0 - square ends
      * 1 - round ends
      * 2 - square ends extended by half the width
      * 4 - custom extensions (see BeginExt)
    """
    record_name = "PATHTYPE"
    data_type = DataType.INT16
    value: int


@dataclass
class EFlags(ElementParameter):
    """Element flags: bit 15 marks template data, bit 14 external data."""
    record_name = "EFLAGS"
    data_type = DataType.BITARRAY
    value: int

    @property
    def template(self) -> bool:
        return bool(self.value & 0x0001)

    @property
    def external(self) -> bool:
        return bool(self.value & 0x0002)


@dataclass
class Nodetype(ElementParameter):
    record_name = "NODETYPE"
    data_type = DataType.INT16
    value: int


@dataclass
class BeginExt(ElementParameter):
    """Extension of the first path point, used with pathtype 4."""
    record_name = "BGNEXTN"
    data_type = DataType.INT32
    value: int


PARAMETER_TYPES: Dict[str, Type[ElementParameter]] = {
    cls.record_name: cls
    for cls in (
        Layer, XY, Datatype, Width, StructureName, ColRow, TextType,
        Presentation, String, StrTransf, Magnification, Angle, Pathtype,
        EFlags, Nodetype, BeginExt,
    )
}

P = TypeVar("P", bound=ElementParameter)


# ---------------------------
# Element
# ---------------------------
@dataclass
class Element:
    """
    One geometry or annotation item.

    ``element_type`` is None only while an element is being accumulated;
    a finished element always carries an ElementType.
    """
    element_type: Optional[ElementType] = None
    parameters: List[ElementParameter] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return self.element_type is not None

    def add(self, parameter: ElementParameter) -> "Element":
        self.parameters.append(parameter)
        return self

    def get(self, kind: Type[P]) -> Optional[P]:
        """First parameter of the given class, if any."""
        for p in self.parameters:
            if isinstance(p, kind):
                return p
        return None
