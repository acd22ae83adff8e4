# gdsio/protocol/core/primitive.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict
import struct

from gdsio.errors import EncodeError


@dataclass(frozen=True)
class PrimitiveCodec:
    fmt: str  # big-endian struct format
    size: int


# GDSII is big-endian throughout.
PRIMITIVES: Dict[str, PrimitiveCodec] = {
    "bitarray": PrimitiveCodec(fmt=">H", size=2),
    "int16":    PrimitiveCodec(fmt=">h", size=2),
    "uint16":   PrimitiveCodec(fmt=">H", size=2),
    "int32":    PrimitiveCodec(fmt=">i", size=4),
    "uint32":   PrimitiveCodec(fmt=">I", size=4),
}


def _codec(kind: str) -> PrimitiveCodec:
    k = kind.lower()
    if k not in PRIMITIVES:
        raise NotImplementedError(f"Unknown primitive type '{kind}'")
    return PRIMITIVES[k]


def decode_primitive(kind: str, raw_bytes: bytes) -> int:
    codec = _codec(kind)
    if len(raw_bytes) != codec.size:
        raise ValueError(f"Raw bytes length {len(raw_bytes)} != expected {codec.size} for '{kind}'")
    return struct.unpack(codec.fmt, raw_bytes)[0]


def encode_primitive(kind: str, value: int) -> bytes:
    codec = _codec(kind)
    try:
        return struct.pack(codec.fmt, value)
    except struct.error as e:
        raise EncodeError(
            f"Value {value!r} does not fit '{kind}'",
            details={"kind": kind, "value": value},
        ) from e


def primitive_size(kind: str) -> int:
    return _codec(kind).size
