# gdsio/protocol/core/record.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO, List, Union

from gdsio.errors import EncodeError, EndOfStreamError, FramingError, StringEncodingError

from .primitive import decode_primitive, encode_primitive
from .real import decode_real, encode_real
from .types import DataType, HEADER_SIZE, MAX_RECORD_SIZE, data_size

RecordValue = Union[int, float, str]

_KNOWN_DATA_TYPES = {int(t) for t in DataType}


def _read_exact(stream: BinaryIO, n: int) -> bytes:
    """Read up to n bytes, looping over short reads; returns fewer only at EOF."""
    chunks = []
    remaining = n
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def _decode_values(data_type: int, payload: bytes) -> List[RecordValue]:
    width = data_size(data_type)
    # trailing partial element is dropped
    count = len(payload) // width
    values: List[RecordValue] = []
    for i in range(count):
        raw = payload[i * width: (i + 1) * width]
        if data_type == DataType.BITARRAY:
            values.append(decode_primitive("bitarray", raw))
        elif data_type == DataType.INT16:
            values.append(decode_primitive("int16", raw))
        elif data_type == DataType.INT32:
            values.append(decode_primitive("int32", raw))
        else:
            values.append(decode_real(raw))
    return values


def _encode_value(data_type: int, value: RecordValue, encoding: str) -> bytes:
    if data_type == DataType.BITARRAY:
        return encode_primitive("bitarray", int(value))
    if data_type == DataType.INT16:
        return encode_primitive("int16", int(value))
    if data_type == DataType.INT32:
        return encode_primitive("int32", int(value))
    if data_type == DataType.REAL32:
        return encode_real(float(value), 4)
    if data_type == DataType.REAL64:
        return encode_real(float(value), 8)
    if data_type == DataType.STRING:
        try:
            return str(value).encode(encoding)
        except UnicodeEncodeError as e:
            raise StringEncodingError(f"Cannot encode {value!r} as {encoding}") from e
    return b""


@dataclass
class Record:
    """
    One length-prefixed GDSII record.

    Wire layout:
        [size (u16)] [rec_type (u8)] [data_type (u8)] [payload...]

    ``size`` counts the 4-byte header. It is recomputed by update_size()
    when data is appended, not on every write.
    """
    rec_type: int
    data_type: int
    data: List[RecordValue] = field(default_factory=list)
    size: int = HEADER_SIZE
    encoding: str = field(default="utf-8", repr=False, compare=False)

    # ---------------- Constructors ----------------
    @classmethod
    def new(
        cls, rec_type: int, data_type: int, data: List[RecordValue], *, encoding: str = "utf-8"
    ) -> "Record":
        rec = cls(rec_type=rec_type, data_type=int(data_type), data=list(data), encoding=encoding)
        rec.update_size()
        return rec

    @classmethod
    def new_single(
        cls, rec_type: int, data_type: int, value: RecordValue, *, encoding: str = "utf-8"
    ) -> "Record":
        return cls.new(rec_type, data_type, [value], encoding=encoding)

    @classmethod
    def new_none(cls, rec_type: int) -> "Record":
        return cls(rec_type=rec_type, data_type=int(DataType.NONE))

    # ---------------- Size bookkeeping ----------------
    def payload_size(self) -> int:
        if self.data_type == DataType.STRING:
            return sum(len(str(v).encode(self.encoding)) for v in self.data)
        return data_size(self.data_type) * len(self.data)

    def update_size(self) -> None:
        self.size = HEADER_SIZE + self.payload_size()

    def push_data(self, value: RecordValue) -> None:
        self.data.append(value)
        self.update_size()

    # ---------------- Wire I/O ----------------
    @classmethod
    def read(cls, stream: BinaryIO, *, encoding: str = "utf-8") -> "Record":
        hdr = _read_exact(stream, HEADER_SIZE)
        if not hdr:
            raise EndOfStreamError("End of stream")
        if len(hdr) < HEADER_SIZE:
            raise FramingError(
                f"Stream ended inside a record header ({len(hdr)} of {HEADER_SIZE} bytes)",
                details={"available": len(hdr)},
            )

        size = int.from_bytes(hdr[0:2], "big")
        rec_type = hdr[2]
        data_type = hdr[3]

        if size < HEADER_SIZE:
            raise FramingError(
                f"Record length {size} is shorter than its header",
                details={"size": size, "rec_type": rec_type},
            )
        if data_type not in _KNOWN_DATA_TYPES:
            raise FramingError(
                f"Unknown data type 0x{data_type:02X} in record 0x{rec_type:02X}",
                details={"size": size, "rec_type": rec_type, "data_type": data_type},
            )

        payload_len = size - HEADER_SIZE
        payload = _read_exact(stream, payload_len)
        if len(payload) < payload_len:
            raise FramingError(
                f"Record 0x{rec_type:02X} declares {size} bytes but the stream ended "
                f"after {HEADER_SIZE + len(payload)}",
                details={"size": size, "rec_type": rec_type, "available": HEADER_SIZE + len(payload)},
            )

        if data_type == DataType.STRING:
            try:
                data: List[RecordValue] = [payload.decode(encoding)]
            except UnicodeDecodeError as e:
                raise StringEncodingError(
                    f"Invalid {encoding} string in record 0x{rec_type:02X}",
                    details={"rec_type": rec_type, "raw": bytes(payload)},
                ) from e
        elif data_type == DataType.NONE:
            data = []
        else:
            data = _decode_values(data_type, payload)

        return cls(rec_type=rec_type, data_type=data_type, data=data, size=size, encoding=encoding)

    def to_bytes(self) -> bytes:
        payload = b"".join(_encode_value(self.data_type, v, self.encoding) for v in self.data)
        if HEADER_SIZE + len(payload) > MAX_RECORD_SIZE:
            raise EncodeError(
                f"Record 0x{self.rec_type:02X} payload of {len(payload)} bytes exceeds the 16-bit length field",
                hint="split long XY lists across elements",
                details={"rec_type": self.rec_type, "payload_len": len(payload)},
            )
        if self.size != HEADER_SIZE + len(payload):
            raise EncodeError(
                f"Record 0x{self.rec_type:02X} size {self.size} does not match payload of {len(payload)} bytes",
                hint="call update_size() after editing data",
                details={"rec_type": self.rec_type, "size": self.size, "payload_len": len(payload)},
            )
        header = self.size.to_bytes(2, "big") + bytes([self.rec_type & 0xFF, self.data_type & 0xFF])
        return header + payload

    def write(self, stream: BinaryIO) -> None:
        stream.write(self.to_bytes())
