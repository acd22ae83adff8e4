# gdsio/protocol/core/reader.py
from __future__ import annotations

import logging
from typing import BinaryIO, Iterator, Optional

from gdsio.errors import EndOfStreamError, GdsError

from .defs import RecordTable
from .record import Record


class RecordReader:
    """
    Sequential record reader over a binary stream.

    Iterating yields records until the stream ends on a record boundary.
    Framing and string errors propagate with the byte offset and record index
    of the failing record added to their details.
    """

    def __init__(
        self,
        stream: BinaryIO,
        *,
        encoding: str = "utf-8",
        table: Optional[RecordTable] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.stream = stream
        self.encoding = encoding
        self.table = table or RecordTable.default()
        self.offset = 0  # byte offset of the next record
        self.index = 0   # index of the next record
        self._log = logger or logging.getLogger(__name__)

    def read(self) -> Record:
        try:
            rec = Record.read(self.stream, encoding=self.encoding)
        except GdsError as e:
            e.details.setdefault("offset", self.offset)
            e.details.setdefault("record_index", self.index)
            if not isinstance(e, EndOfStreamError):
                e.message = f"{e.message} (record #{self.index} at offset {self.offset})"
                e.args = (e.message,)
            raise

        self._log.debug(
            "Read %s size=%d dtype=%d values=%d at offset=%d",
            self.table.name(rec.rec_type),
            rec.size,
            rec.data_type,
            len(rec.data),
            self.offset,
        )
        self.offset += rec.size
        self.index += 1
        return rec

    def __iter__(self) -> Iterator[Record]:
        while True:
            try:
                yield self.read()
            except EndOfStreamError:
                return
