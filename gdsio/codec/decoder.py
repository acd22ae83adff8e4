# gdsio/codec/decoder.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Callable, Dict, Iterable, List, Optional, Type

from gdsio.errors import MissingTerminatorError, TruncatedStreamError
from gdsio.model.date import Date
from gdsio.model.element import PARAMETER_TYPES, Element, ElementParameter, ElementType
from gdsio.model.library import Library, Structure
from gdsio.protocol.core.defs import RecordTable
from gdsio.protocol.core.record import Record, RecordValue
from gdsio.protocol.core.types import DataType

from .layout import check_record_table


@dataclass(frozen=True)
class SkippedRecord:
    """A record the decoder read but could not turn into model data."""
    record: str
    reason: str
    record_index: int
    offset: int


class LibraryDecoder:
    """
    Folds a record sequence into a Library.

    State is three accumulators: the library being filled, the structure
    in progress and the element in progress. Each record type has one
    transition method; records with no transition are counted in
    ``ignored`` and dropped.

    Parameter records that do not match their expected data type (or carry
    no value) are skipped, never raised: they land in ``skipped``.
    """

    def __init__(self, table: Optional[RecordTable] = None, logger: Optional[logging.Logger] = None):
        self.table = table or RecordTable.default()
        check_record_table(self.table)
        self._log = logger or logging.getLogger(__name__)

        self._handlers: Dict[int, Callable[[Record], None]] = {}
        for name, handler in {
            "HEADER": self._on_header,
            "BGNLIB": self._on_bgnlib,
            "LIBNAME": self._on_libname,
            "UNITS": self._on_units,
            "ENDLIB": self._on_endlib,
            "BGNSTR": self._on_bgnstr,
            "STRNAME": self._on_strname,
            "ENDSTR": self._on_endstr,
            "ENDEL": self._on_endel,
        }.items():
            self._handlers[self.table.code(name)] = handler
        for etype in ElementType:
            self._handlers[self.table.code(etype.record_name)] = partial(self._on_element_type, etype)
        for name, kind in PARAMETER_TYPES.items():
            self._handlers[self.table.code(name)] = partial(self._on_parameter, kind)

        self.reset()

    # ---------------- State ----------------
    def reset(self) -> None:
        self._library = Library()
        self._structure = Structure()
        self._element = Element()
        self._structure_open = False
        self._element_open = False
        self._done = False

        self.skipped: List[SkippedRecord] = []
        self.ignored = 0
        self.index = 0   # index of the record being processed
        self.offset = 0  # byte offset of the record being processed

    @property
    def done(self) -> bool:
        return self._done

    # ---------------- Public API ----------------
    def feed(self, record: Record) -> bool:
        """Apply one record. Returns True once ENDLIB has been seen."""
        handler = self._handlers.get(record.rec_type)
        if handler is None:
            self.ignored += 1
            self._log.debug(
                "Ignoring %s at offset=%d",
                self.table.name(record.rec_type),
                self.offset,
            )
        else:
            handler(record)

        self.index += 1
        self.offset += record.size
        return self._done

    def finish(self) -> Library:
        if not self._done:
            raise TruncatedStreamError(
                f"Record stream ended before ENDLIB (after {self.index} records, {self.offset} bytes)",
                hint="the file is probably truncated",
                details={"record_index": self.index, "offset": self.offset},
            )
        return self._library

    def decode(self, records: Iterable[Record]) -> Library:
        self.reset()
        for rec in records:
            if self.feed(rec):
                break
        library = self.finish()
        self._log.debug(
            "Decoded library '%s': %d structures, %d skipped, %d ignored",
            library.name,
            len(library.structures),
            len(self.skipped),
            self.ignored,
        )
        return library

    # ---------------- Helpers ----------------
    def _values(self, record: Record, data_type: DataType) -> List[RecordValue]:
        return list(record.data) if record.data_type == data_type else []

    def _first(self, record: Record, data_type: DataType, default: RecordValue) -> RecordValue:
        values = self._values(record, data_type)
        return values[0] if values else default

    def _dates(self, record: Record) -> tuple[Date, Date]:
        values = [int(v) for v in self._values(record, DataType.INT16)]
        return Date.from_record_data(values[0:6]), Date.from_record_data(values[6:12])

    def _skip(self, record: Record, reason: str) -> None:
        name = self.table.name(record.rec_type)
        self.skipped.append(SkippedRecord(name, reason, self.index, self.offset))
        self._log.debug("Skipping %s at offset=%d: %s", name, self.offset, reason)

    def _missing(self, what: str, record: Record) -> MissingTerminatorError:
        return MissingTerminatorError(
            f"{what} before {self.table.name(record.rec_type)} "
            f"(record #{self.index} at offset {self.offset})",
            details={"record_index": self.index, "offset": self.offset},
        )

    # ---------------- Library transitions ----------------
    def _on_header(self, record: Record) -> None:
        self._library.version = int(self._first(record, DataType.INT16, 0))

    def _on_bgnlib(self, record: Record) -> None:
        self._library.date_mod, self._library.date_acc = self._dates(record)

    def _on_libname(self, record: Record) -> None:
        self._library.name = str(self._first(record, DataType.STRING, ""))

    def _on_units(self, record: Record) -> None:
        values = self._values(record, DataType.REAL64)
        self._library.units_user = float(values[0]) if len(values) > 0 else 0.0
        self._library.units_m = float(values[1]) if len(values) > 1 else 0.0

    def _on_endlib(self, record: Record) -> None:
        if self._element_open:
            raise self._missing("ENDEL missing", record)
        if self._structure_open:
            raise self._missing(f"ENDSTR missing for structure '{self._structure.name}'", record)
        self._done = True

    # ---------------- Structure transitions ----------------
    def _on_bgnstr(self, record: Record) -> None:
        if self._structure_open:
            raise self._missing(f"ENDSTR missing for structure '{self._structure.name}'", record)
        self._structure.date_mod, self._structure.date_acc = self._dates(record)
        self._structure_open = True

    def _on_strname(self, record: Record) -> None:
        if not self._structure_open:
            self._skip(record, "outside a structure")
            return
        self._structure.name = str(self._first(record, DataType.STRING, ""))

    def _on_endstr(self, record: Record) -> None:
        if not self._structure_open:
            raise self._missing("BGNSTR missing", record)
        if self._element_open:
            raise self._missing("ENDEL missing", record)
        self._library.structures.append(self._structure)
        self._log.debug(
            "Structure '%s' closed with %d elements",
            self._structure.name,
            len(self._structure.elements),
        )
        self._structure = Structure()
        self._structure_open = False

    # ---------------- Element transitions ----------------
    def _on_element_type(self, etype: ElementType, record: Record) -> None:
        if not self._structure_open:
            raise self._missing("BGNSTR missing", record)
        if self._element_open:
            raise self._missing("ENDEL missing", record)
        self._element.element_type = etype
        self._element_open = True

    def _on_parameter(self, kind: Type[ElementParameter], record: Record) -> None:
        if not self._structure_open:
            self._skip(record, "outside a structure")
            return
        reason = kind.accepts(record)
        if reason is not None:
            self._skip(record, reason)
            return
        param = kind.from_record(record)
        if param is not None:
            self._element.parameters.append(param)

    def _on_endel(self, record: Record) -> None:
        if not self._structure_open:
            raise self._missing("BGNSTR missing", record)
        if self._element.is_complete:
            self._structure.elements.append(self._element)
        else:
            self._log.warning(
                "Dropping element without a type at offset=%d (%d parameters)",
                self.offset,
                len(self._element.parameters),
            )
            self._skip(record, "element has no type")
        self._element = Element()
        self._element_open = False
