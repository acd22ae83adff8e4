# gdsio/codec/encoder.py
from __future__ import annotations

import logging
from typing import BinaryIO, Iterator, List, Optional

from gdsio.errors import EncodeError
from gdsio.model.date import Date
from gdsio.model.element import Element
from gdsio.model.library import Library, Structure
from gdsio.protocol.core.defs import RecordTable
from gdsio.protocol.core.record import Record

from .layout import STRUCTURAL_RECORDS, check_record_table


class LibraryEncoder:
    """
    Flattens a Library into records, in the order LibraryDecoder consumes them:

        HEADER BGNLIB LIBNAME UNITS
          (BGNSTR STRNAME (<type> <params...> ENDEL)* ENDSTR)*
        ENDLIB
    """

    def __init__(
        self,
        table: Optional[RecordTable] = None,
        *,
        encoding: str = "utf-8",
        logger: Optional[logging.Logger] = None,
    ):
        self.table = table or RecordTable.default()
        check_record_table(self.table)
        self.encoding = encoding
        self._log = logger or logging.getLogger(__name__)

    # ---------------- Record builders ----------------
    def _single(self, name: str, value) -> Record:
        return Record.new_single(
            self.table.code(name), STRUCTURAL_RECORDS[name], value, encoding=self.encoding
        )

    def _none(self, name: str) -> Record:
        return Record.new_none(self.table.code(name))

    def _dates(self, name: str, date_mod: Date, date_acc: Date) -> Record:
        data = date_mod.to_record_data() + date_acc.to_record_data()
        return Record.new(self.table.code(name), STRUCTURAL_RECORDS[name], data)

    # ---------------- Public API ----------------
    def element_records(self, element: Element) -> List[Record]:
        if element.element_type is None:
            raise EncodeError(
                "Element has no type",
                hint="set element_type before writing",
                details={"parameters": len(element.parameters)},
            )
        out = [self._none(element.element_type.record_name)]
        for param in element.parameters:
            out.append(
                Record.new(
                    self.table.code(param.record_name),
                    param.data_type,
                    param.to_data(),
                    encoding=self.encoding,
                )
            )
        out.append(self._none("ENDEL"))
        return out

    def structure_records(self, structure: Structure) -> Iterator[Record]:
        yield self._dates("BGNSTR", structure.date_mod, structure.date_acc)
        yield self._single("STRNAME", structure.name)
        for idx, element in enumerate(structure.elements):
            try:
                yield from self.element_records(element)
            except EncodeError as e:
                e.details.setdefault("structure", structure.name)
                e.details.setdefault("element_index", idx)
                raise
        yield self._none("ENDSTR")

    def records(self, library: Library) -> Iterator[Record]:
        yield self._single("HEADER", library.version)
        yield self._dates("BGNLIB", library.date_mod, library.date_acc)
        yield self._single("LIBNAME", library.name)
        yield Record.new(
            self.table.code("UNITS"),
            STRUCTURAL_RECORDS["UNITS"],
            [library.units_user, library.units_m],
        )
        for structure in library.structures:
            yield from self.structure_records(structure)
        yield self._none("ENDLIB")

    def encode(self, library: Library, stream: BinaryIO) -> int:
        """Build every record first, then write them in order. Returns bytes written."""
        records = list(self.records(library))
        written = 0
        for rec in records:
            raw = rec.to_bytes()
            stream.write(raw)
            written += len(raw)
        self._log.debug(
            "Encoded library '%s': %d records, %d bytes",
            library.name,
            len(records),
            written,
        )
        return written
