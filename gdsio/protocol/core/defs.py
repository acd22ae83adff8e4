# gdsio/protocol/core/defs.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from gdsio.config import DEFAULTS

from .types import DataType
from ..loader import RecordTableLoader

_log = logging.getLogger(__name__)


class RecordTable:
    """Runtime access to the record-type table (name <-> tag, canonical data type)."""

    _default: Optional["RecordTable"] = None

    def __init__(self, loader: RecordTableLoader):
        self.records: Dict[str, Dict[str, Any]] = loader.records
        self.file_hashes: Dict[str, str] = dict(loader.file_hashes)

        # Fast lookup maps
        self.codes: Dict[str, int] = {name: r["code"] for name, r in self.records.items()}
        self.names: Dict[int, str] = {r["code"]: name for name, r in self.records.items()}

    @classmethod
    def from_dir(cls, defs_dir: Path) -> "RecordTable":
        loader = RecordTableLoader(defs_dir)
        loader.load_all()
        table = cls(loader)
        _log.debug(
            "Loaded %d record types from %s (sha256 %s)",
            len(table.records),
            defs_dir,
            ", ".join(f"{fn}={h[:12]}" for fn, h in sorted(table.file_hashes.items())),
        )
        return table

    @classmethod
    def default(cls) -> "RecordTable":
        """The packaged table, loaded once per process."""
        if cls._default is None:
            cls._default = cls.from_dir(DEFAULTS.defs_dir)
        return cls._default

    def code(self, name: str) -> int:
        key = name.upper()
        if key not in self.codes:
            raise KeyError(f"Unknown record type: {name}")
        return self.codes[key]

    def name(self, code: int) -> str:
        return self.names.get(int(code), f"REC_0x{int(code):02X}")

    def has_code(self, code: int) -> bool:
        return int(code) in self.names

    def data_type(self, name: str) -> DataType:
        key = name.upper()
        if key not in self.records:
            raise KeyError(f"Unknown record type: {name}")
        return self.records[key]["data_type"]
