# gdsio/protocol/loader.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

from gdsio.utils.hashing import sha256_file
from gdsio.protocol.core.types import DataType


class RecordTableLoader:
    """Load the record-type YAML table into dicts + keep per-file SHA256 hashes."""

    REQUIRED_FILES = (
        "records.yml",
    )

    def __init__(self, defs_dir: Path):
        self.defs_dir = Path(defs_dir)

        # Full document
        self.records_doc: Dict[str, Any] = {}

        # name -> {"code": int, "data_type": DataType}
        self.records: Dict[str, Dict[str, Any]] = {}

        # File fingerprints (filename -> sha256 hex)
        self.file_hashes: Dict[str, str] = {}

    def load_all(self) -> None:
        self.file_hashes.clear()
        for fn in self.REQUIRED_FILES:
            path = self.defs_dir / fn
            if not path.exists():
                raise FileNotFoundError(f"Record table file not found: {path}")
            self.file_hashes[fn] = sha256_file(path)

        self.records_doc = self._load_yaml("records.yml")

        records = self.records_doc.get("records")
        if not isinstance(records, dict):
            raise ValueError("records.yml must contain 'records' mapping")

        self.records = {}
        seen: Dict[int, str] = {}
        for name, entry in records.items():
            if not isinstance(entry, dict):
                raise ValueError(f"Record '{name}' entry must be a mapping")

            code = entry.get("code")
            if not isinstance(code, int) or not 0 <= code <= 0xFF:
                raise ValueError(f"Record '{name}' has invalid code {code!r}")
            if code in seen:
                raise ValueError(f"Duplicate code 0x{code:02X} for records '{seen[code]}' and '{name}'")
            seen[code] = str(name)

            dtype = DataType.from_name(str(entry.get("data_type", "none")))
            self.records[str(name).upper()] = {"code": code, "data_type": dtype}

    def _load_yaml(self, filename: str) -> Dict[str, Any]:
        path = self.defs_dir / filename
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
