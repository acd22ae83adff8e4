# gdsio/model/library.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, List, Optional

from .date import Date
from .element import Element

if TYPE_CHECKING:
    from gdsio.config import GdsConfig


@dataclass
class Structure:
    """A named, ordered collection of elements (a cell)."""
    name: str = ""
    date_mod: Date = field(default_factory=Date)
    date_acc: Date = field(default_factory=Date)
    elements: List[Element] = field(default_factory=list)

    def add_element(self, element: Element) -> "Structure":
        self.elements.append(element)
        return self


@dataclass
class Library:
    """
    Root of a GDSII design: header fields plus ordered structures.

    units_user: database units per user unit
    units_m:    database unit size in meters
    """
    version: int = 0
    name: str = ""
    date_mod: Date = field(default_factory=Date)
    date_acc: Date = field(default_factory=Date)
    units_user: float = 0.0
    units_m: float = 0.0
    structures: List[Structure] = field(default_factory=list)

    @classmethod
    def new(cls, version: int, name: str) -> "Library":
        """Empty library; dates default to the epoch and units to 0.0."""
        return cls(version=int(version), name=name)

    # --- structures ---
    def add_structure(self, structure: Structure) -> "Library":
        self.structures.append(structure)
        return self

    def get_structure(self, name: str) -> Optional[Structure]:
        for s in self.structures:
            if s.name == name:
                return s
        return None

    # --- serialization ---
    @classmethod
    def read(cls, path: str | Path, *, config: Optional["GdsConfig"] = None) -> "Library":
        from gdsio.io import read_library
        return read_library(path, config=config)

    def write(self, path: str | Path, *, config: Optional["GdsConfig"] = None) -> None:
        from gdsio.io import write_library
        write_library(self, path, config=config)

    @classmethod
    def read_stream(cls, stream: BinaryIO, *, config: Optional["GdsConfig"] = None) -> "Library":
        from gdsio.io import read_library_stream
        return read_library_stream(stream, config=config)

    def write_stream(self, stream: BinaryIO, *, config: Optional["GdsConfig"] = None) -> None:
        from gdsio.io import write_library_stream
        write_library_stream(self, stream, config=config)

    @classmethod
    def from_bytes(cls, data: bytes, *, config: Optional["GdsConfig"] = None) -> "Library":
        from gdsio.io import library_from_bytes
        return library_from_bytes(data, config=config)

    def to_bytes(self, *, config: Optional["GdsConfig"] = None) -> bytes:
        from gdsio.io import library_to_bytes
        return library_to_bytes(self, config=config)

    def __str__(self) -> str:
        return (
            f"Library {self.name} (version {self.version}), "
            f"modified {self.date_mod} / accessed {self.date_acc}"
        )
