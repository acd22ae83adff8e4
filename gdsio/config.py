# gdsio/config.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


def package_root() -> Path:
    # <repo>/gdsio, based on this file's location
    return Path(__file__).resolve().parent


def default_defs_dir() -> Path:
    return package_root() / "protocol" / "defs"


@dataclass(frozen=True)
class GdsConfig:
    defs_dir: Path = field(default_factory=default_defs_dir)
    string_encoding: str = "utf-8"
    atomic_write: bool = True  # write to a sibling temp file, then os.replace


DEFAULTS = GdsConfig()
