# gdsio/io.py
from __future__ import annotations

import io
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import BinaryIO, Optional

from gdsio.codec.decoder import LibraryDecoder
from gdsio.codec.encoder import LibraryEncoder
from gdsio.config import DEFAULTS, GdsConfig
from gdsio.errors import GdsIOError
from gdsio.model.library import Library
from gdsio.protocol.core.defs import RecordTable
from gdsio.protocol.core.reader import RecordReader

_log = logging.getLogger(__name__)


def _table_for(config: GdsConfig) -> RecordTable:
    if Path(config.defs_dir) == Path(DEFAULTS.defs_dir):
        return RecordTable.default()
    return RecordTable.from_dir(config.defs_dir)


def _target_mode(path: Path) -> int:
    """Mode for a replacement file: the existing file's, else 0o666 minus the umask."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


# ---------------------------------------------------------------------------
# Streams
# ---------------------------------------------------------------------------

def read_library_stream(stream: BinaryIO, *, config: Optional[GdsConfig] = None) -> Library:
    cfg = config or DEFAULTS
    table = _table_for(cfg)
    reader = RecordReader(stream, encoding=cfg.string_encoding, table=table)
    return LibraryDecoder(table).decode(reader)


def write_library_stream(library: Library, stream: BinaryIO, *, config: Optional[GdsConfig] = None) -> int:
    cfg = config or DEFAULTS
    encoder = LibraryEncoder(_table_for(cfg), encoding=cfg.string_encoding)
    return encoder.encode(library, stream)


def library_from_bytes(data: bytes, *, config: Optional[GdsConfig] = None) -> Library:
    return read_library_stream(io.BytesIO(data), config=config)


def library_to_bytes(library: Library, *, config: Optional[GdsConfig] = None) -> bytes:
    buf = io.BytesIO()
    write_library_stream(library, buf, config=config)
    return buf.getvalue()


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------

def read_library(path: str | Path, *, config: Optional[GdsConfig] = None) -> Library:
    path = Path(path)
    try:
        with open(path, "rb") as f:
            library = read_library_stream(f, config=config)
    except OSError as e:
        raise GdsIOError(
            f"Cannot read {path}: {e.strerror or e}",
            details={"path": str(path)},
        ) from e
    _log.debug("Read %s from %s", library, path)
    return library


def write_library(library: Library, path: str | Path, *, config: Optional[GdsConfig] = None) -> None:
    """
    Write ``library`` to ``path``.

    With ``atomic_write`` (the default) the records go to a temporary file in
    the same directory which replaces ``path`` only once everything has been
    written; on any failure the temporary file is removed and ``path`` is
    left untouched. The result keeps the mode of the file it replaces, or
    gets the umask default for a new file.
    """
    cfg = config or DEFAULTS
    path = Path(path)
    try:
        if not cfg.atomic_write:
            with open(path, "wb") as f:
                written = write_library_stream(library, f, config=cfg)
        else:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
            )
            try:
                with os.fdopen(fd, "wb") as f:
                    os.chmod(tmp_name, _target_mode(path))
                    written = write_library_stream(library, f, config=cfg)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                try:
                    os.unlink(tmp_name)
                except FileNotFoundError:
                    pass
                raise
    except OSError as e:
        raise GdsIOError(
            f"Cannot write {path}: {e.strerror or e}",
            details={"path": str(path)},
        ) from e
    _log.debug("Wrote %d bytes to %s", written, path)
