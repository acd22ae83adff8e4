"""Read and write GDSII stream files."""

from .config import DEFAULTS, GdsConfig
from .errors import (
    GdsError,
    GdsIOError,
    FramingError,
    EndOfStreamError,
    StringEncodingError,
    MissingTerminatorError,
    TruncatedStreamError,
    EncodeError,
)
from .model import (
    Date,
    Library,
    Structure,
    Element,
    ElementType,
    ElementParameter,
)
from .io import (
    read_library,
    write_library,
    read_library_stream,
    write_library_stream,
)

__all__ = [
    "DEFAULTS", "GdsConfig",
    "GdsError", "GdsIOError", "FramingError", "EndOfStreamError",
    "StringEncodingError", "MissingTerminatorError", "TruncatedStreamError",
    "EncodeError",
    "Date", "Library", "Structure", "Element", "ElementType", "ElementParameter",
    "read_library", "write_library", "read_library_stream", "write_library_stream",
]
