# gdsio/errors.py
from __future__ import annotations


class GdsError(Exception):
    """
    Base class for all expected failures while reading or writing GDSII streams.
    """

    #: Stable machine-readable identifier
    code: str = "unknown"

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# I/O
# ---------------------------------------------------------------------------

class GdsIOError(GdsError):
    """
    The underlying file or stream could not be opened, read or written.

    Examples:
      - file not found / permission denied
      - disk full while writing
    """
    code = "io_error"


# ---------------------------------------------------------------------------
# Record framing
# ---------------------------------------------------------------------------

class FramingError(GdsError):
    """
    A record header or payload is inconsistent with the bytes available.

    Examples:
      - declared length runs past the end of the stream
      - declared length smaller than the 4-byte header
      - unknown data-type tag
    """
    code = "framing_error"


class EndOfStreamError(FramingError):
    """The stream ended cleanly on a record boundary."""
    code = "end_of_stream"


class StringEncodingError(GdsError):
    """A string payload is not valid in the configured encoding."""
    code = "string_encoding_error"


# ---------------------------------------------------------------------------
# Grammar
# ---------------------------------------------------------------------------

class MissingTerminatorError(GdsError):
    """
    Structure or element records are not properly nested.

    Examples:
      - ENDLIB reached while a BGNSTR has no ENDSTR
      - ENDSTR/ENDLIB reached while an element has no ENDEL
      - element records or ENDSTR with no open BGNSTR
    """
    code = "missing_terminator"


class TruncatedStreamError(MissingTerminatorError):
    """The record stream ended before ENDLIB."""
    code = "truncated_stream"


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------

class EncodeError(GdsError):
    """
    A value in the object model cannot be represented on the wire.

    Examples:
      - integer outside its field width
      - real outside the excess-64 exponent range, NaN or infinity
      - element whose type was never set
      - record payload longer than 65531 bytes
    """
    code = "encode_error"
