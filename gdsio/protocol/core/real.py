# gdsio/protocol/core/real.py
"""
Excess-64, base-16 reals.

Byte 0 holds the sign (bit 7) and a power-of-16 exponent biased by 64
(bits 0-6). The remaining 3 or 7 bytes are an unsigned mantissa with the
radix point in front of its most significant bit:

    value = sign * mantissa * 16 ** (exponent - 64 - digits)

where ``digits`` is the number of hex digits in the mantissa (6 or 14).
"""
from __future__ import annotations

import math

from gdsio.errors import EncodeError

# width in bytes -> mantissa hex digits
MANTISSA_DIGITS = {4: 6, 8: 14}

_SIGN_BIT = 0x80
_EXP_MASK = 0x7F
_EXP_BIAS = 64


def _digits(width: int) -> int:
    if width not in MANTISSA_DIGITS:
        raise ValueError(f"GDS reals are 4 or 8 bytes wide, got {width}")
    return MANTISSA_DIGITS[width]


def decode_real(raw: bytes) -> float:
    digits = _digits(len(raw))
    exponent = (raw[0] & _EXP_MASK) - _EXP_BIAS - digits
    mantissa = int.from_bytes(raw[1:], "big")
    # ldexp keeps the power-of-two scaling exact
    value = math.ldexp(mantissa, 4 * exponent)
    return -value if raw[0] & _SIGN_BIT else value


def encode_real(value: float, width: int = 8) -> bytes:
    digits = _digits(width)
    if math.isnan(value) or math.isinf(value):
        raise EncodeError(f"Cannot encode non-finite real {value!r}")

    mantissa = abs(float(value))
    if mantissa == 0.0:
        return bytes(width)

    exponent = _EXP_BIAS
    # normalize into [1/16, 1)
    while mantissa >= 1.0:
        mantissa /= 16.0
        exponent += 1
    while mantissa < 1.0 / 16.0:
        mantissa *= 16.0
        exponent -= 1

    if not 0 <= exponent <= _EXP_MASK:
        raise EncodeError(
            f"Real {value!r} is outside the excess-64 exponent range",
            details={"value": value, "exponent": exponent - _EXP_BIAS},
        )

    man_int = int(mantissa * 16.0 ** digits)
    first = exponent | _SIGN_BIT if value < 0 else exponent
    return bytes([first]) + man_int.to_bytes(width - 1, "big")
