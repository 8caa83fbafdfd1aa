"""Fixed-width lowercase base32 codec for strong ID suffixes.

Values are split into 5-bit groups, most-significant first, and mapped through
a lowercase Crockford alphabet. Every width has a fixed encoded length of
``ceil(bits / 5)`` characters, so the top ``length * 5 - bits`` bits of an
encoded suffix are padding and must always be zero.

Example:
    >>> encode(3203, Width.W16)
    '0343'
    >>> decode("0343", Width.W16)
    3203
"""

from __future__ import annotations

import struct
from enum import IntEnum

from strongid.errors import InvalidCharacterError, LengthMismatchError, SuffixOverflowError


# Crockford base32, lowercase. Excludes i, l, o and u.
# IMPORTANT: '0' must be the first character, it doubles as the padding symbol
ALPHABET = "0123456789abcdefghjkmnpqrstvwxyz"
_DECODE_MAP = {c: i for i, c in enumerate(ALPHABET)}

_BITS_PER_SYMBOL = 5
_SYMBOL_MASK = 0b11111

# Pointer width of the running interpreter, fixed for the life of the process
_NATIVE_BITS = struct.calcsize("P") * 8


class Width(IntEnum):
    """Supported payload bit widths."""

    W8 = 8
    W16 = 16
    W32 = 32
    W64 = 64
    W128 = 128
    NATIVE = _NATIVE_BITS

    @property
    def encoded_length(self) -> int:
        """Number of base32 characters needed to hold this width."""
        return encoded_length(self)

    @property
    def padding_bits(self) -> int:
        """High-order bits of the encoded form that are always zero."""
        return self.encoded_length * _BITS_PER_SYMBOL - self.value

    @property
    def max_value(self) -> int:
        return (1 << self.value) - 1


def encoded_length(width: Width | int) -> int:
    """Return the fixed encoded length for a width (``ceil(bits / 5)``)."""
    bits = Width(width).value
    return -(-bits // _BITS_PER_SYMBOL)


def encode_symbol(value: int) -> str:
    """Map a 5-bit value to its alphabet character."""
    if not 0 <= value <= _SYMBOL_MASK:
        raise ValueError(f"Symbol value must be in 0..31, got {value}")
    return ALPHABET[value]


def decode_symbol(char: str) -> int:
    """Map an alphabet character back to its 5-bit value.

    Raises:
        InvalidCharacterError: If ``char`` is not in the alphabet. Uppercase
            characters are rejected, there is no case folding.
    """
    try:
        return _DECODE_MAP[char]
    except KeyError as e:
        raise InvalidCharacterError(char) from e


def encode(value: int, width: Width | int) -> str:
    """Encode an unsigned integer into a fixed-width base32 string.

    Raises:
        SuffixOverflowError: If ``value`` is negative or wider than ``width``.
    """
    width = Width(width)
    if not 0 <= value <= width.max_value:
        raise SuffixOverflowError(f"Value {value} does not fit in {width.value} bits")

    length = width.encoded_length
    return "".join(
        ALPHABET[(value >> (_BITS_PER_SYMBOL * (length - 1 - i))) & _SYMBOL_MASK]
        for i in range(length)
    )


def decode(text: str, width: Width | int) -> int:
    """Decode a fixed-width base32 string into an unsigned integer.

    Raises:
        LengthMismatchError: If ``text`` is not exactly the encoded length.
        InvalidCharacterError: If ``text`` contains a character outside the alphabet.
        SuffixOverflowError: If the padding bits above ``width`` are not zero.
    """
    width = Width(width)
    length = width.encoded_length
    if len(text) != length:
        raise LengthMismatchError(length, len(text))

    result = 0
    for position, char in enumerate(text):
        symbol = _DECODE_MAP.get(char)
        if symbol is None:
            raise InvalidCharacterError(char, position)
        result = (result << _BITS_PER_SYMBOL) | symbol

    if result >> width.value:
        highest = ALPHABET[width.max_value >> (_BITS_PER_SYMBOL * (length - 1))]
        raise SuffixOverflowError(
            f"Suffix {text!r} overflows {width.value} bits "
            f"(first character must be at most {highest!r})"
        )
    return result


__all__ = [
    "ALPHABET",
    "Width",
    "decode",
    "decode_symbol",
    "encode",
    "encode_symbol",
    "encoded_length",
]
