"""
Conversions between list marker text and integer values.

Two numbering systems besides plain decimal appear in list markers:
- Roman numerals: I, II, III, IV ... MMMCMXCIX (1-3999), upper or lower case
- Letters: a, b, ... z, aa, ab ... (bijective base-26), upper or lower case

Decoding is lenient (markers are user-authored text) and encoding never raises:
values that cannot be represented fall back to the first symbol of the system.
"""

from __future__ import annotations

ROMAN_MAX = 3999

_ROMAN_NUMERALS: list[tuple[int, str]] = [
    (1000, "M"),
    (900, "CM"),
    (500, "D"),
    (400, "CD"),
    (100, "C"),
    (90, "XC"),
    (50, "L"),
    (40, "XL"),
    (10, "X"),
    (9, "IX"),
    (5, "V"),
    (4, "IV"),
    (1, "I"),
]

_ROMAN_VALUES = {"I": 1, "V": 5, "X": 10, "L": 50, "C": 100, "D": 500, "M": 1000}


def int_to_roman(n: int, lowercase: bool = False) -> str:
    """
    Convert an integer to a Roman numeral string.

    Values outside 1..3999 have no canonical form and come back as "I" (or "i").
    """
    if n < 1 or n > ROMAN_MAX:
        return "i" if lowercase else "I"
    result = []
    for value, numeral in _ROMAN_NUMERALS:
        while n >= value:
            result.append(numeral)
            n -= value
    roman = "".join(result)
    return roman.lower() if lowercase else roman


def roman_to_int(text: str) -> int:
    """
    Convert a Roman numeral string to an integer, scanning left to right.

    A symbol followed by a larger one is read as a subtractive pair. Unknown
    characters count as 0 and non-canonical forms like "IIII" still decode.
    """
    if not text:
        return 1
    s = text.upper()
    total = 0
    i = 0
    while i < len(s):
        current = _ROMAN_VALUES.get(s[i], 0)
        following = _ROMAN_VALUES.get(s[i + 1], 0) if i + 1 < len(s) else 0
        if current < following:
            total += following - current
            i += 2
        else:
            total += current
            i += 1
    return total


def alpha_max(max_len: int) -> int:
    """Largest value representable with at most `max_len` letters (702 for 2)."""
    return sum(26**power for power in range(1, max_len + 1))


def int_to_letter(n: int, lowercase: bool = True, max_len: int | None = None) -> str:
    """
    Convert an integer to a letter marker (1 -> a, 26 -> z, 27 -> aa, ...).

    Values below 1, or above `alpha_max(max_len)` when `max_len` is given,
    come back as "a" (or "A").
    """
    if n < 1 or (max_len is not None and n > alpha_max(max_len)):
        return "a" if lowercase else "A"
    chars = []
    while n > 0:
        n -= 1
        chars.append(chr(ord("a") + n % 26))
        n //= 26
    letters = "".join(reversed(chars))
    return letters if lowercase else letters.upper()


def letter_to_int(text: str) -> int:
    """Convert a letter marker to an integer (a=1, ..., z=26, aa=27, ...), ignoring case."""
    result = 0
    for char in text.lower():
        digit = ord(char) - ord("a") + 1
        if 1 <= digit <= 26:
            result = result * 26 + digit
    return result if result > 0 else 1
