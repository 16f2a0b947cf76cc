"""
Bullet recognition for single lines of text.

Six kinds of list markers are recognized:
- Standard: "- item", "* item", "+ item", ". item"
- Checkbox: "- [ ] item", "* [x] item" (marker drawn from the checkbox ramp)
- Numeric: "1. item", "12) item"
- Roman: "iv. item", "XII) item"
- Alphabetic: "a. item", "AB) item" (up to the configured number of letters)

Classification is the first phase of a two-phase pipeline. Roman numerals and
letters share surface syntax ("i.", "v)", "C."), so `classify_candidates()`
returns every structurally valid reading of a line and leaves the choice to the
context-aware resolver in `listmark.bullets.search`.

Usage:
    from listmark.bullets.classifier import classify, classify_candidates

    classify("  3. Details", 4, config)
    # BulletDescriptor(kind=numeric, leading_space="  ", marker="3", closure=".", ...)

    [c.kind for c in classify_candidates("i. item", 1, config)]
    # [BulletKind.roman, BulletKind.alphabetic]
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from functools import lru_cache

from listmark.bullets.numerals import int_to_letter, int_to_roman, letter_to_int, roman_to_int
from listmark.config import BulletsConfig


class BulletKind(str, Enum):
    """Kind of list marker. Values are the short tags used in outline levels."""

    standard = "std"  # -, *, +, .
    checkbox = "chk"  # - [ ], - [x]
    numeric = "num"  # 1. 2. 3.
    roman = "rom"  # i. ii. iii. or I. II. III.
    alphabetic = "abc"  # a. b. c. or A. B. C.

    @property
    def is_numbered(self) -> bool:
        """Whether markers of this kind carry a counter."""
        return self not in (BulletKind.standard, BulletKind.checkbox)


@dataclass(frozen=True)
class BulletDescriptor:
    """
    A line recognized as the head of a list item.

    Examples:
    - "  3. Details" -> numeric, leading_space="  ", marker="3", closure=".",
      trailing_space=" ", body_text="Details"
    - "- [x] Done" -> checkbox, marker="-", checkbox_marker="x", closure=""
    """

    kind: BulletKind
    leading_space: str
    marker: str
    checkbox_marker: str
    closure: str
    trailing_space: str
    body_text: str
    source_line: int

    def text(self) -> str:
        """Reassemble the line. An unmodified descriptor gives back its source line."""
        checkbox_part = f" [{self.checkbox_marker}]" if self.kind == BulletKind.checkbox else ""
        return (
            self.leading_space
            + self.marker
            + checkbox_part
            + self.closure
            + self.trailing_space
            + self.body_text
        )

    @property
    def is_lowercase(self) -> bool:
        return self.marker == self.marker.lower()

    @property
    def value(self) -> int:
        """Integer value of the marker (0 for standard and checkbox bullets)."""
        if self.kind == BulletKind.numeric:
            return int(self.marker)
        if self.kind == BulletKind.roman:
            return roman_to_int(self.marker)
        if self.kind == BulletKind.alphabetic:
            return letter_to_int(self.marker)
        return 0

    @property
    def outline_tag(self) -> str:
        """
        The outline level tag this bullet corresponds to, e.g. "num", "ROM",
        "abc", "chk", or "std-".
        """
        if self.kind == BulletKind.standard:
            return f"std{self.marker}"
        if self.kind in (BulletKind.roman, BulletKind.alphabetic):
            return self.kind.value if self.is_lowercase else self.kind.value.upper()
        return self.kind.value


# === Grammars ===

# Quick rejection of ordinary prose before any full grammar is tried.
_PRECHECK = re.compile(r"\s*[-*+.0-9A-Za-z]")

_STANDARD = re.compile(r"(\s*)([-*+.])()(\s+)(.*)")
_NUMERIC = re.compile(r"(\s*)(\d+)([.)])(\s+)(.*)")
_ROMAN = re.compile(
    r"(\s*)"
    r"(?=[IVXLCDMivxlcdm])"
    r"(M{0,4}(?:CM|CD|D?C{0,3})(?:XC|XL|L?X{0,3})(?:IX|IV|V?I{0,3})"
    r"|m{0,4}(?:cm|cd|d?c{0,3})(?:xc|xl|l?x{0,3})(?:ix|iv|v?i{0,3}))"
    r"([.)])(\s+)(.*)"
)


@lru_cache(maxsize=32)
def _checkbox_pattern(markers: str) -> re.Pattern[str]:
    chars = re.escape("".join(dict.fromkeys(markers + "xX")))
    return re.compile(rf"(\s*)([-*+]) \[([{chars}])\]()(\s+)(.*)")


@lru_cache(maxsize=32)
def _alphabetic_pattern(max_len: int) -> re.Pattern[str]:
    return re.compile(rf"(\s*)([A-Za-z]{{1,{max_len}}})([.)])(\s+)(.*)")


# (kind, leading, marker, checkbox_marker, closure, trailing, body)
_Parsed = tuple[BulletKind, str, str, str, str, str, str]


@lru_cache(maxsize=4096)
def _parse(text: str, markers: str, alpha_len: int) -> tuple[_Parsed, ...]:
    """All readings of `text` as a bullet, independent of line position."""
    if not _PRECHECK.match(text):
        return ()

    if "[" in text:
        match = _checkbox_pattern(markers).fullmatch(text)
        if match:
            leading, marker, box, closure, trailing, body = match.groups()
            return ((BulletKind.checkbox, leading, marker, box, closure, trailing, body),)

    match = _STANDARD.fullmatch(text)
    if match:
        leading, marker, closure, trailing, body = match.groups()
        return ((BulletKind.standard, leading, marker, "", closure, trailing, body),)

    match = _NUMERIC.fullmatch(text)
    if match:
        leading, marker, closure, trailing, body = match.groups()
        return ((BulletKind.numeric, leading, marker, "", closure, trailing, body),)

    # Roman and alphabetic readings can both be valid; keep both.
    found: list[_Parsed] = []
    match = _ROMAN.fullmatch(text)
    if match:
        leading, marker, closure, trailing, body = match.groups()
        found.append((BulletKind.roman, leading, marker, "", closure, trailing, body))
    if alpha_len > 0:
        match = _alphabetic_pattern(alpha_len).fullmatch(text)
        if match:
            leading, marker, closure, trailing, body = match.groups()
            found.append((BulletKind.alphabetic, leading, marker, "", closure, trailing, body))
    return tuple(found)


def classify_candidates(
    text: str, line_num: int, config: BulletsConfig
) -> tuple[BulletDescriptor, ...]:
    """
    Return every valid bullet reading of a line: empty for non-bullets, a single
    descriptor in most cases, or a Roman and an alphabetic descriptor for
    ambiguous markers like "i." or "C)".
    """
    return tuple(
        BulletDescriptor(kind, leading, marker, box, closure, trailing, body, line_num)
        for kind, leading, marker, box, closure, trailing, body in _parse(
            text, config.checkbox_markers, config.alpha_max_len
        )
    )


def classify(text: str, line_num: int, config: BulletsConfig) -> BulletDescriptor | None:
    """
    Classify a line without looking at its neighbors. Ambiguous markers are read
    as Roman numerals; use `BulletSearch` for a context-aware answer.
    """
    candidates = classify_candidates(text, line_num, config)
    return candidates[0] if candidates else None


def format_marker(kind: BulletKind, value: int, lowercase: bool, config: BulletsConfig) -> str:
    """Encode a counter value as marker text of the given kind."""
    if kind == BulletKind.roman:
        return int_to_roman(value, lowercase)
    if kind == BulletKind.alphabetic:
        return int_to_letter(value, lowercase, config.alpha_max_len)
    return str(value)


def next_bullet(bullet: BulletDescriptor, config: BulletsConfig) -> BulletDescriptor:
    """
    The bullet that follows `bullet` in its series, with an empty body.

    Numbered kinds advance by one, standard bullets repeat their marker, and
    checkboxes restart unchecked.
    """
    if bullet.kind.is_numbered:
        marker = format_marker(bullet.kind, bullet.value + 1, bullet.is_lowercase, config)
        return replace(bullet, marker=marker, body_text="")
    if bullet.kind == BulletKind.checkbox:
        return replace(bullet, checkbox_marker=config.unchecked_marker, body_text="")
    return replace(bullet, body_text="")
