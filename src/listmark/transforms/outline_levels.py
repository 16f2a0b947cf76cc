"""
Promoting and demoting list items through the configured outline levels.

The outline level sequence (default `ROM, ABC, num, abc, rom, std*, std-, std+`)
gives the marker style used at each depth. Demoting an item indents it by one
shift width and promoting outdents it; the item's new marker is then derived
from the closest bullet above it at the new indentation:

- a sibling at the same indentation: the next marker in the sibling's series
- a parent at a shallower indentation: the first marker of the level that
  follows the parent's level in the sequence
- a parent already at the last level: nothing changes
- a parent whose style is not in the sequence: the marker is dropped and
  only the body text is kept

Promoting an unindented item is not possible and changes nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from listmark.bullets.classifier import BulletDescriptor, BulletKind, next_bullet
from listmark.bullets.numerals import int_to_letter, int_to_roman
from listmark.bullets.search import BulletSearch
from listmark.config import BulletsConfig
from listmark.logs import get_logger
from listmark.surface import leading_whitespace
from listmark.transforms.renumbering import list_bounds, renumber_lines

logger = get_logger(__name__)


class Direction(str, Enum):
    promote = "promote"  # one level shallower
    demote = "demote"  # one level deeper


@dataclass(frozen=True)
class OutlineLevel:
    """
    One entry of the outline level sequence.

    Examples:
    - "ROM" -> OutlineLevel(kind=roman, lowercase=False, symbol="")
    - "abc" -> OutlineLevel(kind=alphabetic, lowercase=True, symbol="")
    - "std-" -> OutlineLevel(kind=standard, lowercase=True, symbol="-")
    """

    tag: str
    kind: BulletKind
    lowercase: bool
    symbol: str

    @classmethod
    def parse(cls, tag: str) -> OutlineLevel:
        if tag.startswith("std"):
            return cls(tag, BulletKind.standard, True, tag[3:])
        kind = BulletKind(tag.lower())
        return cls(tag, kind, tag == tag.lower(), "")

    def first_marker(self, config: BulletsConfig) -> str:
        """Marker text of the first item at this level, e.g. "1", "a", "I", "-", "- [ ]"."""
        if self.kind == BulletKind.numeric:
            return "1"
        if self.kind == BulletKind.roman:
            return int_to_roman(1, self.lowercase)
        if self.kind == BulletKind.alphabetic:
            return int_to_letter(1, self.lowercase)
        if self.kind == BulletKind.checkbox:
            return f"- [{config.unchecked_marker}]"
        return self.symbol


def next_level(config: BulletsConfig, tag: str) -> OutlineLevel | None:
    """
    The outline level after `tag`, or `None` when `tag` is the last level.

    Raises `KeyError` when `tag` is not in the sequence at all.
    """
    levels = list(config.outline_levels)
    if tag not in levels:
        raise KeyError(tag)
    index = levels.index(tag)
    if index + 1 >= len(levels):
        return None
    return OutlineLevel.parse(levels[index + 1])


def change_level(search: BulletSearch, direction: Direction, line: int) -> bool:
    """
    Promote or demote line `line` by one level. Returns `False` when the line was
    left unchanged (promoting an unindented line, or demoting past the last
    outline level).
    """
    surface = search.surface
    config = search.config
    original = surface.get_line(line)
    indent = search.indent(line)
    if search.is_blank(line):
        return False

    if direction == Direction.promote:
        if indent == 0:
            logger.debug("outline_level_unchanged", line=line, reason="already_outermost")
            return False
        new_indent = max(0, indent - config.shift_width)
    else:
        new_indent = indent + config.shift_width

    bullet = search.bullet_at(line)
    new_leading = " " * new_indent
    _write(search, line, new_leading + original[len(leading_whitespace(original)) :])
    if bullet is None:
        return True

    bullet = search.bullet_at(line)
    assert bullet is not None
    neighbor = search.previous_bullet(line)
    if neighbor is None:
        return True

    new_text = _transition_text(search, bullet, neighbor, new_indent)
    if new_text is None:
        _write(search, line, original)
        logger.debug("outline_level_unchanged", line=line, reason="last_outline_level")
        return False

    _write(search, line, new_text)
    logger.debug(
        "outline_level_changed",
        line=line,
        direction=direction.value,
        indent=new_indent,
        neighbor=neighbor.outline_tag,
    )
    return True


def _transition_text(
    search: BulletSearch, bullet: BulletDescriptor, neighbor: BulletDescriptor, new_indent: int
) -> str | None:
    """New text for `bullet` given its `neighbor` above, or `None` for no change."""
    config = search.config
    neighbor_indent = search.indent(neighbor.source_line)

    if neighbor_indent == new_indent:
        sibling = next_bullet(neighbor, config)
        if sibling.kind == BulletKind.checkbox and bullet.kind == BulletKind.checkbox:
            sibling = replace(sibling, checkbox_marker=bullet.checkbox_marker)
        return replace(
            sibling, leading_space=bullet.leading_space, body_text=bullet.body_text
        ).text()

    try:
        level = next_level(config, neighbor.outline_tag)
    except KeyError:
        return bullet.leading_space + bullet.body_text
    if level is None:
        return None

    if level.kind.is_numbered:
        closure = neighbor.closure or "."
    else:
        closure = ""
    return bullet.leading_space + level.first_marker(config) + closure + " " + bullet.body_text


def change_level_range(search: BulletSearch, direction: Direction, start: int, end: int) -> int:
    """
    Promote or demote every line in `start..end`, then renumber the enclosing list
    if renumbering on change is enabled. Returns the number of lines changed.
    """
    changed = sum(1 for line in range(start, end + 1) if change_level(search, direction, line))
    if changed and search.config.renumber_on_change:
        first = list_bounds(search, start)
        last = list_bounds(search, end)
        if first is not None and last is not None:
            renumber_lines(search, first[0], max(first[1], last[1]))
    return changed


def _write(search: BulletSearch, line: int, text: str) -> None:
    search.surface.set_lines(line, line, [text])
    search.cache.clear()
