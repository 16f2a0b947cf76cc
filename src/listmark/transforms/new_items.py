"""
Starting a new list item below an existing one.

The new item continues the series of the item it follows ("3." after "2.",
"- [ ]" after any checkbox). Asking for a new item from an item that is still
empty ends the list instead, the way word processors do: the empty marker is
removed. An item ending in a colon gets its new item one level deeper.
"""

from __future__ import annotations

from listmark.bullets.classifier import BulletKind, next_bullet
from listmark.bullets.search import BulletSearch
from listmark.logs import get_logger
from listmark.transforms.outline_levels import Direction, change_level
from listmark.transforms.renumbering import renumber_list

logger = get_logger(__name__)


def insert_new_item(search: BulletSearch, line: int) -> int | None:
    """
    Add a new item after line `line`.

    Returns the line to continue editing at: the new item, or `line` itself when
    an empty item was cleared. Returns `None` when nothing was done (`line` is
    not in a list, or the series cannot continue).
    """
    config = search.config
    surface = search.surface
    bullet = search.closest_bullet(line, search.indent(line))
    if bullet is None:
        return None

    if not bullet.body_text:
        if not config.delete_last_bullet:
            return None
        surface.set_lines(line, line, [""])
        search.cache.clear()
        logger.debug("empty_item_cleared", line=line)
        return line

    if bullet.kind == BulletKind.alphabetic and bullet.value + 1 > config.alpha_max:
        logger.debug("new_item_skipped", line=line, reason="alphabet_exhausted")
        return None

    following = next_bullet(bullet, config)
    new_lines = [""] * (config.line_spacing - 1) + [following.text()]
    surface.set_lines(line + 1, line, new_lines)
    search.cache.clear()
    new_line = line + len(new_lines)
    logger.debug("new_item_inserted", line=new_line, marker=following.marker)

    if config.colon_indent and surface.get_line(line).rstrip().endswith(":"):
        change_level(search, Direction.demote, new_line)
    elif config.renumber_on_change:
        renumber_list(search, new_line)
    return new_line
