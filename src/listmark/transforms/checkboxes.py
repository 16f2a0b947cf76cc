"""
Checkbox toggling with propagation through nested checklists.

The checkbox ramp (default `" .oOx"`) orders the states of a checkbox: the first
character is unchecked, the last is checked, and the characters in between mark
partial completion.

Toggling a checkbox flips it between unchecked and checked. With nested
checkboxes enabled the change then spreads:
- up: each ancestor checkbox shows how many of its children are checked, as the
  ramp character at `floor((len(ramp) - 1) * checked / total)`
- down: every descendant checkbox takes the new state

EXAMPLE
-------
Toggling "Draft" with the default ramp:

    - [ ] Write report             - [.] Write report
      - [ ] Draft           ->       - [x] Draft
      - [ ] Review                   - [ ] Review
      - [ ] Send                     - [ ] Send
"""

from __future__ import annotations

from dataclasses import replace

from listmark.bullets.classifier import BulletDescriptor, BulletKind
from listmark.bullets.search import BulletSearch
from listmark.config import BulletsConfig
from listmark.logs import get_logger

logger = get_logger(__name__)


def is_checked(marker: str, config: BulletsConfig) -> bool:
    return marker == config.checked_marker or marker in ("x", "X")


def toggled_marker(marker: str, config: BulletsConfig) -> str | None:
    """
    The marker a checkbox gets when toggled, or `None` for a character that is
    not part of the ramp.
    """
    if marker == config.unchecked_marker:
        return config.checked_marker
    if is_checked(marker, config):
        return config.unchecked_marker
    if marker in config.partial_markers:
        return config.checked_marker if config.toggle_partials else config.unchecked_marker
    return None


def completion_marker(checked: int, total: int, config: BulletsConfig) -> str:
    """Ramp character for `checked` out of `total` children being checked."""
    ramp = config.checkbox_markers
    if total <= 0:
        return ramp[0]
    return ramp[(len(ramp) - 1) * checked // total]


def toggle_checkbox(search: BulletSearch, line: int) -> bool:
    """
    Toggle the checkbox of the bullet containing line `line`. Returns `False` if
    there was nothing to toggle.
    """
    config = search.config
    bullet = search.closest_bullet(line, search.indent(line))
    if bullet is None or bullet.kind != BulletKind.checkbox:
        logger.debug("checkbox_unchanged", line=line, reason="not_a_checkbox")
        return False

    marker = toggled_marker(bullet.checkbox_marker, config)
    if marker is None:
        logger.debug("checkbox_unchanged", line=line, reason="unknown_marker", marker=bullet.checkbox_marker)
        return False

    _set_checkbox(search, bullet, marker)
    logger.debug("checkbox_toggled", line=bullet.source_line, marker=marker)

    if config.nested_checkboxes:
        _update_ancestors(search, bullet.source_line)
        if marker in (config.unchecked_marker, config.checked_marker):
            _set_descendants(search, bullet.source_line, marker)
    return True


def _update_ancestors(search: BulletSearch, line: int) -> None:
    config = search.config
    while True:
        parent = search.parent_of(line)
        if parent is None or parent.kind != BulletKind.checkbox:
            return
        siblings = search.siblings_of(line)
        checked = 0
        for sibling in siblings:
            bullet = search.bullet_at(sibling)
            if bullet is not None and is_checked(bullet.checkbox_marker, config):
                checked += 1
        _set_checkbox(search, parent, completion_marker(checked, len(siblings), config))
        line = parent.source_line


def _set_descendants(search: BulletSearch, line: int, marker: str) -> None:
    stack = [line]
    while stack:
        for child in search.children_of(stack.pop()):
            bullet = search.bullet_at(child)
            if bullet is not None and bullet.kind == BulletKind.checkbox:
                _set_checkbox(search, bullet, marker)
            stack.append(child)


def _set_checkbox(search: BulletSearch, bullet: BulletDescriptor, marker: str) -> None:
    """Rewrite only the bracketed character of a checkbox line."""
    if bullet.checkbox_marker == marker:
        return
    line = bullet.source_line
    search.surface.set_lines(line, line, [replace(bullet, checkbox_marker=marker).text()])
    search.cache.clear()
