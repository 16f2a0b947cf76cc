"""
List renumbering.

Renumbering walks a range of lines once, keeping one counter per indentation
width. Each bullet head either starts a counter (first bullet at a new, deeper
indentation) or advances the counter of its indentation (a sibling). Moving back
out to a shallower indentation closes every deeper list, so nested lists start
over when they are entered again.

The first bullet at each indentation sets the style for its list: later siblings
are rewritten in that kind, case, closure, and spacing. Standard and checkbox
bullets are never numbered and are left as they are.

EXAMPLE
-------
Input:
    I. Top
      a. Sub
      c. Sub
    III. Top

Output:
    I. Top
      a. Sub
      b. Sub
    II. Top
"""

from __future__ import annotations

from dataclasses import dataclass

from listmark.bullets.classifier import BulletKind, format_marker
from listmark.bullets.search import BulletSearch
from listmark.logs import get_logger

logger = get_logger(__name__)


@dataclass
class ListLevelState:
    """The counter and style of the list open at one indentation width."""

    value: int
    kind: BulletKind
    lowercase: bool
    closure: str
    trailing_space: str


def renumber_lines(search: BulletSearch, start: int, end: int) -> int:
    """
    Renumber the bullets on lines `start..end` in place.

    Returns the number of lines whose text changed. Running it again on its own
    output changes nothing.
    """
    if start > end:
        return 0

    surface = search.surface
    old_lines = surface.get_lines(start, end)
    new_lines = list(old_lines)
    levels: dict[int, ListLevelState] = {}
    prev_indent = -1

    for line in range(start, end + 1):
        bullet = search.bullet_at(line)
        if bullet is None:
            continue
        indent = search.indent(line)
        numbered = bullet.kind.is_numbered

        if indent < prev_indent:
            # Outdent closes every nested list.
            for deeper in [key for key in levels if key > indent]:
                del levels[deeper]

        if indent > prev_indent or indent not in levels:
            if numbered:
                levels[indent] = ListLevelState(
                    value=bullet.value,
                    kind=bullet.kind,
                    lowercase=bullet.is_lowercase,
                    closure=bullet.closure,
                    trailing_space=bullet.trailing_space,
                )
        elif numbered:
            levels[indent].value += 1
        prev_indent = indent

        state = levels.get(indent)
        if numbered and state is not None:
            marker = format_marker(state.kind, state.value, state.lowercase, search.config)
            new_lines[line - start] = (
                bullet.leading_space + marker + state.closure + state.trailing_space + bullet.body_text
            )

    changed = sum(1 for old, new in zip(old_lines, new_lines) if old != new)
    if changed:
        surface.set_lines(start, end, new_lines)
        search.cache.clear()
    logger.debug("lines_renumbered", start=start, end=end, changed=changed)
    return changed


def list_bounds(search: BulletSearch, line: int) -> tuple[int, int] | None:
    """
    First and last line of the list containing `line`, or `None` if `line` is not
    part of a list. Runs of blank lines shorter than the configured line spacing
    do not end a list.
    """
    if not _in_list(search, line):
        return None

    first = line
    while True:
        previous = _step(search, first, -1)
        if previous is None:
            break
        first = previous

    last = line
    while True:
        following = _step(search, last, 1)
        if following is None:
            break
        last = following

    return first, last


def _in_list(search: BulletSearch, line: int) -> bool:
    return not search.is_blank(line) and search.closest_bullet(line, search.indent(line)) is not None


def _step(search: BulletSearch, line: int, direction: int) -> int | None:
    """The next list line from `line` in `direction`, skipping allowed blank separators."""
    for distance in range(1, search.config.line_spacing + 1):
        candidate = line + direction * distance
        if candidate < 1 or candidate > search.surface.last_line():
            return None
        if not search.is_blank(candidate):
            return candidate if _in_list(search, candidate) else None
    return None


def renumber_list(search: BulletSearch, line: int) -> int:
    """Renumber the whole list containing `line`. Returns the number of changed lines."""
    bounds = list_bounds(search, line)
    if bounds is None:
        return 0
    return renumber_lines(search, *bounds)


def renumber_document(search: BulletSearch) -> int:
    """
    Renumber every list in the document, each one on its own so that numbering
    never carries over from one list to the next. Returns the number of changed
    lines.
    """
    changed = 0
    line = 1
    while line <= search.surface.last_line():
        bounds = list_bounds(search, line)
        if bounds is None:
            line += 1
            continue
        changed += renumber_lines(search, *bounds)
        line = bounds[1] + 1
    return changed
