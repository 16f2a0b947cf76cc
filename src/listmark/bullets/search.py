"""
Locating the list item a line belongs to, and resolving ambiguous markers.

Every higher-level operation observes bullets through `BulletSearch`, so the
meaning of "the closest bullet at or above an indentation" stays uniform:

- `closest_bullet(line, ceiling)` walks backward from `line` to the nearest
  bullet indented at most `ceiling` columns. The walk gives up at a blank line,
  at unindented prose, or at the top of the document.
- `resolve(candidates)` picks between a Roman and an alphabetic reading of the
  same marker by following the preceding siblings until one of them settles it.
  With nothing to go on the Roman reading wins.

Results are memoized in a `SearchCache`. The cache observes the text, so any
write must be followed by `invalidate()` or `clear()`; the transforms clear it
after every batch of writes.
"""

from __future__ import annotations

from listmark.bullets.classifier import BulletDescriptor, BulletKind, classify_candidates
from listmark.config import BulletsConfig
from listmark.surface import TextSurface

_AMBIGUOUS_KINDS = (BulletKind.roman, BulletKind.alphabetic)


class SearchCache:
    """
    Memo for closest-bullet walks and ambiguity resolutions.

    Walks only go backward, so an entry keyed at line `n` can only have observed
    lines `1..n`.
    """

    def __init__(self) -> None:
        self._closest: dict[tuple[int, int], tuple[BulletDescriptor, ...]] = {}
        self._resolved: dict[int, BulletDescriptor] = {}

    def __len__(self) -> int:
        return len(self._closest) + len(self._resolved)

    def get_closest(self, line: int, ceiling: int) -> tuple[BulletDescriptor, ...] | None:
        return self._closest.get((line, ceiling))

    def put_closest(self, line: int, ceiling: int, found: tuple[BulletDescriptor, ...]) -> None:
        self._closest[(line, ceiling)] = found

    def get_resolved(self, line: int) -> BulletDescriptor | None:
        return self._resolved.get(line)

    def put_resolved(self, line: int, bullet: BulletDescriptor) -> None:
        self._resolved[line] = bullet

    def invalidate(self, start: int, end: int | None = None) -> None:
        """
        Drop every entry that could have observed lines `start..end`. Since walks
        only look backward, that is every entry keyed at or after `start`.
        """
        self._closest = {key: v for key, v in self._closest.items() if key[0] < start}
        self._resolved = {line: v for line, v in self._resolved.items() if line < start}

    def clear(self) -> None:
        self._closest.clear()
        self._resolved.clear()


class BulletSearch:
    """
    Bullet lookups over a text surface with a given configuration.
    """

    def __init__(
        self,
        surface: TextSurface,
        config: BulletsConfig | None = None,
        cache: SearchCache | None = None,
    ) -> None:
        self.surface: TextSurface = surface
        self.config: BulletsConfig = config or BulletsConfig()
        self.cache: SearchCache = cache or SearchCache()

    def indent(self, line: int) -> int:
        return self.surface.indent_width(line)

    def is_blank(self, line: int) -> bool:
        """Blank lines and lines past either end of the document."""
        return self.indent(line) < 0 or not self.surface.get_line(line).strip()

    def candidates_at(self, line: int) -> tuple[BulletDescriptor, ...]:
        """All readings of line `line` as a bullet, without context."""
        return classify_candidates(self.surface.get_line(line), line, self.config)

    def closest_candidates(self, from_line: int, ceiling: int) -> tuple[BulletDescriptor, ...]:
        """
        Candidates of the closest bullet at or before `from_line` indented at most
        `ceiling` columns, or an empty tuple.
        """
        if ceiling < 0 or from_line < 1:
            return ()
        cached = self.cache.get_closest(from_line, ceiling)
        if cached is not None:
            return cached

        found: tuple[BulletDescriptor, ...] = ()
        line = from_line
        while line >= 1 and not self.is_blank(line):
            candidates = self.candidates_at(line)
            indent = self.indent(line)
            if candidates and indent <= ceiling:
                found = candidates
                break
            if not candidates and indent == 0:
                # Unindented prose ends the list.
                break
            line -= self.config.line_spacing if candidates else 1

        self.cache.put_closest(from_line, ceiling, found)
        return found

    def closest_bullet(self, from_line: int, ceiling: int) -> BulletDescriptor | None:
        """The resolved closest bullet at or before `from_line` within `ceiling`."""
        candidates = self.closest_candidates(from_line, ceiling)
        return self.resolve(candidates) if candidates else None

    def bullet_at(self, line: int) -> BulletDescriptor | None:
        """The bullet that starts on `line`, or `None` for continuation and prose lines."""
        bullet = self.closest_bullet(line, self.indent(line))
        if bullet is not None and bullet.source_line == line:
            return bullet
        return None

    def previous_bullet(self, line: int) -> BulletDescriptor | None:
        """The closest bullet before `line` at the same or a shallower indentation."""
        return self.closest_bullet(line - self.config.line_spacing, self.indent(line))

    def resolve(self, candidates: tuple[BulletDescriptor, ...]) -> BulletDescriptor:
        """
        Choose one reading of an ambiguous (Roman or alphabetic) marker.

        The previous bullet at the same indentation decides: an unambiguous
        Roman or alphabetic sibling is followed; an ambiguous sibling defers to
        its own predecessor, and so on up the chain. A chain that starts a list,
        steps out to a shallower level, or reaches another kind of bullet
        resolves to Roman.
        """
        if len(candidates) == 1:
            return candidates[0]

        line = candidates[0].source_line
        cached = self.cache.get_resolved(line)
        if cached is not None:
            return cached

        indent = self.indent(line)
        kind = BulletKind.roman
        chain: list[int] = [line]
        current = line
        while True:
            previous = self.closest_candidates(current - self.config.line_spacing, indent)
            if not previous:
                break
            previous_line = previous[0].source_line
            if self.indent(previous_line) < indent:
                break
            if len(previous) == 1:
                if previous[0].kind in _AMBIGUOUS_KINDS:
                    kind = previous[0].kind
                break
            settled = self.cache.get_resolved(previous_line)
            if settled is not None:
                kind = settled.kind
                break
            chain.append(previous_line)
            current = previous_line

        for chain_line in chain:
            chain_candidates = self.closest_candidates(chain_line, indent)
            self.cache.put_resolved(chain_line, _pick(chain_candidates, kind))
        return _pick(candidates, kind)

    def parent_of(self, line: int) -> BulletDescriptor | None:
        """The bullet one level shallower than line `line`."""
        return self.closest_bullet(line, self.indent(line) - 1)

    def children_of(self, line: int) -> list[int]:
        """
        Line numbers of the direct children of the bullet starting at `line`: the
        bullet heads at the first deeper indentation, up to where indentation
        returns to the parent's level or the list ends.
        """
        parent_indent = self.indent(line)
        last = self.surface.last_line()
        children: list[int] = []
        child_indent = -1
        current = line + 1
        while current <= last:
            if self.is_blank(current):
                if self.config.line_spacing > 1 and not self.is_blank(current + 1):
                    current += 1
                    continue
                break
            indent = self.indent(current)
            if indent <= parent_indent:
                break
            if self.bullet_at(current) is not None:
                if child_indent < 0:
                    child_indent = indent
                if indent == child_indent:
                    children.append(current)
            current += 1
        return children

    def siblings_of(self, line: int) -> list[int]:
        """Line numbers of all bullets sharing `line`'s parent and indentation, including `line`."""
        parent = self.parent_of(line)
        if parent is None:
            return [line]
        indent = self.indent(line)
        return [n for n in self.children_of(parent.source_line) if self.indent(n) == indent]


def _pick(candidates: tuple[BulletDescriptor, ...], kind: BulletKind) -> BulletDescriptor:
    for candidate in candidates:
        if candidate.kind == kind:
            return candidate
    return candidates[0]
