"""
`ListEditor` bundles a text surface, settings, and a search cache, and exposes
every list operation as a method. It is the entry point for editor integrations
and the CLI.

Usage:
    from listmark.editor import ListEditor
    from listmark.surface import LineBuffer

    buffer = LineBuffer.from_text("1. a\\n3. b\\n5. c\\n")
    editor = ListEditor(buffer)
    editor.renumber_list(1)
    buffer.text()  # "1. a\\n2. b\\n3. c\\n"
"""

from __future__ import annotations

from listmark.bullets.classifier import BulletDescriptor
from listmark.bullets.search import BulletSearch, SearchCache
from listmark.config import BulletsConfig
from listmark.logs import ensure_logging
from listmark.surface import TextSurface
from listmark.transforms.checkboxes import toggle_checkbox
from listmark.transforms.new_items import insert_new_item
from listmark.transforms.outline_levels import Direction, change_level, change_level_range
from listmark.transforms.renumbering import renumber_document, renumber_lines, renumber_list


class ListEditor:
    """List operations on one text surface, sharing a single search cache."""

    def __init__(self, surface: TextSurface, config: BulletsConfig | None = None) -> None:
        self.surface: TextSurface = surface
        self.config: BulletsConfig = config or BulletsConfig()
        self.search: BulletSearch = BulletSearch(surface, self.config, SearchCache())
        ensure_logging()

    def classify(self, line: int) -> BulletDescriptor | None:
        """The bullet starting on `line`, with ambiguous markers resolved in context."""
        return self.search.bullet_at(line)

    def closest_bullet(self, line: int, ceiling: int | None = None) -> BulletDescriptor | None:
        """The list item `line` belongs to (searching up to `ceiling` columns of indent)."""
        if ceiling is None:
            ceiling = self.search.indent(line)
        return self.search.closest_bullet(line, ceiling)

    def renumber(self, start: int, end: int) -> int:
        return renumber_lines(self.search, start, end)

    def renumber_list(self, line: int) -> int:
        return renumber_list(self.search, line)

    def renumber_document(self) -> int:
        return renumber_document(self.search)

    def toggle_checkbox(self, line: int) -> bool:
        return toggle_checkbox(self.search, line)

    def promote(self, start: int, end: int | None = None) -> int:
        return self.change_level(Direction.promote, start, end)

    def demote(self, start: int, end: int | None = None) -> int:
        return self.change_level(Direction.demote, start, end)

    def change_level(self, direction: Direction, start: int, end: int | None = None) -> int:
        """
        Promote or demote lines `start..end` (just `start` if `end` is omitted).
        Returns the number of lines changed; 0 means the operation had no effect.
        """
        if end is None or end == start:
            changed = int(change_level(self.search, direction, start))
            if changed and self.config.renumber_on_change:
                renumber_list(self.search, start)
            return changed
        return change_level_range(self.search, direction, start, end)

    def new_item(self, line: int) -> int | None:
        return insert_new_item(self.search, line)

    def invalidate(self, start: int, end: int | None = None) -> None:
        """Forget cached lookups after the host edited lines `start..end` directly."""
        self.search.cache.invalidate(start, end)
