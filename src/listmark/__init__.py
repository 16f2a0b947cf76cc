"""
Listmark keeps numbered lists, outlines, and checklists in plaintext and
Markdown documents in order: it recognizes list markers, renumbers lists,
promotes and demotes items through outline levels, and toggles nested
checkboxes.

Usage::

    from listmark import ListEditor, LineBuffer

    buffer = LineBuffer.from_text(text)
    ListEditor(buffer).renumber_document()
    text = buffer.text()
"""

from listmark.bullets.classifier import BulletDescriptor, BulletKind, classify
from listmark.config import BulletsConfig
from listmark.editor import ListEditor
from listmark.surface import LineBuffer, TextSurface
from listmark.transforms.outline_levels import Direction

__all__ = [
    "BulletDescriptor",
    "BulletKind",
    "BulletsConfig",
    "Direction",
    "LineBuffer",
    "ListEditor",
    "TextSurface",
    "classify",
]
