"""Tests for checkbox toggling and propagation."""

from __future__ import annotations

from textwrap import dedent

from listmark.bullets.search import BulletSearch
from listmark.config import BulletsConfig
from listmark.surface import LineBuffer
from listmark.transforms.checkboxes import (
    completion_marker,
    is_checked,
    toggle_checkbox,
    toggled_marker,
)


def toggle(text: str, line: int, **settings: object) -> str:
    buffer = LineBuffer.from_text(text)
    search = BulletSearch(buffer, BulletsConfig(**settings))  # type: ignore[arg-type]
    toggle_checkbox(search, line)
    return buffer.text()


REPORT = """\
- [ ] Write report
  - [ ] Draft
  - [ ] Review
  - [ ] Send
"""


class TestMarkers:
    """Tests for the checkbox ramp helpers."""

    def test_is_checked(self) -> None:
        config = BulletsConfig()
        assert is_checked("x", config)
        assert is_checked("X", config)
        assert not is_checked(" ", config)
        assert not is_checked("o", config)
        assert not is_checked("", config)

    def test_custom_checked_marker(self) -> None:
        assert is_checked("+", BulletsConfig(checkbox_markers=" -+"))

    def test_toggled_marker(self) -> None:
        config = BulletsConfig()
        assert toggled_marker(" ", config) == "x"
        assert toggled_marker("x", config) == " "
        assert toggled_marker("X", config) == " "
        assert toggled_marker("o", config) == "x"
        assert toggled_marker("?", config) is None

    def test_partials_toggle_to_unchecked_when_disabled(self) -> None:
        assert toggled_marker(".", BulletsConfig(toggle_partials=False)) == " "

    def test_completion_marker(self) -> None:
        config = BulletsConfig()
        assert completion_marker(0, 3, config) == " "
        assert completion_marker(1, 3, config) == "."
        assert completion_marker(2, 3, config) == "o"
        assert completion_marker(3, 3, config) == "x"
        assert completion_marker(3, 4, config) == "O"
        assert completion_marker(0, 0, config) == " "


class TestToggle:
    """Tests for toggling a single checkbox."""

    def test_cycle(self) -> None:
        once = toggle("- [ ] task\n", 1)
        assert once == "- [x] task\n"
        assert toggle(once, 1) == "- [ ] task\n"

    def test_partial(self) -> None:
        assert toggle("- [o] task\n", 1) == "- [x] task\n"
        assert toggle("- [o] task\n", 1, toggle_partials=False) == "- [ ] task\n"

    def test_from_continuation_line(self) -> None:
        assert toggle("- [ ] task\n  more detail\n", 2) == "- [x] task\n  more detail\n"

    def test_only_the_marker_changes(self) -> None:
        assert toggle("  * [ ]   spaced\n", 1) == "  * [x]   spaced\n"

    def test_not_a_checkbox(self) -> None:
        buffer = LineBuffer.from_text("1. item\n- plain\n")
        search = BulletSearch(buffer)
        assert not toggle_checkbox(search, 1)
        assert not toggle_checkbox(search, 2)
        assert buffer.text() == "1. item\n- plain\n"

    def test_unknown_bracket_is_not_a_checkbox(self) -> None:
        assert toggle("- [?] maybe\n", 1) == "- [?] maybe\n"


class TestNesting:
    """Toggling spreads to ancestors and descendants."""

    def test_parent_shows_completion(self) -> None:
        """One of three children checked gives the first partial marker."""
        expected = REPORT.replace("[ ] Write", "[.] Write").replace("[ ] Draft", "[x] Draft")
        assert toggle(REPORT, 2) == expected

    def test_all_children_checked_checks_parent(self) -> None:
        text = "- [ ] p\n  - [x] a\n  - [ ] b\n"
        assert toggle(text, 3) == "- [x] p\n  - [x] a\n  - [x] b\n"

    def test_unchecking_child_reduces_parent(self) -> None:
        text = "- [x] p\n  - [x] a\n  - [x] b\n"
        assert toggle(text, 3) == "- [o] p\n  - [x] a\n  - [ ] b\n"

    def test_propagates_through_grandparents(self) -> None:
        text = dedent(
            """\
            - [ ] g
              - [ ] p
                - [ ] c
              - [ ] q
            """
        )
        expected = dedent(
            """\
            - [o] g
              - [x] p
                - [x] c
              - [ ] q
            """
        )
        assert toggle(text, 3) == expected

    def test_descendants_take_new_state(self) -> None:
        text = dedent(
            """\
            - [ ] parent
              - [ ] a
                - [ ] a1
              - [x] b
              - plain note
            """
        )
        expected = dedent(
            """\
            - [x] parent
              - [x] a
                - [x] a1
              - [x] b
              - plain note
            """
        )
        assert toggle(text, 1) == expected
        assert toggle(expected, 1) == text.replace("[x] b", "[ ] b")

    def test_non_checkbox_parent_stops_propagation(self) -> None:
        text = "1. step\n  - [ ] a\n  - [ ] b\n"
        assert toggle(text, 2) == "1. step\n  - [x] a\n  - [ ] b\n"

    def test_nesting_disabled(self) -> None:
        expected = REPORT.replace("[ ] Draft", "[x] Draft")
        assert toggle(REPORT, 2, nested_checkboxes=False) == expected
