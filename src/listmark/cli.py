#!/usr/bin/env python3
"""
Listmark: Keep numbered lists, outlines, and checklists in order

Common usage:
  listmark notes.md                   Renumber every list, print the result
  listmark --inplace docs/            Renumber lists in all Markdown/text files
  listmark --toggle 12 -i todo.md     Toggle the checkbox on line 12
  listmark --demote 4-6 -i notes.md   Demote lines 4 to 6 one outline level
  listmark --classify notes.md        Show how each line is recognized

Settings are read from `.listmark.toml`, `listmark.toml`, or `[tool.listmark]` in
`pyproject.toml`; command-line flags take precedence.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import sys
from dataclasses import dataclass
from pathlib import Path

from strif import atomic_output_file

from listmark.config import BulletsConfig, find_config_file, load_config, merge_cli_with_config
from listmark.editor import ListEditor
from listmark.file_discovery import FileDiscovery
from listmark.logs import configure_logging, get_logger
from listmark.surface import LineBuffer

logger = get_logger(__name__)


@dataclass
class Options:
    """Command-line options for the listmark tool."""

    files: list[str]
    output: str
    inplace: bool
    nobackup: bool
    version: bool
    verbose: bool
    list_files: bool
    # Actions (renumbering when none is given)
    toggle: int | None
    promote: tuple[int, int] | None
    demote: tuple[int, int] | None
    new_item: int | None
    classify: bool
    # Engine settings
    checkbox_markers: str
    toggle_partials: bool
    nested_checkboxes: bool
    alpha_max_len: int
    outline_levels: list[str]
    line_spacing: int
    renumber_on_change: bool
    delete_last_bullet: bool
    colon_indent: bool
    shift_width: int
    tab_width: int
    file_types: list[str]

    def bullets_config(self) -> BulletsConfig:
        return BulletsConfig(
            checkbox_markers=self.checkbox_markers,
            toggle_partials=self.toggle_partials,
            nested_checkboxes=self.nested_checkboxes,
            alpha_max_len=self.alpha_max_len,
            outline_levels=tuple(self.outline_levels),
            line_spacing=self.line_spacing,
            renumber_on_change=self.renumber_on_change,
            delete_last_bullet=self.delete_last_bullet,
            colon_indent=self.colon_indent,
            shift_width=self.shift_width,
            tab_width=self.tab_width,
            file_types=tuple(self.file_types),
        )


def _line_range(value: str) -> tuple[int, int]:
    """Parse "N" or "N-M" into an inclusive line range."""
    start_text, _, end_text = value.partition("-")
    try:
        start = int(start_text)
        end = int(end_text) if end_text else start
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid line range: {value!r}") from None
    if start < 1 or end < start:
        raise argparse.ArgumentTypeError(f"invalid line range: {value!r}")
    return start, end


def _line_number(value: str) -> int:
    start, end = _line_range(value)
    if start != end:
        raise argparse.ArgumentTypeError(f"expected a single line number: {value!r}")
    return start


def _build_parser() -> argparse.ArgumentParser:
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    defaults = BulletsConfig()
    parser = argparse.ArgumentParser(
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "files",
        nargs="*",
        type=str,
        default=[],
        help="Input files or directories (use '-' for stdin)",
    )
    parser.add_argument(
        "-o", "--output", type=str, default="-", help="Output file (use '-' for stdout)"
    )
    parser.add_argument(
        "-i", "--inplace", action="store_true", help="Edit files in place (ignores --output)"
    )
    parser.add_argument(
        "--nobackup",
        action="store_true",
        help="Do not make a backup of the original file when using --inplace",
    )

    actions = parser.add_mutually_exclusive_group()
    actions.add_argument(
        "--toggle", type=_line_number, metavar="LINE", help="Toggle the checkbox on LINE"
    )
    actions.add_argument(
        "--promote",
        type=_line_range,
        metavar="LINES",
        help="Promote LINES (N or N-M) one outline level",
    )
    actions.add_argument(
        "--demote",
        type=_line_range,
        metavar="LINES",
        help="Demote LINES (N or N-M) one outline level",
    )
    actions.add_argument(
        "--new-item",
        type=_line_number,
        dest="new_item",
        metavar="LINE",
        help="Start a new list item after LINE",
    )
    actions.add_argument(
        "--classify",
        action="store_true",
        help="Print the bullet kind and marker recognized on each line",
    )
    actions.add_argument(
        "--list-files",
        action="store_true",
        dest="list_files",
        help="Print resolved file paths without processing them",
    )

    parser.add_argument(
        "--markers",
        type=str,
        dest="checkbox_markers",
        default=defaults.checkbox_markers,
        help="Checkbox marker ramp, unchecked first and checked last (default: %(default)r)",
    )
    parser.add_argument(
        "--alpha-len",
        type=int,
        dest="alpha_max_len",
        default=defaults.alpha_max_len,
        help="Maximum number of letters in an alphabetic bullet (default: %(default)s)",
    )
    parser.add_argument(
        "--outline-levels",
        type=lambda s: [tag.strip() for tag in s.split(",") if tag.strip()],
        dest="outline_levels",
        default=list(defaults.outline_levels),
        metavar="TAGS",
        help="Comma-separated outline level sequence (default: %s)"
        % ",".join(defaults.outline_levels),
    )
    parser.add_argument(
        "--shift-width",
        type=int,
        dest="shift_width",
        default=defaults.shift_width,
        help="Columns to indent or outdent per outline level (default: %(default)s)",
    )
    parser.add_argument(
        "--tab-width",
        type=int,
        dest="tab_width",
        default=defaults.tab_width,
        help="Columns per tab when measuring indentation (default: %(default)s)",
    )
    parser.add_argument(
        "--line-spacing",
        type=int,
        dest="line_spacing",
        default=defaults.line_spacing,
        help="Lines from one list item to the next, 2 for blank-separated (default: %(default)s)",
    )
    parser.add_argument(
        "--no-renumber",
        action="store_true",
        dest="no_renumber",
        help="Do not renumber the list after promoting, demoting, or adding items",
    )
    parser.add_argument(
        "--no-nest",
        action="store_true",
        dest="no_nest",
        help="Toggle only the given checkbox, without updating parents or children",
    )
    parser.add_argument(
        "--no-partials",
        action="store_true",
        dest="no_partials",
        help="Toggle partially checked boxes to unchecked rather than checked",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log each operation to stderr"
    )
    parser.add_argument(
        "--version", action="store_true", help="Show version information and exit"
    )
    return parser


# argparse dest name -> Options field name, for flags a config file can also set
_TRACKED_FLAGS: dict[str, str] = {
    "checkbox_markers": "checkbox_markers",
    "alpha_max_len": "alpha_max_len",
    "outline_levels": "outline_levels",
    "shift_width": "shift_width",
    "tab_width": "tab_width",
    "line_spacing": "line_spacing",
    "no_renumber": "renumber_on_change",
    "no_nest": "nested_checkboxes",
    "no_partials": "toggle_partials",
}


def _explicit_flags(args: list[str] | None) -> set[str]:
    """
    Which tracked flags the user actually passed. Re-parses with sentinel
    defaults rather than comparing against default values, which fails when the
    user passes the default.
    """
    _SENTINEL = object()
    sentinel_parser = argparse.ArgumentParser(add_help=False)
    sentinel_parser.add_argument("--markers", dest="checkbox_markers", default=_SENTINEL)
    sentinel_parser.add_argument("--alpha-len", dest="alpha_max_len", default=_SENTINEL)
    sentinel_parser.add_argument("--outline-levels", dest="outline_levels", default=_SENTINEL)
    sentinel_parser.add_argument("--shift-width", dest="shift_width", default=_SENTINEL)
    sentinel_parser.add_argument("--tab-width", dest="tab_width", default=_SENTINEL)
    sentinel_parser.add_argument("--line-spacing", dest="line_spacing", default=_SENTINEL)
    for flag in ("--no-renumber", "--no-nest", "--no-partials"):
        sentinel_parser.add_argument(flag, action="store_true", default=_SENTINEL)
    sentinel_opts, _ = sentinel_parser.parse_known_args(args if args is not None else sys.argv[1:])

    return {
        field_name
        for dest_name, field_name in _TRACKED_FLAGS.items()
        if getattr(sentinel_opts, dest_name, _SENTINEL) is not _SENTINEL
    }


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns the options and the set of option fields the user set explicitly (for
    config merge precedence).
    """
    opts = _build_parser().parse_args(args)
    options = Options(
        files=opts.files,
        output=opts.output,
        inplace=opts.inplace,
        nobackup=opts.nobackup,
        version=opts.version,
        verbose=opts.verbose,
        list_files=opts.list_files,
        toggle=opts.toggle,
        promote=opts.promote,
        demote=opts.demote,
        new_item=opts.new_item,
        classify=opts.classify,
        checkbox_markers=opts.checkbox_markers,
        toggle_partials=not opts.no_partials,
        nested_checkboxes=not opts.no_nest,
        alpha_max_len=opts.alpha_max_len,
        outline_levels=opts.outline_levels,
        line_spacing=opts.line_spacing,
        renumber_on_change=not opts.no_renumber,
        delete_last_bullet=True,
        colon_indent=True,
        shift_width=opts.shift_width,
        tab_width=opts.tab_width,
        file_types=list(BulletsConfig().file_types),
    )
    return options, _explicit_flags(args)


def _resolve_files(options: Options) -> list[str]:
    """Expand directories into the files matching the configured file types."""
    if not any(f != "-" and Path(f).is_dir() for f in options.files) and not options.list_files:
        return options.files

    resolvable = [f for f in options.files if f != "-"]
    resolved = [str(p) for p in FileDiscovery(options.file_types).resolve(resolvable)]
    if len(resolvable) < len(options.files):
        resolved.insert(0, "-")
    return resolved


def _check_lines(editor: ListEditor, start: int, end: int) -> None:
    last = editor.surface.last_line()
    if end > last:
        raise IndexError(f"Line {end} is past the end of the document ({last} lines)")


def process_text(text: str, options: Options, config: BulletsConfig) -> tuple[str, bool]:
    """
    Apply the selected action to a document. Returns the new text and whether the
    action had any effect.
    """
    buffer = LineBuffer.from_text(text, tab_width=config.tab_width)
    editor = ListEditor(buffer, config)

    if options.toggle is not None:
        _check_lines(editor, options.toggle, options.toggle)
        effect = editor.toggle_checkbox(options.toggle)
    elif options.promote is not None:
        _check_lines(editor, *options.promote)
        effect = editor.promote(*options.promote) > 0
    elif options.demote is not None:
        _check_lines(editor, *options.demote)
        effect = editor.demote(*options.demote) > 0
    elif options.new_item is not None:
        _check_lines(editor, options.new_item, options.new_item)
        effect = editor.new_item(options.new_item) is not None
    else:
        effect = editor.renumber_document() > 0
    return buffer.text(), effect


def classify_text(text: str, config: BulletsConfig) -> str:
    """One line per input line: number, bullet kind tag (or "-"), and marker."""
    buffer = LineBuffer.from_text(text, tab_width=config.tab_width)
    editor = ListEditor(buffer, config)
    rows = []
    for line in range(1, buffer.last_line() + 1):
        bullet = editor.classify(line)
        if bullet is None:
            rows.append(f"{line}\t-")
        else:
            rows.append(f"{line}\t{bullet.outline_tag}\t{bullet.marker}")
    return "\n".join(rows) + "\n" if rows else ""


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _write_output(path: str, text: str, backup: bool) -> None:
    if path == "-":
        sys.stdout.write(text)
        return
    with atomic_output_file(
        Path(path), make_parents=True, backup_suffix=".orig" if backup else None
    ) as temp_path:
        Path(temp_path).write_text(text, encoding="utf-8")


def process_files(options: Options, files: list[str]) -> None:
    config = options.bullets_config()
    if options.inplace and "-" in files:
        raise ValueError("Cannot use --inplace with stdin")
    if not options.inplace and not options.classify and len(files) > 1:
        raise ValueError("Multiple inputs require --inplace")

    targeted = any(
        action is not None
        for action in (options.toggle, options.promote, options.demote, options.new_item)
    )
    for path in files:
        text = _read_input(path)
        if options.classify:
            sys.stdout.write(classify_text(text, config))
            continue
        result, effect = process_text(text, options, config)
        if targeted and not effect:
            logger.warning("operation_had_no_effect", file=path)
        else:
            logger.debug("file_processed", file=path, changed=result != text)
        if options.inplace:
            if result != text:
                _write_output(path, result, backup=not options.nobackup)
        else:
            _write_output(options.output, result, backup=False)


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the listmark CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    options, explicit_flags = _parse_args(args)
    configure_logging(options.verbose)

    if options.version:
        try:
            version = importlib.metadata.version("listmark")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    if not options.files:
        print(
            "Error: No input specified. Provide files, directories, or '-' for stdin."
            " Use --help for more options.",
            file=sys.stderr,
        )
        return 1

    try:
        config_path = find_config_file(Path.cwd())
        if config_path:
            merge_cli_with_config(options, load_config(config_path), explicit_flags)

        files = _resolve_files(options)
        if options.list_files:
            for f in files:
                print(f)
            return 0

        process_files(options, files)
    except (ValueError, IndexError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
