"""
Engine settings and TOML-based config file loading for Listmark.

`BulletsConfig` holds the settings the list engine runs with. Config files are
searched as `.listmark.toml`, `listmark.toml`, or `pyproject.toml [tool.listmark]`
walking up from the current directory. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, TypeVar, cast

from listmark.bullets.numerals import alpha_max
from listmark.logs import get_logger

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]


# Tags accepted in an outline level sequence. Case matters for ROM/rom and ABC/abc.
OUTLINE_TAGS = frozenset(["ROM", "rom", "ABC", "abc", "num", "chk", "std-", "std*", "std+", "std."])

DEFAULT_OUTLINE_LEVELS = ("ROM", "ABC", "num", "abc", "rom", "std*", "std-", "std+")

DEFAULT_FILE_TYPES = ("*.md", "*.markdown", "*.txt", "COMMIT_EDITMSG")


@dataclass(frozen=True)
class BulletsConfig:
    """
    Settings for bullet recognition and list maintenance.

    `checkbox_markers` is the checkbox ramp: first character is unchecked, last is
    checked, anything in between is a partial state.
    """

    checkbox_markers: str = " .oOx"
    toggle_partials: bool = True
    nested_checkboxes: bool = True
    alpha_max_len: int = 2
    outline_levels: tuple[str, ...] = DEFAULT_OUTLINE_LEVELS
    line_spacing: int = 1
    renumber_on_change: bool = True
    delete_last_bullet: bool = True
    colon_indent: bool = True
    shift_width: int = 2
    tab_width: int = 4
    file_types: tuple[str, ...] = field(default=DEFAULT_FILE_TYPES)

    def __post_init__(self) -> None:
        if len(self.checkbox_markers) < 2:
            raise ValueError(
                f"checkbox markers need at least 2 characters, got {self.checkbox_markers!r}"
            )
        unknown = [tag for tag in self.outline_levels if tag not in OUTLINE_TAGS]
        if unknown:
            raise ValueError(
                f"Unknown outline level tag(s): {', '.join(unknown)} "
                f"(expected some of: {', '.join(sorted(OUTLINE_TAGS))})"
            )
        if self.alpha_max_len < 0:
            raise ValueError(f"alpha max length must be >= 0, got {self.alpha_max_len}")
        for name in ("line_spacing", "shift_width", "tab_width"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name.replace('_', ' ')} must be >= 1, got {getattr(self, name)}")

    @property
    def alpha_max(self) -> int:
        """Largest alphabetic marker value, e.g. 702 ("zz") for length 2."""
        return alpha_max(self.alpha_max_len)

    @property
    def unchecked_marker(self) -> str:
        return self.checkbox_markers[0]

    @property
    def checked_marker(self) -> str:
        return self.checkbox_markers[-1]

    @property
    def partial_markers(self) -> str:
        return self.checkbox_markers[1:-1]


@dataclass
class ListmarkConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    allowing the merge logic to distinguish "not configured" from "explicitly set
    to default value".
    """

    # Checkboxes
    checkbox_markers: str | None = None
    toggle_partials: bool | None = None
    nested_checkboxes: bool | None = None
    # Numbering and outline
    alpha_max_len: int | None = None
    outline_levels: list[str] | None = None
    line_spacing: int | None = None
    renumber_on_change: bool | None = None
    delete_last_bullet: bool | None = None
    colon_indent: bool | None = None
    shift_width: int | None = None
    tab_width: int | None = None
    # File discovery
    file_types: list[str] | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".listmark.toml", "listmark.toml", "pyproject.toml"]

# TOML keys whose names differ from the field names beyond kebab-case conversion
_TOML_ALIASES: dict[str, str] = {
    "markers": "checkbox_markers",
    "nest": "nested_checkboxes",
    "levels": "outline_levels",
    "renumber": "renumber_on_change",
    "alpha-len": "alpha_max_len",
}

_VALID_FIELDS = {f.name for f in fields(ListmarkConfig)}

logger = get_logger(__name__)


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.listmark.toml` >
    `listmark.toml` > `pyproject.toml` (only if it has `[tool.listmark]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename != "pyproject.toml" or _pyproject_has_listmark_section(candidate):
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_listmark_section(path: Path) -> bool:
    try:
        data = tomllib.loads(path.read_text())
        return "listmark" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> ListmarkConfig:
    """
    Load a `ListmarkConfig` from a TOML file. Supports both standalone
    `listmark.toml` / `.listmark.toml` and `pyproject.toml` (extracts
    `[tool.listmark]`).
    """
    data = tomllib.loads(config_path.read_text())

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("listmark", {})

    return _parse_config_data(data)


def _parse_config_data(data: dict[str, Any]) -> ListmarkConfig:
    """Parse a flat or sectioned TOML dict into ListmarkConfig."""
    # Flatten sections: [checkbox], [outline], [files] merge into top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = _TOML_ALIASES.get(key, key.replace("-", "_"))
        if snake_key in _VALID_FIELDS:
            mapped[snake_key] = value
        else:
            logger.warning("unrecognized_config_key", key=key)

    return ListmarkConfig(**mapped)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: ListmarkConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(ListmarkConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue
        if cfg_field.name in explicit_flags:
            continue
        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
