"""Filtering and processing options shared by the MCP tools."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Union

from arkmcp.model.on_off_switch import OnOffSwitch, bool_to_on_off
from arkmcp.model.output_format import OutputFormat

SwitchLike = Union[OnOffSwitch, bool, str]


def _switch(value: SwitchLike) -> OnOffSwitch:
    if isinstance(value, OnOffSwitch):
        return value
    if isinstance(value, bool):
        return bool_to_on_off(value)
    return OnOffSwitch.parse(value)


def _format(value: OutputFormat | str) -> OutputFormat:
    if isinstance(value, OutputFormat):
        return value
    return OutputFormat.parse(value)


def _compile(pattern: str, what: str) -> re.Pattern[str] | None:
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ValueError(f"invalid {what} regex {pattern!r}: {exc}") from None


def _names(csv: str) -> frozenset[str]:
    return frozenset(item.strip() for item in csv.split(",") if item.strip())


def _extensions(csv: str) -> frozenset[str]:
    cleaned = (item.strip().lstrip(".").lower() for item in csv.split(","))
    return frozenset(item for item in cleaned if item)


def _extension(path: str) -> str:
    """Return the extension of the last path element, dot included."""
    name = os.path.basename(path)
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


@dataclass(frozen=True)
class Option:
    """Which files to take and how to process their content.

    Switch fields accept an OnOffSwitch, a bool or any accepted spelling
    such as ``"on"`` or ``"no"``; regular expressions are checked on creation.
    """

    allow_gitignore: SwitchLike = OnOffSwitch.ON
    ignore_dotfile: SwitchLike = OnOffSwitch.OFF
    mask_secrets: SwitchLike = OnOffSwitch.ON
    with_line_number: SwitchLike = OnOffSwitch.ON
    skip_non_utf8: bool = False
    delete_comments: bool = False
    output_format: OutputFormat | str = OutputFormat.PLAINTEXT
    include_ext: str = ""
    exclude_ext: str = ""
    exclude_dir: str = ""
    pattern_regex: str = ""
    exclude_file_regex: str = ""
    exclude_dir_regex: str = ""

    _include_exts: frozenset[str] = field(init=False, repr=False, compare=False)
    _exclude_exts: frozenset[str] = field(init=False, repr=False, compare=False)
    _excluded_dirs: frozenset[str] = field(init=False, repr=False, compare=False)
    _pattern: re.Pattern[str] | None = field(init=False, repr=False, compare=False)
    _exclude_file_pattern: re.Pattern[str] | None = field(
        init=False, repr=False, compare=False
    )
    _exclude_dir_pattern: re.Pattern[str] | None = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        normalized = {
            "allow_gitignore": _switch(self.allow_gitignore),
            "ignore_dotfile": _switch(self.ignore_dotfile),
            "mask_secrets": _switch(self.mask_secrets),
            "with_line_number": _switch(self.with_line_number),
            "skip_non_utf8": bool(self.skip_non_utf8),
            "delete_comments": bool(self.delete_comments),
            "output_format": _format(self.output_format),
            "_include_exts": _extensions(self.include_ext),
            "_exclude_exts": _extensions(self.exclude_ext),
            "_excluded_dirs": _names(self.exclude_dir),
            "_pattern": _compile(self.pattern_regex, "pattern"),
            "_exclude_file_pattern": _compile(self.exclude_file_regex, "exclude file"),
            "_exclude_dir_pattern": _compile(self.exclude_dir_regex, "exclude directory"),
        }
        for name, value in normalized.items():
            object.__setattr__(self, name, value)

    def allows(self, path: str, is_dir: bool) -> bool:
        """Whether a file or directory at ``path`` passes the filters."""
        name = os.path.basename(os.path.normpath(path))
        hidden = name.startswith(".") and name not in (".", "..")
        if self.ignore_dotfile and hidden:
            return False
        if is_dir:
            if name == ".git" or name in self._excluded_dirs:
                return False
            return not (
                self._exclude_dir_pattern and self._exclude_dir_pattern.search(name)
            )
        ext = _extension(name).lstrip(".").lower()
        if self._include_exts and ext not in self._include_exts:
            return False
        if ext in self._exclude_exts:
            return False
        if self._pattern and not self._pattern.search(name):
            return False
        return not (
            self._exclude_file_pattern and self._exclude_file_pattern.search(name)
        )