"""
Doc tag data structures.

A DocTag is one parsed START/END region in one file of one snapshot. A
DocTagDiff is one classified difference between a tag in the base snapshot
and the head snapshot.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import PurePath
from typing import Any, TypeVar

from doctags.errors import ConfigurationError


class DiffType(Enum):
    """Kind of difference between two snapshots."""

    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"


class ChangeType(Enum):
    """
    Aspect of a tag that changed.

    Attributes:
        FILE_PATH: The tag moved to a different file
        LINE_NUMBER: The START or END marker moved to a different line
        CODE_CONTENTS: The text between the markers changed
    """

    FILE_PATH = "file_path"
    LINE_NUMBER = "line_number"
    CODE_CONTENTS = "code_contents"


@dataclass(frozen=True)
class DocTag:
    """One tagged region parsed out of a file."""

    file_path: str
    tag_name: str
    start_line: int  # 1-based line of the START marker
    end_line: int  # 1-based line of the END marker
    content: str

    @property
    def extension(self) -> str:
        return PurePath(self.file_path).suffix

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class DocTagDiff:
    """One detected difference for a single tag."""

    file_path: str
    tag_name: str
    type: DiffType
    change_type: ChangeType = ChangeType.CODE_CONTENTS
    content_diff: str | None = None  # only for changed/code_contents
    start_line: int | None = None
    end_line: int | None = None
    previous_file_path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        result = asdict(self)
        result["type"] = self.type.value
        result["change_type"] = self.change_type.value
        return result


E = TypeVar("E", bound=Enum)


def _parse_enum_list(raw: str, enum_cls: type[E], label: str) -> frozenset[E]:
    values: set[E] = set()
    for item in raw.split(","):
        name = item.strip().lower()
        if not name:
            continue
        try:
            values.add(enum_cls(name))
        except ValueError as err:
            allowed = ", ".join(member.value for member in enum_cls)
            raise ConfigurationError(
                f"Unknown {label} '{name}' (expected one of: {allowed})"
            ) from err
    return frozenset(values)


@dataclass(frozen=True)
class DiffOptions:
    """Which diff categories are reported. Everything is enabled by default."""

    diff_types: frozenset[DiffType] = field(default_factory=lambda: frozenset(DiffType))
    change_types: frozenset[ChangeType] = field(
        default_factory=lambda: frozenset(ChangeType)
    )

    def reports(self, diff_type: DiffType, change_type: ChangeType) -> bool:
        """Whether a diff of the given category should be emitted."""
        if diff_type not in self.diff_types:
            return False
        if diff_type is DiffType.CHANGED:
            return change_type in self.change_types
        return True

    @classmethod
    def from_strings(
        cls, diff_types: str | None = None, change_types: str | None = None
    ) -> DiffOptions:
        """
        Build options from comma separated category names.

        Args:
            diff_types: e.g. "added,removed"; empty or None enables all
            change_types: e.g. "code_contents"; empty or None enables all

        Raises:
            ConfigurationError: A name is not a known category
        """
        parsed_diff_types = (
            _parse_enum_list(diff_types, DiffType, "diff type") if diff_types else None
        )
        parsed_change_types = (
            _parse_enum_list(change_types, ChangeType, "change type")
            if change_types
            else None
        )
        return cls(
            diff_types=parsed_diff_types or frozenset(DiffType),
            change_types=parsed_change_types or frozenset(ChangeType),
        )
