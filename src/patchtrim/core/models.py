"""PatchTrim core: shared data models.

Every collection in the model is a list of slots. Removing an entry overwrites
its slot with the REMOVED tombstone, so indices taken before an edit stay valid
after it.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, List, Tuple

NO_LINE = -1


class _Removed:
    """Tombstone left in a slot whose entry has been removed."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "REMOVED"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


REMOVED = _Removed()


class LineKind(Enum):
    INSERTION = "+"
    DELETION = "-"
    CONTEXT = " "
    NO_NEWLINE = "\\"  # "\ No newline at end of file"

    @property
    def marker(self) -> str:
        return self.value

    @classmethod
    def classify(cls, line: str) -> "LineKind":
        if line.startswith("+"):
            return cls.INSERTION
        if line.startswith("-"):
            return cls.DELETION
        return cls.CONTEXT


@dataclass
class LineChange:
    content: str
    kind: LineKind
    original_line: int = NO_LINE
    revised_line: int = NO_LINE
    # a deletion that was dropped from the patch and now reads as context
    restored: bool = field(default=False, compare=False)
    # first character of a context line that did not start with a space
    raw_marker: str = field(default="", compare=False)

    def to_line(self) -> str:
        return (self.raw_marker or self.kind.marker) + self.content


def _live(slots: List[Any]) -> Iterator[Tuple[int, Any]]:
    for idx, item in enumerate(slots):
        if item is not REMOVED:
            yield idx, item


@dataclass
class Hunk:
    original_start: int
    original_length: int
    revised_start: int
    revised_length: int
    trailing_text: str = ""
    lines: List[Any] = field(default_factory=list)  # LineChange | REMOVED
    # "@@ -3 +3 @@": a length of 1 was left out of the parsed header
    short_original: bool = False
    short_revised: bool = False

    @staticmethod
    def _range(start: int, length: int, short: bool) -> str:
        if short and length == 1:
            return str(start)
        return f"{start},{length}"

    def header_line(self) -> str:
        header = (
            f"@@ -{self._range(self.original_start, self.original_length, self.short_original)}"
            f" +{self._range(self.revised_start, self.revised_length, self.short_revised)} @@"
        )
        if self.trailing_text:
            header += " " + self.trailing_text
        return header

    def renumber(self) -> None:
        """Reassign line numbers of the live lines from the two header starts."""
        old_ln = self.original_start
        new_ln = self.revised_start
        for _, lc in self.live_lines():
            if lc.kind is LineKind.INSERTION:
                lc.original_line, lc.revised_line = NO_LINE, new_ln
                new_ln += 1
            elif lc.kind is LineKind.DELETION:
                lc.original_line, lc.revised_line = old_ln, NO_LINE
                old_ln += 1
            elif lc.kind is LineKind.CONTEXT:
                lc.original_line, lc.revised_line = old_ln, new_ln
                old_ln += 1
                new_ln += 1

    def num_lines(self) -> int:
        return len(self.lines)

    def live_lines(self) -> Iterator[Tuple[int, LineChange]]:
        return _live(self.lines)

    def shift_revised_start(self, delta: int) -> None:
        self.revised_start += delta
        self.renumber()

    def counted_lengths(self) -> Tuple[int, int]:
        """(original, revised) lengths recomputed from the live lines."""
        original = revised = 0
        for _, lc in self.live_lines():
            if lc.kind in (LineKind.CONTEXT, LineKind.DELETION):
                original += 1
            if lc.kind in (LineKind.CONTEXT, LineKind.INSERTION):
                revised += 1
        return original, revised

    def start_context(self) -> List[LineChange]:
        """Leading run of context lines, before the first change."""
        out: List[LineChange] = []
        for _, lc in self.live_lines():
            if lc.kind is not LineKind.CONTEXT:
                break
            out.append(lc)
        return out

    def end_context(self) -> List[LineChange]:
        """Trailing run of context lines, after the last change."""
        out: List[LineChange] = []
        for _, lc in reversed(list(self.live_lines())):
            if lc.kind is LineKind.NO_NEWLINE:
                continue
            if lc.kind is not LineKind.CONTEXT:
                break
            out.append(lc)
        out.reverse()
        return out

    def copy(self) -> "Hunk":
        return copy.deepcopy(self)


def _strip_prefix_ab(p: str) -> str:
    p = p.strip()
    if p.startswith("a/") and len(p) > 2:
        return p[2:]
    if p.startswith("b/") and len(p) > 2:
        return p[2:]
    return p


def _path_from_marker_line(line: str) -> str:
    # "--- a/foo.py\t2020-01-01" -> "foo.py"; path ends at first TAB if present
    rest = line[3:].lstrip(" ")
    if "\t" in rest:
        rest = rest.split("\t", 1)[0]
    rest = rest.strip()
    return rest if rest == "/dev/null" else _strip_prefix_ab(rest)


@dataclass
class FileDiff:
    original_path_line: str
    revised_path_line: str
    preamble: List[str] = field(default_factory=list)
    hunks: List[Any] = field(default_factory=list)  # Hunk | REMOVED

    @property
    def original_path(self) -> str:
        return _path_from_marker_line(self.original_path_line)

    @property
    def revised_path(self) -> str:
        return _path_from_marker_line(self.revised_path_line)

    @property
    def display_path(self) -> str:
        return self.revised_path if self.revised_path != "/dev/null" else self.original_path

    def set_paths(self, original_rel_path: str, revised_rel_path: str) -> None:
        self.original_path_line = "--- a/" + original_rel_path
        self.revised_path_line = "+++ b/" + revised_rel_path

    def num_hunks(self) -> int:
        return len(self.hunks)

    def live_hunks(self) -> Iterator[Tuple[int, Hunk]]:
        return _live(self.hunks)

    def copy(self) -> "FileDiff":
        return copy.deepcopy(self)


@dataclass
class Patch:
    file_diffs: List[Any] = field(default_factory=list)  # FileDiff | REMOVED
    boundary_token: str = "diff"
    line_ending: str = "\n"
    trailing_newline: bool = True

    def num_file_diffs(self) -> int:
        return len(self.file_diffs)

    def live_file_diffs(self) -> Iterator[Tuple[int, FileDiff]]:
        return _live(self.file_diffs)

    def total_files(self) -> int:
        return sum(1 for _ in self.live_file_diffs())

    def total_hunks(self) -> int:
        return sum(1 for _, fd in self.live_file_diffs() for _ in fd.live_hunks())

    def changes(self) -> List[LineChange]:
        """Every live insertion and deletion, in patch order."""
        out: List[LineChange] = []
        for _, fd in self.live_file_diffs():
            for _, hunk in fd.live_hunks():
                for _, lc in hunk.live_lines():
                    if lc.kind in (LineKind.INSERTION, LineKind.DELETION):
                        out.append(lc)
        return out

    def copy(self) -> "Patch":
        return copy.deepcopy(self)
