"""PatchTrim core: error taxonomy for parsing and editing."""

from __future__ import annotations

from typing import List, Optional


class PatchError(Exception):
    """Base class for every error raised by patchtrim.core."""


# ---------------- Parsing ----------------

class PatchParseError(PatchError):
    """The input is not a patch this parser can model. No partial Patch is produced."""


class EmptyPatchError(PatchParseError):
    def __str__(self):
        return "Patch is empty: no lines to parse."


class MissingPathMarkersError(PatchParseError):
    def __init__(self, block_lines: List[str]):
        super().__init__()
        self.block_lines = list(block_lines)

    def __str__(self):
        first = self.block_lines[0] if self.block_lines else "(empty block)"
        return (
            "File diff has no '---' / '+++' path markers."
            f"\nBlock starts with: {first}"
        )


class EmptyFileDiffError(PatchParseError):
    def __init__(self, original_path_line: str):
        super().__init__()
        self.original_path_line = original_path_line

    def __str__(self):
        return f"File diff contains no hunks: {self.original_path_line}"


class MalformedHunkHeaderError(PatchParseError):
    def __init__(self, header: str, numbers_found: int):
        super().__init__()
        self.header = header
        self.numbers_found = numbers_found

    def __str__(self):
        return (
            f"Malformed hunk header (expected 4 numbers, found {self.numbers_found}):"
            f"\n{self.header}"
        )


# ---------------- Editing ----------------

class PatchEditError(PatchError):
    """An edit was rejected. The Patch is left exactly as it was."""


class IndexOutOfRangeError(PatchEditError, IndexError):
    def __init__(self, level: str, index: int, size: int, parent: Optional[str] = None):
        super().__init__()
        self.level = level
        self.index = index
        self.size = size
        self.parent = parent

    def __str__(self):
        where = f" in {self.parent}" if self.parent else ""
        return f"{self.level} index {self.index} out of range{where} (slots: {self.size})"


class AlreadyRemovedError(PatchEditError):
    def __init__(self, level: str, index: int, parent: Optional[str] = None):
        super().__init__()
        self.level = level
        self.index = index
        self.parent = parent

    def __str__(self):
        where = f" in {self.parent}" if self.parent else ""
        return f"{self.level} {self.index}{where} has already been removed"
