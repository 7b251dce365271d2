"""PatchTrim core: unified diff parsing into Patch/FileDiff/Hunk/LineChange."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

import structlog

from .errors import (
    EmptyFileDiffError,
    EmptyPatchError,
    MalformedHunkHeaderError,
    MissingPathMarkersError,
)
from .models import FileDiff, Hunk, LineChange, LineKind, Patch
from .normalizer import PatchInputNormalizer

logger = structlog.get_logger(__name__)


class UnifiedDiffParser:
    """
    Parses unified diff lines into a Patch.

    The input is split into one block per file at every line starting with
    the boundary token ("diff" for git / diff -r output, "---" for plain
    diff -u output). Lines before the first boundary line belong to the
    first block.
    """

    DEFAULT_OPTIONS: Dict[str, Any] = {"boundary_token": "diff"}

    HUNK_START = "@@"
    ORIGINAL_PATH_MARKER = "---"
    NO_NEWLINE_MARKER = "\\"

    RE_HUNK = re.compile(r"^@@\s+\-(\d+)(?:,(\d+))?\s+\+(\d+)(?:,(\d+))?\s+@@")
    RE_NUMBER = re.compile(r"\d+")

    def __init__(self, boundary_token: str = "diff"):
        if not boundary_token:
            raise ValueError("boundary_token must be a non-empty string")
        self.boundary_token = boundary_token
        self.normalizer = PatchInputNormalizer()

    @classmethod
    def from_options(cls, opts: Optional[Dict[str, Any]] = None) -> "UnifiedDiffParser":
        merged = dict(cls.DEFAULT_OPTIONS)
        merged.update(opts or {})
        return cls(boundary_token=merged["boundary_token"])

    # ---------------- Patch ----------------

    def parse_text(self, raw_text: str) -> Patch:
        lines, line_ending, trailing_newline = self.normalizer.normalize(raw_text)
        patch = self.parse(lines)
        patch.line_ending = line_ending
        patch.trailing_newline = trailing_newline
        return patch

    def parse(self, lines: List[str]) -> Patch:
        if not lines:
            raise EmptyPatchError()

        blocks = self.split_file_blocks(lines)
        patch = Patch(
            file_diffs=[self.parse_file_diff(block) for block in blocks],
            boundary_token=self.boundary_token,
        )
        logger.debug(
            "patch_parsed",
            boundary_token=self.boundary_token,
            lines=len(lines),
            files=patch.total_files(),
            hunks=patch.total_hunks(),
        )
        return patch

    def split_file_blocks(self, lines: List[str]) -> List[List[str]]:
        blocks: List[List[str]] = []
        cur: List[str] = []
        seen_boundary = False
        for line in lines:
            if line.startswith(self.boundary_token):
                if seen_boundary:
                    blocks.append(cur)
                    cur = []
                seen_boundary = True
            cur.append(line)
        if cur:
            blocks.append(cur)
        return blocks

    # ---------------- File diff ----------------

    def parse_file_diff(self, lines: List[str]) -> FileDiff:
        preamble: List[str] = []
        i = 0
        while i < len(lines) and not lines[i].startswith(self.ORIGINAL_PATH_MARKER):
            preamble.append(lines[i])
            i += 1
        # the revised path line must follow the original one
        if i + 1 >= len(lines):
            raise MissingPathMarkersError(lines)

        fd = FileDiff(
            original_path_line=lines[i],
            revised_path_line=lines[i + 1],
            preamble=preamble,
        )
        fd.hunks = [self.parse_hunk(block) for block in self._split_hunk_blocks(lines[i + 2:])]
        if not fd.hunks:
            raise EmptyFileDiffError(fd.original_path_line)
        return fd

    def _split_hunk_blocks(self, lines: List[str]) -> List[List[str]]:
        blocks: List[List[str]] = []
        cur: Optional[List[str]] = None
        for line in lines:
            if line.startswith(self.HUNK_START):
                if cur is not None:
                    blocks.append(cur)
                cur = [line]
            elif cur is not None:
                cur.append(line)
            # anything between the path markers and the first @@ is dropped
        if cur is not None:
            blocks.append(cur)
        return blocks

    # ---------------- Hunk ----------------

    def parse_header(self, header: str) -> Hunk:
        """Hunk with the four header numbers and trailing text, no body lines yet."""
        parts = header.split(self.HUNK_START, 2)
        trailing = parts[2].strip() if len(parts) > 2 else ""

        m = self.RE_HUNK.match(header)
        if m:
            # "@@ -3 +3 @@" omits lengths of 1
            return Hunk(
                original_start=int(m.group(1)),
                original_length=int(m.group(2)) if m.group(2) is not None else 1,
                revised_start=int(m.group(3)),
                revised_length=int(m.group(4)) if m.group(4) is not None else 1,
                trailing_text=trailing,
                short_original=m.group(2) is None,
                short_revised=m.group(4) is None,
            )

        ranges = parts[1] if len(parts) > 1 else header
        numbers = [int(n) for n in self.RE_NUMBER.findall(ranges)]
        if len(numbers) < 4:
            raise MalformedHunkHeaderError(header, len(numbers))
        return Hunk(numbers[0], numbers[1], numbers[2], numbers[3], trailing)

    def parse_hunk(self, lines: List[str]) -> Hunk:
        hunk = self.parse_header(lines[0])
        for ln in lines[1:]:
            if ln.startswith(self.NO_NEWLINE_MARKER):
                hunk.lines.append(LineChange(ln[1:], LineKind.NO_NEWLINE))
                continue
            kind = LineKind.classify(ln)
            lc = LineChange(ln[1:], kind)
            if kind is LineKind.CONTEXT and ln[:1] not in ("", " "):
                lc.raw_marker = ln[0]
            hunk.lines.append(lc)
        hunk.renumber()
        return hunk
