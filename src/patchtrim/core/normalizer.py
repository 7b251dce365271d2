"""PatchTrim core: patch text normalization & boundary token detection."""

from __future__ import annotations

from typing import List, Tuple


class PatchInputNormalizer:
    """
    Responsibilities:
      - Strip UTF-8 BOM if present.
      - Detect the original line ending, then normalize to \n internally.
      - Split into lines, remembering whether the text ended with a newline.
      - Suggest a boundary token deterministically.
    """

    BOUNDARY_DIFF = "diff"
    BOUNDARY_HEADER = "---"
    BOUNDARY_AUTO = "auto"

    def normalize(self, raw_text: str) -> Tuple[List[str], str, bool]:
        """
        Returns: (lines, line_ending, trailing_newline)
          lines never include the empty string produced by a final newline.
        """
        if raw_text.startswith("\ufeff"):
            raw_text = raw_text.lstrip("\ufeff")

        line_ending = "\r\n" if "\r\n" in raw_text else "\n"

        # Normalize to \n
        raw_text = raw_text.replace("\r\n", "\n").replace("\r", "\n")
        if not raw_text:
            return [], line_ending, False

        trailing_newline = raw_text.endswith("\n")
        if trailing_newline:
            raw_text = raw_text[:-1]
        return raw_text.split("\n"), line_ending, trailing_newline

    def detect_boundary_token(self, lines: List[str]) -> str:
        # git / diff -r output announces each file with a "diff" line; plain
        # diff -u output only has the ---/+++ pair.
        if any(l.startswith(self.BOUNDARY_DIFF) for l in lines):
            return self.BOUNDARY_DIFF
        return self.BOUNDARY_HEADER

    def resolve_boundary_token(self, requested: str, lines: List[str]) -> str:
        if requested == self.BOUNDARY_AUTO:
            return self.detect_boundary_token(lines)
        return requested
