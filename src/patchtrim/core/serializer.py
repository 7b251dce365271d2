"""PatchTrim core: Patch back to unified diff text."""

from __future__ import annotations

from typing import List

from .models import FileDiff, Hunk, Patch


class PatchSerializer:
    """
    Rebuilds patch lines from the current model. Tombstoned files, hunks and
    lines are skipped; hunk headers are always re-formatted from the current
    start/length fields.
    """

    def hunk_lines(self, hunk: Hunk) -> List[str]:
        out = [hunk.header_line()]
        for _, lc in hunk.live_lines():
            out.append(lc.to_line())
        return out

    def file_diff_lines(self, fd: FileDiff) -> List[str]:
        out = list(fd.preamble)
        out.append(fd.original_path_line)
        out.append(fd.revised_path_line)
        for _, hunk in fd.live_hunks():
            out.extend(self.hunk_lines(hunk))
        return out

    def to_lines(self, patch: Patch) -> List[str]:
        out: List[str] = []
        for _, fd in patch.live_file_diffs():
            out.extend(self.file_diff_lines(fd))
        return out

    def to_text(self, patch: Patch) -> str:
        lines = self.to_lines(patch)
        if not lines:
            return ""
        text = patch.line_ending.join(lines)
        if patch.trailing_newline:
            text += patch.line_ending
        return text
