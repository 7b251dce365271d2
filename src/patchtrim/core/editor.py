"""PatchTrim core: removal edits that keep a Patch internally consistent."""

from __future__ import annotations

from typing import List

import structlog

from .errors import AlreadyRemovedError, IndexOutOfRangeError
from .models import REMOVED, FileDiff, Hunk, LineChange, LineKind, Patch

logger = structlog.get_logger(__name__)


class PatchEditor:
    """
    Removal operations on a parsed Patch.

    Entries are addressed by the index they had when the patch was parsed.
    Removal tombstones a slot instead of deleting it, so those indices stay
    valid across any sequence of edits. Every index and tombstone check runs
    before the first mutation: a rejected edit leaves the patch untouched.

    Only the revised side is renumbered. Dropping a change never moves a hunk
    in the original file, but it changes how many lines precede every later
    hunk in the revised file. Line numbers of the edited hunk and of every
    shifted hunk are reassigned from the new header starts.
    """

    def __init__(self, patch: Patch):
        self.patch = patch

    # ---------------- Lookup ----------------

    def _file_diff(self, file_index: int) -> FileDiff:
        slots = self.patch.file_diffs
        if not 0 <= file_index < len(slots):
            raise IndexOutOfRangeError("file", file_index, len(slots))
        fd = slots[file_index]
        if fd is REMOVED:
            raise AlreadyRemovedError("file", file_index)
        return fd

    def _hunk(self, file_index: int, hunk_index: int) -> Hunk:
        fd = self._file_diff(file_index)
        parent = f"file {file_index}"
        if not 0 <= hunk_index < len(fd.hunks):
            raise IndexOutOfRangeError("hunk", hunk_index, len(fd.hunks), parent)
        hunk = fd.hunks[hunk_index]
        if hunk is REMOVED:
            raise AlreadyRemovedError("hunk", hunk_index, parent)
        return hunk

    def _line_change(self, file_index: int, hunk_index: int, line_index: int) -> LineChange:
        hunk = self._hunk(file_index, hunk_index)
        parent = f"file {file_index}, hunk {hunk_index}"
        if not 0 <= line_index < len(hunk.lines):
            raise IndexOutOfRangeError("line", line_index, len(hunk.lines), parent)
        lc = hunk.lines[line_index]
        if lc is REMOVED or lc.restored:
            raise AlreadyRemovedError("line", line_index, parent)
        return lc

    def _shift_following_hunks(self, file_index: int, hunk_index: int, delta: int) -> None:
        fd = self.patch.file_diffs[file_index]
        for idx in range(hunk_index + 1, len(fd.hunks)):
            hunk = fd.hunks[idx]
            if hunk is not REMOVED:
                hunk.shift_revised_start(delta)

    # ---------------- Edits ----------------

    def remove_file(self, file_index: int) -> None:
        self._file_diff(file_index)
        self.patch.file_diffs[file_index] = REMOVED
        logger.info("file_removed", file_index=file_index)

    def remove_hunk(self, file_index: int, hunk_index: int) -> int:
        """Tombstone a hunk; returns the revised-start offset applied to later hunks."""
        removed = self._hunk(file_index, hunk_index)
        offset = removed.original_length - removed.revised_length
        if offset:
            self._shift_following_hunks(file_index, hunk_index, offset)
        self.patch.file_diffs[file_index].hunks[hunk_index] = REMOVED
        logger.info("hunk_removed", file_index=file_index, hunk_index=hunk_index, offset=offset)
        return offset

    def remove_line_change(self, file_index: int, hunk_index: int, line_index: int) -> int:
        """
        Drop one change from a hunk; returns the shift applied to later hunks.

          insertion -> slot tombstoned, revised length - 1, shift -1
          deletion  -> line kept as context, revised length + 1, shift +1
          context   -> nothing to drop, shift 0
        """
        lc = self._line_change(file_index, hunk_index, line_index)
        hunk = self.patch.file_diffs[file_index].hunks[hunk_index]
        kind = lc.kind

        shift = 0
        if kind is LineKind.INSERTION:
            hunk.lines[line_index] = REMOVED
            hunk.revised_length -= 1
            shift = -1
        elif kind is LineKind.DELETION:
            lc.kind = LineKind.CONTEXT
            lc.restored = True
            hunk.revised_length += 1
            shift = 1

        if shift:
            hunk.renumber()
            self._shift_following_hunks(file_index, hunk_index, shift)
        logger.info(
            "line_change_removed",
            file_index=file_index,
            hunk_index=hunk_index,
            line_index=line_index,
            kind=kind.name,
            shift=shift,
        )
        return shift

    def remove_change(self, change: LineChange) -> int:
        """Remove every live insertion/deletion equal to `change`; returns how many were removed."""
        targets: List[tuple] = []
        for f_idx, fd in self.patch.live_file_diffs():
            for h_idx, hunk in fd.live_hunks():
                for l_idx, lc in hunk.live_lines():
                    if lc == change and lc.kind in (LineKind.INSERTION, LineKind.DELETION):
                        targets.append((f_idx, h_idx, l_idx))
        for f_idx, h_idx, l_idx in targets:
            self.remove_line_change(f_idx, h_idx, l_idx)
        return len(targets)

    def set_file_paths(self, file_index: int, original_rel_path: str, revised_rel_path: str) -> None:
        fd = self._file_diff(file_index)
        fd.set_paths(original_rel_path, revised_rel_path)
        logger.info(
            "file_paths_set",
            file_index=file_index,
            original=original_rel_path,
            revised=revised_rel_path,
        )
