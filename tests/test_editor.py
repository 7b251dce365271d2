"""Unit tests for removal edits and revised-side renumbering."""

import pytest

from patchtrim.core import (
    NO_LINE,
    REMOVED,
    AlreadyRemovedError,
    IndexOutOfRangeError,
    LineChange,
    LineKind,
    PatchEditor,
    PatchEditError,
    UnifiedDiffParser,
)

from .conftest import NO_NEWLINE_AT_EOF, assert_consistent


def _hunk(patch, f_idx, h_idx):
    return patch.file_diffs[f_idx].hunks[h_idx]


def _revised_numbers(hunk):
    return [lc.revised_line for _, lc in hunk.live_lines()]


@pytest.fixture(autouse=True)
def patch_stays_consistent(git_patch):
    """Every edit leaves lengths and line numbers in step with the headers."""
    yield
    assert_consistent(git_patch)


class TestRemoveFile:
    def test_tombstones_slot_and_keeps_indices(self, git_patch, editor, serializer) -> None:
        editor.remove_file(0)

        assert git_patch.file_diffs[0] is REMOVED
        assert git_patch.num_file_diffs() == 2
        assert serializer.to_lines(git_patch)[0] == "diff --git a/notes.txt b/notes.txt"

    def test_later_files_are_untouched(self, git_patch, editor) -> None:
        before = git_patch.file_diffs[1].copy()

        editor.remove_file(0)

        assert git_patch.file_diffs[1] == before

    def test_out_of_range_leaves_patch_unchanged(self, git_patch, editor) -> None:
        before = git_patch.copy()

        with pytest.raises(IndexOutOfRangeError) as exc_info:
            editor.remove_file(999)

        assert git_patch == before
        assert exc_info.value.size == 2
        assert isinstance(exc_info.value, IndexError)

    def test_negative_index_is_out_of_range(self, editor) -> None:
        with pytest.raises(IndexOutOfRangeError):
            editor.remove_file(-1)

    def test_second_removal_is_rejected(self, git_patch, editor, serializer) -> None:
        editor.remove_file(1)
        before = serializer.to_lines(git_patch)

        with pytest.raises(AlreadyRemovedError):
            editor.remove_file(1)

        assert serializer.to_lines(git_patch) == before


class TestRemoveHunk:
    def test_zero_offset_leaves_following_hunk(self, git_patch, editor) -> None:
        """Original 5 / revised 5 contributes no net lines."""
        offset = editor.remove_hunk(0, 0)

        assert offset == 0
        assert _hunk(git_patch, 0, 0) is REMOVED
        assert _hunk(git_patch, 0, 1).revised_start == 30

    def test_offset_shifts_following_hunk(self, git_patch, editor) -> None:
        """Original 5 / revised 2 removed three lines; later hunks move down by 3."""
        offset = editor.remove_hunk(1, 0)

        assert offset == 3
        assert _hunk(git_patch, 1, 1).revised_start == 20
        assert _hunk(git_patch, 1, 1).original_start == 20

    def test_other_files_are_not_renumbered(self, git_patch, editor) -> None:
        editor.remove_hunk(1, 0)

        assert _hunk(git_patch, 0, 1).revised_start == 30

    def test_last_hunk_has_nothing_to_shift(self, git_patch, editor) -> None:
        offset = editor.remove_hunk(1, 1)

        assert offset == -2
        assert _hunk(git_patch, 1, 0).revised_start == 1

    def test_header_is_re_rendered(self, git_patch, editor, serializer) -> None:
        editor.remove_hunk(1, 0)
        lines = serializer.to_lines(git_patch)

        assert "@@ -1,5 +1,2 @@" not in lines
        assert "@@ -20,2 +20,4 @@" in lines

    def test_index_checks(self, git_patch, editor) -> None:
        before = git_patch.copy()

        with pytest.raises(IndexOutOfRangeError):
            editor.remove_hunk(0, 2)
        with pytest.raises(IndexOutOfRangeError):
            editor.remove_hunk(5, 0)

        assert git_patch == before

    def test_hunk_in_removed_file(self, editor) -> None:
        editor.remove_file(0)

        with pytest.raises(AlreadyRemovedError) as exc_info:
            editor.remove_hunk(0, 0)

        assert exc_info.value.level == "file"

    def test_second_removal_is_rejected(self, git_patch, editor, serializer) -> None:
        editor.remove_hunk(1, 0)
        before = serializer.to_lines(git_patch)

        with pytest.raises(AlreadyRemovedError):
            editor.remove_hunk(1, 0)

        assert serializer.to_lines(git_patch) == before
        assert _hunk(git_patch, 1, 1).revised_start == 20


class TestRemoveLineChange:
    def test_deletion_becomes_context(self, git_patch, editor) -> None:
        """Removing a deletion keeps the line: one more line in the revised file."""
        shift = editor.remove_line_change(0, 0, 1)
        h0 = _hunk(git_patch, 0, 0)

        assert shift == 1
        assert h0.lines[1].kind is LineKind.CONTEXT
        assert h0.revised_length == 6
        assert h0.original_length == 5
        assert _hunk(git_patch, 0, 1).revised_start == 31

    def test_insertion_is_tombstoned(self, git_patch, editor) -> None:
        shift = editor.remove_line_change(0, 0, 2)
        h0 = _hunk(git_patch, 0, 0)

        assert shift == -1
        assert h0.lines[2] is REMOVED
        assert h0.revised_length == 4
        assert _hunk(git_patch, 0, 1).revised_start == 29

    def test_context_is_a_no_op(self, git_patch, editor) -> None:
        before = git_patch.copy()

        shift = editor.remove_line_change(0, 0, 0)

        assert shift == 0
        assert git_patch == before

    def test_serialized_output(self, git_patch, editor, serializer) -> None:
        editor.remove_line_change(0, 0, 1)
        editor.remove_line_change(0, 0, 2)
        lines = serializer.to_lines(git_patch)

        assert lines[4:11] == [
            "@@ -10,5 +10,5 @@ def add(a, b):",
            " line10",
            " line11",
            " line12",
            " line13",
            " line14",
            "@@ -30,3 +30,3 @@ def sub(a, b):",
        ]

    def test_shift_skips_removed_hunks(self, git_patch, editor) -> None:
        editor.remove_hunk(1, 0)
        editor.remove_line_change(1, 1, 1)

        assert _hunk(git_patch, 1, 0) is REMOVED
        assert _hunk(git_patch, 1, 1).revised_length == 3

    def test_edits_accumulate_on_later_hunks(self, git_patch, editor) -> None:
        editor.remove_line_change(1, 0, 1)
        editor.remove_line_change(1, 0, 2)
        assert _hunk(git_patch, 1, 1).revised_start == 19

        # the hunk now nets one removed line; dropping it lands at the same place
        offset = editor.remove_hunk(1, 0)
        assert offset == 1
        assert _hunk(git_patch, 1, 1).revised_start == 20

    def test_invariants_hold_after_mixed_edits(self, git_patch, editor) -> None:
        editor.remove_line_change(0, 0, 2)
        editor.remove_line_change(0, 1, 1)
        editor.remove_line_change(1, 0, 3)
        editor.remove_line_change(1, 1, 2)
        editor.remove_file(0)

        assert_consistent(git_patch)

    def test_second_removal_of_insertion(self, git_patch, editor, serializer) -> None:
        editor.remove_line_change(0, 0, 2)
        before = serializer.to_lines(git_patch)

        with pytest.raises(AlreadyRemovedError):
            editor.remove_line_change(0, 0, 2)

        assert serializer.to_lines(git_patch) == before

    def test_second_removal_of_deletion(self, git_patch, editor, serializer) -> None:
        editor.remove_line_change(0, 0, 1)
        before = serializer.to_lines(git_patch)

        with pytest.raises(AlreadyRemovedError):
            editor.remove_line_change(0, 0, 1)

        assert serializer.to_lines(git_patch) == before
        assert _hunk(git_patch, 0, 1).revised_start == 31

    def test_index_checks_leave_patch_unchanged(self, git_patch, editor) -> None:
        before = git_patch.copy()

        for args in [(0, 0, 6), (0, 0, -1), (0, 9, 0), (9, 0, 0)]:
            with pytest.raises(IndexOutOfRangeError):
                editor.remove_line_change(*args)

        assert git_patch == before

    def test_no_newline_marker_is_not_a_change(self, parser, serializer) -> None:
        patch = parser.parse_text(NO_NEWLINE_AT_EOF)
        shift = PatchEditor(patch).remove_line_change(0, 0, 2)

        assert shift == 0
        assert serializer.to_text(patch) == NO_NEWLINE_AT_EOF

    def test_errors_share_a_base_class(self, editor) -> None:
        with pytest.raises(PatchEditError):
            editor.remove_line_change(0, 0, 99)


class TestLineNumbering:
    def test_restored_deletion_takes_a_revised_number(self, git_patch, editor) -> None:
        editor.remove_line_change(0, 0, 1)
        h0 = _hunk(git_patch, 0, 0)

        assert h0.lines[1].revised_line == 11
        assert h0.lines[1].original_line == 11
        assert _revised_numbers(h0) == [10, 11, 12, 13, 14, 15]

    def test_lines_after_a_removed_insertion_move_up(self, git_patch, editor) -> None:
        editor.remove_line_change(0, 0, 2)

        assert _revised_numbers(_hunk(git_patch, 0, 0)) == [10, NO_LINE, 11, 12, 13]

    def test_shifted_hunk_lines_follow_the_new_start(self, git_patch, editor) -> None:
        editor.remove_line_change(0, 0, 1)
        h1 = _hunk(git_patch, 0, 1)

        assert h1.revised_start == 31
        assert _revised_numbers(h1) == [31, NO_LINE, 32, 33]

    def test_hunk_removal_renumbers_later_hunks(self, git_patch, editor) -> None:
        editor.remove_hunk(1, 0)
        h1 = _hunk(git_patch, 1, 1)

        assert _revised_numbers(h1) == [20, 21, 22, 23]
        assert [lc.original_line for _, lc in h1.live_lines()] == [20, NO_LINE, NO_LINE, 21]

    def test_original_numbers_never_move(self, git_patch, editor) -> None:
        before = [[lc.original_line for _, lc in h.live_lines()]
                  for _, fd in git_patch.live_file_diffs() for _, h in fd.live_hunks()]

        editor.remove_line_change(0, 0, 1)
        editor.remove_line_change(1, 0, 2)

        after = [[lc.original_line for _, lc in h.live_lines()]
                 for _, fd in git_patch.live_file_diffs() for _, h in fd.live_hunks()]
        assert after == before


class TestRemoveChangeByValue:
    def test_removes_matching_deletion(self, git_patch, editor) -> None:
        removed = editor.remove_change(LineChange("line11", LineKind.DELETION, 11, NO_LINE))

        assert removed == 1
        assert _hunk(git_patch, 0, 0).lines[1].kind is LineKind.CONTEXT
        assert _hunk(git_patch, 0, 1).revised_start == 31

    def test_no_match(self, git_patch, editor) -> None:
        before = git_patch.copy()

        assert editor.remove_change(LineChange("line11", LineKind.DELETION, 99, NO_LINE)) == 0
        assert git_patch == before

    def test_context_lines_are_never_matched(self, git_patch, editor) -> None:
        assert editor.remove_change(LineChange("line10", LineKind.CONTEXT, 10, 10)) == 0


class TestSetFilePaths:
    def test_paths_are_independent(self, git_patch, editor, serializer) -> None:
        editor.set_file_paths(0, "src/calc.py", "src/calc_v2.py")
        fd = git_patch.file_diffs[0]

        assert fd.original_path_line == "--- a/src/calc.py"
        assert fd.revised_path_line == "+++ b/src/calc_v2.py"
        assert fd.original_path == "src/calc.py"
        assert fd.revised_path == "src/calc_v2.py"
        assert serializer.to_lines(git_patch)[2:4] == ["--- a/src/calc.py", "+++ b/src/calc_v2.py"]

    def test_removed_file(self, editor) -> None:
        editor.remove_file(0)

        with pytest.raises(AlreadyRemovedError):
            editor.set_file_paths(0, "a", "b")


class TestCopy:
    def test_copy_is_independent(self, git_patch) -> None:
        clone = git_patch.copy()
        PatchEditor(clone).remove_hunk(1, 0)

        assert clone.file_diffs[1].hunks[0] is REMOVED
        assert git_patch.file_diffs[1].hunks[0] is not REMOVED

    def test_copy_keeps_tombstones(self, git_patch, editor) -> None:
        editor.remove_file(0)

        assert git_patch.copy().file_diffs[0] is REMOVED

    def test_reparse_of_edited_output(self, git_patch, editor, serializer) -> None:
        editor.remove_line_change(1, 0, 1)
        editor.remove_hunk(0, 0)
        text = serializer.to_text(git_patch)

        reparsed = UnifiedDiffParser().parse_text(text)

        assert serializer.to_text(reparsed) == text
        assert_consistent(reparsed)
