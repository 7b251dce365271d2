"""PatchTrim core: in-process self tests."""

from __future__ import annotations

from typing import Tuple

from .editor import PatchEditor
from .errors import AlreadyRemovedError, EmptyPatchError, IndexOutOfRangeError, MalformedHunkHeaderError
from .models import Patch
from .parser import UnifiedDiffParser
from .serializer import PatchSerializer


class PatchTrimSelfTests:
    """
    In-process self tests using embedded patch strings.
    """

    TWO_HUNKS = (
        "diff --git a/calc.py b/calc.py\n"
        "index 3f1e2a0..8c9d4b1 100644\n"
        "--- a/calc.py\n"
        "+++ b/calc.py\n"
        "@@ -10,5 +10,5 @@ def add(a, b):\n"
        " line10\n"
        "-line11\n"
        "+line11 changed\n"
        " line12\n"
        " line13\n"
        " line14\n"
        "@@ -30,3 +30,3 @@ def sub(a, b):\n"
        " line30\n"
        "-line31\n"
        "+line31 changed\n"
        " line32\n"
    )

    @staticmethod
    def _consistent(patch: Patch) -> bool:
        for _, fd in patch.live_file_diffs():
            for _, hunk in fd.live_hunks():
                if hunk.counted_lengths() != (hunk.original_length, hunk.revised_length):
                    return False
                fresh = hunk.copy()
                fresh.renumber()
                if fresh.lines != hunk.lines:
                    return False
        return True

    @staticmethod
    def run() -> Tuple[bool, str]:
        parser = UnifiedDiffParser()
        serializer = PatchSerializer()

        report_lines = []
        ok = True

        def fail(msg: str) -> None:
            nonlocal ok
            ok = False
            report_lines.append("FAIL: " + msg)

        def pass_(msg: str) -> None:
            report_lines.append("OK: " + msg)

        # 1) Round-trip with no edits
        text = PatchTrimSelfTests.TWO_HUNKS
        ps = parser.parse_text(text)
        if ps.total_files() != 1 or ps.total_hunks() != 2:
            fail("Git unified parsing counts incorrect.")
        else:
            pass_("Git unified parsing.")
        if serializer.to_text(ps) != text:
            fail("Round-trip output mismatch.")
        else:
            pass_("Round-trip parse+serialize.")

        # 2) Plain diff -u with --- boundary, two files
        plain = (
            "--- hello.txt\t2020-01-01\n"
            "+++ hello.txt\t2020-01-02\n"
            "@@ -1,3 +1,4 @@\n"
            " one\n"
            "+one-and-a-half\n"
            " two\n"
            " three\n"
            "--- bye.txt\n"
            "+++ bye.txt\n"
            "@@ -1,2 +1,1 @@\n"
            "-x\n"
            " y\n"
        )
        ps_plain = UnifiedDiffParser(boundary_token="---").parse_text(plain)
        if ps_plain.total_files() != 2 or serializer.to_text(ps_plain) != plain:
            fail("'---' boundary parsing incorrect.")
        else:
            pass_("'---' boundary parsing.")

        # 3) Removing a deletion shifts later hunks by +1
        ps3 = parser.parse_text(text)
        editor = PatchEditor(ps3)
        shift = editor.remove_line_change(0, 0, 1)
        h0 = ps3.file_diffs[0].hunks[0]
        h1 = ps3.file_diffs[0].hunks[1]
        if shift != 1 or h0.revised_length != 6 or h1.revised_start != 31:
            fail("Deletion removal renumbering incorrect.")
        elif not PatchTrimSelfTests._consistent(ps3):
            fail("Deletion removal left inconsistent hunk lengths or line numbers.")
        else:
            pass_("Deletion removal renumbering.")

        # 4) Removing an insertion shifts later hunks by -1
        ps4 = parser.parse_text(text)
        PatchEditor(ps4).remove_line_change(0, 0, 2)
        if ps4.file_diffs[0].hunks[1].revised_start != 29 or not PatchTrimSelfTests._consistent(ps4):
            fail("Insertion removal renumbering incorrect.")
        else:
            pass_("Insertion removal renumbering.")

        # 5) Removing a hunk shifts later hunks by original - revised length
        shrink = (
            "--- a/f.txt\n"
            "+++ b/f.txt\n"
            "@@ -1,5 +1,2 @@\n"
            " a\n"
            "-b\n"
            "-c\n"
            "-d\n"
            " e\n"
            "@@ -20,2 +17,2 @@\n"
            "-t\n"
            "+T\n"
            " u\n"
        )
        ps5 = parser.parse_text(shrink)
        offset = PatchEditor(ps5).remove_hunk(0, 0)
        if offset != 3 or ps5.file_diffs[0].hunks[1].revised_start != 20 or not PatchTrimSelfTests._consistent(ps5):
            fail("Hunk removal offset incorrect.")
        else:
            pass_("Hunk removal offset.")

        # 6) Second removal of the same index is rejected and changes nothing
        ps6 = parser.parse_text(text)
        ed6 = PatchEditor(ps6)
        ed6.remove_hunk(0, 1)
        before = serializer.to_lines(ps6)
        try:
            ed6.remove_hunk(0, 1)
            fail("Repeated hunk removal was accepted.")
        except AlreadyRemovedError:
            if serializer.to_lines(ps6) != before:
                fail("Rejected hunk removal modified the patch.")
            else:
                pass_("Repeated removal rejected.")

        # 7) Error taxonomy
        try:
            parser.parse([])
            fail("Empty input accepted.")
        except EmptyPatchError:
            pass_("Empty input rejected.")
        try:
            parser.parse(["--- a/x", "+++ b/x", "@@ -10,5 @@", " x"])
            fail("Malformed hunk header accepted.")
        except MalformedHunkHeaderError:
            pass_("Malformed hunk header rejected.")
        try:
            PatchEditor(parser.parse_text(text)).remove_file(999)
            fail("Out of range file index accepted.")
        except IndexOutOfRangeError:
            pass_("Out of range file index rejected.")

        return ok, "\n".join(report_lines)
