"""Shared pytest fixtures: sample patches and parsed models."""

import pytest

from patchtrim.core import NO_LINE, LineKind, Patch, PatchEditor, PatchSerializer, UnifiedDiffParser

GIT_TWO_FILES = (
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
    "diff --git a/notes.txt b/notes.txt\n"
    "--- a/notes.txt\n"
    "+++ b/notes.txt\n"
    "@@ -1,5 +1,2 @@\n"
    " keep\n"
    "-drop1\n"
    "-drop2\n"
    "-drop3\n"
    " end\n"
    "@@ -20,2 +17,4 @@\n"
    " tail\n"
    "+added1\n"
    "+added2\n"
    " last\n"
)

PLAIN_TWO_FILES = (
    "--- hello.txt\t2020-01-01 10:00:00\n"
    "+++ hello.txt\t2020-01-02 10:00:00\n"
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

NO_NEWLINE_AT_EOF = (
    "--- a/x.txt\n"
    "+++ b/x.txt\n"
    "@@ -1,2 +1,2 @@\n"
    " a\n"
    "-b\n"
    "\\ No newline at end of file\n"
    "+B\n"
    "\\ No newline at end of file\n"
)


def assert_consistent(patch: Patch) -> None:
    """Header lengths and line-number runs match the live lines of every live hunk."""
    for f_idx, fd in patch.live_file_diffs():
        for h_idx, hunk in fd.live_hunks():
            where = f"file {f_idx} hunk {h_idx}: {hunk.header_line()}"
            assert hunk.counted_lengths() == (hunk.original_length, hunk.revised_length), where

            originals = [lc.original_line for _, lc in hunk.live_lines()
                         if lc.kind in (LineKind.CONTEXT, LineKind.DELETION)]
            reviseds = [lc.revised_line for _, lc in hunk.live_lines()
                        if lc.kind in (LineKind.CONTEXT, LineKind.INSERTION)]
            assert originals == list(range(hunk.original_start, hunk.original_start + len(originals))), where
            assert reviseds == list(range(hunk.revised_start, hunk.revised_start + len(reviseds))), where
            for _, lc in hunk.live_lines():
                if lc.kind is LineKind.DELETION:
                    assert lc.revised_line == NO_LINE, where
                elif lc.kind is LineKind.INSERTION:
                    assert lc.original_line == NO_LINE, where


@pytest.fixture
def parser() -> UnifiedDiffParser:
    return UnifiedDiffParser()


@pytest.fixture
def serializer() -> PatchSerializer:
    return PatchSerializer()


@pytest.fixture
def git_patch(parser: UnifiedDiffParser) -> Patch:
    return parser.parse_text(GIT_TWO_FILES)


@pytest.fixture
def editor(git_patch: Patch) -> PatchEditor:
    return PatchEditor(git_patch)
