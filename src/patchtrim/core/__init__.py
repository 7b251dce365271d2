from .normalizer import PatchInputNormalizer
from .errors import (
    PatchError, PatchParseError, PatchEditError,
    EmptyPatchError, EmptyFileDiffError, MissingPathMarkersError, MalformedHunkHeaderError,
    IndexOutOfRangeError, AlreadyRemovedError,
)
from .models import REMOVED, NO_LINE, LineKind, LineChange, Hunk, FileDiff, Patch
from .parser import UnifiedDiffParser
from .editor import PatchEditor
from .serializer import PatchSerializer
from .selftests import PatchTrimSelfTests

__all__ = [
    "PatchInputNormalizer",
    "PatchError","PatchParseError","PatchEditError",
    "EmptyPatchError","EmptyFileDiffError","MissingPathMarkersError","MalformedHunkHeaderError",
    "IndexOutOfRangeError","AlreadyRemovedError",
    "REMOVED","NO_LINE","LineKind","LineChange","Hunk","FileDiff","Patch",
    "UnifiedDiffParser","PatchEditor","PatchSerializer","PatchTrimSelfTests",
]
