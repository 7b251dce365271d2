"""PatchTrim application entrypoint (GUI + CLI selftest / print)."""

from __future__ import annotations

import sys
from pathlib import Path

import structlog

from .core.errors import PatchError
from .core.normalizer import PatchInputNormalizer
from .core.parser import UnifiedDiffParser
from .core.selftests import PatchTrimSelfTests
from .core.serializer import PatchSerializer
from .logging import configure_logging
from .settings import settings

logger = structlog.get_logger(__name__)

USAGE = (
    "usage: patchtrim [--selftest | --print PATCHFILE]\n"
    "  (no arguments)     open the patch editor window\n"
    "  --selftest         run in-process self tests\n"
    "  --print PATCHFILE  parse PATCHFILE and write it back to stdout\n"
)


def _run_selftests_cli() -> int:
    ok, report = PatchTrimSelfTests.run()
    print(report)
    return 0 if ok else 2


def _run_print_cli(path: str) -> int:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        print(f"patchtrim: cannot read {path}: {e}", file=sys.stderr)
        return 2

    normalizer = PatchInputNormalizer()
    lines, _, _ = normalizer.normalize(text)
    token = normalizer.resolve_boundary_token(settings.boundary_token(), lines)
    try:
        patch = UnifiedDiffParser.from_options({"boundary_token": token}).parse_text(text)
    except PatchError as e:
        logger.error("patch_parse_failed", path=path, error=str(e))
        print(f"patchtrim: {e}", file=sys.stderr)
        return 2

    sys.stdout.write(PatchSerializer().to_text(patch))
    return 0


def _run_gui(argv: list[str]) -> int:
    # Qt is only needed for the window; CLI modes work without a display.
    from PyQt6.QtGui import QFont
    from PyQt6.QtWidgets import QApplication

    from .ui.main_window import MainWindow

    app = QApplication(argv)
    app.setFont(QFont("Consolas", 10))
    w = MainWindow()
    w.show()
    return app.exec()


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv if argv is None else argv)
    configure_logging()

    if "--selftest" in argv:
        return _run_selftests_cli()
    if "--print" in argv:
        idx = argv.index("--print")
        if idx + 1 >= len(argv):
            print(USAGE, file=sys.stderr)
            return 2
        return _run_print_cli(argv[idx + 1])
    if "--help" in argv or "-h" in argv:
        print(USAGE)
        return 0

    return _run_gui(argv)


if __name__ == "__main__":
    raise SystemExit(main())
