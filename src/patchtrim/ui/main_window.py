"""PatchTrim UI: main window."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Optional, Dict, Any, Tuple

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QFont
from PyQt6.QtWidgets import (
    QMainWindow, QToolBar, QStatusBar, QSplitter, QTreeView, QTableView,
    QDockWidget, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QFileDialog, QMessageBox, QCheckBox, QPlainTextEdit, QFormLayout,
    QLineEdit, QAbstractItemView, QDialog, QHeaderView
)

from ..core.editor import PatchEditor
from ..core.errors import PatchError
from ..core.models import Patch
from ..core.normalizer import PatchInputNormalizer
from ..core.parser import UnifiedDiffParser
from ..core.selftests import PatchTrimSelfTests
from ..core.serializer import PatchSerializer
from ..settings import settings

from .dialogs import PatchSummaryDialog
from .models import PatchTreeModel, LogTableModel


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("PatchTrim")
        self.resize(1200, 720)

        self.normalizer = PatchInputNormalizer()
        self.serializer = PatchSerializer()

        # Session state
        self.loaded_file: Optional[str] = None
        self.patch: Optional[Patch] = None
        self.editor: Optional[PatchEditor] = None
        self.dirty = False

        app_font = QFont("Consolas", 10)
        self.setFont(app_font)

        self._build_toolbar()
        self._build_central()
        self._build_docks()
        self._build_status()

        self._refresh_actions()
        self._log_info("Ready.", component="ui")

    # ---------------- UI Construction ----------------

    def _build_toolbar(self):
        tb = QToolBar("Main")
        tb.setMovable(False)
        self.addToolBar(tb)

        self.act_open = QAction("Open Patch", self)
        self.act_open.triggered.connect(self._open_patch)

        self.act_remove = QAction("Remove", self)
        self.act_remove.setShortcut("Del")
        self.act_remove.triggered.connect(self._remove_selected)

        self.act_paths = QAction("Set Paths", self)
        self.act_paths.triggered.connect(self._set_paths_selected)

        self.act_save = QAction("Save Patch", self)
        self.act_save.triggered.connect(self._save_patch)

        self.act_summary = QAction("Summary", self)
        self.act_summary.triggered.connect(self._show_summary)

        self.act_advanced = QAction("Advanced", self)
        self.act_advanced.triggered.connect(self._toggle_advanced)

        self.act_help = QAction("Help", self)
        self.act_help.triggered.connect(self._show_help)

        for a in [
            self.act_open, self.act_remove, self.act_paths, self.act_save,
            self.act_summary, self.act_advanced, self.act_help
        ]:
            tb.addAction(a)

    def _build_central(self):
        splitter = QSplitter()
        splitter.setOrientation(Qt.Orientation.Horizontal)

        self.tree = QTreeView()
        self.tree_model = PatchTreeModel()
        self.tree.setModel(self.tree_model)
        self.tree.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.tree.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.tree.setUniformRowHeights(True)
        hdr = self.tree.header()
        hdr.setStretchLastSection(False)
        hdr.setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        self.tree.setColumnWidth(1, 60)
        self.tree.setColumnWidth(2, 60)
        self.tree.selectionModel().selectionChanged.connect(self._on_selection_changed)

        self.preview = QPlainTextEdit()
        self.preview.setReadOnly(True)
        self.preview.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)

        splitter.addWidget(self.tree)
        splitter.addWidget(self.preview)
        splitter.setSizes([640, 560])

        self.setCentralWidget(splitter)

    def _build_docks(self):
        # Bottom dock: Log (hidden by default)
        self.log_dock = QDockWidget("Log", self)
        self.log_dock.setAllowedAreas(Qt.DockWidgetArea.BottomDockWidgetArea)
        self.log_dock.setVisible(False)

        log_widget = QWidget()
        log_layout = QVBoxLayout(log_widget)
        log_layout.setContentsMargins(4, 4, 4, 4)

        self.log_table = QTableView()
        self.log_model = LogTableModel()
        self.log_table.setModel(self.log_model)
        self.log_table.horizontalHeader().setStretchLastSection(True)
        self.log_table.setWordWrap(False)
        self.log_table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.log_table.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)

        log_layout.addWidget(self.log_table)
        self.log_dock.setWidget(log_widget)
        self.addDockWidget(Qt.DockWidgetArea.BottomDockWidgetArea, self.log_dock)

        # Right dock: Advanced panel (hidden by default)
        self.adv_dock = QDockWidget("Advanced", self)
        self.adv_dock.setAllowedAreas(Qt.DockWidgetArea.RightDockWidgetArea)
        self.adv_dock.setVisible(False)

        adv_widget = QWidget()
        form = QFormLayout(adv_widget)
        form.setContentsMargins(8, 8, 8, 8)

        token = settings.boundary_token()
        self.chk_auto_boundary = QCheckBox("Detect boundary token")
        self.chk_auto_boundary.setChecked(token == PatchInputNormalizer.BOUNDARY_AUTO)
        self.txt_boundary = QLineEdit(
            PatchInputNormalizer.BOUNDARY_DIFF if token == PatchInputNormalizer.BOUNDARY_AUTO else token
        )
        self.txt_boundary.setEnabled(not self.chk_auto_boundary.isChecked())
        self.chk_auto_boundary.toggled.connect(lambda on: self.txt_boundary.setEnabled(not on))

        form.addRow(self.chk_auto_boundary)
        form.addRow("Boundary token", self.txt_boundary)
        form.addRow(QLabel("Applies to the next Open Patch."))

        self.adv_dock.setWidget(adv_widget)
        self.addDockWidget(Qt.DockWidgetArea.RightDockWidgetArea, self.adv_dock)

        self.menu = self.menuBar().addMenu("Help")
        act_selftests = QAction("Run Self Tests", self)
        act_selftests.triggered.connect(self._run_selftests_ui)
        self.menu.addAction(act_selftests)

    def _build_status(self):
        sb = QStatusBar()
        self.setStatusBar(sb)
        self._set_status("No patch loaded.", state="Idle", warn="")

    # ---------------- Utilities ----------------

    def _options(self) -> Dict[str, Any]:
        if self.chk_auto_boundary.isChecked():
            token = PatchInputNormalizer.BOUNDARY_AUTO
        else:
            token = self.txt_boundary.text() or PatchInputNormalizer.BOUNDARY_DIFF
        return {"boundary_token": token}

    def _set_status(self, summary: str, state: str, warn: str) -> None:
        self.statusBar().showMessage(f"{summary}    |    State: {state}    |    {warn}".strip())

    def _log(self, level: str, message: str, **fields: Any) -> None:
        entry = {"ts": time.time(), "level": level, "message": message}
        entry.update(fields)
        self.log_model.append(entry)
        if level in ("ERROR", "WARN"):
            self.log_dock.setVisible(True)

    def _log_info(self, message: str, **fields: Any) -> None:
        self._log("INFO", message, **fields)

    def _log_error(self, message: str, **fields: Any) -> None:
        self._log("ERROR", message, **fields)

    def _refresh_actions(self):
        has_patch = self.patch is not None
        self.act_remove.setEnabled(has_patch)
        self.act_paths.setEnabled(has_patch)
        self.act_save.setEnabled(has_patch)
        self.act_summary.setEnabled(has_patch)

    def _refresh_views(self):
        self.tree_model.set_patch(self.patch)
        self.tree.expandToDepth(0)
        self.preview.setPlainText(self.serializer.to_text(self.patch) if self.patch else "")
        self._refresh_actions()

    def _selected_address(self) -> Optional[Dict[str, Any]]:
        idx = self.tree.currentIndex()
        if not idx.isValid():
            return None
        return self.tree_model.data(idx, Qt.ItemDataRole.UserRole)

    # ---------------- Actions ----------------

    def _open_patch(self):
        fn, _ = QFileDialog.getOpenFileName(self, "Open Patch", "", "Diff/Patch (*.diff *.patch *.txt);;All Files (*.*)")
        if not fn:
            return
        self.load_patch_file(fn)

    def load_patch_file(self, fn: str) -> bool:
        try:
            text = Path(fn).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            QMessageBox.critical(self, "Open Failed", f"Could not read patch:\n{e}")
            return False

        opts = self._options()
        lines, _, _ = self.normalizer.normalize(text)
        opts["boundary_token"] = self.normalizer.resolve_boundary_token(opts["boundary_token"], lines)
        try:
            patch = UnifiedDiffParser.from_options(opts).parse_text(text)
        except PatchError as e:
            self._log_error("Patch parse failed.", path=fn, error=str(e), error_type=type(e).__name__)
            QMessageBox.critical(self, "Parse Failed", str(e))
            return False

        self.loaded_file = fn
        self.patch = patch
        self.editor = PatchEditor(patch)
        self.dirty = False
        self._refresh_views()
        self._log_info("Loaded patch.", path=fn, files=patch.total_files(), hunks=patch.total_hunks(), **opts)
        self._set_status(
            f"Loaded patch: {patch.total_files()} file(s), {patch.total_hunks()} hunk(s)",
            state="Patch loaded", warn=f"Boundary: {patch.boundary_token}",
        )
        return True

    def _remove_selected(self):
        addr = self._selected_address()
        if self.editor is None or addr is None:
            return
        level = addr["level"]
        try:
            if level == "file":
                self.editor.remove_file(addr["file_index"])
                detail = "file removed"
            elif level == "hunk":
                offset = self.editor.remove_hunk(addr["file_index"], addr["hunk_index"])
                detail = f"hunk removed, later hunks shifted by {offset:+d}"
            else:
                shift = self.editor.remove_line_change(addr["file_index"], addr["hunk_index"], addr["line_index"])
                detail = f"line removed, later hunks shifted by {shift:+d}" if shift else "context line, nothing to remove"
        except PatchError as e:
            self._log_error("Remove rejected.", error=str(e), address=addr)
            QMessageBox.warning(self, "Remove", str(e))
            return

        self.dirty = True
        self._log_info("Removed.", detail=detail, address=addr)
        self._set_status(detail, state="Edited", warn="Unsaved changes")
        self._refresh_views()

    def _set_paths_selected(self):
        addr = self._selected_address()
        if self.editor is None or addr is None:
            return
        fd = self.patch.file_diffs[addr["file_index"]]
        values, ok = self._paths_input(fd.original_path, fd.revised_path)
        if not ok:
            return
        try:
            self.editor.set_file_paths(addr["file_index"], values[0], values[1])
        except PatchError as e:
            QMessageBox.warning(self, "Set Paths", str(e))
            return
        self.dirty = True
        self._log_info("Paths set.", file_index=addr["file_index"], original=values[0], revised=values[1])
        self._refresh_views()

    def _save_patch(self):
        if self.patch is None:
            return
        default = self.loaded_file or "patch.diff"
        fn, _ = QFileDialog.getSaveFileName(self, "Save Patch", default, "Diff (*.diff *.patch *.txt);;All Files (*.*)")
        if not fn:
            return
        text = self.serializer.to_text(self.patch)
        try:
            Path(fn).write_text(text, encoding="utf-8", newline="")
        except OSError as e:
            QMessageBox.critical(self, "Save Failed", f"Could not save patch:\n{e}")
            return
        self.dirty = False
        self._log_info("Saved patch.", path=fn, bytes=len(text))
        self._set_status(f"Saved patch: {fn}", state="Saved", warn="")

    def _show_summary(self):
        if self.patch is None:
            return
        PatchSummaryDialog(self, self.patch).exec()

    def _toggle_advanced(self):
        self.adv_dock.setVisible(not self.adv_dock.isVisible())

    def _show_help(self):
        QMessageBox.information(
            self,
            "PatchTrim Help",
            "Workflow:\n"
            "1) Open Patch\n"
            "2) Select a file, hunk or line and press Remove\n"
            "   - removing an added line drops it\n"
            "   - removing a deleted line keeps it as context\n"
            "3) Save Patch\n\n"
            "Hunk headers are renumbered as you edit.\n"
            "Use Advanced to change the boundary token for multi-file patches."
        )

    def _run_selftests_ui(self):
        ok, report = PatchTrimSelfTests.run()
        if ok:
            QMessageBox.information(self, "Self Tests", "All self tests passed.\n\n" + report)
        else:
            QMessageBox.critical(self, "Self Tests", "One or more self tests failed.\n\n" + report)

    # ---------------- Selection Handling ----------------

    def _on_selection_changed(self):
        addr = self._selected_address()
        if addr is None:
            return
        self._set_status(
            f"Selected {addr['level']} (file {addr['file_index']}, hunk {addr['hunk_index']}, line {addr['line_index']})",
            state="Edited" if self.dirty else "View", warn="Unsaved changes" if self.dirty else "",
        )

    # ---------------- Dialog Helpers ----------------

    def _paths_input(self, original: str, revised: str) -> Tuple[Tuple[str, str], bool]:
        dlg = QDialog(self)
        dlg.setWindowTitle("Set File Paths")
        lay = QVBoxLayout(dlg)
        form = QFormLayout()
        orig_edit = QLineEdit(original)
        rev_edit = QLineEdit(revised)
        form.addRow("Original (--- a/)", orig_edit)
        form.addRow("Revised (+++ b/)", rev_edit)
        lay.addLayout(form)

        btns = QHBoxLayout()
        btns.addStretch(1)
        ok_btn = QPushButton("OK")
        cancel_btn = QPushButton("Cancel")
        btns.addWidget(ok_btn)
        btns.addWidget(cancel_btn)
        lay.addLayout(btns)

        ok_btn.clicked.connect(dlg.accept)
        cancel_btn.clicked.connect(dlg.reject)

        rc = dlg.exec()
        values = (orig_edit.text().strip(), rev_edit.text().strip())
        return values, (rc == QDialog.DialogCode.Accepted and all(values))

    # ---------------- Close Event ----------------

    def closeEvent(self, event):
        if self.dirty:
            rc = QMessageBox.question(self, "Unsaved Changes", "Discard unsaved edits to the patch?")
            if rc != QMessageBox.StandardButton.Yes:
                event.ignore()
                return
        event.accept()
