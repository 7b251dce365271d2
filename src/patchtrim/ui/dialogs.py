"""PatchTrim UI: dialogs."""

from __future__ import annotations

from typing import List, Dict

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QTableView,
    QAbstractItemView, QHeaderView
)

from ..core.models import LineKind, Patch
from .models import KeyValueTableModel


def summarize_patch(patch: Patch) -> List[Dict[str, str]]:
    live_files = patch.total_files()
    insertions = deletions = 0
    removed_hunks = 0
    for _, fd in patch.live_file_diffs():
        removed_hunks += fd.num_hunks() - sum(1 for _ in fd.live_hunks())
    for lc in patch.changes():
        if lc.kind is LineKind.INSERTION:
            insertions += 1
        elif lc.kind is LineKind.DELETION:
            deletions += 1
    return [
        {"k": "Boundary token", "v": patch.boundary_token},
        {"k": "Files", "v": str(live_files)},
        {"k": "Files removed", "v": str(patch.num_file_diffs() - live_files)},
        {"k": "Hunks", "v": str(patch.total_hunks())},
        {"k": "Hunks removed (in remaining files)", "v": str(removed_hunks)},
        {"k": "Insertions", "v": str(insertions)},
        {"k": "Deletions", "v": str(deletions)},
    ]


class PatchSummaryDialog(QDialog):
    def __init__(self, parent, patch: Patch):
        super().__init__(parent)
        self.setWindowTitle("Patch Summary")
        self.resize(520, 320)

        layout = QVBoxLayout(self)
        note = QLabel("Counts reflect the patch as it would be saved now.")
        layout.addWidget(note)

        self.table = QTableView()
        self.model = KeyValueTableModel(summarize_patch(patch))
        self.table.setModel(self.model)
        self.table.setSelectionMode(QAbstractItemView.SelectionMode.NoSelection)
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Interactive)
        self.table.setWordWrap(False)
        layout.addWidget(self.table)

        btns = QHBoxLayout()
        btns.addStretch(1)
        close_btn = QPushButton("Close")
        close_btn.clicked.connect(self.accept)
        btns.addWidget(close_btn)
        layout.addLayout(btns)
