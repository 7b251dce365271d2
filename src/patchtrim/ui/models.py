"""PatchTrim UI: Qt models for the patch tree and tables."""

from __future__ import annotations

import json
import time
from typing import List, Dict, Any, Optional

from PyQt6.QtCore import Qt, QAbstractItemModel, QAbstractTableModel, QModelIndex
from PyQt6.QtGui import QBrush, QColor

from ..core.models import NO_LINE, LineKind, Patch


class _Node:
    """One row of the tree; carries the parse-time indices used by PatchEditor."""

    LEVEL_FILE = "file"
    LEVEL_HUNK = "hunk"
    LEVEL_LINE = "line"

    def __init__(self, level: str, payload: Any, parent: Optional["_Node"], row: int,
                 file_index: int, hunk_index: int = -1, line_index: int = -1):
        self.level = level
        self.payload = payload
        self.parent = parent
        self.row = row
        self.children: List["_Node"] = []
        self.file_index = file_index
        self.hunk_index = hunk_index
        self.line_index = line_index

    def address(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "file_index": self.file_index,
            "hunk_index": self.hunk_index,
            "line_index": self.line_index,
        }


class PatchTreeModel(QAbstractItemModel):
    """
    Files -> hunks -> lines, 3 columns:
      0 label (path, hunk header, or marker + content)
      1 original line number (or blank)
      2 revised line number (or blank)
    Tombstoned entries are not shown; rows keep their parse-time indices.
    """

    COL_LABEL = 0
    COL_OLD_NO = 1
    COL_NEW_NO = 2

    def __init__(self):
        super().__init__()
        self._roots: List[_Node] = []
        self._header = ["Patch", "Old", "New"]

        # Soft colors (explicit RGB)
        self._bg_context = QBrush(QColor(255, 255, 255))
        self._bg_add = QBrush(QColor(228, 246, 228))
        self._bg_del = QBrush(QColor(246, 228, 228))
        self._bg_hunk = QBrush(QColor(248, 248, 248))
        self._fg_default = QBrush(QColor(20, 20, 20))
        self._fg_marker = QBrush(QColor(120, 120, 120))

    # ---------------- Tree building ----------------

    def set_patch(self, patch: Optional[Patch]) -> None:
        self.beginResetModel()
        self._roots = []
        if patch is not None:
            for f_idx, fd in patch.live_file_diffs():
                f_node = _Node(_Node.LEVEL_FILE, fd, None, len(self._roots), f_idx)
                for h_idx, hunk in fd.live_hunks():
                    h_node = _Node(_Node.LEVEL_HUNK, hunk, f_node, len(f_node.children), f_idx, h_idx)
                    for l_idx, lc in hunk.live_lines():
                        h_node.children.append(
                            _Node(_Node.LEVEL_LINE, lc, h_node, len(h_node.children), f_idx, h_idx, l_idx)
                        )
                    f_node.children.append(h_node)
                self._roots.append(f_node)
        self.endResetModel()

    def node(self, index: QModelIndex) -> Optional[_Node]:
        if not index.isValid():
            return None
        return index.internalPointer()

    # ---------------- QAbstractItemModel ----------------

    def index(self, row: int, column: int, parent=QModelIndex()) -> QModelIndex:
        if not self.hasIndex(row, column, parent):
            return QModelIndex()
        siblings = self._roots if not parent.isValid() else parent.internalPointer().children
        if 0 <= row < len(siblings):
            return self.createIndex(row, column, siblings[row])
        return QModelIndex()

    def parent(self, index: QModelIndex) -> QModelIndex:
        if not index.isValid():
            return QModelIndex()
        node: _Node = index.internalPointer()
        if node.parent is None:
            return QModelIndex()
        return self.createIndex(node.parent.row, 0, node.parent)

    def rowCount(self, parent=QModelIndex()) -> int:
        if parent.column() > 0:
            return 0
        if not parent.isValid():
            return len(self._roots)
        return len(parent.internalPointer().children)

    def columnCount(self, parent=QModelIndex()) -> int:
        return 3

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.ItemDataRole.DisplayRole):
        if role != Qt.ItemDataRole.DisplayRole:
            return None
        if orientation == Qt.Orientation.Horizontal:
            return self._header[section] if 0 <= section < len(self._header) else ""
        return str(section + 1)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole):
        node = self.node(index)
        if node is None:
            return None
        c = index.column()

        if role == Qt.ItemDataRole.DisplayRole:
            if node.level == _Node.LEVEL_FILE:
                return node.payload.display_path if c == self.COL_LABEL else ""
            if node.level == _Node.LEVEL_HUNK:
                return node.payload.header_line() if c == self.COL_LABEL else ""
            lc = node.payload
            if c == self.COL_LABEL:
                return lc.to_line()
            if c == self.COL_OLD_NO:
                return "" if lc.original_line == NO_LINE else str(lc.original_line)
            if c == self.COL_NEW_NO:
                return "" if lc.revised_line == NO_LINE else str(lc.revised_line)
            return ""

        if role == Qt.ItemDataRole.TextAlignmentRole:
            if c in (self.COL_OLD_NO, self.COL_NEW_NO):
                return int(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
            return int(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter)

        if role == Qt.ItemDataRole.BackgroundRole:
            if node.level == _Node.LEVEL_HUNK:
                return self._bg_hunk
            if node.level == _Node.LEVEL_LINE:
                kind = node.payload.kind
                if kind is LineKind.INSERTION:
                    return self._bg_add
                if kind is LineKind.DELETION:
                    return self._bg_del
            return self._bg_context

        if role == Qt.ItemDataRole.ForegroundRole:
            if node.level == _Node.LEVEL_LINE and node.payload.kind is LineKind.NO_NEWLINE:
                return self._fg_marker
            return self._fg_default

        if role == Qt.ItemDataRole.ToolTipRole:
            if node.level == _Node.LEVEL_FILE:
                fd = node.payload
                return f"{fd.original_path_line}\n{fd.revised_path_line}"
            return None

        if role == Qt.ItemDataRole.UserRole:
            # expose the editor address of the row
            return node.address()

        return None


class LogTableModel(QAbstractTableModel):
    def __init__(self):
        super().__init__()
        self._rows: List[Dict[str, Any]] = []
        self._header = ["Time", "Level", "Message"]

    def rowCount(self, parent=QModelIndex()) -> int:
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent=QModelIndex()) -> int:
        return 0 if parent.isValid() else 3

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.ItemDataRole.DisplayRole):
        if role != Qt.ItemDataRole.DisplayRole:
            return None
        if orientation == Qt.Orientation.Horizontal:
            return self._header[section]
        return str(section + 1)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole):
        if not index.isValid():
            return None
        row = self._rows[index.row()]
        c = index.column()

        if role == Qt.ItemDataRole.DisplayRole:
            if c == 0:
                ts = row.get("ts", 0.0)
                return time.strftime("%H:%M:%S", time.localtime(ts))
            if c == 1:
                return row.get("level", "")
            if c == 2:
                return row.get("message", "")
        if role == Qt.ItemDataRole.ToolTipRole:
            # JSON details
            det = {k: v for k, v in row.items() if k not in ("ts", "level", "message")}
            if det:
                return json.dumps(det, indent=2, default=str)
        return None

    def append(self, entry: Dict[str, Any]) -> None:
        self.beginInsertRows(QModelIndex(), len(self._rows), len(self._rows))
        self._rows.append(entry)
        self.endInsertRows()

    def clear(self) -> None:
        self.beginResetModel()
        self._rows = []
        self.endResetModel()


class KeyValueTableModel(QAbstractTableModel):
    def __init__(self, rows: List[Dict[str, str]]):
        super().__init__()
        self._rows = rows
        self._header = ["Field", "Value"]

    def rowCount(self, parent=QModelIndex()) -> int:
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent=QModelIndex()) -> int:
        return 0 if parent.isValid() else 2

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.ItemDataRole.DisplayRole):
        if role != Qt.ItemDataRole.DisplayRole:
            return None
        if orientation == Qt.Orientation.Horizontal:
            return self._header[section]
        return str(section + 1)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole):
        if not index.isValid():
            return None
        row = self._rows[index.row()]
        if role == Qt.ItemDataRole.DisplayRole:
            return row["k"] if index.column() == 0 else row["v"]
        return None
