# file_table.py - 文件表格组件
"""
文件表格组件模块
负责文件列表的创建，以及根据 BatchCoordinator 的记录刷新行内容
"""

from PySide6.QtWidgets import (
    QHBoxLayout, QVBoxLayout, QGroupBox, QTableWidget, QTableWidgetItem, QHeaderView,
    QPushButton, QAbstractItemView, QProgressBar
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QColor

from config import TABLE_COLUMNS
from models import FileStatus

STATUS_TEXT = {
    FileStatus.CHECKING: "Checking...",
    FileStatus.ENCRYPTED: "Encrypted",
    FileStatus.CLEAR: "Not Encrypted",
    FileStatus.UNREADABLE: "Unreadable",
    FileStatus.PROCESSING: "Processing...",
    FileStatus.SUCCEEDED: "Succeeded",
    FileStatus.FAILED: "Failed",
}

STATUS_ICON = {
    FileStatus.CHECKING: "⏳",
    FileStatus.ENCRYPTED: "🔒",
    FileStatus.CLEAR: "📄",
    FileStatus.UNREADABLE: "⚠️",
    FileStatus.PROCESSING: "⏳",
    FileStatus.SUCCEEDED: "✅",
    FileStatus.FAILED: "❌",
}

STATUS_COLOR = {
    FileStatus.UNREADABLE: "#e67e22",
    FileStatus.SUCCEEDED: "#27ae60",
    FileStatus.FAILED: "#c0392b",
}

ID_ROLE = Qt.UserRole + 1


class FileTableManager:
    """文件表格管理器"""

    def __init__(self, main_window):
        self.main_window = main_window
        self._ = main_window._

    def create_table_area(self) -> QHBoxLayout:
        """创建文件列表及右侧的控制按钮"""
        layout = QHBoxLayout()
        layout.setSpacing(10)
        layout.setContentsMargins(10, 10, 10, 10)

        table_group = QGroupBox("📋 " + self._("File List"))
        table_group_layout = QVBoxLayout()
        table_group_layout.setContentsMargins(10, 10, 10, 10)

        table = QTableWidget()
        table.setColumnCount(len(TABLE_COLUMNS))
        table.setHorizontalHeaderLabels([self._(title) for title in TABLE_COLUMNS])
        table.setSelectionBehavior(QAbstractItemView.SelectRows)
        table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        table.setAlternatingRowColors(True)
        table.verticalHeader().setVisible(False)

        header = table.horizontalHeader()
        header.setSectionResizeMode(0, QHeaderView.ResizeToContents)  # 序号列
        header.setSectionResizeMode(1, QHeaderView.Stretch)           # 文件名（拉伸填充）
        header.setSectionResizeMode(2, QHeaderView.ResizeToContents)  # 大小
        header.setSectionResizeMode(3, QHeaderView.ResizeToContents)  # 状态
        header.setDefaultAlignment(Qt.AlignLeft | Qt.AlignVCenter)
        self.main_window.file_table = table

        self.main_window.progress_bar = QProgressBar()
        self.main_window.progress_bar.setVisible(False)

        table_group_layout.addWidget(table)
        table_group_layout.addWidget(self.main_window.progress_bar)
        table_group.setLayout(table_group_layout)

        layout.addWidget(table_group, 1)
        layout.addWidget(self._create_control_buttons())
        return layout

    def _create_control_buttons(self) -> QGroupBox:
        group = QGroupBox()
        controls_layout = QVBoxLayout()
        controls_layout.setSpacing(8)

        buttons = [
            ("add_button", "➕ " + self._("Add Files..."), self.main_window.import_files),
            ("remove_button", "🗑️ " + self._("Remove Selected"), self.main_window.remove_selected_items),
            ("clear_button", "🧹 " + self._("Clear All"), self.main_window.clear_file_list),
            ("decrypt_button", "🔓 " + self._("Decrypt..."), self.main_window.start_decrypt),
            ("encrypt_button", "🔒 " + self._("Encrypt..."), self.main_window.start_encrypt),
            ("cancel_button", "⏹ " + self._("Cancel"), self.main_window.cancel_processing),
        ]
        for attr, text, slot in buttons:
            button = QPushButton(text)
            button.setMinimumHeight(35)
            button.clicked.connect(slot)
            setattr(self.main_window, attr, button)
            controls_layout.addWidget(button)

        controls_layout.addStretch()
        group.setLayout(controls_layout)
        return group

    def populate(self, records):
        """用文件记录完全重建表格"""
        table = self.main_window.file_table
        table.setRowCount(0)
        table.setRowCount(len(records))
        for row, record in enumerate(records):
            index_item = QTableWidgetItem(str(row + 1))
            index_item.setData(ID_ROLE, record.id)
            table.setItem(row, 0, index_item)
            table.setItem(row, 1, QTableWidgetItem(record.name))
            table.setItem(row, 2, QTableWidgetItem(f"{record.size_mb:.2f}"))
            self._set_status_cell(row, record)

    def update_record(self, record):
        """只刷新某一条记录所在行的状态列"""
        row = self.row_of(record.id)
        if row >= 0:
            self._set_status_cell(row, record)

    def row_of(self, record_id: str) -> int:
        table = self.main_window.file_table
        for row in range(table.rowCount()):
            cell = table.item(row, 0)
            if cell is not None and cell.data(ID_ROLE) == record_id:
                return row
        return -1

    def record_id_at(self, row: int):
        cell = self.main_window.file_table.item(row, 0)
        return cell.data(ID_ROLE) if cell is not None else None

    def selected_record_ids(self) -> list:
        rows = sorted({index.row() for index in self.main_window.file_table.selectionModel().selectedRows()})
        return [rid for rid in (self.record_id_at(r) for r in rows) if rid]

    def _set_status_cell(self, row: int, record):
        text = f"{STATUS_ICON[record.status]} {self._(STATUS_TEXT[record.status])}"
        cell = QTableWidgetItem(text)
        if record.error_detail:
            cell.setToolTip(record.error_detail)
        color = STATUS_COLOR.get(record.status)
        if color:
            cell.setForeground(QColor(color))
        self.main_window.file_table.setItem(row, 3, cell)
