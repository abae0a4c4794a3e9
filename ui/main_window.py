# main_window.py
import os
from typing import Optional

# PySide6 imports - 统一管理
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QLabel, QFileDialog, QMessageBox, QDialog
)
from PySide6.QtCore import QTimer

# 应用模块
from config import APP_NAME, APP_VERSION, load_settings, save_settings, apply_defaults
from controller import BatchCoordinator
from errors import BatchError
from folder_importer import filter_pdf_files
from logger import logger, log_and_display_error, log_error_summary
from models import BatchFlow, BatchSummary, TransformMode
from ui.components.file_table import FileTableManager
from ui.dialogs.password_dialog import PasswordDialog

# 导入语言管理器
from ui.i18n.locale_manager import get_locale_manager


class MainWindow(QMainWindow):
    """
    应用程序主窗口。
    - 只负责布局和用户交互，所有批处理逻辑委托给 BatchCoordinator。
    - 通过协调器发出的信号刷新文件列表和按钮状态。
    """

    def __init__(self, settings: Optional[dict] = None):
        super().__init__()
        self.settings = apply_defaults(settings if settings is not None else load_settings())

        # 使用语言管理器
        self.locale_manager = get_locale_manager(self.settings["language"])
        self._ = self.locale_manager._

        self.setWindowTitle(f"{APP_NAME} - PDF Batch Encrypt & Decrypt")
        self.resize(900, 600)
        self.coordinator = BatchCoordinator(self.settings, parent=self)

        # 创建状态栏
        self.statusBar = self.statusBar()
        self.statusBar.showMessage(self._("Ready"))

        self.file_table_manager = FileTableManager(self)
        self._setup_ui()
        self._connect_signals()

        self.setAcceptDrops(True)
        self._update_ui_state()

    # --- UI Setup Methods ---
    def _setup_ui(self):
        central = QWidget()
        layout = QVBoxLayout(central)
        hint = QLabel("🔐 " + APP_NAME + f" v{APP_VERSION}")
        hint.setStyleSheet("font-size: 16px; font-weight: bold; color: #2c3e50;")
        layout.addWidget(hint)
        layout.addLayout(self.file_table_manager.create_table_area())
        self.setCentralWidget(central)
        self.file_table.cellDoubleClicked.connect(self._show_record_details)

    def _connect_signals(self):
        c = self.coordinator
        c.record_changed.connect(self._on_record_changed)
        c.batch_changed.connect(self._on_batch_changed)
        c.flow_changed.connect(lambda _flow: self._update_ui_state())
        c.progress.connect(self.update_progress)
        c.cycle_finished.connect(self.on_cycle_finished)
        c.cycle_cancelled.connect(lambda: self.statusBar.showMessage(self._("Ready")))
        c.error_occurred.connect(self.statusBar.showMessage)

    def _update_ui_state(self):
        c = self.coordinator
        busy = c.flow == BatchFlow.PROCESSING
        self.add_button.setEnabled(not busy)
        self.remove_button.setEnabled(not busy and c.has_any_files)
        self.clear_button.setEnabled(c.has_any_files)
        self.decrypt_button.setEnabled(not busy and c.has_eligible_for_decrypt)
        self.encrypt_button.setEnabled(not busy and c.has_eligible_for_encrypt)
        self.cancel_button.setEnabled(busy)

    # --- File list ---
    def import_files(self):
        """打开文件对话框以导入PDF文件"""
        paths, _ = QFileDialog.getOpenFileNames(self, self._("Select PDF Files"), "", "PDF Files (*.pdf)")
        if paths:
            self.process_imported_paths(paths)

    def dragEnterEvent(self, event):
        if event.mimeData().hasUrls():
            event.acceptProposedAction()

    def dropEvent(self, event):
        """处理文件拖放（文件夹会被递归展开）"""
        if not event.mimeData().hasUrls():
            return
        paths = [url.toLocalFile() for url in event.mimeData().urls() if url.isLocalFile()]
        pdfs = filter_pdf_files(paths)
        if not pdfs:
            QMessageBox.warning(self, self._("Invalid Files"), self._("Only PDF files can be imported."))
            return
        self.process_imported_paths(pdfs)
        event.acceptProposedAction()

    def process_imported_paths(self, paths: list):
        added = self.coordinator.add(filter_pdf_files(paths))
        logger.info(f"Imported {len(added)} new file(s)")

    def remove_selected_items(self):
        for record_id in self.file_table_manager.selected_record_ids():
            try:
                self.coordinator.remove(record_id)
            except BatchError as e:
                self.show_error(str(e))

    def clear_file_list(self):
        """清空文件列表"""
        self.coordinator.clear()

    def _show_record_details(self, row: int, _column: int):
        record_id = self.file_table_manager.record_id_at(row)
        if record_id:
            QMessageBox.information(self, self._("File Details"), self.coordinator.describe(record_id))

    # --- Batch flow ---
    def start_decrypt(self):
        self._start(TransformMode.DECRYPT)

    def start_encrypt(self):
        self._start(TransformMode.ENCRYPT)

    def _start(self, mode: TransformMode):
        caption = ("Choose a folder to save the encrypted PDF files" if mode == TransformMode.ENCRYPT
                   else "Choose a folder to save the decrypted PDF files")
        start_dir = self.settings.get("last_destination") or os.path.expanduser("~/Downloads")
        destination = QFileDialog.getExistingDirectory(self, self._(caption), start_dir)
        if not destination:
            return
        try:
            if mode == TransformMode.ENCRYPT:
                self.coordinator.start_encrypt(destination)
            else:
                self.coordinator.start_decrypt(destination)
        except BatchError as e:
            QMessageBox.warning(self, self._("Cannot Start"), e.message)
            return
        self.settings["last_destination"] = destination
        self._ask_password(mode, is_retry=False)

    def _ask_password(self, mode: TransformMode, is_retry: bool):
        dialog = PasswordDialog(mode, self._, is_retry=is_retry, parent=self)
        if dialog.exec() != QDialog.Accepted:
            self.coordinator.cancel()
            return
        try:
            self.coordinator.submit_secret(dialog.take_secret())
        except BatchError as e:
            QMessageBox.warning(self, self._("Cannot Start"), e.message)

    def cancel_processing(self):
        self.coordinator.cancel()
        if self.coordinator.is_cancelling:
            self.cancel_button.setEnabled(False)
            self.statusBar.showMessage(self._("Cancelling..."))

    def on_cycle_finished(self, summary: BatchSummary):
        """处理完成后的回调函数"""
        self.progress_bar.setVisible(False)
        self.statusBar.showMessage(self._("Ready"))
        if self.coordinator.flow == BatchFlow.RETRY_PROMPT:
            # 全部失败：等当前信号处理完再弹出重试对话框
            QTimer.singleShot(0, lambda: self._ask_password(summary.mode, is_retry=True))
            return
        QMessageBox.information(self, self._("Processing Complete"), summary.message())

    def update_progress(self, current: int, total: int, filename: str):
        """更新进度条和状态栏"""
        self.progress_bar.setVisible(True)
        self.progress_bar.setMaximum(total)
        self.progress_bar.setValue(current)
        self.statusBar.showMessage(f"{self._('Processing')} {current}/{total}: {filename}")

    def _on_record_changed(self, record_id: str):
        record = self.coordinator.record(record_id)
        if record is not None:
            self.file_table_manager.update_record(record)

    def _on_batch_changed(self):
        records = self.coordinator.records
        if self.file_table.rowCount() != len(records):
            self.file_table_manager.populate(records)
        self._update_ui_state()

    def show_error(self, message: str, exception: Exception = None):
        """显示错误信息对话框和日志"""
        log_and_display_error(f"UI Error: {message}", exception)
        QMessageBox.critical(self, "Error", f"{message}\n\n{str(exception or '')}".strip())

    def closeEvent(self, event):
        """在关闭应用前保存设置"""
        self.coordinator.clear()
        save_settings(self.settings)
        log_error_summary()
        event.accept()
