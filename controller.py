"""
controller.py
- BatchCoordinator：持有文件列表（FileRecord）与批处理状态机
- 分类、变换、写出都在线程池中执行，结果通过排队信号送回持有者线程，
  所有 FileRecord 字段只在持有者线程中修改
"""

import os
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Qt, Signal, Slot

from classifier import classify
from config import apply_defaults, DecryptNaming
from destination import (
    PersistItem, PersistOutcome, persist, run_preflight, check_writable, DESTINATION_GONE_MESSAGE,
)
from errors import (
    BatchError, CycleActiveError, ErrorKind, InvalidFlowError, PreflightError, SecretError,
)
from logger import logger, log_user_action, log_system_event, track_error
from models import BatchFlow, BatchSummary, FileRecord, FileStatus, TransformMode, TransformResult
from transform import transform


class TaskSignals(QObject):
    classified = Signal(str, object, object)  # record_id, status, detail
    transformed = Signal(int, object)         # cycle_id, TransformResult
    persisted = Signal(int, object)           # cycle_id, List[PersistOutcome]


class ClassifyTask(QRunnable):

    def __init__(self, record_id: str, path: str, signals: TaskSignals):
        super().__init__()
        self.record_id = record_id
        self.path = path
        self.signals = signals

    @Slot()
    def run(self):
        try:
            status, detail = classify(self.path)
        except Exception as e:
            logger.error(f"Classification crashed for {self.path}", exc_info=True)
            status, detail = FileStatus.UNREADABLE, f"Unexpected error: {e}"
        self.signals.classified.emit(self.record_id, status, detail)


class TransformTask(QRunnable):

    def __init__(self, cycle_id: int, record: FileRecord, secret: str, mode: TransformMode,
                 destination: str, cancel_event: threading.Event, signals: TaskSignals):
        super().__init__()
        self.cycle_id = cycle_id
        self.record = record
        self.secret = secret
        self.mode = mode
        self.destination = destination
        self.cancel_event = cancel_event
        self.signals = signals

    @Slot()
    def run(self):
        try:
            result = transform(self.record, self.secret, self.mode, self.destination, self.cancel_event)
        except Exception as e:
            logger.error(f"Transform crashed for {self.record.path}", exc_info=True)
            result = TransformResult(record_id=self.record.id, success=False,
                                     failure_reason=f"Unexpected error: {e}",
                                     error_kind=ErrorKind.UNREADABLE)
        finally:
            self.secret = ""
        self.signals.transformed.emit(self.cycle_id, result)


class PersistTask(QRunnable):

    def __init__(self, cycle_id: int, items: List[PersistItem], destination: str,
                 naming: DecryptNaming, signals: TaskSignals):
        super().__init__()
        self.cycle_id = cycle_id
        self.items = items
        self.destination = destination
        self.naming = naming
        self.signals = signals

    @Slot()
    def run(self):
        try:
            outcomes = persist(self.items, self.destination, self.naming)
        except Exception as e:
            logger.error("Saving decrypted files crashed", exc_info=True)
            outcomes = [PersistOutcome(i.record_id, False, failure_reason=f"Unexpected error: {e}",
                                       error_kind=ErrorKind.WRITE_FAILED) for i in self.items]
        finally:
            self.items = []
        self.signals.persisted.emit(self.cycle_id, outcomes)


@dataclass
class _Cycle:
    id: int
    mode: TransformMode
    destination: str
    secret: str = field(repr=False)
    queue: List[str] = field(default_factory=list)
    snapshots: Dict[str, tuple] = field(default_factory=dict)
    names: Dict[str, str] = field(default_factory=dict)
    completed: List[str] = field(default_factory=list)
    succeeded: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    cancel_event: threading.Event = field(default_factory=threading.Event)
    persisting: bool = False
    in_flight: Optional[str] = None
    cancelling: bool = False

    @property
    def total(self) -> int:
        return len(self.snapshots)

    def names_of(self, record_ids: List[str]) -> List[str]:
        return [self.names[rid] for rid in record_ids]


class BatchCoordinator(QObject):
    """
    批处理协调器。
    - add() 为每个新路径创建 FileRecord 并异步分类
    - start_decrypt()/start_encrypt() 选择目标目录（加密会先做预检）
    - submit_secret() 开始一个处理周期，逐个文件顺序变换
    - 全部失败时进入 RETRY_PROMPT，retry() 以新密码重试，cancel() 回到 IDLE
    """

    record_changed = Signal(str)
    batch_changed = Signal()
    flow_changed = Signal(object)
    progress = Signal(int, int, str)
    cycle_finished = Signal(object)
    cycle_cancelled = Signal()
    error_occurred = Signal(str)

    def __init__(self, settings: Optional[dict] = None, thread_pool: Optional[QThreadPool] = None,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self.settings = apply_defaults(dict(settings or {}))
        self._pool = thread_pool or QThreadPool.globalInstance()
        self._records: List[FileRecord] = []
        self._flow = BatchFlow.IDLE
        self._pending_mode: Optional[TransformMode] = None
        self._pending_destination: Optional[str] = None
        self._cycle: Optional[_Cycle] = None
        self._cycle_counter = 0
        self._classifying = 0
        self._last_summary: Optional[BatchSummary] = None
        self._clear_pending = False

        self._signals = TaskSignals(self)
        self._signals.classified.connect(self._on_classified, Qt.QueuedConnection)
        self._signals.transformed.connect(self._on_transformed, Qt.QueuedConnection)
        self._signals.persisted.connect(self._on_persisted, Qt.QueuedConnection)

    # --- Batch state ---
    @property
    def records(self) -> tuple:
        return tuple(self._records)

    def record(self, record_id: str) -> Optional[FileRecord]:
        for item in self._records:
            if item.id == record_id:
                return item
        return None

    @property
    def flow(self) -> BatchFlow:
        return self._flow

    @property
    def mode(self) -> Optional[TransformMode]:
        return self._pending_mode

    @property
    def destination(self) -> Optional[str]:
        return self._pending_destination

    @property
    def last_summary(self) -> Optional[BatchSummary]:
        return self._last_summary

    @property
    def is_classifying(self) -> bool:
        return self._classifying > 0

    @property
    def is_cancelling(self) -> bool:
        return self._cycle is not None and self._cycle.cancelling

    @property
    def has_active_secret(self) -> bool:
        return self._cycle is not None and bool(self._cycle.secret)

    @property
    def has_any_files(self) -> bool:
        return bool(self._records)

    @property
    def has_eligible_for_decrypt(self) -> bool:
        return any(r.is_eligible(TransformMode.DECRYPT) for r in self._records)

    @property
    def has_eligible_for_encrypt(self) -> bool:
        return any(r.is_eligible(TransformMode.ENCRYPT) for r in self._records)

    # --- File list ---
    def add(self, paths: Iterable[str]) -> List[FileRecord]:
        """Add files; paths already in the batch are silently ignored."""
        known = {r.path for r in self._records}
        new_records = []
        for raw in paths:
            path = os.path.abspath(os.fspath(raw))
            if path in known:
                continue
            known.add(path)
            item = FileRecord(path=path)
            self._records.append(item)
            new_records.append(item)
            self._classifying += 1
            self._pool.start(ClassifyTask(item.id, item.path, self._signals))

        if new_records:
            log_user_action("add files", f"{len(new_records)} new", context="Batch")
            self.batch_changed.emit()
        return new_records

    def remove(self, record_id: str) -> None:
        item = self.record(record_id)
        if item is None:
            return
        if self._cycle is not None and record_id in self._cycle.snapshots:
            raise CycleActiveError("File is part of the running batch.", item.path)
        item.release()
        self._records.remove(item)
        log_user_action("remove file", item.name, context="Batch")
        self.batch_changed.emit()

    def clear(self) -> bool:
        """
        Drop every record; payloads are released first.

        While a file is still being transformed or decrypted files are being
        saved, the clear is deferred until the cycle has stopped and False
        is returned.
        """
        if self._flow == BatchFlow.PROCESSING:
            self.cancel()
            if self._cycle is not None:
                self._clear_pending = True
                logger.info("Clear deferred until the running batch stops")
                return False
        self._drop_all()
        return True

    def _drop_all(self) -> None:
        self._clear_pending = False
        for item in self._records:
            item.release()
        self._records.clear()
        if self._flow in (BatchFlow.DESTINATION_CHOSEN, BatchFlow.RETRY_PROMPT):
            self._reset_pending()
            self._set_flow(BatchFlow.IDLE)
        log_user_action("clear all", context="Batch")
        self.batch_changed.emit()

    def describe(self, record_id: str) -> str:
        item = self.record(record_id)
        if item is None:
            return ""
        if item.status == FileStatus.FAILED:
            action = "decryption" if item.failed_mode == TransformMode.DECRYPT else "encryption"
            return item.error_detail or f"Unknown error occurred during {action}."
        if item.status == FileStatus.UNREADABLE:
            return item.error_detail or "This file could not be read and may be corrupted or not a valid PDF file."
        if item.status == FileStatus.CLEAR:
            return "This file is a valid PDF but is not encrypted, so no decryption is needed."
        if item.status == FileStatus.ENCRYPTED:
            return "This file is password protected."
        if item.status == FileStatus.SUCCEEDED:
            return f"Saved to: {item.output_path}" if item.output_path else "Processed successfully."
        if item.status == FileStatus.PROCESSING:
            return "Processing..."
        return "Checking file..."

    # --- Flow: choose destination ---
    def start_decrypt(self, destination: str) -> None:
        self._choose_destination(TransformMode.DECRYPT, destination)

    def start_encrypt(self, destination: str) -> None:
        self._choose_destination(TransformMode.ENCRYPT, destination)

    def _choose_destination(self, mode: TransformMode, destination: str) -> None:
        if self._flow == BatchFlow.PROCESSING:
            raise CycleActiveError("A batch is already being processed.")
        destination = os.path.abspath(os.fspath(destination))
        log_user_action(f"choose destination ({mode.value})", destination, context="Batch")
        try:
            if mode == TransformMode.ENCRYPT:
                run_preflight(self._records, destination, check_space=True)
            elif self.settings["decrypt_preflight"]:
                check_writable(destination)
            elif not os.path.isdir(destination):
                raise PreflightError(DESTINATION_GONE_MESSAGE, destination)
        except PreflightError as e:
            self._fail_flow(e)
            raise
        self._pending_mode = mode
        self._pending_destination = destination
        self._set_flow(BatchFlow.DESTINATION_CHOSEN)

    # --- Flow: run a cycle ---
    def submit_secret(self, secret: str) -> None:
        if self._flow == BatchFlow.PROCESSING:
            raise CycleActiveError("A batch is already being processed.")
        if self._flow not in (BatchFlow.DESTINATION_CHOSEN, BatchFlow.RETRY_PROMPT):
            raise InvalidFlowError("Choose a destination before entering a password.")
        if not secret:
            raise SecretError("Password must not be empty.")

        mode, destination = self._pending_mode, self._pending_destination
        if not os.path.isdir(destination):
            error = PreflightError(DESTINATION_GONE_MESSAGE, destination)
            self._fail_flow(error)
            raise error

        eligible = [r for r in self._records if r.is_eligible(mode)]
        if not eligible:
            logger.info(f"No files eligible for {mode.value}; nothing to do")
            self._last_summary = BatchSummary(mode=mode)
            self._reset_pending()
            self._set_flow(BatchFlow.IDLE)
            self.cycle_finished.emit(self._last_summary)
            return

        self._cycle_counter += 1
        cycle = _Cycle(id=self._cycle_counter, mode=mode, destination=destination, secret=secret)
        for item in eligible:
            cycle.queue.append(item.id)
            cycle.snapshots[item.id] = item.snapshot()
            cycle.names[item.id] = item.name
            item.apply_status(FileStatus.PROCESSING)
            self.record_changed.emit(item.id)
        self._cycle = cycle
        log_system_event(f"{mode.value} cycle started", f"{cycle.total} file(s)", context="Batch")
        self._set_flow(BatchFlow.PROCESSING)
        self.batch_changed.emit()
        self._dispatch_next()

    def retry(self, secret: str) -> None:
        if self._flow != BatchFlow.RETRY_PROMPT:
            raise InvalidFlowError("Nothing to retry.")
        self.submit_secret(secret)

    def cancel(self) -> bool:
        """
        Stop the current cycle between files (or leave the destination/retry prompt).
        Files not yet processed return to their status from before the cycle.

        A file that is already being transformed is allowed to finish first;
        until its result arrives the flow stays PROCESSING and
        ``is_cancelling`` is True, so no new cycle can start.
        """
        if self._flow in (BatchFlow.DESTINATION_CHOSEN, BatchFlow.RETRY_PROMPT):
            log_user_action("cancel", self._flow.value, context="Batch")
            self._reset_pending()
            self._set_flow(BatchFlow.IDLE)
            return True
        cycle = self._cycle
        if cycle is None:
            return False
        if cycle.persisting:
            logger.warning("Decrypted files are being saved; cancel ignored")
            return False
        if cycle.cancelling:
            return True

        cycle.cancel_event.set()
        log_user_action("cancel", f"{len(cycle.completed)}/{cycle.total} done", context="Batch")
        if cycle.in_flight is not None:
            # 当前文件处理完成后再停止，期间仍拒绝开始新的周期
            cycle.cancelling = True
            logger.info(f"Waiting for {cycle.names.get(cycle.in_flight)} to finish before stopping")
            return True
        self._finish_cancel()
        return True

    def _finish_cancel(self) -> None:
        cycle = self._cycle
        for record_id, snapshot in cycle.snapshots.items():
            item = self.record(record_id)
            if item is None:
                continue
            # 解密结果尚未写出，取消时一并丢弃
            undo = record_id not in cycle.completed or (
                cycle.mode == TransformMode.DECRYPT and item.status == FileStatus.SUCCEEDED)
            if undo:
                item.restore(snapshot)
                self.record_changed.emit(record_id)

        self._last_summary = BatchSummary(
            mode=cycle.mode,
            succeeded=[] if cycle.mode == TransformMode.DECRYPT else cycle.names_of(cycle.succeeded),
            failed=[(cycle.names[rid], reason) for rid, reason in cycle.failed.items()],
            cancelled=True,
        )
        self._end_cycle()
        self._reset_pending()
        self._set_flow(BatchFlow.IDLE)
        self.batch_changed.emit()
        self.cycle_cancelled.emit()
        if self._clear_pending:
            self._drop_all()

    # --- Internal ---
    def _dispatch_next(self) -> None:
        cycle = self._cycle
        while cycle.queue:
            if cycle.cancel_event.is_set():
                return
            record_id = cycle.queue.pop(0)
            item = self.record(record_id)
            if item is None:
                continue
            cycle.in_flight = record_id
            self._pool.start(TransformTask(cycle.id, item, cycle.secret, cycle.mode,
                                           cycle.destination, cycle.cancel_event, self._signals))
            return
        self._finish_transforms()

    def _finish_transforms(self) -> None:
        cycle = self._cycle
        if cycle.mode == TransformMode.DECRYPT and cycle.succeeded:
            items = []
            for record_id in cycle.succeeded:
                item = self.record(record_id)
                if item is not None and item.pending_result is not None:
                    items.append(PersistItem(item.id, item.path, item.pending_result))
            cycle.persisting = True
            naming = DecryptNaming(self.settings["decrypt_naming"])
            self._pool.start(PersistTask(cycle.id, items, cycle.destination, naming, self._signals))
            return
        self._complete_cycle()

    def _complete_cycle(self) -> None:
        cycle = self._cycle
        summary = BatchSummary(
            mode=cycle.mode,
            succeeded=cycle.names_of(cycle.succeeded),
            failed=[(cycle.names[rid], reason) for rid, reason in cycle.failed.items()],
        )
        self._last_summary = summary
        self._end_cycle()
        log_system_event(f"{cycle.mode.value} cycle finished",
                         f"{summary.success_count} succeeded, {summary.failure_count} failed", context="Batch")
        if summary.all_failed:
            # 保留目标目录，只需输入新密码即可重试
            self._set_flow(BatchFlow.RETRY_PROMPT)
        else:
            self._reset_pending()
            self._set_flow(BatchFlow.IDLE)
        self.batch_changed.emit()
        self.cycle_finished.emit(summary)
        if self._clear_pending:
            self._drop_all()

    def _end_cycle(self) -> None:
        if self._cycle is not None:
            self._cycle.secret = ""
        self._cycle = None

    def _reset_pending(self) -> None:
        self._pending_mode = None
        self._pending_destination = None

    def _fail_flow(self, error: BatchError) -> None:
        track_error(ErrorKind.PREFLIGHT_FAILED.value, str(error))
        self._reset_pending()
        self._set_flow(BatchFlow.IDLE)
        self.error_occurred.emit(error.message)

    def _set_flow(self, flow: BatchFlow) -> None:
        if flow != self._flow:
            logger.debug(f"Batch flow: {self._flow.value} -> {flow.value}")
            self._flow = flow
            self.flow_changed.emit(flow)

    # --- Slots (always run on the owner thread) ---
    @Slot(str, object, object)
    def _on_classified(self, record_id: str, status: FileStatus, detail: Optional[str]) -> None:
        self._classifying = max(0, self._classifying - 1)
        item = self.record(record_id)
        if item is None or item.status != FileStatus.CHECKING:
            return
        kind = ErrorKind.UNREADABLE if status == FileStatus.UNREADABLE else None
        item.apply_status(status, detail, kind)
        if kind is not None:
            track_error(kind.value, f"{item.name}: {detail}")
        self.record_changed.emit(record_id)
        self.batch_changed.emit()

    @Slot(int, object)
    def _on_transformed(self, cycle_id: int, result: TransformResult) -> None:
        cycle = self._cycle
        if cycle is None or cycle.id != cycle_id:
            logger.debug(f"Discarding result from finished cycle {cycle_id}")
            return
        cycle.in_flight = None
        item = self.record(result.record_id)
        if item is None or result.skipped:
            if cycle.cancelling:
                self._finish_cancel()
            return

        if result.success:
            item.apply_status(FileStatus.SUCCEEDED)
            item.pending_result = result.payload
            item.output_path = result.output_path
            cycle.succeeded.append(item.id)
        else:
            item.apply_status(FileStatus.FAILED, result.failure_reason, result.error_kind, cycle.mode)
            kind = result.error_kind.value if result.error_kind else "unknown"
            track_error(kind, f"{item.name}: {result.failure_reason}")
            cycle.failed[item.id] = item.error_detail
        cycle.completed.append(item.id)

        self.record_changed.emit(item.id)
        if cycle.cancelling:
            self._finish_cancel()
            return
        self.batch_changed.emit()
        self.progress.emit(len(cycle.completed), cycle.total, item.name)
        if self._cycle is not cycle:
            return  # cancelled by a listener
        self._dispatch_next()

    @Slot(int, object)
    def _on_persisted(self, cycle_id: int, outcomes: List[PersistOutcome]) -> None:
        cycle = self._cycle
        if cycle is None or cycle.id != cycle_id:
            return
        for outcome in outcomes:
            item = self.record(outcome.record_id)
            if item is None:
                continue
            if outcome.success:
                item.output_path = outcome.output_path
            else:
                item.apply_status(FileStatus.FAILED, outcome.failure_reason, outcome.error_kind, cycle.mode)
                track_error(ErrorKind.WRITE_FAILED.value, f"{item.name}: {outcome.failure_reason}")
                cycle.succeeded.remove(item.id)
                cycle.failed[item.id] = item.error_detail
            self.record_changed.emit(item.id)
        # 无论写出成功与否都丢弃内存中的结果
        for record_id in cycle.snapshots:
            item = self.record(record_id)
            if item is not None:
                item.release()
        self._complete_cycle()
