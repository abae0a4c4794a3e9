import os
import uuid
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from enum import Enum

from errors import ErrorKind


class FileStatus(str, Enum):
    CHECKING = "checking"
    ENCRYPTED = "encrypted"
    CLEAR = "clear"
    UNREADABLE = "unreadable"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class TransformMode(str, Enum):
    DECRYPT = "decrypt"
    ENCRYPT = "encrypt"


class BatchFlow(str, Enum):
    IDLE = "idle"
    DESTINATION_CHOSEN = "destination_chosen"
    PROCESSING = "processing"
    RETRY_PROMPT = "retry_prompt"


# 只有这两种状态会携带 error_detail
DETAIL_STATUSES = (FileStatus.UNREADABLE, FileStatus.FAILED)


@dataclass
class FileRecord:
    """
    Represents a single tracked input file in the batch list.
    `id` and `path` never change after creation; everything else is owned
    and mutated by the BatchCoordinator on its own thread.
    """
    path: str                                   # Full source file path
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    status: FileStatus = FileStatus.CHECKING
    error_detail: Optional[str] = None          # Present iff status in DETAIL_STATUSES
    error_kind: Optional[ErrorKind] = None
    failed_mode: Optional[TransformMode] = None # Which transform produced FAILED
    pending_result: Optional[bytes] = field(default=None, repr=False)  # Decrypted payload awaiting write
    output_path: Optional[str] = None           # Where the last successful output landed

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @property
    def size_mb(self) -> float:
        try:
            return round(os.path.getsize(self.path) / (1024 * 1024), 2)
        except OSError:
            return 0.0

    def is_eligible(self, mode: TransformMode) -> bool:
        """Decrypt picks up ENCRYPTED and decrypt failures; encrypt picks up CLEAR and encrypt failures."""
        if self.status == FileStatus.FAILED:
            return self.failed_mode == mode
        if mode == TransformMode.DECRYPT:
            return self.status == FileStatus.ENCRYPTED
        return self.status == FileStatus.CLEAR

    def apply_status(
        self,
        status: FileStatus,
        detail: Optional[str] = None,
        kind: Optional[ErrorKind] = None,
        mode: Optional[TransformMode] = None,
    ) -> None:
        # 状态离开 SUCCEEDED 时立即释放内存中的解密结果
        if status != FileStatus.SUCCEEDED:
            self.pending_result = None
        self.status = status
        if status in DETAIL_STATUSES:
            self.error_detail = detail or "Unknown error."
            self.error_kind = kind
        else:
            self.error_detail = None
            self.error_kind = None
        self.failed_mode = mode if status == FileStatus.FAILED else None

    def snapshot(self) -> Tuple[FileStatus, Optional[str], Optional[ErrorKind], Optional[TransformMode]]:
        return (self.status, self.error_detail, self.error_kind, self.failed_mode)

    def restore(self, snapshot) -> None:
        status, detail, kind, mode = snapshot
        self.apply_status(status, detail, kind, mode)

    def release(self) -> None:
        self.pending_result = None


@dataclass
class TransformResult:
    """
    Represents the result of one transform on a single PDF.
    """
    record_id: str
    success: bool
    payload: Optional[bytes] = field(default=None, repr=False)  # Decrypt only
    output_path: Optional[str] = None           # Encrypt only (written directly)
    failure_reason: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    skipped: bool = False                       # Cancelled before the worker started


@dataclass
class BatchSummary:
    """Outcome of one cycle, the primary user-visible signal."""
    mode: TransformMode
    succeeded: List[str] = field(default_factory=list)         # file names
    failed: List[Tuple[str, str]] = field(default_factory=list)  # (file name, reason)
    cancelled: bool = False

    @property
    def success_count(self) -> int:
        return len(self.succeeded)

    @property
    def failure_count(self) -> int:
        return len(self.failed)

    @property
    def is_noop(self) -> bool:
        return not self.cancelled and not self.succeeded and not self.failed

    @property
    def any_succeeded(self) -> bool:
        return self.success_count > 0

    @property
    def all_failed(self) -> bool:
        return self.failure_count > 0 and self.success_count == 0

    def message(self) -> str:
        if self.cancelled:
            return "Processing was cancelled."
        verb = "decrypted" if self.mode == TransformMode.DECRYPT else "encrypted"
        final_message = ""
        if self.succeeded:
            final_message = f"Successfully {verb} and saved {self.success_count} file(s)."
        if self.failed:
            lines = "\n".join(f"• {name}: {reason}" for name, reason in self.failed)
            final_message += "\n\nErrors:\n" + lines
        return final_message.strip() or "No files were processed."
