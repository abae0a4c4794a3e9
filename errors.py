"""
errors.py
- 批处理错误分类与异常定义
- 单文件错误（UNREADABLE / WRONG_SECRET / WRITE_FAILED）只记录在对应的 FileRecord 上，
  批次级错误（PREFLIGHT_FAILED 等）以异常形式同步抛给调用方
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    ACCESS_DENIED = "access_denied"
    UNREADABLE = "unreadable"
    WRONG_SECRET = "wrong_secret"
    WRITE_FAILED = "write_failed"
    PREFLIGHT_FAILED = "preflight_failed"
    CANCELLED = "cancelled"


class BatchError(Exception):
    """Base exception for all CryptDeck errors."""

    kind: Optional[ErrorKind] = None

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.message} ({self.path})"
        return self.message


class AccessDeniedError(BatchError):
    """没有读取/写入指定路径的权限（或路径不存在）。"""
    kind = ErrorKind.ACCESS_DENIED


class UnreadableError(BatchError):
    """文件不是有效的 PDF，或无法被解析。"""
    kind = ErrorKind.UNREADABLE


class WrongSecretError(BatchError):
    """当提供的密码不正确时引发的异常。"""
    kind = ErrorKind.WRONG_SECRET


class WriteFailedError(BatchError):
    kind = ErrorKind.WRITE_FAILED


class PreflightError(BatchError):
    """Destination failed the write-permission or free-space check."""
    kind = ErrorKind.PREFLIGHT_FAILED


class CycleActiveError(BatchError):
    """A batch cycle is already running; only one may be active at a time."""


class InvalidFlowError(BatchError):
    """The requested transition is not allowed from the current flow state."""


class SecretError(BatchError):
    """Empty password, or password and confirmation do not match."""
