"""
transform.py
- 单个文件的加密 / 解密变换（在工作线程中执行）
- 解密：结果保存在内存中，由 destination.persist 写出
- 加密：直接写入目标目录（流式，不在内存中保留结果）
"""

import threading
from typing import Optional

from logger import logger, log_performance
from errors import BatchError, ErrorKind, WriteFailedError, WrongSecretError
from file_namer import resolve_output_path
from models import FileRecord, TransformMode, TransformResult
from pdf_crypto import open_document

WRONG_SECRET_MESSAGE = "Wrong password."
WRITE_ENCRYPTED_MESSAGE = "Failed to write encrypted file."


def _failure(record_id: str, reason: str, kind: Optional[ErrorKind]) -> TransformResult:
    return TransformResult(record_id=record_id, success=False, failure_reason=reason, error_kind=kind)


@log_performance("decrypt", context="TransformWorker")
def decrypt_file(record_id: str, path: str, secret: str) -> TransformResult:
    try:
        with open_document(path) as doc:
            if not doc.unlock(secret):
                # 不区分“密码错误”与其他解锁失败
                raise WrongSecretError(WRONG_SECRET_MESSAGE, path)
            payload = doc.to_bytes()
        logger.info(f"成功解密文件（内存中）: '{path}' ({len(payload)} bytes)")
        return TransformResult(record_id=record_id, success=True, payload=payload)
    except BatchError as e:
        logger.warning(f"解密失败: {e}")
        return _failure(record_id, e.message, e.kind)
    except Exception as e:
        logger.error(f"处理文件时发生未知错误: {path}。", exc_info=True)
        return _failure(record_id, f"Unexpected error: {e}", ErrorKind.UNREADABLE)


@log_performance("encrypt", context="TransformWorker")
def encrypt_file(record_id: str, path: str, secret: str, destination: str) -> TransformResult:
    try:
        with open_document(path) as doc:
            output_path = resolve_output_path(path, destination, TransformMode.ENCRYPT)
            if not doc.write(output_path, password=secret):
                raise WriteFailedError(WRITE_ENCRYPTED_MESSAGE, output_path)
        logger.info(f"文件 '{path}' 已加密，输出保存到: {output_path}")
        return TransformResult(record_id=record_id, success=True, output_path=output_path)
    except BatchError as e:
        logger.warning(f"加密失败: {e}")
        return _failure(record_id, e.message, e.kind)
    except Exception as e:
        logger.error(f"处理文件时发生未知错误: {path}。", exc_info=True)
        return _failure(record_id, f"Unexpected error: {e}", ErrorKind.UNREADABLE)


def transform(
    record: FileRecord,
    secret: str,
    mode: TransformMode,
    destination: Optional[str] = None,
    cancel_event: Optional[threading.Event] = None,
) -> TransformResult:
    """
    Run one password-gated transform on ``record``.

    Only the immutable ``id``/``path`` of the record are read, so this is
    safe to call from a pool thread. If ``cancel_event`` is already set the
    file is not touched and a skipped result is returned.
    """
    if cancel_event is not None and cancel_event.is_set():
        return TransformResult(record_id=record.id, success=False, skipped=True,
                               error_kind=ErrorKind.CANCELLED)
    if mode == TransformMode.DECRYPT:
        return decrypt_file(record.id, record.path, secret)
    if destination is None:
        raise ValueError("encrypt mode requires a destination directory")
    return encrypt_file(record.id, record.path, secret, destination)
