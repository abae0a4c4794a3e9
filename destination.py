"""
destination.py
- 目标目录相关操作：预检（写权限探测、剩余空间探测）与解密结果写出
- 目录访问以上下文管理器形式获取和释放，任何退出路径都会释放
"""

from __future__ import annotations

import os
import shutil
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional

from config import (
    WRITE_PROBE_NAME, FREE_SPACE_MARGIN_RATIO, FREE_SPACE_MARGIN_CAP, DecryptNaming,
)
from errors import PreflightError, ErrorKind
from file_namer import resolve_output_path
from logger import logger, track_warning
from models import FileRecord, FileStatus, TransformMode

DESTINATION_GONE_MESSAGE = "The originally chosen directory is no longer available. Please select a new location."
NOT_WRITABLE_MESSAGE = "You do not have permission to save files to the chosen location. Please select a different folder."
NO_SPACE_MESSAGE = ("There may not be enough free space on the destination drive to save the encrypted files. "
                    "Please free up space or choose a different location.")
WRITE_DECRYPTED_MESSAGE = "Failed to write decrypted file."


@dataclass
class PersistItem:
    record_id: str
    path: str
    payload: bytes = field(repr=False)


@dataclass
class PersistOutcome:
    record_id: str
    success: bool
    output_path: Optional[str] = None
    failure_reason: Optional[str] = None
    error_kind: Optional[ErrorKind] = None


@contextmanager
def destination_access(directory: str) -> Iterator[str]:
    """Hold access to ``directory`` for the duration of the block."""
    if not os.path.isdir(directory):
        raise PreflightError(DESTINATION_GONE_MESSAGE, directory)
    logger.debug(f"Acquired destination access: {directory}")
    try:
        yield directory
    finally:
        logger.debug(f"Released destination access: {directory}")


def check_writable(directory: str) -> None:
    """写入并立即删除一个探测文件；失败则说明没有写权限。"""
    if not os.path.isdir(directory):
        raise PreflightError(DESTINATION_GONE_MESSAGE, directory)
    probe = os.path.join(directory, WRITE_PROBE_NAME)
    try:
        with open(probe, "w", encoding="utf-8") as f:
            f.write("test")
        os.remove(probe)
    except OSError as e:
        logger.warning(f"Destination verification failed: {e}")
        raise PreflightError(NOT_WRITABLE_MESSAGE, directory) from e


def required_space(sizes: Iterable[int]) -> int:
    """Total source size plus a margin of min(10% of total, 100 MB)."""
    total = sum(sizes)
    margin = min(int(total * FREE_SPACE_MARGIN_RATIO), FREE_SPACE_MARGIN_CAP)
    return total + margin


def check_free_space(records: Iterable[FileRecord], directory: str) -> None:
    candidates = [r for r in records if r.status == FileStatus.CLEAR]
    try:
        needed = required_space(os.path.getsize(r.path) for r in candidates)
        free = shutil.disk_usage(directory).free
    except OSError as e:
        # 无法获取空间信息时继续处理，只记录警告
        track_warning("FreeSpace", f"Could not verify disk space: {e}")
        return
    logger.info(f"Free space check: need {needed} bytes, {free} bytes available in '{directory}'")
    if needed > free:
        raise PreflightError(NO_SPACE_MESSAGE, directory)


def run_preflight(records: Iterable[FileRecord], directory: str, check_space: bool = True) -> None:
    """Raise PreflightError before any record is touched."""
    records = list(records)
    check_writable(directory)
    if check_space:
        check_free_space(records, directory)


def persist(items: List[PersistItem], directory: str,
            decrypt_naming: DecryptNaming = DecryptNaming.SUFFIX) -> List[PersistOutcome]:
    """
    Write every decrypted payload into ``directory``.

    Never raises for a single file; a missing destination fails every item.
    The caller discards the payloads afterwards whatever the outcome.
    """
    outcomes: List[PersistOutcome] = []
    try:
        with destination_access(directory):
            for item in items:
                if not os.path.isdir(directory):
                    raise PreflightError(DESTINATION_GONE_MESSAGE, directory)
                outcomes.append(_write_one(item, directory, decrypt_naming))
    except PreflightError as e:
        logger.error(f"Destination unavailable while saving: {e}")
        done = {o.record_id for o in outcomes}
        outcomes.extend(
            PersistOutcome(item.record_id, False, failure_reason=e.message, error_kind=ErrorKind.WRITE_FAILED)
            for item in items if item.record_id not in done
        )
    return outcomes


def _write_one(item: PersistItem, directory: str, decrypt_naming: DecryptNaming) -> PersistOutcome:
    output_path = resolve_output_path(item.path, directory, TransformMode.DECRYPT, decrypt_naming)
    try:
        with open(output_path, "wb") as f:
            f.write(item.payload)
    except OSError as e:
        logger.error(f"写出解密文件失败: '{output_path}'。原因: {e}")
        return PersistOutcome(item.record_id, False, failure_reason=WRITE_DECRYPTED_MESSAGE,
                              error_kind=ErrorKind.WRITE_FAILED)
    logger.info(f"解密文件已保存: {output_path}")
    return PersistOutcome(item.record_id, True, output_path=output_path)
