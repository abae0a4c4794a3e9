"""
classifier.py
- 判断新加入文件的初始状态：已加密 / 未加密 / 无法读取
- 只读取，不做任何写入（源文件字节保持不变）
"""

from __future__ import annotations

import os
from typing import Optional, Tuple

# 轻量依赖：PyPDF2 读取加密状态
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from logger import logger, log_performance
from models import FileStatus

ACCESS_MESSAGE = "Cannot access file - may be corrupted or permission denied."
UNREADABLE_MESSAGE = "File could not be read - may be corrupted or not a valid PDF."


@log_performance("classify", context="Classifier")
def classify(path: str) -> Tuple[FileStatus, Optional[str]]:
    """
    Return ``(status, detail)`` for the file at ``path``.

    ``detail`` is only set for UNREADABLE. A restricted PDF (owner password
    only) still counts as ENCRYPTED so that it can go through the decrypt flow.
    """
    name = os.path.basename(path)
    if not os.path.isfile(path) or not os.access(path, os.R_OK):
        logger.warning(f"File {name}: not accessible")
        return FileStatus.UNREADABLE, ACCESS_MESSAGE

    try:
        reader = PdfReader(path)
        if reader.is_encrypted:
            logger.info(f"File {name}: encrypted")
            return FileStatus.ENCRYPTED, None
        logger.info(f"File {name}: not encrypted, pages={len(reader.pages)}")
        return FileStatus.CLEAR, None
    except PermissionError as e:
        logger.error(f"File {name}: permission denied - {e}")
        return FileStatus.UNREADABLE, ACCESS_MESSAGE
    except PdfReadError as e:
        logger.error(f"File {name}: PdfReadError - {e}")
        return FileStatus.UNREADABLE, UNREADABLE_MESSAGE
    except Exception as e:
        logger.error(f"File {name}: unexpected error - {e}")
        return FileStatus.UNREADABLE, UNREADABLE_MESSAGE
