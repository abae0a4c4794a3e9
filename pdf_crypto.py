import os
import fitz  # PyMuPDF
from typing import Optional

# 使用项目统一的logger实例
from logger import logger
from errors import AccessDeniedError, UnreadableError

# 输出文件的所有权限：能打开文件的人即可打印/复制/编辑
FULL_PERMISSIONS = (
    fitz.PDF_PERM_PRINT
    | fitz.PDF_PERM_MODIFY
    | fitz.PDF_PERM_COPY
    | fitz.PDF_PERM_ANNOTATE
    | fitz.PDF_PERM_FORM
    | fitz.PDF_PERM_ACCESSIBILITY
    | fitz.PDF_PERM_ASSEMBLE
    | fitz.PDF_PERM_PRINT_HQ
)


class PdfDocument:
    """
    PyMuPDF 文档的薄封装，只暴露批处理需要的四个操作：
    打开、是否加密、用密码解锁、写出（可选加密）。

    所有操作都被视为可能失败的黑盒，失败时返回 False 而不是抛出异常。
    """

    def __init__(self, path: str, doc):
        self.path = path
        self._doc = doc
        self._encrypted = bool(doc.is_encrypted or doc.needs_pass)

    @property
    def is_encrypted(self) -> bool:
        """文件在磁盘上是否带有加密（解锁后仍为 True）。"""
        return self._encrypted

    @property
    def needs_password(self) -> bool:
        return bool(self._doc.needs_pass) and bool(self._doc.is_encrypted)

    def unlock(self, password: str) -> bool:
        # 仅限制编辑的文件无需密码即可读取
        if not self.needs_password:
            return True
        try:
            return self._doc.authenticate(password) > 0
        except Exception as e:
            logger.debug(f"authenticate() raised for '{self.path}': {e}")
            return False

    def to_bytes(self) -> bytes:
        """Serialize the (unlocked) document without any encryption."""
        return self._doc.tobytes(encryption=fitz.PDF_ENCRYPT_NONE, garbage=1)

    def write(self, output_path: str, password: Optional[str] = None) -> bool:
        """
        写出文档。password 为 None 时输出无加密副本；
        否则使用 AES-256，用户密码与所有者密码相同，并授予全部权限。
        """
        try:
            if password is None:
                self._doc.save(output_path, encryption=fitz.PDF_ENCRYPT_NONE, garbage=1)
            else:
                self._doc.save(
                    output_path,
                    encryption=fitz.PDF_ENCRYPT_AES_256,
                    owner_pw=password,
                    user_pw=password,
                    permissions=FULL_PERMISSIONS,
                    garbage=1,
                )
            return True
        except Exception as e:
            logger.error(f"写出文件失败: '{output_path}'。原因: {e}")
            return False

    def close(self):
        try:
            self._doc.close()
            logger.debug(f"成功关闭文档: {self.path}")
        except Exception as close_error:
            logger.error(f"关闭文档 '{self.path}' 时发生错误: {close_error}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        # 确保文档对象在使用后被关闭
        self.close()
        return False


def open_document(path: str) -> PdfDocument:
    """
    打开 PDF 文件。

    Raises:
        AccessDeniedError: 文件不存在或没有读取权限。
        UnreadableError: 文件不是有效的 PDF。
    """
    if not os.path.isfile(path):
        raise AccessDeniedError("File does not exist.", path)
    if not os.access(path, os.R_OK):
        raise AccessDeniedError("Permission denied to access file.", path)
    try:
        doc = fitz.open(path, filetype="pdf")
    except PermissionError as e:
        raise AccessDeniedError("Permission denied to access file.", path) from e
    except FileNotFoundError as e:
        raise AccessDeniedError("File does not exist.", path) from e
    except Exception as e:
        raise UnreadableError("File could not be read or is corrupted.", path) from e

    if not doc.is_pdf:
        doc.close()
        raise UnreadableError("File is not a valid PDF document.", path)
    return PdfDocument(path, doc)
