"""
UI Components Module
包含所有UI组件的模块化实现
"""

from .file_table import FileTableManager

__all__ = [
    'FileTableManager',
]
