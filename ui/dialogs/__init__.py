"""
UI Dialogs Module
包含所有对话框的模块化实现
"""

from .password_dialog import PasswordDialog

__all__ = [
    'PasswordDialog',
]
