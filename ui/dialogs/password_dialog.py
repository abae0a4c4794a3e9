# password_dialog.py - 密码输入对话框
"""
解密：单个密码输入框
加密：密码 + 确认密码，并显示强度估算
重试：标题与提示文字改为重试说明
"""

from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QLabel, QLineEdit, QCheckBox, QDialogButtonBox
)

from errors import SecretError
from models import TransformMode
from secret_strength import strength_label, validate_new_secret


class PasswordDialog(QDialog):

    def __init__(self, mode: TransformMode, translate, is_retry: bool = False, parent=None):
        super().__init__(parent)
        self._ = translate
        self.mode = mode
        self.is_retry = is_retry
        self._secret = ""
        self._build()

    def _build(self):
        encrypt = self.mode == TransformMode.ENCRYPT
        if self.is_retry:
            title = "Encryption Failed - Try Different Password" if encrypt else "Decryption Failed - Try Different Password"
            message = "Some or all files failed. Please try a different password or cancel to stop."
        elif encrypt:
            title = "Set Encryption Password"
            message = "Enter a password to encrypt the PDF files. The same password will be applied to all files."
        else:
            title = "Enter PDF Password"
            message = "Please enter the password for the selected PDF files."
        self.setWindowTitle(self._(title))

        layout = QVBoxLayout(self)
        hint = QLabel(self._(message))
        hint.setWordWrap(True)
        layout.addWidget(hint)

        self.password_input = QLineEdit()
        self.password_input.setEchoMode(QLineEdit.Password)
        self.password_input.setPlaceholderText(self._("Password"))
        layout.addWidget(self.password_input)

        self.confirm_input = None
        self.strength_label = None
        if encrypt:
            self.confirm_input = QLineEdit()
            self.confirm_input.setEchoMode(QLineEdit.Password)
            self.confirm_input.setPlaceholderText(self._("Confirm Password"))
            layout.addWidget(self.confirm_input)
            self.strength_label = QLabel()
            layout.addWidget(self.strength_label)
            self.password_input.textChanged.connect(self._update_strength)
            self._update_strength("")

        show_box = QCheckBox(self._("Show password"))
        show_box.toggled.connect(self._toggle_echo)
        layout.addWidget(show_box)

        self.error_label = QLabel()
        self.error_label.setStyleSheet("color: #c0392b;")
        layout.addWidget(self.error_label)

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self._on_accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _toggle_echo(self, checked: bool):
        echo = QLineEdit.Normal if checked else QLineEdit.Password
        self.password_input.setEchoMode(echo)
        if self.confirm_input is not None:
            self.confirm_input.setEchoMode(echo)

    def _update_strength(self, text: str):
        self.strength_label.setText(self._("Strength: ") + self._(strength_label(text).value))

    def _on_accept(self):
        secret = self.password_input.text()
        try:
            if self.confirm_input is not None:
                validate_new_secret(secret, self.confirm_input.text())
            elif not secret:
                raise SecretError("Password must not be empty.")
        except SecretError as e:
            self.error_label.setText(str(e))
            return
        self._secret = secret
        self.accept()

    def take_secret(self) -> str:
        """取出密码并清空对话框中的副本"""
        secret = self._secret
        self._secret = ""
        self.password_input.clear()
        if self.confirm_input is not None:
            self.confirm_input.clear()
        return secret
