"""UI 包入口
- 导出 `ui.main_window.MainWindow`
"""

from ui.main_window import MainWindow

__all__ = [
    'MainWindow',
]
