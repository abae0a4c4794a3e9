# locale_manager.py - 语言管理器
"""
语言管理器模块
负责系统语言检测和翻译文本获取
"""

import locale
from typing import Optional
from .translations import TRANSLATIONS


class LocaleManager:
    """语言管理器"""

    def __init__(self, locale_code: Optional[str] = None):
        self.translations = TRANSLATIONS
        self.current_locale = locale_code if locale_code in TRANSLATIONS else self._detect_system_language()

    def _detect_system_language(self) -> str:
        """检测系统语言"""
        try:
            system_locale = locale.getlocale()[0]
            if system_locale and system_locale.startswith('zh'):
                return 'zh_CN'
        except Exception:
            pass
        return 'en_US'

    def _(self, text: str) -> str:
        """获取本地化文本"""
        return self.translations.get(self.current_locale, {}).get(text, text)

    def set_locale(self, locale_code: str):
        """设置语言"""
        if locale_code in self.translations:
            self.current_locale = locale_code


# 全局实例（单例模式）
_locale_manager_instance = None

def get_locale_manager(locale_code: Optional[str] = None) -> LocaleManager:
    """获取语言管理器单例"""
    global _locale_manager_instance
    if _locale_manager_instance is None:
        _locale_manager_instance = LocaleManager(locale_code)
    elif locale_code:
        _locale_manager_instance.set_locale(locale_code)
    return _locale_manager_instance
