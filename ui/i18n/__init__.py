from .locale_manager import get_locale_manager, LocaleManager

__all__ = ['get_locale_manager', 'LocaleManager']
