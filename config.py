from enum import Enum

# === App Version ===
APP_VERSION = "1.0.0"
APP_NAME = "CryptDeck"

# === Default Output Settings ===
DEFAULT_LANGUAGE = "en_US"  # zh_CN, en_US
DECRYPT_SUFFIX = " (no crypt)"  # "report.pdf" -> "report (no crypt).pdf"
SUPPORTED_EXTENSIONS = (".pdf",)


# === Decrypted Output Naming ===
class DecryptNaming(Enum):
    SUFFIX = "suffix"        # "<stem> (no crypt).pdf"
    ORIGINAL = "original"    # 保留原文件名


# === Pre-flight Checks ===
WRITE_PROBE_NAME = ".cryptdeck-writetest"
FREE_SPACE_MARGIN_RATIO = 0.1               # 10% of total source size
FREE_SPACE_MARGIN_CAP = 100 * 1024 * 1024   # but never more than 100 MB

# === Secret Strength (bits of entropy) ===
SECRET_WEAK_BITS = 28
SECRET_FAIR_BITS = 60
SECRET_GOOD_BITS = 80

# === Logging Settings ===
LOG_DIR = "logs"
LOG_FILE = "app.log"
LOG_LEVEL = "INFO"

# === UI Defaults ===
TABLE_COLUMNS = ["No.", "Filename", "Size (MB)", "Status"]
SUPPORTED_LANGUAGES = {
    "zh_CN": "简体中文",
    "en_US": "English"
}

# === Preset Config Keys ===
PRESET_KEYS = [
    "last_destination",
    "language",
    "decrypt_naming",
    "decrypt_preflight",
]

import os
import json
import logging

CONFIG_FILE_NAME = ".cryptdeck_config.json"
CONFIG_DIR = os.path.expanduser("~/.cryptdeck")
CONFIG_PATH = os.path.join(CONFIG_DIR, CONFIG_FILE_NAME)


def save_settings(settings: dict):
    """
    保存用户设置（只写入 PRESET_KEYS 中的键，密码永远不会落盘）。
    先写临时文件再替换，避免写到一半时留下损坏的配置。
    """
    data = {k: settings[k] for k in PRESET_KEYS if k in settings}
    tmp_path = CONFIG_PATH + ".tmp"
    try:
        os.makedirs(CONFIG_DIR, exist_ok=True)
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=4)
        os.replace(tmp_path, CONFIG_PATH)
    except OSError:
        logging.getLogger(APP_NAME).error("配置保存失败: %s", CONFIG_PATH, exc_info=True)


def load_settings() -> dict:
    """读取用户设置；文件缺失或损坏时返回空字典"""
    if not os.path.exists(CONFIG_PATH):
        return {}
    try:
        with open(CONFIG_PATH, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError):
        logging.getLogger(APP_NAME).error("配置加载失败: %s", CONFIG_PATH, exc_info=True)
        return {}
    if not isinstance(data, dict):
        return {}
    return {k: v for k, v in data.items() if k in PRESET_KEYS}

# === Settings Defaults & Compatibility ===
def apply_defaults(settings: dict) -> dict:
    """确保配置包含所有默认值（适用于旧版配置文件）"""
    defaults = {
        "last_destination": "",
        "language": DEFAULT_LANGUAGE,
        "decrypt_naming": DecryptNaming.SUFFIX.value,
        "decrypt_preflight": False,
    }
    for key, value in defaults.items():
        if key not in settings:
            settings[key] = value
    if settings["decrypt_naming"] not in [m.value for m in DecryptNaming]:
        settings["decrypt_naming"] = DecryptNaming.SUFFIX.value
    if settings["language"] not in SUPPORTED_LANGUAGES:
        settings["language"] = DEFAULT_LANGUAGE
    if not isinstance(settings["decrypt_preflight"], bool):
        settings["decrypt_preflight"] = str(settings["decrypt_preflight"]).lower() in ("1", "true", "yes")
    return settings
