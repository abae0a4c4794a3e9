"""
secret_strength.py
- 加密密码强度估算（字符池熵）以及两次输入一致性校验
"""

import math
import unicodedata
from enum import Enum

from config import SECRET_WEAK_BITS, SECRET_FAIR_BITS, SECRET_GOOD_BITS
from errors import SecretError


class SecretStrength(str, Enum):
    WEAK = "weak"
    FAIR = "fair"
    GOOD = "good"
    STRONG = "strong"


def _char_class(ch: str):
    if ch.islower():
        return "lower"
    if ch.isupper():
        return "upper"
    if ch.isdigit():
        return "digit"
    if unicodedata.category(ch)[0] in ("P", "S"):
        return "symbol"
    return None


POOL_SIZES = {"lower": 26, "upper": 26, "digit": 10, "symbol": 32}


def estimate_entropy(secret: str) -> float:
    """Bits of entropy = length * log2(pool size of the character classes used)."""
    if not secret:
        return 0.0
    classes = {_char_class(ch) for ch in secret} - {None}
    pool = sum(POOL_SIZES[c] for c in classes)
    if pool <= 1:
        return 0.0
    return math.log2(pool) * len(secret)


def strength_label(secret: str) -> SecretStrength:
    bits = estimate_entropy(secret)
    if bits < SECRET_WEAK_BITS:
        return SecretStrength.WEAK
    if bits < SECRET_FAIR_BITS:
        return SecretStrength.FAIR
    if bits < SECRET_GOOD_BITS:
        return SecretStrength.GOOD
    return SecretStrength.STRONG


def validate_new_secret(secret: str, confirmation: str) -> None:
    if not secret:
        raise SecretError("Password must not be empty.")
    if secret != confirmation:
        raise SecretError("Passwords do not match.")
