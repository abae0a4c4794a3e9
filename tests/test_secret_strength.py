"""Tests for password strength estimation and confirmation."""

import math

import pytest

from errors import SecretError
from secret_strength import SecretStrength, estimate_entropy, strength_label, validate_new_secret


class TestEntropy:
    def test_empty(self):
        assert estimate_entropy("") == 0.0

    def test_lowercase_pool(self):
        assert estimate_entropy("abcd") == pytest.approx(4 * math.log2(26))

    def test_all_classes_pool(self):
        assert estimate_entropy("aB3!") == pytest.approx(4 * math.log2(94))


class TestStrengthLabel:
    @pytest.mark.parametrize(
        "secret, expected",
        [
            ("abc", SecretStrength.WEAK),
            ("correcthorse", SecretStrength.FAIR),
            ("Tr0ub4dor&3", SecretStrength.GOOD),
            ("Tr0ub4dor&3-Horse!Battery", SecretStrength.STRONG),
        ],
    )
    def test_labels(self, secret, expected):
        assert strength_label(secret) == expected


class TestValidateNewSecret:
    def test_matching(self):
        validate_new_secret("alpha", "alpha")

    def test_empty(self):
        with pytest.raises(SecretError, match="must not be empty"):
            validate_new_secret("", "")

    def test_mismatch(self):
        with pytest.raises(SecretError, match="do not match"):
            validate_new_secret("alpha", "alpah")
