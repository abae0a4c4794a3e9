"""Tests for output file naming."""

from config import DecryptNaming
from file_namer import get_unique_filename, resolve_output_path, suggest_output_filename
from models import TransformMode


class TestUniqueFilename:
    def test_free_name_is_kept(self, tmp_path):
        assert get_unique_filename(str(tmp_path), "report.pdf") == "report.pdf"

    def test_collisions_get_numbered(self, tmp_path):
        (tmp_path / "report.pdf").write_bytes(b"x")
        assert get_unique_filename(str(tmp_path), "report.pdf") == "report (1).pdf"
        (tmp_path / "report (1).pdf").write_bytes(b"x")
        assert get_unique_filename(str(tmp_path), "report.pdf") == "report (2).pdf"


class TestResolveOutputPath:
    def test_suggest_suffix(self):
        assert suggest_output_filename("/a/b/doc.pdf") == "doc (no crypt).pdf"

    def test_encrypt_keeps_name(self, tmp_path):
        out = resolve_output_path("/src/report.pdf", str(tmp_path), TransformMode.ENCRYPT)
        assert out == str(tmp_path / "report.pdf")

    def test_encrypt_collision(self, tmp_path):
        (tmp_path / "report.pdf").write_bytes(b"x")
        out = resolve_output_path("/src/report.pdf", str(tmp_path), TransformMode.ENCRYPT)
        assert out == str(tmp_path / "report (1).pdf")

    def test_decrypt_suffix_default(self, tmp_path):
        out = resolve_output_path("/src/report.pdf", str(tmp_path), TransformMode.DECRYPT)
        assert out == str(tmp_path / "report (no crypt).pdf")

    def test_decrypt_original_name(self, tmp_path):
        out = resolve_output_path("/src/report.pdf", str(tmp_path), TransformMode.DECRYPT,
                                  DecryptNaming.ORIGINAL)
        assert out == str(tmp_path / "report.pdf")

    def test_decrypt_naming_accepts_string(self, tmp_path):
        out = resolve_output_path("/src/report.pdf", str(tmp_path), TransformMode.DECRYPT, "original")
        assert out == str(tmp_path / "report.pdf")
