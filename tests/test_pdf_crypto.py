"""Tests for the PyMuPDF document wrapper."""

import pikepdf
import pytest

from conftest import make_pdf

from errors import AccessDeniedError
from pdf_crypto import open_document


class TestOpenDocument:
    def test_missing_file(self, tmp_path):
        with pytest.raises(AccessDeniedError):
            open_document(str(tmp_path / "missing.pdf"))

    def test_clear_document(self, tmp_path):
        with open_document(make_pdf(tmp_path / "plain.pdf")) as doc:
            assert not doc.is_encrypted
            assert not doc.needs_password
            assert doc.unlock("anything")

    def test_encrypted_document(self, tmp_path):
        with open_document(make_pdf(tmp_path / "locked.pdf", password="alpha")) as doc:
            assert doc.is_encrypted
            assert doc.needs_password
            assert not doc.unlock("beta")
            assert doc.unlock("alpha")
            assert doc.is_encrypted


class TestWrite:
    def test_write_with_password(self, tmp_path):
        out = tmp_path / "out.pdf"
        with open_document(make_pdf(tmp_path / "plain.pdf")) as doc:
            assert doc.write(str(out), password="pw")
        with pikepdf.open(str(out), password="pw") as pdf:
            assert pdf.is_encrypted

    def test_write_without_password(self, tmp_path):
        out = tmp_path / "out.pdf"
        with open_document(make_pdf(tmp_path / "locked.pdf", password="alpha")) as doc:
            assert doc.unlock("alpha")
            assert doc.write(str(out))
        with pikepdf.open(str(out)) as pdf:
            assert not pdf.is_encrypted

    def test_write_to_missing_directory_fails(self, tmp_path):
        with open_document(make_pdf(tmp_path / "plain.pdf")) as doc:
            assert not doc.write(str(tmp_path / "nope" / "out.pdf"), password="pw")
