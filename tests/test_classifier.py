"""Tests for initial file classification."""

import os

from conftest import file_hash, make_pdf, make_restricted_pdf

from classifier import ACCESS_MESSAGE, UNREADABLE_MESSAGE, classify
from models import FileStatus


class TestClassify:
    def test_clear_pdf(self, tmp_path):
        path = make_pdf(tmp_path / "plain.pdf")
        assert classify(path) == (FileStatus.CLEAR, None)

    def test_encrypted_pdf(self, tmp_path):
        path = make_pdf(tmp_path / "locked.pdf", password="alpha")
        assert classify(path) == (FileStatus.ENCRYPTED, None)

    def test_restricted_pdf_counts_as_encrypted(self, tmp_path):
        path = make_restricted_pdf(tmp_path / "restricted.pdf")
        status, detail = classify(path)
        assert status == FileStatus.ENCRYPTED
        assert detail is None

    def test_garbage_is_unreadable(self, tmp_path):
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"this is not a pdf at all")
        assert classify(str(path)) == (FileStatus.UNREADABLE, UNREADABLE_MESSAGE)

    def test_missing_file_is_unreadable(self, tmp_path):
        assert classify(str(tmp_path / "missing.pdf")) == (FileStatus.UNREADABLE, ACCESS_MESSAGE)

    def test_source_bytes_unchanged(self, tmp_path):
        path = make_pdf(tmp_path / "locked.pdf", password="alpha")
        before = file_hash(path)
        mtime = os.path.getmtime(path)
        classify(path)
        assert file_hash(path) == before
        assert os.path.getmtime(path) == mtime
