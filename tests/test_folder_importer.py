"""Tests for collecting PDF paths from files and folders."""

import os

from folder_importer import filter_pdf_files, import_from_folder


def _touch(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"%PDF-1.4")
    return path


class TestImportFromFolder:
    def test_recursive_and_filtered(self, tmp_path):
        _touch(tmp_path / "b.pdf")
        _touch(tmp_path / "a.PDF")
        _touch(tmp_path / "notes.txt")
        _touch(tmp_path / "sub" / "c.pdf")
        found = import_from_folder(str(tmp_path))
        assert [os.path.relpath(p, tmp_path) for p in found] == ["a.PDF", "b.pdf", os.path.join("sub", "c.pdf")]
        assert all(os.path.isabs(p) for p in found)

    def test_hidden_entries_skipped(self, tmp_path):
        _touch(tmp_path / ".hidden.pdf")
        _touch(tmp_path / ".cache" / "d.pdf")
        assert import_from_folder(str(tmp_path)) == []
        assert len(import_from_folder(str(tmp_path), include_hidden=True)) == 2


class TestFilterPdfFiles:
    def test_keeps_input_order_and_expands_folders(self, tmp_path):
        z = _touch(tmp_path / "z.pdf")
        _touch(tmp_path / "folder" / "inner.pdf")
        txt = _touch(tmp_path / "readme.txt")
        result = filter_pdf_files([str(z), str(tmp_path / "folder"), str(txt), str(tmp_path / "missing.pdf")])
        assert result == [str(z), str(tmp_path / "folder" / "inner.pdf")]
