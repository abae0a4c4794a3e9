"""Pytest configuration for CryptDeck tests.

Log files are redirected to a temporary directory before any project
module is imported, since ``logger`` sets up its handlers at import time.
"""

import hashlib
import os
import tempfile
import time

_LOG_DIR = tempfile.mkdtemp(prefix="cryptdeck-logs-")
os.environ.setdefault("CRYPTDECK_LOG_DIR", _LOG_DIR)

import pikepdf
import pytest
from PySide6.QtCore import QCoreApplication, QThreadPool


def make_pdf(path, password=None, num_pages=1):
    """Write a small PDF to ``path``; AES-256 encrypted when ``password`` is given."""
    pdf = pikepdf.Pdf.new()
    for _ in range(num_pages):
        page = pikepdf.Page(
            pikepdf.Dictionary(
                Type=pikepdf.Name.Page,
                MediaBox=[0, 0, 612, 792],
                Contents=pdf.make_stream(b"0 0 m 100 100 l S"),
            )
        )
        pdf.pages.append(page)
    if password is None:
        pdf.save(path)
    else:
        pdf.save(path, encryption=pikepdf.Encryption(user=password, owner=password, R=6))
    pdf.close()
    return str(path)


def make_restricted_pdf(path, owner_password="owner"):
    """PDF that opens without a password but carries an owner password."""
    pdf = pikepdf.Pdf.new()
    pdf.pages.append(pikepdf.Page(pikepdf.Dictionary(Type=pikepdf.Name.Page, MediaBox=[0, 0, 612, 792])))
    pdf.save(path, encryption=pikepdf.Encryption(user="", owner=owner_password, R=6,
                                                 allow=pikepdf.Permissions(extract=False)))
    pdf.close()
    return str(path)


def file_hash(path):
    with open(path, "rb") as f:
        return hashlib.sha256(f.read()).hexdigest()


def wait_until(predicate, timeout=15.0):
    """Pump the Qt event loop until ``predicate()`` is true."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        QCoreApplication.processEvents()
        if predicate():
            return True
        time.sleep(0.01)
    QCoreApplication.processEvents()
    return predicate()


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def pool():
    thread_pool = QThreadPool()
    thread_pool.setMaxThreadCount(2)
    yield thread_pool
    thread_pool.waitForDone(10000)


@pytest.fixture
def src_dir(tmp_path):
    path = tmp_path / "src"
    path.mkdir()
    return path


@pytest.fixture
def out_dir(tmp_path):
    path = tmp_path / "out"
    path.mkdir()
    return path
