"""Tests for FileRecord state handling and BatchSummary messages."""

from errors import ErrorKind
from models import BatchSummary, FileRecord, FileStatus, TransformMode


class TestFileRecordEligibility:
    def test_encrypted_is_decrypt_only(self):
        record = FileRecord(path="/tmp/a.pdf", status=FileStatus.ENCRYPTED)
        assert record.is_eligible(TransformMode.DECRYPT)
        assert not record.is_eligible(TransformMode.ENCRYPT)

    def test_clear_is_encrypt_only(self):
        record = FileRecord(path="/tmp/a.pdf", status=FileStatus.CLEAR)
        assert record.is_eligible(TransformMode.ENCRYPT)
        assert not record.is_eligible(TransformMode.DECRYPT)

    def test_failed_follows_failing_mode(self):
        record = FileRecord(path="/tmp/a.pdf")
        record.apply_status(FileStatus.FAILED, "Wrong password.", ErrorKind.WRONG_SECRET, TransformMode.DECRYPT)
        assert record.is_eligible(TransformMode.DECRYPT)
        assert not record.is_eligible(TransformMode.ENCRYPT)

    def test_other_statuses_never_eligible(self):
        for status in (FileStatus.CHECKING, FileStatus.UNREADABLE, FileStatus.PROCESSING, FileStatus.SUCCEEDED):
            record = FileRecord(path="/tmp/a.pdf", status=status)
            assert not record.is_eligible(TransformMode.DECRYPT)
            assert not record.is_eligible(TransformMode.ENCRYPT)


class TestFileRecordStatus:
    def test_ids_are_unique(self):
        assert FileRecord(path="/tmp/a.pdf").id != FileRecord(path="/tmp/a.pdf").id

    def test_detail_only_for_unreadable_and_failed(self):
        record = FileRecord(path="/tmp/a.pdf")
        record.apply_status(FileStatus.UNREADABLE, "broken", ErrorKind.UNREADABLE)
        assert record.error_detail == "broken"
        record.apply_status(FileStatus.CLEAR, "ignored")
        assert record.error_detail is None
        assert record.error_kind is None

    def test_failed_without_detail_gets_placeholder(self):
        record = FileRecord(path="/tmp/a.pdf")
        record.apply_status(FileStatus.FAILED, mode=TransformMode.ENCRYPT)
        assert record.error_detail == "Unknown error."

    def test_leaving_succeeded_drops_payload(self):
        record = FileRecord(path="/tmp/a.pdf")
        record.apply_status(FileStatus.SUCCEEDED)
        record.pending_result = b"%PDF-1.7"
        record.apply_status(FileStatus.FAILED, "Failed to write decrypted file.", ErrorKind.WRITE_FAILED,
                            TransformMode.DECRYPT)
        assert record.pending_result is None

    def test_snapshot_restore(self):
        record = FileRecord(path="/tmp/a.pdf")
        record.apply_status(FileStatus.FAILED, "Wrong password.", ErrorKind.WRONG_SECRET, TransformMode.DECRYPT)
        snap = record.snapshot()
        record.apply_status(FileStatus.PROCESSING)
        record.restore(snap)
        assert record.status == FileStatus.FAILED
        assert record.error_detail == "Wrong password."
        assert record.failed_mode == TransformMode.DECRYPT

    def test_name_and_missing_size(self):
        record = FileRecord(path="/nonexistent/dir/report.pdf")
        assert record.name == "report.pdf"
        assert record.size_mb == 0.0


class TestBatchSummary:
    def test_success_message(self):
        summary = BatchSummary(mode=TransformMode.DECRYPT, succeeded=["a.pdf", "b.pdf"])
        assert summary.message() == "Successfully decrypted and saved 2 file(s)."
        assert summary.any_succeeded
        assert not summary.all_failed

    def test_mixed_message_lists_errors(self):
        summary = BatchSummary(mode=TransformMode.ENCRYPT, succeeded=["a.pdf"],
                               failed=[("b.pdf", "Failed to write encrypted file.")])
        text = summary.message()
        assert text.startswith("Successfully encrypted and saved 1 file(s).")
        assert "Errors:\n• b.pdf: Failed to write encrypted file." in text

    def test_all_failed(self):
        summary = BatchSummary(mode=TransformMode.DECRYPT, failed=[("a.pdf", "Wrong password.")])
        assert summary.all_failed
        assert summary.message() == "Errors:\n• a.pdf: Wrong password."

    def test_noop_and_cancelled(self):
        assert BatchSummary(mode=TransformMode.DECRYPT).is_noop
        assert BatchSummary(mode=TransformMode.DECRYPT).message() == "No files were processed."
        cancelled = BatchSummary(mode=TransformMode.ENCRYPT, cancelled=True)
        assert not cancelled.is_noop
        assert cancelled.message() == "Processing was cancelled."
