"""
Unit Tests for Document Handling

Text extraction, chunking, cleaning and upload file-type rules.
"""
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from doctorpath.core.documents import chunk_text, clean_medical_text, extract_text_from_pdf
from doctorpath.services.uploads import (
    StoredUpload,
    discard_upload,
    file_type_for,
    store_upload,
    unique_file_name,
)
from doctorpath.utils import DocumentError


# Fixtures
@pytest.fixture
def lab_report_pdf(tmp_path):
    """Two-page PDF with known text."""
    path = tmp_path / "lab_report.pdf"
    pdf = canvas.Canvas(str(path), pagesize=A4)
    pdf.drawString(72, 760, "Serum AFP 512 ng/mL")
    pdf.showPage()
    pdf.drawString(72, 760, "Impression: hepatic lesion 4.2 cm")
    pdf.showPage()
    pdf.save()
    return path


class TestExtractTextFromPdf:

    def test_extracts_every_page(self, lab_report_pdf):
        result = extract_text_from_pdf(lab_report_pdf)
        assert result.success
        assert result.page_count == 2
        assert "AFP 512" in result.text
        assert "hepatic lesion" in result.text

    def test_missing_file_does_not_raise(self, tmp_path):
        result = extract_text_from_pdf(tmp_path / "nope.pdf")
        assert not result.success
        assert result.text is None
        assert "PDF extraction failed" in result.error

    def test_garbage_file_does_not_raise(self, tmp_path):
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"this is not a pdf")
        assert not extract_text_from_pdf(path).success


class TestChunkText:
    """Fixed-size windows with overlap."""

    def test_empty_text(self):
        assert chunk_text("") == []

    def test_short_text_is_one_chunk(self):
        assert chunk_text("abc") == ["abc"]

    def test_exact_chunk_size(self):
        text = "x" * 1000
        assert chunk_text(text) == [text]

    def test_windows_overlap(self):
        text = "".join(chr(ord("a") + i % 26) for i in range(2500))
        chunks = chunk_text(text)

        assert [len(c) for c in chunks] == [1000, 1000, 900]
        assert chunks[0][-200:] == chunks[1][:200]
        assert chunks[1][-200:] == chunks[2][:200]
        assert chunks[-1].endswith(text[-1])

    def test_zero_overlap_partitions(self):
        text = "0123456789"
        assert chunk_text(text, chunk_size=4, overlap=0) == ["0123", "4567", "89"]

    def test_overlap_must_be_smaller_than_chunk(self):
        with pytest.raises(AssertionError):
            chunk_text("abc", chunk_size=10, overlap=10)


class TestCleanMedicalText:

    def test_collapses_whitespace(self):
        assert clean_medical_text("  CEA \n\n 4.2\tng/mL ") == "CEA 4.2 ng/mL"

    def test_keeps_clinical_punctuation(self):
        text = "HER2 (+); CA 15-3 = 35 U/mL, 12% [ref <30]"
        assert clean_medical_text(text) == text

    def test_blanks_stray_symbols(self):
        assert clean_medical_text("• AFP ■ high") == "AFP   high"


class TestUploadRules:

    @pytest.mark.parametrize("name,expected", [
        ("scan.PDF", "pdf"),
        ("xray.jpeg", "jpeg"),
        ("slice.dcm", "dcm"),
    ])
    def test_allowed_types(self, name, expected):
        assert file_type_for(name) == expected

    @pytest.mark.parametrize("name", ["notes.txt", "macro.docx", "noextension"])
    def test_rejected_types(self, name):
        with pytest.raises(DocumentError) as exc_info:
            file_type_for(name)
        assert exc_info.value.status_code == 400

    def test_unique_name_keeps_base_name(self):
        name = unique_file_name("../reports/my scan.pdf")
        assert name.endswith("-my_scan.pdf")
        assert "/" not in name
        assert unique_file_name("a.pdf") != unique_file_name("a.pdf")


def _upload(filename: str, *chunks):
    return SimpleNamespace(
        filename=filename,
        content_type="image/png",
        read=AsyncMock(side_effect=list(chunks)),
    )


@pytest.mark.asyncio
class TestStoreUpload:

    async def test_writes_file(self, tmp_path):
        stored = await store_upload(_upload("scan.png", b"abc", b"def", b""), upload_dir=str(tmp_path))
        assert stored.size == 6
        assert stored.path.read_bytes() == b"abcdef"
        assert stored.extracted_text is None

    async def test_oversize_leaves_nothing_behind(self, tmp_path):
        with pytest.raises(DocumentError):
            await store_upload(_upload("scan.png", b"x" * 10, b""), upload_dir=str(tmp_path), max_bytes=4)
        assert list(tmp_path.iterdir()) == []

    async def test_failed_read_leaves_nothing_behind(self, tmp_path):
        upload = _upload("scan.png", b"abc", OSError("connection reset"))
        with pytest.raises(OSError):
            await store_upload(upload, upload_dir=str(tmp_path))
        assert list(tmp_path.iterdir()) == []

    async def test_discard_removes_file(self, tmp_path):
        stored = await store_upload(_upload("scan.png", b"abc", b""), upload_dir=str(tmp_path))
        discard_upload(stored)
        assert not stored.path.exists()


class TestDiscardUpload:

    def test_tolerates_missing_file(self, tmp_path):
        discard_upload(StoredUpload(
            original_name="gone.png", file_type="png", path=tmp_path / "gone.png", size=0,
        ))
        assert list(tmp_path.iterdir()) == []
