"""Unit tests for PDF text extraction."""
import fitz
import pytest

from ics205_chirp import text_extractor as text_extractor_module
from ics205_chirp.errors import EmptyDocumentError, UnreadableDocumentError
from ics205_chirp.text_extractor import TextExtractor


@pytest.fixture
def blank_pdf():
    doc = fitz.open()
    doc.new_page()
    data = doc.tobytes()
    doc.close()
    return data


class TestTextExtractor:

    def test_extracts_lines_in_order(self, make_pdf):
        extracted = TextExtractor().extract(make_pdf(["Command 155.160", "Tactical 146.520"]))

        assert extracted.page_count == 1
        assert extracted.text.index("155.160") < extracted.text.index("146.520")
        assert extracted.char_count == len(extracted.text)

    def test_blank_pdf_is_empty_document(self, blank_pdf):
        with pytest.raises(EmptyDocumentError):
            TextExtractor().extract(blank_pdf)

    def test_garbage_is_unreadable(self):
        with pytest.raises(UnreadableDocumentError):
            TextExtractor().extract(b"this is not a pdf")

    def test_falls_back_to_pdfplumber(self, make_pdf, monkeypatch):
        pdf_bytes = make_pdf(["Command 155.160"])

        def broken_open(*args, **kwargs):
            raise RuntimeError("mupdf failure")

        monkeypatch.setattr(text_extractor_module.fitz, "open", broken_open)
        extracted = TextExtractor().extract(pdf_bytes)

        assert "155.160" in extracted.text
        assert extracted.page_count == 1

    def test_pdfplumber_only(self, make_pdf):
        extractor = TextExtractor()
        extractor.use_pymupdf = False
        assert "146.520" in extractor.extract(make_pdf(["Tactical 146.520"])).text
