"""Text extraction from PDF using PyMuPDF and pdfplumber"""
import io
import logging
from dataclasses import dataclass

import fitz  # PyMuPDF
import pdfplumber

from .errors import EmptyDocumentError, UnreadableDocumentError


logger = logging.getLogger(__name__)


@dataclass
class ExtractedText:
    """Linear text of a PDF plus the counts reported for diagnostics"""
    text: str
    page_count: int

    @property
    def char_count(self) -> int:
        return len(self.text)


class TextExtractor:
    """Extracts the text layer of a PDF, page by page, in reading order"""

    def __init__(self):
        self.use_pymupdf = True  # Prefer PyMuPDF for better performance

    def extract(self, pdf_bytes: bytes) -> ExtractedText:
        """
        Extract text from PDF bytes

        Args:
            pdf_bytes: PDF file as bytes

        Returns:
            ExtractedText with the concatenated page text

        Raises:
            UnreadableDocumentError: neither parser can open the buffer
            EmptyDocumentError: the document has no text layer
        """
        try:
            if self.use_pymupdf:
                extracted = self._extract_pymupdf(pdf_bytes)
            else:
                extracted = self._extract_pdfplumber(pdf_bytes)
        except Exception as e:
            if not self.use_pymupdf:
                raise UnreadableDocumentError(f"Failed to read PDF: {e}") from e
            # Fallback to pdfplumber if PyMuPDF fails
            logger.warning("PyMuPDF could not read the PDF (%s), trying pdfplumber", e)
            try:
                extracted = self._extract_pdfplumber(pdf_bytes)
            except Exception as plumber_error:
                raise UnreadableDocumentError(
                    f"Failed to read PDF: {plumber_error}"
                ) from plumber_error

        logger.info("PDF parsed: %d pages, %d characters",
                    extracted.page_count, extracted.char_count)
        if extracted.text:
            logger.debug("Extracted text preview:\n%s", extracted.text[:500])

        if not extracted.text.strip():
            raise EmptyDocumentError(
                "PDF contains no extractable text. It may be an image-based PDF that requires OCR."
            )
        return extracted

    def _extract_pymupdf(self, pdf_bytes: bytes) -> ExtractedText:
        """Extract using PyMuPDF (fitz)"""
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
        try:
            pages = [page.get_text() for page in doc]
        finally:
            doc.close()
        return ExtractedText(text="\n".join(pages), page_count=len(pages))

    def _extract_pdfplumber(self, pdf_bytes: bytes) -> ExtractedText:
        """Extract using pdfplumber (fallback)"""
        with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
        return ExtractedText(text="\n".join(pages), page_count=len(pages))
