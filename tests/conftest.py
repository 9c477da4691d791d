"""Shared fixtures: fake AI backends and in-memory PDFs"""
import fitz
import pytest

from ics205_chirp.llm_client import LLMBackend


class FakeBackend(LLMBackend):
    """
    Scripted backend; each reply is either a completion string or an
    exception instance to raise
    """

    def __init__(self, name="fake", supports_documents=False,
                 document_reply="[]", text_reply="[]"):
        self.name = name
        self.supports_documents = supports_documents
        self.document_reply = document_reply
        self.text_reply = text_reply
        self.document_calls = []
        self.text_calls = []

    def complete_from_document(self, prompt, pdf_bytes, filename="document.pdf"):
        self.document_calls.append((prompt, pdf_bytes, filename))
        return self._reply(self.document_reply)

    def complete_from_text(self, prompt):
        self.text_calls.append(prompt)
        return self._reply(self.text_reply)

    @staticmethod
    def _reply(reply):
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def fake_backend():
    """Factory for FakeBackend instances"""
    return FakeBackend


@pytest.fixture
def make_pdf():
    """Factory building a one-page PDF with one text line per entry"""
    def _make(lines):
        doc = fitz.open()
        page = doc.new_page()
        y = 72
        for line in lines:
            page.insert_text((72, y), line, fontsize=10)
            y += 14
        data = doc.tobytes()
        doc.close()
        return data
    return _make


@pytest.fixture
def channel_reply():
    return """Here is the channel list:
```json
[
  {"name": "Command", "rxFreq": "155.160", "txFreq": "155.160", "tone": null, "mode": "FM", "remarks": "Net control"},
  {"name": "Tactical 1", "rxFreq": "146.940", "txFreq": "146.340", "tone": "100.0", "mode": "FM", "remarks": null}
]
```"""
