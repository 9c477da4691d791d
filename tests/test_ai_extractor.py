"""Unit tests for AI reply parsing and the AI extraction tier."""
import pytest

from ics205_chirp.ai_extractor import (
    AIChannelExtractor,
    build_document_prompt,
    build_text_prompt,
    extract_json_array,
)
from ics205_chirp.errors import (
    AIEmptyResultError,
    AIMalformedResponseError,
    AIUnavailableError,
)


class TestExtractJsonArray:

    def test_bare_array(self):
        assert extract_json_array('[{"name": "A"}]') == [{"name": "A"}]

    @pytest.mark.parametrize("fence", ["```json", "```JSON", "```"])
    def test_fenced_array(self, fence):
        reply = f'{fence}\n[{{"name": "A"}}]\n```'
        assert extract_json_array(reply) == [{"name": "A"}]

    def test_array_surrounded_by_prose(self):
        reply = 'Sure! Here you go: [{"name": "A"}, {"name": "B"}] Let me know.'
        assert extract_json_array(reply) == [{"name": "A"}, {"name": "B"}]

    def test_skips_bracketed_prose_before_array(self):
        reply = 'Channels [see table] follow: [{"name": "A"}]'
        assert extract_json_array(reply) == [{"name": "A"}]

    def test_empty_array(self):
        assert extract_json_array("[]") == []

    def test_no_array(self):
        with pytest.raises(AIMalformedResponseError):
            extract_json_array('{"channels": "none"}')

    def test_unparsable_array(self):
        with pytest.raises(AIMalformedResponseError):
            extract_json_array("[{name: 'A',}")

    def test_none_reply(self):
        with pytest.raises(AIMalformedResponseError):
            extract_json_array(None)


class TestPrompts:

    def test_prompts_demand_json_array_and_empty_result(self):
        for prompt in (build_document_prompt(), build_text_prompt("x")):
            assert "ONLY a JSON array" in prompt
            assert "[]" in prompt
            for field in ("name", "rxFreq", "txFreq", "tone", "mode", "remarks"):
                assert f'"{field}"' in prompt

    def test_text_prompt_carries_text(self):
        assert "CMD1  Command  155.160" in build_text_prompt("CMD1  Command  155.160")


class TestAIChannelExtractor:

    def test_text_extraction_normalizes_records(self, fake_backend, channel_reply):
        backend = fake_backend(text_reply=channel_reply)
        records = AIChannelExtractor(backend).extract_via_text("form text")

        assert len(backend.text_calls) == 1
        assert "form text" in backend.text_calls[0]
        assert [r.name for r in records] == ["Command", "Tactical 1"]
        assert records[0].tone is None
        assert records[1].tx_frequency == pytest.approx(146.34)
        assert records[1].tone == "100.0"

    def test_document_extraction_sends_pdf(self, fake_backend, channel_reply):
        backend = fake_backend(supports_documents=True, document_reply=channel_reply)
        records = AIChannelExtractor(backend).extract_via_document(b"%PDF-1.7", "plan.pdf")

        prompt, pdf_bytes, filename = backend.document_calls[0]
        assert pdf_bytes == b"%PDF-1.7"
        assert filename == "plan.pdf"
        assert "JSON array" in prompt
        assert len(records) == 2

    def test_empty_array_is_empty_result(self, fake_backend):
        backend = fake_backend(text_reply="[]")
        with pytest.raises(AIEmptyResultError):
            AIChannelExtractor(backend).extract_via_text("form text")

    def test_array_without_objects_is_malformed(self, fake_backend):
        backend = fake_backend(text_reply='["146.520", "146.550"]')
        with pytest.raises(AIMalformedResponseError):
            AIChannelExtractor(backend).extract_via_text("form text")

    def test_backend_errors_propagate(self, fake_backend):
        backend = fake_backend(text_reply=AIUnavailableError("quota exceeded"))
        with pytest.raises(AIUnavailableError):
            AIChannelExtractor(backend).extract_via_text("form text")

    def test_missing_fields_get_defaults(self, fake_backend):
        backend = fake_backend(text_reply='[{"rxFreq": 146.52}]')
        record = AIChannelExtractor(backend).extract_via_text("form text")[0]

        assert record.name == "Channel 1"
        assert record.tx_frequency == pytest.approx(146.52)
        assert record.mode == "FM"
        assert record.remarks is None
