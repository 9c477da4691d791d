"""AI extraction of channel records from ICS-205 documents"""
import json
import logging
import re
from typing import List

from .errors import AIEmptyResultError, AIMalformedResponseError
from .llm_client import LLMBackend
from .models import ChannelRecord, records_from_dicts


logger = logging.getLogger(__name__)

CODE_FENCE = re.compile(r'```(?:json|JSON)?\s*(.*?)```', re.DOTALL)

RECORD_SCHEMA = """[
  {
    "name": "Command",
    "rxFreq": "146.520",
    "txFreq": "146.520",
    "tone": "100.0",
    "mode": "FM",
    "remarks": "Net control"
  }
]"""

FIELD_RULES = """Fields for every channel entry:
- name: channel name, function or assignment (string)
- rxFreq: receive frequency in MHz (string, e.g. "146.520")
- txFreq: transmit frequency in MHz (string; same as rxFreq for simplex)
- tone: CTCSS/PL tone in Hz (string, e.g. "100.0"), or null when there is none
- mode: emission mode such as "FM", "NFM" or "AM" (default "FM")
- remarks: notes or function description (string), or null"""

INSTRUCTIONS = """You are an expert at reading ICS-205 Radio Communications Plan forms.
{task}

{rules}

Reply with ONLY a JSON array using exactly this structure, no markdown and no commentary:
{schema}

If the document lists no frequencies, reply with an empty array: []"""


def build_document_prompt() -> str:
    """Prompt sent alongside the raw PDF (may be scanned/image-only)"""
    return INSTRUCTIONS.format(
        task="Analyze the attached PDF and extract every radio channel it lists.",
        rules=FIELD_RULES,
        schema=RECORD_SCHEMA,
    )


def build_text_prompt(text: str) -> str:
    """Prompt carrying text already extracted from the PDF"""
    prompt = INSTRUCTIONS.format(
        task="Extract every radio channel listed in the form text below.",
        rules=FIELD_RULES,
        schema=RECORD_SCHEMA,
    )
    return f"{prompt}\n\nICS-205 text:\n{text}\n\nJSON array:"


def extract_json_array(completion: str) -> list:
    """
    Recover the first well-formed JSON array from a free-text model reply

    Code-fence delimiters are stripped first when present.

    Raises:
        AIMalformedResponseError: no array substring parses as JSON
    """
    text = completion or ""
    fenced = CODE_FENCE.search(text)
    if fenced:
        text = fenced.group(1)

    decoder = json.JSONDecoder()
    start = text.find('[')
    if start < 0:
        raise AIMalformedResponseError("No JSON array found in model response")

    while start >= 0:
        try:
            value, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find('[', start + 1)
            continue
        if not isinstance(value, list):
            raise AIMalformedResponseError("Model response is not an array")
        return value

    raise AIMalformedResponseError("Model response contains no parsable JSON array")


class AIChannelExtractor:
    """Runs the extraction prompt against one backend and parses its reply"""

    def __init__(self, backend: LLMBackend):
        self.backend = backend

    @property
    def name(self) -> str:
        return self.backend.name

    def extract_via_document(self, pdf_bytes: bytes,
                             filename: str = "document.pdf") -> List[ChannelRecord]:
        """Submit the PDF itself to a document-capable model"""
        completion = self.backend.complete_from_document(
            build_document_prompt(), pdf_bytes, filename
        )
        return self._parse(completion)

    def extract_via_text(self, text: str) -> List[ChannelRecord]:
        """Submit already-extracted text to a text-completion model"""
        completion = self.backend.complete_from_text(build_text_prompt(text))
        return self._parse(completion)

    def _parse(self, completion: str) -> List[ChannelRecord]:
        entries = extract_json_array(completion)
        if not entries:
            raise AIEmptyResultError(f"{self.name} found no frequencies in the document")

        records = records_from_dicts(entries)
        if not records:
            raise AIMalformedResponseError(
                f"{self.name} returned an array without channel objects"
            )
        logger.info("%s parsed %d channels", self.name, len(records))
        return records
