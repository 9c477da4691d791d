"""Main conversion orchestrator: PDF bytes -> channel records -> CHIRP CSV"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from . import chirp_csv
from .ai_extractor import AIChannelExtractor
from .config import ConverterConfig
from .errors import (
    ConfigurationError,
    ConversionError,
    ConversionFailed,
    EmptyDocumentError,
    NoFrequenciesFoundError,
    UnreadableDocumentError,
)
from .heuristics import HeuristicChannelExtractor
from .llm_client import LLMBackend, build_backends
from .models import ChannelRecord
from .text_extractor import TextExtractor


logger = logging.getLogger(__name__)

DOCUMENT = "document"
TEXT = "text"


@dataclass
class Tier:
    """
    One step of the fallback plan

    `source` says what the tier consumes: the raw PDF (DOCUMENT) or the
    extracted text (TEXT). `attempt` returns a non-empty record list or
    raises a ConversionError.
    """
    name: str
    source: str
    attempt: Callable


@dataclass
class ConversionResult:
    """Records of one conversion, the tier that produced them and the source name"""
    records: List[ChannelRecord]
    tier: str
    source_filename: str = ""

    @property
    def filename(self) -> str:
        return chirp_csv.output_filename(self.source_filename)

    @property
    def channel_count(self) -> int:
        return len(self.records)

    def to_csv(self) -> str:
        return chirp_csv.encode(self.records)

    def to_payload(self) -> Dict:
        return {
            "csv": self.to_csv(),
            "filename": self.filename,
            "channelCount": self.channel_count,
            "tier": self.tier,
        }


def build_tiers(backends: List[LLMBackend],
                heuristics: HeuristicChannelExtractor,
                document_ai: bool = True) -> List[Tier]:
    """
    Ordered fallback plan

    1. document understanding, per document-capable backend
    2. text prompt, per backend in preference order
    3. regex heuristics
    """
    extractors = [AIChannelExtractor(backend) for backend in backends]
    tiers = []
    if document_ai:
        for extractor in extractors:
            if extractor.backend.supports_documents:
                tiers.append(Tier(f"{extractor.name}:document", DOCUMENT,
                                  extractor.extract_via_document))
    for extractor in extractors:
        tiers.append(Tier(f"{extractor.name}:text", TEXT, extractor.extract_via_text))
    tiers.append(Tier("heuristics", TEXT, heuristics.extract))
    return tiers


class ChannelConverter:
    """Sequences the extraction tiers and keeps the first non-empty result"""

    def __init__(self,
                 backends: List[LLMBackend],
                 text_extractor: Optional[TextExtractor] = None,
                 heuristics: Optional[HeuristicChannelExtractor] = None,
                 document_ai: bool = True):
        if not backends:
            raise ConfigurationError(
                "At least one of OPENAI_API_KEY or GRADIENT_AI_API_KEY must be set"
            )
        self.backends = backends
        self.text_extractor = text_extractor or TextExtractor()
        self.heuristics = heuristics or HeuristicChannelExtractor()
        self.tiers = build_tiers(backends, self.heuristics, document_ai)
        logger.info("Conversion plan: %s", " -> ".join(t.name for t in self.tiers))

    @classmethod
    def from_config(cls, config: ConverterConfig) -> 'ChannelConverter':
        if not config.text_ai_enabled:
            raise ConfigurationError(
                "At least one of OPENAI_API_KEY or GRADIENT_AI_API_KEY must be set"
            )
        return cls(build_backends(config), document_ai=config.document_ai_enabled)

    def convert(self, pdf_bytes: bytes, filename: str = "") -> ConversionResult:
        """
        Convert an ICS-205 PDF into channel records

        Args:
            pdf_bytes: PDF file as bytes
            filename: Original upload name, only used for the output name

        Returns:
            ConversionResult from the first tier that found channels

        Raises:
            ConversionFailed: every tier failed, or the PDF has no text
                layer once the document tiers are exhausted
        """
        attempts: List[Tuple[str, ConversionError]] = []
        text = None

        for tier in self.tiers:
            # Text is extracted once, on the first text tier
            if tier.source == TEXT and text is None:
                text = self._extract_text(pdf_bytes, attempts)

            logger.info("Attempting tier %s", tier.name)
            try:
                if tier.source == DOCUMENT:
                    records = tier.attempt(pdf_bytes, filename or "document.pdf")
                else:
                    records = tier.attempt(text)
            except ConversionError as e:
                logger.warning("Tier %s failed (%s): %s", tier.name, e.reason, e)
                attempts.append((tier.name, e))
                continue

            if not records:
                logger.warning("Tier %s returned no channels", tier.name)
                attempts.append((tier.name, NoFrequenciesFoundError(
                    f"{tier.name} returned no channels"
                )))
                continue

            logger.info("Tier %s produced %d channels", tier.name, len(records))
            return ConversionResult(records=records, tier=tier.name,
                                    source_filename=filename)

        raise ConversionFailed(attempts[-1][1], attempts)

    def convert_to_payload(self, pdf_bytes: bytes, filename: str = "") -> Dict:
        """Convert and render the success payload {csv, filename, channelCount, tier}"""
        return self.convert(pdf_bytes, filename).to_payload()

    def _extract_text(self, pdf_bytes: bytes,
                      attempts: List[Tuple[str, ConversionError]]) -> str:
        try:
            return self.text_extractor.extract(pdf_bytes).text
        except (EmptyDocumentError, UnreadableDocumentError) as e:
            logger.warning("Text extraction failed (%s): %s", e.reason, e)
            attempts.append(("text_extraction", e))
            raise ConversionFailed(e, attempts) from e
