"""Regex fallback: channel records straight from raw form text"""
import logging
import re
from typing import List, Optional

from .errors import NoFrequenciesFoundError
from .models import ChannelRecord


logger = logging.getLogger(__name__)

# Land-mobile radio spans VHF low band through UHF (MHz)
FREQUENCY_RANGE = (30.0, 3000.0)
# CTCSS tones (Hz)
TONE_RANGE = (67.0, 254.1)

MIN_LINE_LENGTH = 5
NAME_WINDOW = 30
REMARKS_START = 50
REMARKS_END = 100


class HeuristicChannelExtractor:
    """Deterministic, dependency-free last-resort extraction"""

    def __init__(self):
        self.frequency_pattern = re.compile(r'\b(\d{2,4}\.\d{1,4})\b')
        self.tone_pattern = re.compile(r'\b(\d{2,3}\.\d)\b')
        self.segment_split = re.compile(r'\s{2,}')
        self.leading_noise = re.compile(r'^[\d\s.\-]+')
        # Short identifiers such as CMD1, TAC-2, LE3
        self.channel_code = re.compile(r'^[A-Z]{2,5}-?\d{1,3}[A-Z]?$')
        self.page_footer = re.compile(r'\bpage\s+[\d.]+\s+of\s+[\d.]+', re.IGNORECASE)

    def extract(self, text: str) -> List[ChannelRecord]:
        """
        Extract one record per line carrying a plausible frequency

        Raises:
            NoFrequenciesFoundError: no line yielded a record
        """
        records: List[ChannelRecord] = []
        lines = text.split('\n')

        for line_number, raw_line in enumerate(lines, start=1):
            line = raw_line.strip()
            if self._skip_line(line):
                continue

            record = self._parse_line(line, len(records))
            if record is None:
                continue

            logger.debug("Found frequency on line %d: %s MHz (%s)",
                         line_number, record.rx_frequency, record.name)
            records.append(record)

        logger.info("Processed %d lines, found %d lines with frequencies",
                    len(lines), len(records))

        if not records:
            logger.debug("First 1000 characters of text:\n%s", text[:1000])
            raise NoFrequenciesFoundError(
                "No frequencies found in PDF. Possible issues: (1) PDF is image-based "
                "and needs OCR, (2) frequencies are in an unsupported format, "
                "(3) file is not a valid ICS-205 form."
            )
        return records

    def _skip_line(self, line: str) -> bool:
        """Short lines, table headers and form boilerplate"""
        if len(line) < MIN_LINE_LENGTH:
            return True
        lower = line.lower()
        if 'frequency' in lower and 'channel' in lower:
            return True
        if 'radio communications plan' in lower:
            return True
        return self.page_footer.search(line) is not None

    def _parse_line(self, line: str, accepted: int) -> Optional[ChannelRecord]:
        valid = [
            match for match in self.frequency_pattern.finditer(line)
            if FREQUENCY_RANGE[0] <= float(match.group(1)) <= FREQUENCY_RANGE[1]
        ]
        if not valid:
            return None

        rx_match = valid[0]
        tx_match = valid[1] if len(valid) >= 2 else rx_match
        used_spans = {rx_match.span(1), tx_match.span(1)}

        return ChannelRecord(
            name=self._channel_name(line, accepted),
            rx_frequency=float(rx_match.group(1)),
            tx_frequency=float(tx_match.group(1)),
            tone=self._tone(line, used_spans),
            mode="FM",
            remarks=line[REMARKS_START:REMARKS_END].strip() if len(line) > REMARKS_START else None,
        )

    def _tone(self, line: str, used_spans: set) -> Optional[str]:
        for match in self.tone_pattern.finditer(line):
            if match.span(1) in used_spans:
                continue
            if TONE_RANGE[0] <= float(match.group(1)) <= TONE_RANGE[1]:
                return match.group(1)
        return None

    def _channel_name(self, line: str, accepted: int) -> str:
        """
        Name from the leading columns of the line

        The first descriptive segment before any frequency wins; a bare
        channel code (CMD1) is only used when nothing better precedes the
        frequencies.
        """
        code = None
        for segment in self.segment_split.split(line[:NAME_WINDOW]):
            # Single-spaced columns: keep only the label before the frequency
            frequency = self.frequency_pattern.search(segment)
            label = segment[:frequency.start()] if frequency else segment
            cleaned = self.leading_noise.sub('', label.strip()).strip()
            if len(cleaned) >= 2:
                if not self.channel_code.match(cleaned):
                    return cleaned
                code = code or cleaned
            if frequency:
                break
        return code or f"Channel {accepted + 1}"
