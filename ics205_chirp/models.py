"""Channel record shared by every extraction tier"""
import math
import re
from dataclasses import dataclass
from typing import Dict, List, Optional


NUMBER_PATTERN = re.compile(r'-?\d+(?:\.\d+)?')
NO_TONE_VALUES = {'', 'none', 'null', 'n/a', 'na', '-', '–', '—', 'off'}


@dataclass
class ChannelRecord:
    """One radio channel entry extracted from an ICS-205 plan"""
    name: str
    rx_frequency: float
    tx_frequency: float
    tone: Optional[str] = None
    mode: str = "FM"
    remarks: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict, position: int) -> 'ChannelRecord':
        """
        Build a record from a loosely-typed dict (AI reply entry)

        Args:
            data: Raw entry; accepts rxFreq/txFreq or rxFrequency/txFrequency keys
            position: 1-based position, used for the default name

        Returns:
            Normalized ChannelRecord
        """
        name = single_line(data.get('name'))
        if not name:
            name = f"Channel {position}"

        rx_raw = _first_present(data, 'rxFreq', 'rxFrequency', 'rx_frequency', 'frequency')
        tx_raw = _first_present(data, 'txFreq', 'txFrequency', 'tx_frequency')

        rx_frequency = parse_frequency(rx_raw)
        if rx_frequency is None:
            rx_frequency = 0.0
        tx_frequency = parse_frequency(tx_raw)
        if tx_frequency is None:
            tx_frequency = rx_frequency

        mode = single_line(data.get('mode')) or "FM"

        remarks = data.get('remarks')
        if remarks is not None:
            remarks = single_line(remarks)

        return cls(
            name=name,
            rx_frequency=rx_frequency,
            tx_frequency=tx_frequency,
            tone=normalize_tone(data.get('tone')),
            mode=mode,
            remarks=remarks,
        )


def records_from_dicts(entries: List[Dict]) -> List[ChannelRecord]:
    """Normalize a list of raw entries, skipping anything that is not a dict"""
    records = []
    for entry in entries:
        if isinstance(entry, dict):
            records.append(ChannelRecord.from_dict(entry, len(records) + 1))
    return records


def parse_frequency(value) -> Optional[float]:
    """Parse '146.520', 146.52 or '146.520 MHz' into a float; None if absent"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    else:
        match = NUMBER_PATTERN.search(str(value))
        if not match:
            return None
        number = match.group()
    try:
        frequency = float(number)
    except (OverflowError, ValueError):
        return None
    return frequency if math.isfinite(frequency) else None


def normalize_tone(value) -> Optional[str]:
    """Return the tone as text, or None for placeholders meaning 'no tone'"""
    if value is None or isinstance(value, bool):
        return None
    text = single_line(value)
    if text.lower() in NO_TONE_VALUES:
        return None
    return text


def single_line(value) -> str:
    """Collapse runs of whitespace, newlines included, to single spaces"""
    if value is None:
        return ''
    return ' '.join(str(value).split())


def _first_present(data: Dict, *keys):
    for key in keys:
        value = data.get(key)
        if value is not None and value != '':
            return value
    return None
