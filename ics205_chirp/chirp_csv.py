"""CHIRP CSV formatting of channel records"""
import re
from typing import List

from .models import ChannelRecord


HEADER = [
    'Location',      # Memory slot, 0-based
    'Name',          # Display label
    'Frequency',     # RX frequency (MHz)
    'Duplex',        # '', '+' or '-'
    'Offset',        # |TX - RX| (MHz)
    'Tone',          # Tone mode
    'rToneFreq',
    'cToneFreq',
    'DtcsCode',
    'DtcsPolarity',
    'Mode',
    'TStep',
    'Skip',
    'Comment',
]

NAME_LIMIT = 16       # CHIRP radio display limit
COMMENT_LIMIT = 256
DEFAULT_TONE = '88.5'
DEFAULT_DTCS_CODE = '023'
DEFAULT_DTCS_POLARITY = 'NN'
DEFAULT_TUNING_STEP = '5.00'

PDF_SUFFIX = re.compile(r'\.pdf$', re.IGNORECASE)
CSV_SUFFIX = '-channels.csv'
DEFAULT_SOURCE_NAME = 'ics205.pdf'


def encode(records: List[ChannelRecord]) -> str:
    """
    Render records as CHIRP CSV text (header + one row per record)

    Fields are written verbatim without quoting; commas in remarks are
    turned into semicolons. Callers must not pass an empty list.
    """
    rows = [','.join(HEADER)]
    for index, record in enumerate(records):
        rows.append(','.join(_row(index, record)))
    return '\n'.join(rows)


def _row(index: int, record: ChannelRecord) -> List[str]:
    name = (record.name or f"Channel {index + 1}")[:NAME_LIMIT]
    duplex, offset = duplex_offset(record.rx_frequency, record.tx_frequency)
    comment = (record.remarks or '').replace(',', ';')[:COMMENT_LIMIT]

    return [
        str(index),
        name,
        f"{record.rx_frequency:.6f}",
        duplex,
        offset,
        'Tone' if record.tone else '',
        record.tone or DEFAULT_TONE,
        record.tone or DEFAULT_TONE,
        DEFAULT_DTCS_CODE,
        DEFAULT_DTCS_POLARITY,
        record.mode or 'FM',
        DEFAULT_TUNING_STEP,
        '',
        comment,
    ]


def duplex_offset(rx_frequency: float, tx_frequency: float):
    """Duplex sign and absolute offset (6 decimals) of TX relative to RX"""
    diff = tx_frequency - rx_frequency
    if diff > 0:
        return '+', f"{diff:.6f}"
    if diff < 0:
        return '-', f"{-diff:.6f}"
    return '', '0.000000'


def output_filename(filename: str) -> str:
    """plan.PDF -> plan-channels.csv; plan -> plan-channels.csv"""
    source = filename or DEFAULT_SOURCE_NAME
    if PDF_SUFFIX.search(source):
        return PDF_SUFFIX.sub(CSV_SUFFIX, source)
    return source + CSV_SUFFIX
