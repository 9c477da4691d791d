"""Convert ICS-205 radio communications plan PDFs into CHIRP channel CSV files"""
from .chirp_csv import encode, output_filename
from .config import ConverterConfig
from .converter import ChannelConverter, ConversionResult
from .errors import ConversionError, ConversionFailed
from .models import ChannelRecord

__all__ = [
    "ChannelConverter",
    "ChannelRecord",
    "ConversionError",
    "ConversionFailed",
    "ConversionResult",
    "ConverterConfig",
    "encode",
    "output_filename",
]
