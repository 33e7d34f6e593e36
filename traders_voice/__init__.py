"""Traders Voice: structured trade notes from spoken transcripts."""

from .analyzers.trade_summary import generate_trade_summary
from .parsers.trade_extractor import TradeRecord, extract_trade_info, extract_trade_record

__version__ = "1.0.0"

__all__ = [
    "TradeRecord",
    "extract_trade_info",
    "extract_trade_record",
    "generate_trade_summary",
    "__version__",
]
