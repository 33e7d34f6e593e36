from .trade_extractor import (
    TradeRecord,
    compact_record,
    extract_trade_info,
    extract_trade_record,
    parse_number,
)
from .transcript_normalizer import correct_indicator, normalize_stop_loss
