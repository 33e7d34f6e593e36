"""
Trade extractor for spoken trade notes.

Turns a raw speech-to-text transcript ("Open long BTC USDT, 500 USD,
stop loss at 86,000...") into a sparse trade record.  Each field has its
own detector; within a detector the patterns are tried in a fixed order
and the first usable match wins.

Detection order:
 1. Action / direction      7. Entry price
 2. Exchange                8. Quantity
 3. Timeframe               9. Position size
 4. Indicators             10. Stop loss (after mishearing correction)
 5. Leverage               11. Take profit
 6. Ticker (cascade)       12. Break-even

A transcript only counts as a trade when at least one of ticker, action,
price, quantity, stop loss, take profit or position size was found.
Nothing in here raises on bad input: a field that cannot be read is
simply left out.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, fields
from typing import Any, Callable, Optional, Union

from .transcript_normalizer import correct_indicator, normalize_stop_loss
from .vocabulary import (
    CRYPTO_NAME_TO_TICKER,
    CRYPTO_TOKENS,
    EXCHANGES,
    EXCLUDED_WORDS,
    INDICATORS,
    PAIR_QUOTES,
    SPOKEN_PAIR_VARIANTS,
    STANDALONE_QUOTES,
    STOCK_TICKERS,
    TIMEFRAME_VARIANTS,
)

logger = logging.getLogger(__name__)

MIN_LEVERAGE = 1
MAX_LEVERAGE = 125
MAX_QUANTITY = 1_000_000
MIN_POSITION_SIZE = 10
MAX_POSITION_SIZE = 10_000_000

# How far back from an entry-price candidate to look for stop/target words
PRICE_EXCLUSION_WINDOW = 20


@dataclass(frozen=True)
class TradeRecord:
    """One spoken trade idea.  Every field is optional."""

    ticker: Optional[str] = None
    action: Optional[str] = None  # buy | sell
    quantity: Optional[float] = None
    price: Optional[float] = None
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    position_size: Optional[float] = None
    exchange: Optional[str] = None
    timeframe: Optional[str] = None
    indicators: tuple[str, ...] = ()
    break_even: Union[float, bool, None] = None  # True = "move to break even", no price
    leverage: Optional[int] = None
    trade_type: Optional[str] = None  # long | short, always paired with action

    @property
    def has_trade_info(self) -> bool:
        """Validity gate: indicators or a timeframe on their own are not a trade."""
        return any(
            value is not None
            for value in (
                self.ticker,
                self.action,
                self.price,
                self.quantity,
                self.stop_loss,
                self.take_profit,
                self.position_size,
            )
        )


# Attribute name -> key in the sparse output shared with the front-end
RECORD_KEYS: dict[str, str] = {
    "ticker": "ticker",
    "action": "action",
    "quantity": "quantity",
    "price": "price",
    "stop_loss": "stopLoss",
    "take_profit": "takeProfit",
    "position_size": "positionSize",
    "exchange": "exchange",
    "timeframe": "timeframe",
    "indicators": "indicators",
    "break_even": "breakEven",
    "leverage": "leverage",
    "trade_type": "tradeType",
}

_TRADE_TYPES = {"buy": "long", "sell": "short"}


def compact_record(record: TradeRecord) -> dict[str, Any]:
    """Drop every absent or empty field and return the sparse dict form."""
    sparse: dict[str, Any] = {}
    for f in fields(record):
        value = getattr(record, f.name)
        if value is None or value == "" or value == ():
            continue
        if isinstance(value, tuple):
            value = list(value)
        sparse[RECORD_KEYS[f.name]] = value
    return sparse


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------

# Digit runs are capped at MAX_NUMBER_CHARS and must not continue past
# the cap, so an overlong run is skipped instead of being truncated.
MAX_NUMBER_CHARS = 20

_NUM = r"([\d,]{1,%d}(?![\d,])(?:\.\d{1,2})?)" % MAX_NUMBER_CHARS

# Whole-number capture that can only start at the beginning of a run
_INT = r"(?<![\d,])([\d,]{1,%d})(?![\d,])" % MAX_NUMBER_CHARS


def parse_number(raw: Optional[str]) -> Optional[float]:
    """Parse a possibly comma-grouped number ("86,000" -> 86000.0).

    Returns None for anything that does not read as a finite number.
    """
    if not raw:
        return None
    try:
        value = float(raw.replace(",", ""))
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _compile(*patterns: str) -> tuple[re.Pattern, ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


def _first_number(
    patterns: tuple[re.Pattern, ...],
    text: str,
    accept: Optional[Callable[[float], bool]] = None,
    label: str = "",
) -> Optional[float]:
    """First parseable, accepted number over ``patterns``, tried in order.

    Only the first match of each pattern is considered; a rejected match
    moves on to the next pattern.
    """
    for pattern in patterns:
        match = pattern.search(text)
        if not match:
            continue
        value = parse_number(match.group(1))
        if value is None:
            continue
        if accept is not None and not accept(value):
            logger.debug("%s %s out of range (pattern %s)", label, value, pattern.pattern)
            continue
        return value
    return None


# ---------------------------------------------------------------------------
# Action, exchange, timeframe, indicators, leverage
# ---------------------------------------------------------------------------

_ACTION_PATTERNS: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"\b(?:BUY|BUYING|BOUGHT|LONG|GOING LONG|OPEN LONG|OPENING LONG)\b", re.IGNORECASE), "buy"),
    (re.compile(
        r"\b(?:SELL|SELLING|SOLD|SHORT|GOING SHORT|OPEN SHORT|OPENING SHORT|CLOSE|CLOSING)\b",
        re.IGNORECASE,
    ), "sell"),
)


def detect_action(text: str) -> Optional[str]:
    """'buy' or 'sell'; buy cues are checked first."""
    for pattern, action in _ACTION_PATTERNS:
        if pattern.search(text):
            return action
    return None


def detect_exchange(text: str) -> Optional[str]:
    upper = text.upper()
    for exchange in EXCHANGES:
        if exchange in upper:
            return exchange.capitalize()
    return None


def detect_timeframe(text: str) -> Optional[str]:
    upper = text.upper()
    for variant, canonical in TIMEFRAME_VARIANTS:
        if variant in upper:
            return canonical
    return None


_INDICATOR_PATTERNS: tuple[tuple[re.Pattern, str], ...] = tuple(
    (re.compile(r"\b" + re.escape(name) + r"\b", re.IGNORECASE), correct_indicator(name))
    for name in INDICATORS
)


def detect_indicators(text: str) -> tuple[str, ...]:
    """Every mentioned indicator under its canonical name, in order of first mention."""
    hits: list[tuple[int, str]] = []
    for pattern, canonical in _INDICATOR_PATTERNS:
        match = pattern.search(text)
        if match:
            hits.append((match.start(), canonical))

    found: list[str] = []
    for _, canonical in sorted(hits, key=lambda hit: hit[0]):
        if canonical not in found:
            found.append(canonical)
    return tuple(found)


_LEVERAGE_PATTERNS = _compile(
    r"(?<!\d)(\d{1,3})X\s*LEVERAGE",
    r"LEVERAGE\s*(?:OF\s*)?(\d{1,3})(?!\d)X?",
    r"\b(?:WITH|USING)\s+(\d{1,3})X\b",
    r"\b(\d{1,3})X\s+(?:LONG|SHORT|POSITION)",
)


def detect_leverage(text: str) -> Optional[int]:
    for pattern in _LEVERAGE_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        leverage = int(match.group(1))
        if MIN_LEVERAGE <= leverage <= MAX_LEVERAGE:
            return leverage
        logger.debug("Leverage %dx outside [%d, %d]", leverage, MIN_LEVERAGE, MAX_LEVERAGE)
    return None


# ---------------------------------------------------------------------------
# Ticker cascade
# ---------------------------------------------------------------------------

_PAIR_QUOTE_ALT = "|".join(PAIR_QUOTES)
_TOKEN_ALT = "|".join(CRYPTO_TOKENS)

_CRYPTO_NAME_PATTERNS: tuple[tuple[re.Pattern, str], ...] = tuple(
    (
        re.compile(r"\b" + re.escape(name) + r"(?:\s+(" + _PAIR_QUOTE_ALT + r"))?\b", re.IGNORECASE),
        ticker,
    )
    for name, ticker in CRYPTO_NAME_TO_TICKER.items()
)

_STANDALONE_QUOTE_RE = re.compile(r"\b(" + "|".join(STANDALONE_QUOTES) + r")\b", re.IGNORECASE)

_CRYPTO_PAIR_PATTERNS = _compile(
    # "BTC USDT", "BTC / USDT", "BTC-USDT"
    r"\b(" + _TOKEN_ALT + r")\s*[/\-]?\s*(" + _PAIR_QUOTE_ALT + r")\b",
    # "BTCUSDT"
    r"\b(" + _TOKEN_ALT + r")(" + _PAIR_QUOTE_ALT + r")\b",
)

_STOCK_RE = re.compile(r"\b(" + "|".join(STOCK_TICKERS) + r")\b", re.IGNORECASE)

_GENERIC_TICKER_PATTERNS = _compile(
    r"\b(?:BUY|SELL|LONG|SHORT|TRADE|TRADING)\s+([A-Z]{2,5})\b",
    r"\b([A-Z]{2,5})\s+(?:AT|@|\$|PRICE)",
    r"\bTICKER\s+([A-Z]{2,5})\b",
)


def _spoken_pair(upper: str) -> Optional[str]:
    for phrase, pair in SPOKEN_PAIR_VARIANTS.items():
        if phrase in upper:
            return pair
    return None


def _named_crypto(upper: str) -> Optional[str]:
    for pattern, ticker in _CRYPTO_NAME_PATTERNS:
        match = pattern.search(upper)
        if not match:
            continue
        if match.group(1):
            return f"{ticker}/{match.group(1).upper()}"
        # "Bitcoin ... in USDT": pair with a quote currency said elsewhere
        quote = _STANDALONE_QUOTE_RE.search(upper)
        if quote:
            return f"{ticker}/{quote.group(1).upper()}"
        return ticker
    return None


def _symbolic_pair(upper: str) -> Optional[str]:
    for pattern in _CRYPTO_PAIR_PATTERNS:
        match = pattern.search(upper)
        if match:
            return f"{match.group(1)}/{match.group(2)}".upper()
    return None


def _stock_ticker(upper: str) -> Optional[str]:
    match = _STOCK_RE.search(upper)
    return match.group(1).upper() if match else None


def _contextual_ticker(upper: str) -> Optional[str]:
    for pattern in _GENERIC_TICKER_PATTERNS:
        match = pattern.search(upper)
        if not match:
            continue
        candidate = match.group(1).upper()
        if candidate not in EXCLUDED_WORDS:
            return candidate
    return None


_TICKER_TIERS: tuple[tuple[str, Callable[[str], Optional[str]]], ...] = (
    ("spoken pair", _spoken_pair),
    ("crypto name", _named_crypto),
    ("crypto pair", _symbolic_pair),
    ("stock", _stock_ticker),
    ("contextual", _contextual_ticker),
)


def detect_ticker(text: str) -> Optional[str]:
    """Run the ticker tiers in order, stopping at the first hit."""
    upper = text.upper()
    for tier, resolver in _TICKER_TIERS:
        ticker = resolver(upper)
        if ticker:
            logger.debug("Ticker %s resolved by %s tier", ticker, tier)
            return ticker
    return None


# ---------------------------------------------------------------------------
# Price levels and sizing
# ---------------------------------------------------------------------------

_PRICE_PATTERNS = _compile(
    r"(?:PRICE|ENTRY|ENTER|AT)\s+(?:OF\s+)?(?:IS\s+)?\$?\s*" + _NUM,
    r"\$\s*" + _NUM + r"\s*(?:EACH|PER|ENTRY)?",
    r"(?:BUY|SELL|LONG|SHORT)\s+(?:AT\s+)?\$?\s*" + _NUM,
)

# Keeps "stop loss at 140" from being read as an entry price
_PRICE_EXCLUDE_BEFORE = re.compile(r"(?:STOP\s*LOSS|SL|TARGET|TAKE\s*PROFIT|TP)\b", re.IGNORECASE)


def detect_price(text: str) -> Optional[float]:
    for pattern in _PRICE_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        before = text[max(0, match.start() - PRICE_EXCLUSION_WINDOW):match.start()]
        if _PRICE_EXCLUDE_BEFORE.search(before):
            logger.debug("Price candidate %r follows a stop/target keyword, skipped", match.group(0))
            continue
        price = parse_number(match.group(1))
        if price is not None:
            return price
    return None


_QUANTITY_PATTERNS = _compile(
    _INT + r"\s*(?:SHARES|CONTRACTS|LOTS|UNITS)",
    r"(?:BUY|SELL|LONG|SHORT)\s+" + _INT + r"\s+(?!USD|USDT|DOLLAR)",
    r"QUANTITY\s+(?:OF\s+)?" + _INT,
)


def detect_quantity(text: str) -> Optional[float]:
    return _first_number(
        _QUANTITY_PATTERNS, text, accept=lambda qty: 0 < qty < MAX_QUANTITY, label="Quantity"
    )


_POSITION_SIZE_PATTERNS = _compile(
    _INT + r"\s*(?:USD|USDT|DOLLARS?|BUCKS)\s*(?:POSITION|SIZE|WORTH)?",
    r"POSITION\s*(?:SIZE)?\s*(?:OF\s*)?" + _INT + r"\s*(?:USD|USDT|DOLLARS?)?",
    r"SIZE\s+(?:OF\s+)?" + _INT + r"\s*(?:USD|USDT|DOLLARS?)?",
)


def detect_position_size(text: str) -> Optional[float]:
    return _first_number(
        _POSITION_SIZE_PATTERNS,
        text,
        accept=lambda size: MIN_POSITION_SIZE <= size <= MAX_POSITION_SIZE,
        label="Position size",
    )


_STOP_LOSS_PATTERNS = _compile(
    r"STOP\s*LOSS\s*(?:AT|@|IS|OF)?\s*\$?\s*" + _NUM,
    r"STOP\s+(?:AT|@)\s*\$?\s*" + _NUM,
    r"\bSL\s*(?:AT|@|IS)?\s*\$?\s*" + _NUM,
    r"(?:SET|PUT)\s+(?:A\s+)?STOP\s+(?:AT\s+)?\$?\s*" + _NUM,
)


def detect_stop_loss(text: str) -> Optional[float]:
    return _first_number(_STOP_LOSS_PATTERNS, normalize_stop_loss(text))


# "target" and "profit" match on their own, so this runs on the raw text
_TAKE_PROFIT_PATTERNS = _compile(
    r"(?:TAKE\s*PROFIT|\bTP)\s*(?:AT|@|IS)?\s*\$?\s*" + _NUM,
    r"TARGET\s*(?:AT|@|IS|OF)?\s*\$?\s*" + _NUM,
    r"PROFIT\s*(?:AT|@)?\s*\$?\s*" + _NUM,
)


def detect_take_profit(text: str) -> Optional[float]:
    return _first_number(_TAKE_PROFIT_PATTERNS, text)


_BREAK_EVEN_PRICE_RE = re.compile(
    r"\b(?:BREAK\s*EVEN|BREAKEVEN|B\s*E)\b\s*(?:AT|@|IS)?\s*\$?\s*" + _NUM,
    re.IGNORECASE,
)
_BREAK_EVEN_CUE_RE = re.compile(
    r"\b(?:MOVE|MOVED|MOVING)\s+(?:STOP\s+)?(?:TO\s+)?(?:BREAK\s*EVEN|BREAKEVEN|B\s*E)\b",
    re.IGNORECASE,
)


def detect_break_even(text: str) -> Union[float, bool, None]:
    """A break-even price, True for "move to break even" without one, else None."""
    price = _first_number((_BREAK_EVEN_PRICE_RE,), text)
    if price is not None:
        return price
    if _BREAK_EVEN_CUE_RE.search(text):
        return True
    return None


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------

# Field -> detector, in detection order.  Detectors are independent of
# each other; the order only matters for reading and logging.
FIELD_DETECTORS: tuple[tuple[str, Callable[[str], Any]], ...] = (
    ("action", detect_action),
    ("exchange", detect_exchange),
    ("timeframe", detect_timeframe),
    ("indicators", detect_indicators),
    ("leverage", detect_leverage),
    ("ticker", detect_ticker),
    ("price", detect_price),
    ("quantity", detect_quantity),
    ("position_size", detect_position_size),
    ("stop_loss", detect_stop_loss),
    ("take_profit", detect_take_profit),
    ("break_even", detect_break_even),
)


def extract_trade_record(text: Any) -> Optional[TradeRecord]:
    """Run every detector over ``text``; None when no trade was mentioned."""
    if not isinstance(text, str) or not text:
        return None

    detected = {name: detector(text) for name, detector in FIELD_DETECTORS}
    detected["trade_type"] = _TRADE_TYPES.get(detected["action"])
    record = TradeRecord(**detected)

    if not record.has_trade_info:
        logger.debug("No trade information in transcript (%d chars)", len(text))
        return None
    return record


def extract_trade_info(text: Any) -> Optional[dict[str, Any]]:
    """Extract a sparse trade dict from a transcript, or None."""
    record = extract_trade_record(text)
    if record is None:
        return None
    return compact_record(record)
