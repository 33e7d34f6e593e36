"""
Static vocabulary for transcript parsing.

Every table here is built once at import and never mutated, so the
extractor can be called from any number of threads without locking.
Lists are ordered where the order is a priority (first match wins);
plain membership tables are frozensets.
"""

from __future__ import annotations

from types import MappingProxyType


# ---------------------------------------------------------------------------
# Ticker detection
# ---------------------------------------------------------------------------

# Words that look like tickers in a transcript but never are
EXCLUDED_WORDS = frozenset({
    "AT", "THE", "AND", "FOR", "WITH", "USD", "USDT", "USDC", "EUR", "GBP",
    "BUY", "SELL", "LONG", "SHORT", "STOP", "LOSS", "TAKE", "PROFIT", "TARGET",
    "OPEN", "CLOSE", "SET", "PUT", "CALL", "GET", "TRADE", "TRADING",
    "PRICE", "SHARES", "CONTRACTS", "LOTS", "QUANTITY", "POSITION", "SIZE",
    "MEET", "MEAN", "REVERSION", "MARKET", "LIMIT", "ORDER",
})

CRYPTO_TOKENS: tuple[str, ...] = (
    "BTC", "ETH", "SOL", "XRP", "ADA", "DOGE", "DOT", "MATIC", "LINK", "AVAX",
    "UNI", "ATOM", "LTC", "BCH", "XLM", "ALGO", "VET", "FTM", "NEAR", "APT",
    "ARB", "OP", "INJ", "SUI", "SEI", "TIA", "PEPE", "SHIB", "BONK", "WIF",
    "BNB", "XMR",
)

# Quote currencies accepted right after a base token or crypto name
PAIR_QUOTES: tuple[str, ...] = ("USDT", "USDC", "USD", "BUSD", "EUR", "BTC", "ETH")

# Quote currencies accepted anywhere in the transcript for a bare crypto name
STANDALONE_QUOTES: tuple[str, ...] = ("USDT", "USDC", "USD", "BUSD", "EUR")

# Spoken coin names, checked in this order
CRYPTO_NAME_TO_TICKER = MappingProxyType({
    "BITCOIN": "BTC",
    "ETHEREUM": "ETH",
    "SOLANA": "SOL",
    "CARDANO": "ADA",
    "DOGECOIN": "DOGE",
    "AVALANCHE": "AVAX",
    "POLKADOT": "DOT",
    "CHAINLINK": "LINK",
    "LITECOIN": "LTC",
    "MONERO": "XMR",
    "BINANCE COIN": "BNB",
    "BNB": "BNB",
    "RIPPLE": "XRP",
})

# Exact spoken phrasings of a pair
SPOKEN_PAIR_VARIANTS = MappingProxyType({
    "BITCOIN TETHER": "BTC/USDT",
    "BTC USDT": "BTC/USDT",
    "ETHEREUM TETHER": "ETH/USDT",
    "ETHER TETHER": "ETH/USDT",
    "ETH USDT": "ETH/USDT",
    "EURO DOLLAR": "EUR/USD",
    "POUND DOLLAR": "GBP/USD",
    "STERLING DOLLAR": "GBP/USD",
    "DOLLAR YEN": "USD/JPY",
})

STOCK_TICKERS: tuple[str, ...] = (
    "AAPL", "GOOGL", "GOOG", "MSFT", "AMZN", "META", "TSLA", "NVDA", "AMD", "INTC",
    "NFLX", "DIS", "BA", "JPM", "GS", "V", "MA", "WMT", "HD", "NKE", "COST", "PEP",
    "KO", "MCD", "SBUX", "CVX", "XOM", "PFE", "JNJ", "UNH", "ABBV", "MRK", "LLY",
    # ETFs
    "SPY", "QQQ", "IWM", "DIA", "VTI", "VOO", "ARKK", "XLF", "XLE", "XLK",
)


# ---------------------------------------------------------------------------
# Venue / context
# ---------------------------------------------------------------------------

EXCHANGES: tuple[str, ...] = (
    "BINANCE", "COINBASE", "KRAKEN", "BYBIT", "OKX", "KUCOIN", "BITFINEX",
    "GEMINI", "HUOBI", "GATE.IO", "BITGET", "MEXC", "CRYPTO.COM",
)

# Most specific phrasing first; hyphenated forms are common in Whisper output
TIMEFRAME_VARIANTS: tuple[tuple[str, str], ...] = (
    ("FIFTEEN MINUTES", "15m"),
    ("15 MINUTES", "15m"),
    ("15-MINUTE", "15m"),
    ("15M CHART", "15m"),
    ("FIVE MINUTES", "5m"),
    ("5 MINUTES", "5m"),
    ("5-MINUTE", "5m"),
    ("5M CHART", "5m"),
    ("ONE MINUTE", "1m"),
    ("1 MINUTE", "1m"),
    ("1-MINUTE", "1m"),
    ("1M CHART", "1m"),
    ("FOUR-HOUR", "4h"),
    ("4-HOUR", "4h"),
    ("FOUR HOUR", "4h"),
    ("FOUR HOURS", "4h"),
    ("4 HOUR", "4h"),
    ("4 HOURS", "4h"),
    ("4H CHART", "4h"),
    ("ONE-HOUR", "1h"),
    ("1-HOUR", "1h"),
    ("ONE HOUR", "1h"),
    ("1 HOUR", "1h"),
    ("1H CHART", "1h"),
    ("HOUR CHART", "1h"),
    ("HOURLY", "1h"),
    ("ONE DAY", "1D"),
    ("1 DAY", "1D"),
    ("1-DAY", "1D"),
    ("DAY CHART", "1D"),
    ("DAILY", "1D"),
    ("ONE WEEK", "1W"),
    ("1 WEEK", "1W"),
    ("1-WEEK", "1W"),
    ("WEEK CHART", "1W"),
    ("WEEKLY", "1W"),
    ("ONE MONTH", "1M"),
    ("1 MONTH", "1M"),
    ("MONTH CHART", "1M"),
    ("MONTHLY", "1M"),
)


# ---------------------------------------------------------------------------
# Indicators and speech-to-text corrections
# ---------------------------------------------------------------------------

INDICATORS: tuple[str, ...] = (
    "RSI", "MACD", "MHCD", "MCD", "MAC D",  # MACD plus its Whisper mishearings
    "EMA", "SMA", "VWAP", "ATR", "BOLLINGER", "BOLLINGER BANDS",
    "STOCHASTIC", "FIBONACCI", "ICHIMOKU", "ADX", "CCI", "WILLIAMS",
)

INDICATOR_CORRECTIONS = MappingProxyType({
    "MHCD": "MACD",
    "MCD": "MACD",
    "MAC D": "MACD",
    "BOLLINGER BANDS": "BOLLINGER",
})

CANONICAL_STOP_LOSS = "STOP LOSS"

# Longer spellings first so "STOPPERS" is not cut down to "STOPPER"
STOP_LOSS_VARIANTS: tuple[str, ...] = (
    "STOPLOSS", "STOP-LOSS",
    "STOPPLERS", "STOPPERS", "STOP PLUS", "STOPPER",
    "SL", "S L", "S.L.",
)
