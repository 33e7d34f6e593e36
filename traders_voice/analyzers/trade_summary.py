"""One-line human readable summary of an extracted trade."""

from __future__ import annotations

from typing import Any, Mapping, Union

from traders_voice.parsers.trade_extractor import TradeRecord, compact_record


def format_number(value: float) -> str:
    """Thousands separators; below 1000 always two decimals ("150.00", "86,000")."""
    if value >= 1000:
        return f"{value:,.2f}".rstrip("0").rstrip(".")
    return f"{value:.2f}"


def plain_number(value: float) -> str:
    """Render 100.0 as "100" and 0.105 as "0.105"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _as_mapping(trade: Union[Mapping[str, Any], TradeRecord]) -> Mapping[str, Any]:
    if isinstance(trade, TradeRecord):
        return compact_record(trade)
    return trade


def _headline(trade: Mapping[str, Any]) -> str:
    action = trade.get("action")
    ticker = trade.get("ticker")

    if action and ticker:
        label = "Buy" if action == "buy" else "Sell"
        trade_type = trade.get("tradeType")
        if trade_type:
            label = "Long" if trade_type == "long" else "Short"
        return f"{label} {ticker}"
    if ticker:
        return f"Trade {ticker}"
    if action:
        return "Buy" if action == "buy" else "Sell"
    return ""


def generate_trade_summary(trade: Union[Mapping[str, Any], TradeRecord]) -> str:
    """
    Build a summary such as
    ``Long BTC/USDT on Binance (4h) 3x at $95,000 • Stop loss: $92,000 • Target: $105,000``.

    Fields missing from ``trade`` contribute nothing.
    """
    trade = _as_mapping(trade)
    parts: list[str] = []

    headline = _headline(trade)
    if headline:
        parts.append(headline)

    if trade.get("exchange"):
        parts.append(f"on {trade['exchange']}")
    if trade.get("timeframe"):
        parts.append(f"({trade['timeframe']})")
    if trade.get("quantity"):
        parts.append(f"{plain_number(trade['quantity'])} shares")
    if trade.get("positionSize"):
        parts.append(f"${format_number(trade['positionSize'])} position")
    if trade.get("leverage"):
        parts.append(f"{trade['leverage']}x")
    if trade.get("price"):
        parts.append(f"at ${format_number(trade['price'])}")

    extras: list[str] = []
    if trade.get("stopLoss"):
        extras.append(f"Stop loss: ${format_number(trade['stopLoss'])}")
    if trade.get("takeProfit"):
        extras.append(f"Target: ${format_number(trade['takeProfit'])}")

    break_even = trade.get("breakEven")
    if break_even is True:
        extras.append("Move to break even")
    elif isinstance(break_even, (int, float)) and not isinstance(break_even, bool):
        extras.append(f"Break even: ${format_number(break_even)}")

    if trade.get("indicators"):
        extras.append(f"Indicators: {', '.join(trade['indicators'])}")

    if extras:
        parts.append("• " + " • ".join(extras))

    return " ".join(parts)
