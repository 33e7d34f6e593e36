"""
Export a transcript and its extracted trade.

Formats:
- ``text``:     the transcript as spoken
- ``markdown``: a "Trade Note" document with a details list and R:R
- ``json``:     a versioned document carrying the transcript, the sparse
                trade and the transcription model name

Plus the plain-text block used when a note is copied to the clipboard.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Union

from traders_voice.analyzers.risk_reward import calculate_risk_reward
from traders_voice.analyzers.trade_summary import format_number, plain_number
from traders_voice.config import load_settings
from traders_voice.parsers.trade_extractor import TradeRecord, compact_record

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0"

Trade = Union[Mapping[str, Any], TradeRecord, None]


class UnsupportedExportFormat(ValueError):
    """Raised for an export format name that is not registered."""


def _as_mapping(trade: Trade) -> Optional[Mapping[str, Any]]:
    if isinstance(trade, TradeRecord):
        return compact_record(trade)
    return trade


def format_note_number(value: float) -> str:
    """Thousands separators, up to eight decimals, no trailing zeros."""
    return f"{value:,.8f}".rstrip("0").rstrip(".")


# ---------------------------------------------------------------------------
# Formats
# ---------------------------------------------------------------------------

def export_plain_text(transcript: str) -> str:
    return transcript


def export_markdown(transcript: str, trade: Trade = None, now: Optional[datetime] = None) -> str:
    trade = _as_mapping(trade)
    now = now or datetime.now()

    lines = [
        "# Trade Note",
        f"**Date:** {now:%Y-%m-%d %H:%M:%S}",
        "",
        "## Transcript",
        transcript,
        "",
    ]

    if trade:
        lines.append("## Trade Details")

        direction = trade.get("tradeType") or trade.get("action")
        if direction:
            lines.append(f"- **Action:** {direction.capitalize()}")
        if trade.get("ticker"):
            lines.append(f"- **Ticker:** {trade['ticker']}")
        if trade.get("exchange"):
            lines.append(f"- **Exchange:** {trade['exchange']}")
        if trade.get("price"):
            lines.append(f"- **Entry:** ${format_note_number(trade['price'])}")
        if trade.get("stopLoss"):
            lines.append(f"- **Stop Loss:** ${format_note_number(trade['stopLoss'])}")
        if trade.get("takeProfit"):
            lines.append(f"- **Take Profit:** ${format_note_number(trade['takeProfit'])}")

        ratio = calculate_risk_reward(trade.get("price"), trade.get("stopLoss"), trade.get("takeProfit"))
        if ratio:
            lines.append(f"- **R:R:** 1:{ratio:.2f}")

        if trade.get("timeframe"):
            lines.append(f"- **Timeframe:** {trade['timeframe']}")
        if trade.get("positionSize"):
            lines.append(f"- **Position Size:** ${format_note_number(trade['positionSize'])}")
        if trade.get("quantity"):
            lines.append(f"- **Quantity:** {format_note_number(trade['quantity'])}")
        if trade.get("leverage"):
            lines.append(f"- **Leverage:** {trade['leverage']}x")
        if trade.get("indicators"):
            lines.append(f"- **Indicators:** {', '.join(trade['indicators'])}")

        if trade.get("rationale"):
            lines.extend(["", "## Rationale", trade["rationale"]])

    return "\n".join(lines) + "\n"


def export_json(
    transcript: str,
    trade: Trade = None,
    model: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    """Indented JSON document; ``model`` defaults to the configured transcription model."""
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    document = {
        "schema_version": SCHEMA_VERSION,
        "timestamp": now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "transcript": transcript,
        "trade": dict(_as_mapping(trade)) if trade else None,
        "model": model or load_settings().model,
    }
    return json.dumps(document, indent=2, ensure_ascii=False)


def format_note_for_clipboard(transcript: str, trade: Trade = None) -> str:
    trade = _as_mapping(trade)
    text = transcript or ""
    if not trade:
        return text

    lines = ["", "", "--- Trade Info ---"]
    if trade.get("ticker"):
        lines.append(f"Ticker: {trade['ticker']}")
    if trade.get("action"):
        lines.append(f"Action: {trade['action'].upper()}")
    if trade.get("positionSize"):
        lines.append(f"Position Size: ${format_number(trade['positionSize'])}")
    if trade.get("quantity"):
        lines.append(f"Quantity: {plain_number(trade['quantity'])}")
    if trade.get("price"):
        lines.append(f"Price: ${format_number(trade['price'])}")
    if trade.get("stopLoss"):
        lines.append(f"Stop Loss: ${format_number(trade['stopLoss'])}")
    if trade.get("takeProfit"):
        lines.append(f"Take Profit: ${format_number(trade['takeProfit'])}")
    return text + "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

EXPORT_FORMATS: dict[str, Callable[..., str]] = {
    "text": lambda transcript, trade, model, now: export_plain_text(transcript),
    "markdown": lambda transcript, trade, model, now: export_markdown(transcript, trade, now=now),
    "json": lambda transcript, trade, model, now: export_json(transcript, trade, model=model, now=now),
}


def export_note(
    fmt: str,
    transcript: str,
    trade: Trade = None,
    model: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    """Render a note in the named format."""
    exporter = EXPORT_FORMATS.get(fmt.lower().strip())
    if exporter is None:
        raise UnsupportedExportFormat(
            f"Unsupported export format {fmt!r}; expected one of {', '.join(EXPORT_FORMATS)}"
        )
    logger.debug("Exporting %d-char transcript as %s", len(transcript), fmt)
    return exporter(transcript, trade, model, now)
