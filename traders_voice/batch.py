"""Batch extraction over a table of saved transcripts."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import numpy as np
import pandas as pd

from traders_voice.analyzers.trade_summary import generate_trade_summary
from traders_voice.parsers.trade_extractor import RECORD_KEYS, extract_trade_info

logger = logging.getLogger(__name__)

TRANSCRIPT_COLUMN_CANDIDATES = ("transcript", "text", "note", "transcription")

TRADE_COLUMNS = list(RECORD_KEYS.values())


def read_transcripts_csv(path: str | Path, text_column: Optional[str] = None) -> pd.DataFrame:
    """Read a CSV of transcripts; the transcript column is renamed to ``transcript``."""
    df = pd.read_csv(path)
    df.columns = [str(c).strip().lower() for c in df.columns]

    candidates = (text_column.strip().lower(),) if text_column else TRANSCRIPT_COLUMN_CANDIDATES
    column = next((c for c in candidates if c in df.columns), None)
    if column is None:
        raise ValueError(
            f"No transcript column in {Path(path).name}; looked for {', '.join(candidates)}"
        )
    if column != "transcript":
        df = df.rename(columns={column: "transcript"})
    return df


def extract_frame(df: pd.DataFrame, text_column: str = "transcript") -> pd.DataFrame:
    """One row of extracted fields per transcript, aligned to ``df``'s index.

    Rows without a trade keep all trade columns empty and ``has_trade`` False.
    """
    if text_column not in df.columns:
        raise ValueError(f"Missing transcript column: {text_column}")

    rows: list[dict[str, Any]] = []
    for text in df[text_column].tolist():
        trade = extract_trade_info(text)
        row: dict[str, Any] = {"transcript": text if isinstance(text, str) else None}
        row.update({key: None for key in TRADE_COLUMNS})
        if trade:
            row.update(trade)
            if "indicators" in trade:
                row["indicators"] = ", ".join(trade["indicators"])
        row["summary"] = generate_trade_summary(trade) if trade else None
        row["has_trade"] = trade is not None
        rows.append(row)

    out = pd.DataFrame(rows, index=df.index, columns=["transcript", *TRADE_COLUMNS, "summary", "has_trade"])
    logger.info("Extracted %d trades from %d transcripts", int(out["has_trade"].sum()), len(out))
    return out


def _sanitize(value: Any) -> Any:
    """Convert numpy / pandas scalars to JSON-safe Python values."""
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        return None if np.isnan(value) else float(value)
    if isinstance(value, np.bool_):
        return bool(value)
    if isinstance(value, float) and np.isnan(value):
        return None
    return value


def frame_to_records(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Rows as sparse dicts with the empty cells dropped."""
    records = []
    for row in df.to_dict(orient="records"):
        clean = {k: _sanitize(v) for k, v in row.items()}
        records.append({k: v for k, v in clean.items() if v is not None})
    return records
