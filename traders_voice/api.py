"""FastAPI service for Traders Voice.

The browser app transcribes audio itself and posts the text here:

    POST /extract  { text }                          -> trade, summary, levels
    POST /summary  { trade }                         -> summary line
    POST /export   { text, trade?, format, model? }  -> rendered note
"""

from __future__ import annotations

import logging
from typing import Any, Literal, Optional, Union

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt, StrictStr

from traders_voice import __version__
from traders_voice.analyzers.export_formats import UnsupportedExportFormat, export_note
from traders_voice.analyzers.risk_reward import describe_levels
from traders_voice.analyzers.trade_summary import generate_trade_summary
from traders_voice.config import configure_logging, load_settings
from traders_voice.parsers.trade_extractor import extract_trade_info

settings = load_settings()
configure_logging(settings)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Traders Voice",
    description="Structured trade notes from spoken transcripts",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


class ExtractRequest(BaseModel):
    text: str


Number = Union[StrictInt, StrictFloat]


class TradePayload(BaseModel):
    """A sparse trade as returned by /extract, camelCase keys."""

    ticker: Optional[StrictStr] = None
    action: Optional[Literal["buy", "sell"]] = None
    trade_type: Optional[Literal["long", "short"]] = Field(None, alias="tradeType")
    quantity: Optional[Number] = None
    price: Optional[Number] = None
    stop_loss: Optional[Number] = Field(None, alias="stopLoss")
    take_profit: Optional[Number] = Field(None, alias="takeProfit")
    position_size: Optional[Number] = Field(None, alias="positionSize")
    exchange: Optional[StrictStr] = None
    timeframe: Optional[StrictStr] = None
    indicators: Optional[list[StrictStr]] = None
    break_even: Optional[Union[StrictBool, StrictInt, StrictFloat]] = Field(None, alias="breakEven")
    leverage: Optional[StrictInt] = None
    rationale: Optional[StrictStr] = None

    def to_trade(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class SummaryRequest(BaseModel):
    trade: TradePayload


class ExportRequest(BaseModel):
    text: str
    trade: Optional[TradePayload] = None
    format: str = "markdown"
    model: Optional[str] = None


# ─── Endpoints ───────────────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, Any]:
    return {"status": "ok", "version": __version__}


@app.post("/extract")
def extract(req: ExtractRequest) -> dict[str, Any]:
    trade = extract_trade_info(req.text)
    if trade is None:
        logger.info("[EXTRACT] No trade in %d-char transcript", len(req.text))
        return {"trade": None, "summary": None, "levels": {}}

    logger.info("[EXTRACT] Found %s", ", ".join(trade))
    return {
        "trade": trade,
        "summary": generate_trade_summary(trade),
        "levels": describe_levels(trade),
    }


@app.post("/summary")
def summary(req: SummaryRequest) -> dict[str, str]:
    return {"summary": generate_trade_summary(req.trade.to_trade())}


@app.post("/export")
def export(req: ExportRequest) -> dict[str, str]:
    trade = req.trade.to_trade() if req.trade else None
    try:
        content = export_note(req.format, req.text, trade, model=req.model)
    except UnsupportedExportFormat as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return {"format": req.format.lower().strip(), "content": content}
