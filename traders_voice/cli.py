#!/usr/bin/env python3
"""
Command line entry point.

Usage:
  traders-voice extract "Long BTC USDT at 95,000, stop loss at 92,000"
  traders-voice extract "Buy 100 shares of AAPL at $150" --json
  traders-voice demo --count 3
  traders-voice batch notes.csv --column text --output trades.csv
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from traders_voice.analyzers.trade_summary import generate_trade_summary
from traders_voice.batch import extract_frame, frame_to_records, read_transcripts_csv
from traders_voice.config import configure_logging, load_settings
from traders_voice.demo import DemoCycle
from traders_voice.parsers.trade_extractor import extract_trade_info

logger = logging.getLogger(__name__)


def _print_trade(text: str, as_json: bool) -> bool:
    trade = extract_trade_info(text)
    if as_json:
        print(json.dumps(trade, indent=2))
    elif trade is None:
        print("No trade detected.")
    else:
        print(generate_trade_summary(trade))
    return trade is not None


def _cmd_extract(args: argparse.Namespace) -> int:
    found = _print_trade(" ".join(args.text), args.json)
    return 0 if found else 1


def _cmd_demo(args: argparse.Namespace) -> int:
    cycle = DemoCycle()
    for _ in range(args.count):
        demo = cycle.next()
        print(f"[{demo.name}] {demo.transcript}")
        print("  -> ", end="")
        _print_trade(demo.transcript, args.json)
    return 0


def _cmd_batch(args: argparse.Namespace) -> int:
    try:
        df = read_transcripts_csv(args.csv, text_column=args.column)
    except (OSError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    result = extract_frame(df)
    if args.output:
        result.to_csv(args.output, index=False)
        logger.info("Wrote %d rows to %s", len(result), args.output)
    else:
        print(json.dumps(frame_to_records(result), indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="traders-voice",
        description="Extract structured trade notes from spoken transcripts.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_extract = sub.add_parser("extract", help="Extract a trade from one transcript")
    p_extract.add_argument("text", nargs="+", help="Transcript text")
    p_extract.add_argument("--json", action="store_true", help="Print the sparse trade as JSON")
    p_extract.set_defaults(func=_cmd_extract)

    p_demo = sub.add_parser("demo", help="Run the extractor over the demo transcripts")
    p_demo.add_argument("--count", type=int, default=3, help="Number of demos to show (default: 3)")
    p_demo.add_argument("--json", action="store_true", help="Print each trade as JSON")
    p_demo.set_defaults(func=_cmd_demo)

    p_batch = sub.add_parser("batch", help="Extract trades from a CSV of transcripts")
    p_batch.add_argument("csv", help="Input CSV path")
    p_batch.add_argument("--column", default=None, help="Transcript column (default: auto-detect)")
    p_batch.add_argument("--output", default=None, help="Write results as CSV instead of printing JSON")
    p_batch.set_defaults(func=_cmd_batch)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    configure_logging(load_settings())
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
