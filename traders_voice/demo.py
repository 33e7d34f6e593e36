"""Canned transcripts for trying the extractor without a microphone."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DemoTranscript:
    id: str
    name: str
    transcript: str


DEMO_TRANSCRIPTS: tuple[DemoTranscript, ...] = (
    DemoTranscript(
        id="crypto-btc",
        name="Bitcoin Long",
        transcript=(
            "Going long on Bitcoin at 95,000. Stop loss at 92,000, take profit at 105,000. "
            "The 4-hour chart is showing strong support with RSI bouncing from oversold. "
            "Volume increasing on the bounce."
        ),
    ),
    DemoTranscript(
        id="crypto-eth",
        name="Ethereum Short",
        transcript=(
            "Shorting Ethereum at 3,200. Target is 2,800 with stop at 3,400. "
            "MACD crossing bearish on the daily, and we're rejecting from resistance. "
            "Risk to reward is about 2:1."
        ),
    ),
    DemoTranscript(
        id="stock-aapl",
        name="Apple Long",
        transcript=(
            "Buying 50 shares of Apple at 185. Stop loss at 180, first target at 195. "
            "The stock is breaking out of a consolidation pattern on the daily chart. "
            "EMA 20 crossing above EMA 50."
        ),
    ),
)


class DemoCycle:
    """Round-robin over the demo transcripts."""

    def __init__(self, demos: tuple[DemoTranscript, ...] = DEMO_TRANSCRIPTS) -> None:
        if not demos:
            raise ValueError("DemoCycle needs at least one transcript")
        self._demos = demos
        self._index = 0

    def next(self) -> DemoTranscript:
        demo = self._demos[self._index]
        self._index = (self._index + 1) % len(self._demos)
        return demo

    def reset(self) -> None:
        self._index = 0
