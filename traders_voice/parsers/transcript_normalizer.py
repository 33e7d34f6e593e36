"""Speech-to-text correction pass.

Whisper regularly mishears trading jargon ("Stopplers at 92,000",
"MHCD crossover").  These helpers rewrite the known mishearings to their
canonical spelling before any field is extracted, so the detectors only
ever see one spelling per concept.
"""

from __future__ import annotations

import re

from .vocabulary import (
    CANONICAL_STOP_LOSS,
    INDICATOR_CORRECTIONS,
    STOP_LOSS_VARIANTS,
)


def _token_pattern(phrase: str) -> re.Pattern:
    """Case-insensitive match of ``phrase`` as a whole token run.

    ``\\b`` is not enough here: variants like ``S.L.`` end in punctuation,
    where a word boundary never fires.
    """
    return re.compile(
        r"(?<![A-Za-z0-9])" + re.escape(phrase) + r"(?![A-Za-z0-9])",
        re.IGNORECASE,
    )


_STOP_LOSS_CORRECTIONS: tuple[tuple[re.Pattern, str], ...] = tuple(
    (_token_pattern(variant), CANONICAL_STOP_LOSS) for variant in STOP_LOSS_VARIANTS
)


def normalize_stop_loss(text: str) -> str:
    """Upper-case ``text`` and rewrite every stop-loss mishearing to STOP LOSS."""
    normalized = text.upper()
    for pattern, canonical in _STOP_LOSS_CORRECTIONS:
        normalized = pattern.sub(canonical, normalized)
    return normalized


def correct_indicator(name: str) -> str:
    """Map an indicator spelling to its canonical name (MHCD -> MACD)."""
    key = " ".join(name.upper().split())
    return INDICATOR_CORRECTIONS.get(key, key)
