"""Risk/reward maths over the price levels of an extracted trade."""

from __future__ import annotations

from typing import Any, Mapping, Optional


def calculate_risk_reward(
    entry: Optional[float],
    stop_loss: Optional[float],
    take_profit: Optional[float],
) -> Optional[float]:
    """Reward divided by risk, or None if a level is missing or the risk is zero.

    Distances are absolute, so the same formula serves longs and shorts.
    """
    if not entry or not stop_loss or not take_profit:
        return None
    risk = abs(entry - stop_loss)
    reward = abs(take_profit - entry)
    if risk == 0:
        return None
    return reward / risk


def calculate_percent_change(start: Optional[float], end: Optional[float]) -> Optional[float]:
    if not start or not end:
        return None
    return (end - start) / start * 100


def format_percent(value: Optional[float]) -> str:
    if value is None:
        return ""
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.2f}%"


def describe_levels(trade: Mapping[str, Any]) -> dict[str, Any]:
    """Entry, stop and target of a sparse trade with their distance from entry.

    Only levels present in ``trade`` appear in the result; ``riskReward``
    needs all three.
    """
    entry = trade.get("price")
    levels: dict[str, Any] = {}
    if entry:
        levels["entry"] = entry

    for key in ("stopLoss", "takeProfit"):
        level = trade.get(key)
        if not level:
            continue
        levels[key] = level
        change = calculate_percent_change(entry, level)
        if change is not None:
            levels[f"{key}Percent"] = format_percent(change)

    ratio = calculate_risk_reward(entry, trade.get("stopLoss"), trade.get("takeProfit"))
    if ratio is not None:
        levels["riskReward"] = round(ratio, 2)
    return levels
