"""
Hand Combos - Poker-style classification of the selected cards.

Exactly one combo applies per evaluation, picked by priority:

    Four of a Kind   x2.5
    Three of a Kind  x2.0
    Two Pair         x1.75
    Pair             x1.5
    Suited Straight  +10
    Straight         +5
    Flush            x1.25

Straights and flushes need at least three cards.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
import math

from .cards import Card


MIN_RUN_CARDS = 3


@dataclass(frozen=True)
class HandCombo:
    """
    A classified combo.

    multiplier == 0 means a flat-bonus combo: the raw sum is kept and only
    bonus_power is added.
    """
    name: str
    multiplier: float
    bonus_power: int
    cards_involved: int

    def apply(self, raw_total: int) -> int:
        return apply_combo(raw_total, self)


FOUR_OF_A_KIND = "Four of a Kind"
THREE_OF_A_KIND = "Three of a Kind"
TWO_PAIR = "Two Pair"
PAIR = "Pair"
SUITED_STRAIGHT = "Suited Straight"
STRAIGHT = "Straight"
FLUSH = "Flush"


def _is_consecutive(cards: list[Card]) -> bool:
    orders = sorted(c.rank.order for c in cards)
    return all(b == a + 1 for a, b in zip(orders, orders[1:]))


def evaluate_hand_combo(cards) -> HandCombo | None:
    """Classify a card multiset. Returns None when nothing applies."""
    cards = list(cards)
    if len(cards) < 2:
        return None

    rank_counts = Counter(c.rank for c in cards)
    counts = sorted(rank_counts.values(), reverse=True)

    if counts[0] >= 4:
        return HandCombo(FOUR_OF_A_KIND, 2.5, 0, 4)
    if counts[0] == 3:
        return HandCombo(THREE_OF_A_KIND, 2.0, 0, 3)
    if counts.count(2) >= 2:
        return HandCombo(TWO_PAIR, 1.75, 0, 4)
    if counts[0] == 2:
        return HandCombo(PAIR, 1.5, 0, 2)

    if len(cards) < MIN_RUN_CARDS:
        return None

    same_suit = len({c.suit for c in cards}) == 1
    if _is_consecutive(cards):
        if same_suit:
            return HandCombo(SUITED_STRAIGHT, 0, 10, len(cards))
        return HandCombo(STRAIGHT, 0, 5, len(cards))
    if same_suit:
        return HandCombo(FLUSH, 1.25, 0, len(cards))

    return None


def apply_combo(raw_total: int, combo: HandCombo | None) -> int:
    """Multiplier first (floored), then the flat bonus."""
    if combo is None:
        return raw_total
    total = raw_total
    if combo.multiplier > 0:
        total = math.floor(raw_total * combo.multiplier)
    return total + combo.bonus_power
