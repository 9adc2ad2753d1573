"""
Cards - Card primitives, deck construction and draw-with-reshuffle.

Two independent piles exist in a game (player and dungeon). Each pile is a
draw sequence plus a discard sequence. All operations return new piles;
nothing is mutated in place.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
import random

logger = logging.getLogger(__name__)


class Suit(Enum):
    """Card suits."""
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    @property
    def symbol(self) -> str:
        return {
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
            Suit.CLUBS: "♣",
            Suit.SPADES: "♠",
        }[self]


class SuitColor(Enum):
    """Colour of a suit, used to pick a branch path."""
    RED = "red"
    BLACK = "black"


class Rank(Enum):
    """Card ranks in ascending order (Ace low)."""
    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"

    @property
    def order(self) -> int:
        """Position in A..K, used for straights."""
        return RANK_ORDER.index(self)


RANK_ORDER: list[Rank] = list(Rank)
SUIT_ORDER: list[Suit] = list(Suit)
DECK_SIZE = len(RANK_ORDER) * len(SUIT_ORDER)


def rank_value(rank: Rank) -> int:
    """Fixed rank -> value mapping: numerals at face value, faces 10, Ace 1."""
    if rank is Rank.ACE:
        return 1
    if rank in (Rank.JACK, Rank.QUEEN, Rank.KING):
        return 10
    return int(rank.value)


def suit_color(suit: Suit) -> SuitColor:
    if suit in (Suit.HEARTS, Suit.DIAMONDS):
        return SuitColor.RED
    return SuitColor.BLACK


@dataclass(frozen=True)
class Card:
    """An immutable playing card. `card_id` is unique within a game."""
    suit: Suit
    rank: Rank
    value: int
    card_id: str

    @property
    def color(self) -> SuitColor:
        return suit_color(self.suit)

    @property
    def label(self) -> str:
        return f"{self.rank.value}{self.suit.symbol}"

    def with_value(self, value: int) -> Card:
        """Copy of this card showing a different (effective) value."""
        return Card(suit=self.suit, rank=self.rank, value=value, card_id=self.card_id)


def create_deck(rng: random.Random | None = None) -> tuple[Card, ...]:
    """
    Build the 52-card multiset, 4 suits x 13 ranks, in suit/rank order.

    Each card gets its own id so identical faces from two decks never
    collide.
    """
    rng = rng or random.Random()
    cards = []
    for suit in SUIT_ORDER:
        for rank in RANK_ORDER:
            token = f"{rng.getrandbits(40):010x}"
            cards.append(Card(
                suit=suit,
                rank=rank,
                value=rank_value(rank),
                card_id=f"{rank.value}-{suit.value}-{token}",
            ))
    return tuple(cards)


def shuffle(cards, rng: random.Random | None = None) -> tuple[Card, ...]:
    """Return a uniformly shuffled copy (Fisher-Yates). The input is untouched."""
    rng = rng or random.Random()
    new_cards = list(cards)
    for i in range(len(new_cards) - 1, 0, -1):
        j = rng.randint(0, i)
        new_cards[i], new_cards[j] = new_cards[j], new_cards[i]
    return tuple(new_cards)


@dataclass(frozen=True)
class DeckPile:
    """A draw pile and its paired discard pile."""
    name: str
    cards: tuple[Card, ...] = field(default_factory=tuple)
    discard: tuple[Card, ...] = field(default_factory=tuple)

    @property
    def count(self) -> int:
        return len(self.cards)

    @property
    def total(self) -> int:
        """Cards in the draw pile plus the discard pile."""
        return len(self.cards) + len(self.discard)

    @classmethod
    def fresh(cls, name: str, rng: random.Random) -> DeckPile:
        """A newly built and shuffled 52-card pile with an empty discard."""
        return cls(name=name, cards=shuffle(create_deck(rng), rng))

    def add_to_discard(self, cards) -> DeckPile:
        return DeckPile(name=self.name, cards=self.cards, discard=self.discard + tuple(cards))

    def draw(self, n: int, rng: random.Random) -> tuple[tuple[Card, ...], DeckPile]:
        """Draw exactly `n` cards. See `draw`."""
        return draw(self, n, rng)


def draw(pile: DeckPile, n: int, rng: random.Random) -> tuple[tuple[Card, ...], DeckPile]:
    """
    Draw exactly `n` cards from a pile, returning (drawn, new_pile).

    1. Take from the front of the draw pile.
    2. On shortfall, shuffle the discard pile into a new draw pile.
    3. If still short, manufacture a fresh shuffled 52-card deck. This only
       happens when every card is out of both piles (e.g. held in hand) and
       is the intended recovery, not an error.
    """
    if n <= 0:
        return (), pile

    if pile.count >= n:
        return pile.cards[:n], DeckPile(name=pile.name, cards=pile.cards[n:], discard=pile.discard)

    drawn = list(pile.cards)
    cards: tuple[Card, ...] = shuffle(pile.discard, rng) if pile.discard else ()
    discard: tuple[Card, ...] = ()

    shortfall = n - len(drawn)
    if len(cards) < shortfall:
        logger.warning(
            "%s pile exhausted (%d short); manufacturing a fresh deck",
            pile.name, shortfall - len(cards),
        )
        cards = cards + shuffle(create_deck(rng), rng)

    drawn.extend(cards[:shortfall])
    return tuple(drawn), DeckPile(name=pile.name, cards=cards[shortfall:], discard=discard)
