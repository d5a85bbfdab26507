"""Utility functions for the Cluedo solver."""

import enum
import random
from typing import List, MutableSequence, TypeVar

from .cards import CardCatalog, STANDARD_CATALOG

T = TypeVar("T")

SOLUTION_CARD_COUNT = 3


def shuffle_cards(cards: MutableSequence[T], rng: random.Random) -> None:
    """
    Shuffle a sequence in place with a uniform permutation.

    For i from 0 to n-2, position i is swapped with a uniformly random
    position in [i, n-1].

    Args:
        cards: Sequence to shuffle.
        rng: Random generator to draw positions from.
    """
    n = len(cards)
    for i in range(n - 1):
        j = rng.randrange(i, n)
        cards[i], cards[j] = cards[j], cards[i]


def default_card_counts(
    player_count: int, catalog: CardCatalog = STANDARD_CATALOG
) -> List[int]:
    """
    Spread the cards outside the solution as evenly as possible.

    Args:
        player_count: Number of real players. Must be positive.
        catalog: Catalog the game is played with.

    Returns:
        One card count per player; earlier seats take the remainder.

    Raises:
        ValueError: If player_count is not positive.
    """
    if player_count <= 0:
        raise ValueError("player_count must be positive.")

    available = catalog.card_count - SOLUTION_CARD_COUNT
    per_player, remainder = divmod(available, player_count)
    return [per_player + (1 if i < remainder else 0) for i in range(player_count)]


def card_label(card: enum.Enum) -> str:
    """Return a display label for a card, e.g. BILLIARD_ROOM -> 'Billiard Room'."""
    return card.name.replace("_", " ").title()
