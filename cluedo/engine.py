"""Cluedo dealer: deals a hidden solution and hands, and answers suggestions."""

import random
from typing import List, Optional, Sequence, Tuple

from .cards import Card, CardCatalog, CardCategory, CardSet, STANDARD_CATALOG
from .solver import MAX_PLAYER_COUNT, MIN_PLAYER_COUNT, PlayerData, Solution, Suggestion
from .utils import SOLUTION_CARD_COUNT, card_label, shuffle_cards


class CluedoGame:
    """
    Card bookkeeping for a full game: who holds what, and who answers a suggestion.

    Board movement is not modeled; any player may suggest any triple.
    """

    def __init__(
        self,
        card_counts: Sequence[int],
        catalog: CardCatalog = STANDARD_CATALOG,
        rng: Optional[random.Random] = None,
        player_names: Optional[Sequence[str]] = None,
    ) -> None:
        """
        Initialize a game and deal the cards.

        Args:
            card_counts: Hand size of each real player, in seating order.
            catalog: Catalog the game is played with.
            rng: Random generator used for dealing and for picking the card
                a responder shows. A fresh, OS-seeded one is used when None.
            player_names: Optional names; defaults to "Player 1", "Player 2", ...

        Raises:
            ValueError: If the player count is out of range, a card count is
                negative, the card counts do not match the catalog, or the
                names do not match the players.
        """
        if not MIN_PLAYER_COUNT <= len(card_counts) <= MAX_PLAYER_COUNT:
            raise ValueError(
                f"A game needs {MIN_PLAYER_COUNT} to {MAX_PLAYER_COUNT} players."
            )
        if any(count < 0 for count in card_counts):
            raise ValueError("Card counts must be non-negative.")
        if sum(card_counts) + SOLUTION_CARD_COUNT != catalog.card_count:
            raise ValueError(
                "Card counts plus the solution must add up to "
                f"{catalog.card_count} cards."
            )

        if player_names is None:
            player_names = [f"Player {i + 1}" for i in range(len(card_counts))]
        if len(player_names) != len(card_counts):
            raise ValueError("player_names must match the number of players.")

        self.catalog: CardCatalog = catalog
        self.card_counts: List[int] = list(card_counts)
        self.player_names: List[str] = list(player_names)
        self.rng: random.Random = rng if rng is not None else random.Random()

        # Filled by deal().
        self.solution: Solution
        self.hands: List[CardSet] = []
        self.deal()

    @property
    def player_count(self) -> int:
        return len(self.card_counts)

    def deal(self) -> None:
        """Draw a new solution and deal every other card to the players."""
        picked = [
            self.rng.choice(self.catalog.cards_of(category))
            for category in self.catalog.categories
        ]
        self.solution = (picked[0], picked[1], picked[2])  # type: ignore[assignment]

        remaining = [card for card in self.catalog.cards() if card not in picked]
        shuffle_cards(remaining, self.rng)

        self.hands = []
        offset = 0
        for count in self.card_counts:
            self.hands.append(self.catalog.card_set(remaining[offset:offset + count]))
            offset += count

    def player_data(self) -> List[PlayerData]:
        """Return the (name, card_count) pairs a Solver is created from."""
        return [
            PlayerData(name, count)
            for name, count in zip(self.player_names, self.card_counts)
        ]

    def random_suggestion_cards(
        self, player_index: Optional[int] = None
    ) -> Tuple[Card, Card, Card]:
        """
        Draw a random (suspect, weapon, room).

        Args:
            player_index: If given, cards from this player's hand are never
                drawn. Each category keeps at least its solution card.
        """
        hand = (
            self.hands[player_index]
            if player_index is not None
            else self.catalog.card_set()
        )

        picked = []
        for category in (CardCategory.SUSPECT, CardCategory.WEAPON, CardCategory.ROOM):
            choices = [
                card for card in self.catalog.cards_of(category) if not hand.contains(card)
            ]
            picked.append(self.rng.choice(choices))
        return (picked[0], picked[1], picked[2])  # type: ignore[return-value]

    def respond(
        self, suggesting_player_index: int, suspect: Card, weapon: Card, room: Card
    ) -> Tuple[Optional[int], Optional[Card]]:
        """
        Find who answers a suggestion and which card they show.

        Args:
            suggesting_player_index: Index of the player making the suggestion.
            suspect: Suggested suspect.
            weapon: Suggested weapon.
            room: Suggested room.

        Returns:
            (responding_player_index, shown_card) for the first player after
            the suggester, cycling, who holds a suggested card; the shown card
            is picked at random among their matches. (None, None) if nobody
            holds any of the three.

        Raises:
            ValueError: If the suggesting index is out of range.
        """
        if not 0 <= suggesting_player_index < self.player_count:
            raise ValueError("Suggesting player index is outside the table.")

        for offset in range(1, self.player_count):
            player_index = (suggesting_player_index + offset) % self.player_count
            hand = self.hands[player_index]
            matches = [card for card in (suspect, weapon, room) if hand.contains(card)]
            if matches:
                return player_index, self.rng.choice(matches)

        return None, None

    def suggest(
        self, suggesting_player_index: int, suspect: Card, weapon: Card, room: Card
    ) -> Suggestion:
        """Play a suggestion and return it with the full response attached."""
        responding_index, shown_card = self.respond(
            suggesting_player_index, suspect, weapon, room
        )
        return Suggestion(
            suggesting_player_index,
            suspect,
            weapon,
            room,
            responding_player_index=responding_index,
            response_card=shown_card,
        )

    # -------------------------------------------------------------------------
    # Display methods
    # -------------------------------------------------------------------------

    def format_hands(self) -> str:
        """Render the solution and every hand as a multi-line string."""
        out = ["Solution: " + ", ".join(card_label(card) for card in self.solution)]
        for name, hand in zip(self.player_names, self.hands):
            cards = ", ".join(card_label(card) for card in hand) or "-"
            out.append(f"{name}: {cards}")
        return "\n".join(out)
