"""Belief state of one seat at the table."""

from typing import List, Optional

from .cards import CardCatalog, CardSet, STANDARD_CATALOG


class Player:
    """
    What is known about the hand of one seat.

    A seat is either a real player or the synthetic solution seat. The state
    is made of three parts:
    - cards_in_hand: cards the seat is confirmed to hold
    - cards_not_in_hand: cards the seat is confirmed not to hold
    - possibilities: sets of cards the seat holds at least one card of

    The two confirmed sets must never intersect. Player does not enforce
    this; the Solver reports it through are_constraints_satisfied().
    """

    def __init__(
        self,
        name: str,
        card_count: int,
        *,
        is_solution: bool = False,
        catalog: CardCatalog = STANDARD_CATALOG,
    ) -> None:
        self.name: str = name
        self.card_count: int = card_count
        self.is_solution: bool = is_solution
        self.catalog: CardCatalog = catalog

        self.cards_in_hand: CardSet = catalog.card_set()
        self.cards_not_in_hand: CardSet = catalog.card_set()
        self.possibilities: List[CardSet] = []

    def copy(self) -> "Player":
        """Return an independent copy; no CardSet is shared with the original."""
        clone = Player.__new__(Player)
        clone.name = self.name
        clone.card_count = self.card_count
        clone.is_solution = self.is_solution
        clone.catalog = self.catalog
        clone.cards_in_hand = self.cards_in_hand.copy()
        clone.cards_not_in_hand = self.cards_not_in_hand.copy()
        clone.possibilities = [p.copy() for p in self.possibilities]
        return clone

    def has_card(self, card: int) -> Optional[bool]:
        """Return True/False when the card's state is confirmed, None when unknown."""
        if self.cards_in_hand.contains(card):
            return True
        if self.cards_not_in_hand.contains(card):
            return False
        return None

    def missing_card_count(self) -> int:
        """Number of cards of this seat that are not identified yet."""
        return self.card_count - self.cards_in_hand.size()

    def add_in_hand_card(self, card: int) -> None:
        self.cards_in_hand.insert(card)
        self.simplify_possibilities_with_card(card, True)

    def add_not_in_hand_card(self, card: int) -> None:
        self.cards_not_in_hand.insert(card)
        self.simplify_possibilities_with_card(card, False)

    def add_possible_cards(self, cards: CardSet) -> None:
        """
        Record that this seat holds at least one card of ``cards``.

        Cards already known not to be held are dropped first. A set that
        already meets the confirmed hand adds nothing, and a set left with a
        single card makes that card confirmed. If every card is excluded the
        set is recorded as given, which leaves it unsatisfiable. The set is
        rebound to this seat's catalog.
        """
        given = CardSet.from_bits(cards.bits, self.catalog)
        possibility = given.copy()
        for card in given:
            if self.cards_not_in_hand.contains(card):
                possibility.erase(card)

        if possibility.empty():
            possibility = given
        elif not CardSet.intersection(possibility, self.cards_in_hand).empty():
            return
        elif possibility.size() == 1:
            self.add_in_hand_card(next(iter(possibility)))
            return

        self.possibilities.append(possibility)
        self.remove_superfluous_possibilities()

    # -------------------------------------------------------------------------
    # Local simplification
    # -------------------------------------------------------------------------

    def remove_superfluous_possibilities(self) -> None:
        """
        Drop possibilities implied by an earlier one.

        For i < j, possibility j is cleared when possibility i is a subset of
        (or equal to) it. Cleared possibilities are then removed.
        """
        possibilities = self.possibilities
        for i, earlier in enumerate(possibilities):
            if earlier.empty():
                continue
            for later in possibilities[i + 1:]:
                if not later.empty() and earlier.is_subset(later):
                    later.clear()

        for i in range(len(possibilities) - 1, -1, -1):
            if possibilities[i].empty():
                del possibilities[i]

    def simplify_possibilities_with_card(self, card: int, has_card: bool) -> None:
        """
        Fold a newly confirmed card state into the possibilities.

        A held card retires every possibility containing it. A card not held
        is erased from every possibility; a possibility left with one card
        makes that card confirmed held and is retired.
        """
        self.remove_superfluous_possibilities()

        possibilities = self.possibilities
        for i in range(len(possibilities) - 1, -1, -1):
            possibility = possibilities[i]
            if not possibility.contains(card):
                continue

            if has_card:
                del possibilities[i]
                continue

            possibility.erase(card)
            if possibility.size() == 1:
                self.cards_in_hand.insert(next(iter(possibility)))
                del possibilities[i]

    def __repr__(self) -> str:
        return (
            f"Player(name={self.name!r}, card_count={self.card_count}, "
            f"in_hand={self.cards_in_hand!r}, not_in_hand={self.cards_not_in_hand!r}, "
            f"possibilities={self.possibilities!r})"
        )
