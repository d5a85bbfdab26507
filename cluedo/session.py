"""Game session: an information history over a Solver, with rollback and undo."""

import logging
import random
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .cards import Card, CardCatalog, STANDARD_CATALOG
from .errors import CluedoError, Error
from .solver import (
    DEFAULT_TRIAL_BUDGET,
    PlayerData,
    SolutionProbabilityPair,
    Solver,
    Suggestion,
)
from .utils import card_label, default_card_counts

logger = logging.getLogger(__name__)


def describe_card_state(
    solver: Solver, player_index: int, card: Card, has_card: bool
) -> str:
    """Describe a card-state fact, e.g. 'Alice has got Knife'."""
    verb = "has got" if has_card else "hasn't got"
    return f"{solver.player(player_index).name} {verb} {card_label(card)}"


def describe_any_of_cards(solver: Solver, player_index: int, cards: Iterable[Card]) -> str:
    labels = ", ".join(card_label(card) for card in cards)
    return f"{solver.player(player_index).name} has got one of {labels}"


def describe_suggestion(solver: Solver, suggestion: Suggestion) -> str:
    """Describe a suggestion and its response in one line."""
    if suggestion.responding_player_index is None:
        response = "no one responded"
    else:
        responder = solver.player(suggestion.responding_player_index).name
        if suggestion.response_card is not None:
            response = f"{responder} responded with {card_label(suggestion.response_card)}"
        else:
            response = f"{responder} responded"

    cards = ", ".join(card_label(card) for card in suggestion.cards())
    suggester = solver.player(suggestion.suggesting_player_index).name
    return f"{suggester} suggested {cards} and {response}"


class GameSession:
    """
    Drives a Solver the way an interactive front-end does.

    Every accepted fact is kept in ``history`` together with the solver
    snapshot taken before it was applied. A fact that makes the solver
    inconsistent is rolled back and reported as Error.INVALID_INFORMATION.
    """

    def __init__(
        self,
        players_data: Sequence[Tuple[str, int]],
        catalog: CardCatalog = STANDARD_CATALOG,
        *,
        trial_budget: int = DEFAULT_TRIAL_BUDGET,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Start a new game.

        Args:
            players_data: (name, card_count) per real player, in seating order.
            catalog: Catalog the game is played with.
            trial_budget: Number of random deals used by refresh_solutions().
            rng: Random generator for the solution search.

        Raises:
            CluedoError: With INVALID_NUMBER_OF_PLAYERS or INVALID_NUMBER_OF_CARDS
                when the solver cannot be created.
        """
        result = Solver.create(players_data, catalog)
        if isinstance(result, Error):
            raise CluedoError(result)

        self.solver: Solver = result
        self.history: List[Tuple[str, Solver]] = []
        self.solutions: List[SolutionProbabilityPair] = []
        self.trial_budget: int = trial_budget
        self.rng: random.Random = rng if rng is not None else random.Random()

        logger.info(
            "New game with %d player(s): %s",
            self.solver.player_count(),
            ", ".join(name for name, _ in self.player_summaries()),
        )

    @classmethod
    def with_default_card_counts(
        cls,
        player_names: Sequence[str],
        catalog: CardCatalog = STANDARD_CATALOG,
        **kwargs: object,
    ) -> "GameSession":
        """Start a game where the cards are spread evenly between the players."""
        if not player_names:
            raise CluedoError(Error.INVALID_NUMBER_OF_PLAYERS)

        counts = default_card_counts(len(player_names), catalog)
        players_data = [PlayerData(name, count) for name, count in zip(player_names, counts)]
        return cls(players_data, catalog, **kwargs)  # type: ignore[arg-type]

    # -------------------------------------------------------------------------
    # Learning
    # -------------------------------------------------------------------------

    def _learn(self, description: str, apply: Callable[[Solver], None]) -> str:
        snapshot = self.solver.copy()
        try:
            apply(self.solver)
        except Exception:
            self.solver = snapshot
            raise

        if not self.solver.are_constraints_satisfied():
            self.solver = snapshot
            logger.info("Rejected contradictory information: %s", description)
            raise CluedoError(Error.INVALID_INFORMATION)

        self.history.append((description, snapshot))
        logger.info("Learned: %s", description)
        return description

    def learn_player_card_state(self, player_index: int, card: Card, has_card: bool) -> str:
        """
        Learn that a player has (or has not) got a card.

        Returns:
            The description recorded in the history.

        Raises:
            CluedoError: INVALID_INFORMATION if the fact contradicts what is known.
        """
        description = describe_card_state(self.solver, player_index, card, has_card)
        return self._learn(
            description,
            lambda solver: solver.learn_player_card_state(player_index, card, has_card),
        )

    def learn_player_has_any_of_cards(self, player_index: int, cards: Sequence[Card]) -> str:
        description = describe_any_of_cards(self.solver, player_index, cards)
        return self._learn(
            description,
            lambda solver: solver.learn_player_has_any_of_cards(player_index, cards),
        )

    def learn_from_suggestion(self, suggestion: Suggestion) -> str:
        """
        Validate a suggestion and learn from it.

        Raises:
            CluedoError: SUGGESTING_PLAYER_EQUAL_TO_RESPONDING_PLAYER when the
                suggester is also the responder; INVALID_INFORMATION when the
                shown card is not one of the suggested cards, a card is shown
                with no responder, or the suggestion contradicts what is known.
        """
        if suggestion.responding_player_index == suggestion.suggesting_player_index:
            raise CluedoError(Error.SUGGESTING_PLAYER_EQUAL_TO_RESPONDING_PLAYER)

        if suggestion.response_card is not None and (
            suggestion.responding_player_index is None
            or suggestion.response_card not in suggestion.cards()
        ):
            raise CluedoError(Error.INVALID_INFORMATION)

        description = describe_suggestion(self.solver, suggestion)
        return self._learn(
            description, lambda solver: solver.learn_from_suggestion(suggestion)
        )

    def undo(self) -> str:
        """
        Forget the last accepted fact.

        Returns:
            The description of the fact that was undone.

        Raises:
            IndexError: If there is nothing to undo.
        """
        if not self.history:
            raise IndexError("No information to undo.")

        description, snapshot = self.history.pop()
        self.solver = snapshot
        logger.info("Undid: %s", description)
        return description

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def descriptions(self) -> List[str]:
        return [description for description, _ in self.history]

    def player_summaries(self) -> List[Tuple[str, int]]:
        """Return (name, card_count) for every real player."""
        return [
            (self.solver.player(i).name, self.solver.player(i).card_count)
            for i in range(self.solver.player_count())
        ]

    def refresh_solutions(self) -> List[SolutionProbabilityPair]:
        """Rerun the solution search and cache the ranking in ``solutions``."""
        self.solutions = self.solver.find_most_likely_solutions(
            trial_budget=self.trial_budget, rng=self.rng
        )
        return self.solutions
