"""Cluedo solver: fact ingestion, constraint propagation and solution search."""

import dataclasses
import itertools
import logging
import math
import random
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Set, Tuple, Union

from .cards import Card, CardCatalog, CardSet, STANDARD_CATALOG
from .errors import Error
from .player import Player
from .utils import SOLUTION_CARD_COUNT, shuffle_cards

logger = logging.getLogger(__name__)

MIN_PLAYER_COUNT = 2
MAX_PLAYER_COUNT = 6
DEFAULT_TRIAL_BUDGET = 20_000

Solution = Tuple[Card, Card, Card]
SolutionProbabilityPair = Tuple[Solution, float]


class PlayerData(NamedTuple):
    """Name and hand size of one real player. An empty name gets a default."""

    name: str
    card_count: int


@dataclasses.dataclass(frozen=True)
class Suggestion:
    """
    One suggestion made during the game.

    Attributes:
        suggesting_player_index: Index of the player who made the suggestion.
        suspect: Suggested suspect.
        weapon: Suggested weapon.
        room: Suggested room.
        responding_player_index: Index of the player who showed a card, or
            None if nobody could respond.
        response_card: The card that was shown, if it is known.
    """

    suggesting_player_index: int
    suspect: Card
    weapon: Card
    room: Card
    responding_player_index: Optional[int] = None
    response_card: Optional[Card] = None

    def cards(self) -> Tuple[Card, Card, Card]:
        return (self.suspect, self.weapon, self.room)


class Solver:
    """
    Deduction engine for one game.

    The solver keeps one Player per real seat plus a trailing solution seat
    that holds exactly one card per category. Facts are routed to the seats
    they concern; infer_new_information() then runs three global rules:
    1. Elimination: a card held by one seat is held by no other, and a card
       that all seats but one lack belongs to the remaining seat.
    2. Category completion: the solution seat holds the single card of a
       category that nobody else can hold, and nothing else of a category it
       already has a card of.
    3. Shared possibilities: when k players share the same k-card
       possibility, those cards are spread among them and nobody else has any.

    Every learning method takes an ``infer_new_info`` flag. Internal calls
    pass False so that the outer call runs exactly one pass of the rules.
    """

    MIN_PLAYER_COUNT = MIN_PLAYER_COUNT
    MAX_PLAYER_COUNT = MAX_PLAYER_COUNT
    SOLUTION_CARD_COUNT = SOLUTION_CARD_COUNT

    def __init__(self, players: List[Player], catalog: CardCatalog) -> None:
        """
        Wrap already-built seats. Use Solver.create() to build a validated solver.

        Args:
            players: Real players followed by the solution seat.
            catalog: Catalog the game is played with.
        """
        self.players: List[Player] = players
        self.catalog: CardCatalog = catalog

    @classmethod
    def create(
        cls,
        players_data: Sequence[Tuple[str, int]],
        catalog: CardCatalog = STANDARD_CATALOG,
    ) -> Union["Solver", Error]:
        """
        Build a solver from (name, card_count) pairs.

        Args:
            players_data: One PlayerData (or plain pair) per real player,
                in seating order.
            catalog: Catalog the game is played with.

        Returns:
            The new Solver, or Error.INVALID_NUMBER_OF_PLAYERS if the player
            count is outside [MIN_PLAYER_COUNT, MAX_PLAYER_COUNT], or
            Error.INVALID_NUMBER_OF_CARDS if the card counts plus the solution
            do not add up to the catalog size.
        """
        if not MIN_PLAYER_COUNT <= len(players_data) <= MAX_PLAYER_COUNT:
            logger.debug("Rejected game with %d player(s)", len(players_data))
            return Error.INVALID_NUMBER_OF_PLAYERS

        card_counts = [card_count for _, card_count in players_data]
        total_cards = SOLUTION_CARD_COUNT + sum(card_counts)
        if any(count < 0 for count in card_counts) or total_cards != catalog.card_count:
            logger.debug(
                "Rejected card counts %s (total %d, expected %d)",
                card_counts,
                total_cards,
                catalog.card_count,
            )
            return Error.INVALID_NUMBER_OF_CARDS

        players: List[Player] = []
        for i, (name, card_count) in enumerate(players_data):
            players.append(
                Player(name or f"Player {i + 1}", card_count, catalog=catalog)
            )
        players.append(
            Player("", SOLUTION_CARD_COUNT, is_solution=True, catalog=catalog)
        )

        return cls(players, catalog)

    def copy(self) -> "Solver":
        """Return an independent copy of the solver and all of its seats."""
        return Solver([player.copy() for player in self.players], self.catalog)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def player_count(self) -> int:
        """Number of real players (the solution seat is not counted)."""
        return len(self.players) - 1

    def solution_player_index(self) -> int:
        return len(self.players) - 1

    def player(self, player_index: int) -> Player:
        """
        Return a seat by index; index player_count() is the solution seat.

        Raises:
            IndexError: If the index does not name a seat.
        """
        if not 0 <= player_index < len(self.players):
            raise IndexError(f"No seat with index {player_index}.")
        return self.players[player_index]

    def solution(self) -> Player:
        return self.players[-1]

    def are_constraints_satisfied(self) -> bool:
        """Return False iff some seat has a card both confirmed held and not held."""
        for player in self.players:
            if player.cards_in_hand.bits & player.cards_not_in_hand.bits:
                return False
        return True

    def known_solution(self) -> Optional[Solution]:
        """Return the solution once the solution seat has one card per category."""
        solution_hand = self.solution().cards_in_hand
        found: List[Card] = []
        for category in self.catalog.categories:
            held = [c for c in self.catalog.cards_of(category) if solution_hand.contains(c)]
            if len(held) != 1:
                return None
            found.append(held[0])  # type: ignore[arg-type]
        return (found[0], found[1], found[2])

    def is_solved(self) -> bool:
        return self.known_solution() is not None

    # -------------------------------------------------------------------------
    # Learning
    # -------------------------------------------------------------------------

    def learn_player_card_state(
        self,
        player_index: int,
        card: Card,
        has_card: bool,
        infer_new_info: bool = True,
    ) -> None:
        """Learn that a seat has (or has not) got a card."""
        player = self.player(player_index)
        if has_card:
            player.add_in_hand_card(card)
        else:
            player.add_not_in_hand_card(card)

        if infer_new_info:
            self.infer_new_information()

    def learn_player_has_any_of_cards(
        self,
        player_index: int,
        cards: Union[CardSet, Iterable[Card]],
        infer_new_info: bool = True,
    ) -> None:
        """Learn that a seat holds at least one card of a set."""
        if isinstance(cards, CardSet):
            cards = CardSet.from_bits(cards.bits, self.catalog)
        else:
            cards = self.catalog.card_set(cards)

        self.player(player_index).add_possible_cards(cards)

        if infer_new_info:
            self.infer_new_information()

    def learn_from_suggestion(
        self, suggestion: Suggestion, infer_new_info: bool = True
    ) -> None:
        """
        Learn from one suggestion and the response to it.

        Walking forward over the real players from the seat after the
        suggester, every player before the responder lacks all three cards.
        With no responder the walk goes all the way round to the suggester,
        and the solution seat holds each suggested card the suggester is not
        confirmed to hold. Otherwise the responder holds the shown card, or
        at least one of the three when the shown card is unknown.

        The suggestion is assumed well formed: the suggester must not also
        be the responder.
        """
        player_count = self.player_count()
        suggesting_index = suggestion.suggesting_player_index
        if not 0 <= suggesting_index < player_count:
            raise IndexError(f"No player with index {suggesting_index}.")

        responding_index = suggestion.responding_player_index
        if responding_index == self.solution_player_index():
            responding_index = None

        cards = suggestion.cards()

        player_index = (suggesting_index + 1) % player_count
        while player_index != suggesting_index and player_index != responding_index:
            for card in cards:
                self.learn_player_card_state(player_index, card, False, False)
            player_index = (player_index + 1) % player_count

        if responding_index is None:
            suggester = self.players[suggesting_index]
            for card in cards:
                if suggester.has_card(card) is not True:
                    self.learn_player_card_state(
                        self.solution_player_index(), card, True, False
                    )
        elif suggestion.response_card is not None:
            self.learn_player_card_state(
                responding_index, suggestion.response_card, True, False
            )
        else:
            self.learn_player_has_any_of_cards(
                responding_index, self.catalog.card_set(cards), False
            )

        if infer_new_info:
            self.infer_new_information()

    # -------------------------------------------------------------------------
    # Inference
    # -------------------------------------------------------------------------

    def infer_new_information(self) -> None:
        """Run one pass of the three global inference rules."""
        self._infer_by_elimination()
        self._infer_solution_categories()
        self._infer_from_shared_possibilities()

    def _infer_by_elimination(self) -> None:
        players = self.players
        seat_count = len(players)

        for card in self.catalog.cards():
            card_owned = False
            not_owned_count = 0
            candidate_index: Optional[int] = None

            for player_index, player in enumerate(players):
                card_state = player.has_card(card)
                if card_state is None:
                    candidate_index = player_index
                    continue
                if not card_state:
                    not_owned_count += 1
                    continue

                card_owned = True
                for other_index, other in enumerate(players):
                    if other_index != player_index and other.has_card(card) is None:
                        self.learn_player_card_state(other_index, card, False, False)
                break

            if (
                not card_owned
                and not_owned_count == seat_count - 1
                and candidate_index is not None
            ):
                logger.debug(
                    "Elimination: seat %d must hold %s", candidate_index, card.name
                )
                self.learn_player_card_state(candidate_index, card, True, False)

    def _infer_solution_categories(self) -> None:
        solution_index = self.solution_player_index()
        solution = self.players[solution_index]
        real_players = self.players[:solution_index]

        for category in self.catalog.categories:
            category_cards = self.catalog.cards_of(category)

            held = [c for c in category_cards if solution.cards_in_hand.contains(c)]
            if held:
                for card in category_cards:
                    if solution.has_card(card) is None:
                        self.learn_player_card_state(solution_index, card, False, False)
                continue

            candidates = [
                card
                for card in category_cards
                if not solution.cards_not_in_hand.contains(card)
                and not any(p.cards_in_hand.contains(card) for p in real_players)
            ]
            if len(candidates) != 1 or solution.has_card(candidates[0]) is not None:
                continue

            logger.debug(
                "Category completion: solution holds %s", candidates[0].name
            )
            self.learn_player_card_state(solution_index, candidates[0], True, False)

    def _infer_from_shared_possibilities(self) -> None:
        players = self.players
        solution_index = self.solution_player_index()

        holders_by_possibility: Dict[CardSet, Set[int]] = {}
        for player_index in range(solution_index):
            for possibility in players[player_index].possibilities:
                holders_by_possibility.setdefault(possibility.copy(), set()).add(
                    player_index
                )

        for possibility, holders in holders_by_possibility.items():
            if len(holders) < possibility.size():
                continue

            logger.debug(
                "Shared possibility %r held by seats %s", possibility, sorted(holders)
            )
            for player_index, player in enumerate(players):
                if player_index in holders:
                    continue
                for card in possibility:
                    if player.has_card(card) is not False:
                        self.learn_player_card_state(player_index, card, False, False)

    # -------------------------------------------------------------------------
    # Solution search
    # -------------------------------------------------------------------------

    def _candidate_solution_cards(self) -> List[List[Card]]:
        """Per category, the cards the solution seat may still hold."""
        solution = self.solution()
        candidates: List[List[Card]] = []
        for category in self.catalog.categories:
            category_cards = self.catalog.cards_of(category)
            held = [c for c in category_cards if solution.cards_in_hand.contains(c)]
            if held:
                candidates.append(held)  # type: ignore[arg-type]
            else:
                candidates.append(
                    [c for c in category_cards if not solution.cards_not_in_hand.contains(c)]  # type: ignore[misc]
                )
        return candidates

    def _assign_cards_to_players(self, cards: Sequence[Card]) -> bool:
        """
        Deal cards to the real players, in seat order, to fill their hands.

        Returns:
            False as soon as a card is dealt to a player known not to hold it
            or the cards run out, True otherwise.
        """
        next_card_index = 0
        for player_index in range(self.player_count()):
            player = self.players[player_index]

            cards_to_assign = player.card_count - player.cards_in_hand.size()
            if len(cards) - next_card_index < cards_to_assign:
                return False

            for _ in range(cards_to_assign):
                card = cards[next_card_index]
                next_card_index += 1
                if player.cards_not_in_hand.contains(card):
                    return False
                player.add_in_hand_card(card)

        return True

    def _are_constraints_satisfied_for_solution_search(self) -> bool:
        """Check that every hand is complete, disjoint and meets its possibilities."""
        seen_bits = 0
        for player in self.players:
            hand_bits = player.cards_in_hand.bits
            if player.cards_in_hand.size() != player.card_count:
                return False
            if hand_bits & seen_bits:
                return False
            if hand_bits & player.cards_not_in_hand.bits:
                return False
            for possibility in player.possibilities:
                if not possibility.bits & hand_bits:
                    return False
            seen_bits |= hand_bits
        return True

    def _count_deals(self, pool_size: int) -> int:
        """
        Number of distinct ways to deal a pool into the open slots of the real players.

        Returns:
            pool_size! / prod(slots_i!), or 0 when the slots cannot take
            exactly the whole pool.
        """
        slots = [
            self.players[i].missing_card_count() for i in range(self.player_count())
        ]
        if any(slot < 0 for slot in slots) or sum(slots) != pool_size:
            return 0

        deals = math.factorial(pool_size)
        for slot in slots:
            deals //= math.factorial(slot)
        return deals

    def find_most_likely_solutions(
        self,
        trial_budget: int = DEFAULT_TRIAL_BUDGET,
        rng: Optional[random.Random] = None,
    ) -> List[SolutionProbabilityPair]:
        """
        Estimate the probability of every solution still possible.

        This is a Monte-Carlo estimate, not an exact enumeration. For each
        (suspect, weapon, room) combination the solution seat may hold, a
        copy of the solver is forced to that solution and propagated, then
        the remaining cards are dealt at random to the real players many
        times. A deal counts when every hand is complete, disjoint and meets
        every possibility. The success rate of a combination times the number
        of distinct deals of its pool estimates how many consistent deals it
        has; probabilities are these estimates normalized.

        Args:
            trial_budget: Total number of random deals, split evenly over the
                combinations (at least one deal each).
            rng: Random generator. A fresh, OS-seeded one is used when None.

        Returns:
            (solution, probability) pairs sorted by decreasing probability.
            Probabilities add up to 1 when any deal succeeded; otherwise
            they are all 0.
        """
        if rng is None:
            rng = random.Random()

        solution_index = self.solution_player_index()
        combinations: List[Solution] = list(
            itertools.product(*self._candidate_solution_cards())  # type: ignore[arg-type]
        )
        if not combinations:
            return []

        trials_per_combination = max(1, trial_budget // len(combinations))
        logger.debug(
            "Searching %d combination(s) with %d trial(s) each",
            len(combinations),
            trials_per_combination,
        )

        weights: Dict[Solution, float] = {}
        for combination in combinations:
            forced = self.copy()
            for card in combination:
                forced.learn_player_card_state(solution_index, card, True, False)
            forced.infer_new_information()

            if not forced.are_constraints_satisfied():
                weights[combination] = 0.0
                continue

            assigned_bits = 0
            for player in forced.players:
                assigned_bits |= player.cards_in_hand.bits
            unused_cards = [
                card for card in self.catalog.cards() if not (assigned_bits >> int(card)) & 1
            ]

            deal_count = forced._count_deals(len(unused_cards))
            if deal_count == 0:
                weights[combination] = 0.0
                continue

            count = 0
            for _ in range(trials_per_combination):
                trial = forced.copy()
                pool = list(unused_cards)
                shuffle_cards(pool, rng)
                if (
                    trial._assign_cards_to_players(pool)  # type: ignore[arg-type]
                    and trial._are_constraints_satisfied_for_solution_search()
                ):
                    count += 1

            # Pools differ in size between combinations, so the success rate
            # is scaled to an estimated number of consistent deals.
            weights[combination] = count / trials_per_combination * deal_count

        total = sum(weights.values())
        logger.debug("Search finished with total weight %g", total)

        solution_probabilities: List[SolutionProbabilityPair] = [
            (combination, weights[combination] / total if total else 0.0)
            for combination in combinations
        ]
        solution_probabilities.sort(key=lambda pair: pair[1], reverse=True)
        return solution_probabilities
