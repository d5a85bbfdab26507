"""Analysis and benchmarking tools for the Cluedo solver."""

import dataclasses
import logging
import random
from typing import Dict, List, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np

from .cards import CardCatalog, STANDARD_CATALOG
from .engine import CluedoGame
from .errors import Error
from .solver import SolutionProbabilityPair, Solver
from .utils import card_label, default_card_counts

logger = logging.getLogger(__name__)


def format_solver_knowledge(solver: Solver, *, column_width: int = 9) -> str:
    """
    Format what the solver knows as a cards x seats grid.

    Args:
        solver: Solver whose knowledge will be displayed.
        column_width: Width of each seat column; names are truncated to fit.

    Returns:
        A text grid where 'X' marks a card known held, '-' a card known not
        held, '?' a card in one of the seat's open possibilities and '.' a
        card with no information.
    """
    seats = solver.players
    names = [
        "Solution" if player.is_solution else player.name for player in seats
    ]
    label_width = max(len(card_label(card)) for card in solver.catalog.cards())

    def cell_char(seat_index: int, card: int) -> str:
        player = seats[seat_index]
        state = player.has_card(card)
        if state is True:
            return "X"
        if state is False:
            return "-"
        if any(p.contains(card) for p in player.possibilities):
            return "?"
        return "."

    header = " " * label_width + " |" + "".join(
        f"{name[:column_width - 1]:>{column_width}}" for name in names
    )
    lines: List[str] = [header, "-" * len(header)]

    for category in solver.catalog.categories:
        lines.append(f"{category.value.upper():<{label_width}} |")
        for card in solver.catalog.cards_of(category):
            row = "".join(
                f"{cell_char(i, card):>{column_width}}" for i in range(len(seats))
            )
            lines.append(f"{card_label(card):<{label_width}} |" + row)

    return "\n".join(lines)


def format_solutions(solutions: Sequence[SolutionProbabilityPair], limit: int = 10) -> str:
    """Format the best ranked solutions, one per line with its probability."""
    lines: List[str] = []
    for (suspect, weapon, room), probability in solutions[:limit]:
        lines.append(
            f"{probability * 100:6.2f}%  "
            f"{card_label(suspect)}, {card_label(weapon)}, {card_label(room)}"
        )
    return "\n".join(lines)


def run_solver_single_test(
    card_counts: Sequence[int],
    *,
    observer_index: int = 0,
    max_turns: int = 200,
    trial_budget: int = 2_000,
    seed: Optional[int] = None,
    catalog: CardCatalog = STANDARD_CATALOG,
    show_knowledge: bool = False,
) -> Dict[str, object]:
    """
    Play one game against a fresh dealer from the point of view of one seat.

    The observer knows its own hand and sees every suggestion and who
    responded; it sees the shown card only when it suggested or responded.
    Players never suggest cards from their own hand. Play stops once the
    solution seat is fully known or after max_turns suggestions.

    Args:
        card_counts: Hand size of each player.
        observer_index: Seat whose point of view the solver takes.
        max_turns: Maximum number of suggestions to play.
        trial_budget: Trial budget of the final solution search.
        seed: Seed for dealing, suggestions and search.
        catalog: Catalog the game is played with.
        show_knowledge: If True, print the deal and the solver's final grid.

    Returns:
        Dict with:
        - solved: whether propagation alone identified the solution
        - turns: suggestions played
        - consistent: whether the solver stayed free of contradictions
        - true_solution_probability: estimated probability of the real solution
        - top_solution_correct: whether the best ranked solution is the real one
        - candidate_solutions: number of solutions still ranked
        - known_facts: number of (seat, card) states known at the end
    """
    rng = random.Random(seed)
    game = CluedoGame(card_counts, catalog, rng=rng)

    created = Solver.create(game.player_data(), catalog)
    if isinstance(created, Error):
        raise ValueError(f"Cannot create a solver for this game: {created.value}")
    solver = created

    observer_hand = game.hands[observer_index]
    for card in catalog.cards():
        solver.learn_player_card_state(
            observer_index, card, observer_hand.contains(card), infer_new_info=False
        )
    solver.infer_new_information()

    turns = 0
    while turns < max_turns and not solver.is_solved():
        suggesting_index = turns % game.player_count
        suspect, weapon, room = game.random_suggestion_cards(suggesting_index)
        suggestion = game.suggest(suggesting_index, suspect, weapon, room)

        if observer_index not in (suggesting_index, suggestion.responding_player_index):
            suggestion = dataclasses.replace(suggestion, response_card=None)

        solver.learn_from_suggestion(suggestion)
        turns += 1

    consistent = solver.are_constraints_satisfied()
    solutions = solver.find_most_likely_solutions(trial_budget=trial_budget, rng=rng)
    probabilities = dict(solutions)
    known_facts = sum(
        player.cards_in_hand.size() + player.cards_not_in_hand.size()
        for player in solver.players
    )

    if show_knowledge:
        print(game.format_hands())
        print()
        print(format_solver_knowledge(solver))
        print()
        print(format_solutions(solutions, limit=5))

    logger.debug(
        "Game finished after %d turn(s), solved=%s", turns, solver.is_solved()
    )

    return {
        "solved": solver.is_solved(),
        "turns": turns,
        "consistent": consistent,
        "true_solution_probability": probabilities.get(game.solution, 0.0),
        "top_solution_correct": bool(solutions) and solutions[0][0] == game.solution,
        "candidate_solutions": len(solutions),
        "known_facts": known_facts,
    }


def run_solver_many_tests(
    card_counts: Sequence[int],
    runs: int,
    *,
    max_turns: int = 200,
    trial_budget: int = 2_000,
    seed: Optional[int] = None,
    catalog: CardCatalog = STANDARD_CATALOG,
) -> Dict[str, float]:
    """
    Run many independent games and aggregate their results.

    Args:
        card_counts: Hand size of each player.
        runs: Number of games to play. Must be positive.
        max_turns: Maximum number of suggestions per game.
        trial_budget: Trial budget of each final solution search.
        seed: Base seed; game i uses seed + i.
        catalog: Catalog the game is played with.

    Returns:
        Dict with solve_rate, consistency_rate, top_solution_accuracy,
        avg_true_solution_probability, avg_known_facts, and avg/median/std
        of the turns needed by solved games (NaN if no game was solved).

    Raises:
        ValueError: If runs is not positive.
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    solved_turns: List[int] = []
    true_probabilities: List[float] = []
    known_facts: List[int] = []
    consistent_count = 0
    top_correct_count = 0

    for i in range(runs):
        result = run_solver_single_test(
            card_counts,
            max_turns=max_turns,
            trial_budget=trial_budget,
            seed=None if seed is None else seed + i,
            catalog=catalog,
        )
        if result["solved"]:
            solved_turns.append(int(result["turns"]))  # type: ignore[call-overload]
        if result["consistent"]:
            consistent_count += 1
        if result["top_solution_correct"]:
            top_correct_count += 1
        true_probabilities.append(float(result["true_solution_probability"]))  # type: ignore[arg-type]
        known_facts.append(int(result["known_facts"]))  # type: ignore[call-overload]

    turns = np.array(solved_turns, dtype=float)
    has_solved = turns.size > 0

    return {
        "solve_rate": len(solved_turns) / runs,
        "consistency_rate": consistent_count / runs,
        "top_solution_accuracy": top_correct_count / runs,
        "avg_true_solution_probability": float(np.mean(true_probabilities)),
        "avg_known_facts": float(np.mean(known_facts)),
        "avg_turns_to_solve": float(np.mean(turns)) if has_solved else float("nan"),
        "median_turns_to_solve": float(np.median(turns)) if has_solved else float("nan"),
        "std_turns_to_solve": float(np.std(turns)) if has_solved else float("nan"),
    }


def run_solver_player_count_analysis(
    runs: int,
    *,
    player_counts: Sequence[int] = (3, 4, 5, 6),
    max_turns: int = 200,
    trial_budget: int = 2_000,
    seed: Optional[int] = None,
) -> Dict[int, Dict[str, float]]:
    """
    Benchmark the solver for several table sizes and plot summaries.

    Hands are sized with default_card_counts() on the standard catalog.

    Args:
        runs: Number of games per table size.
        player_counts: Table sizes to benchmark.
        max_turns: Maximum number of suggestions per game.
        trial_budget: Trial budget of each final solution search.
        seed: Base seed shared by every table size.

    Returns:
        Mapping from player count to the dict returned by run_solver_many_tests().
    """
    results: Dict[int, Dict[str, float]] = {}
    for player_count in player_counts:
        logger.info("Benchmarking %d player(s) over %d game(s)", player_count, runs)
        results[player_count] = run_solver_many_tests(
            default_card_counts(player_count),
            runs,
            max_turns=max_turns,
            trial_budget=trial_budget,
            seed=seed,
        )

    labels = [str(n) for n in player_counts]
    x = np.arange(len(labels))

    # 1) Solve rate and accuracy of the top ranked solution
    bar_w = 0.35
    solve_rates = [results[n]["solve_rate"] for n in player_counts]
    accuracies = [results[n]["top_solution_accuracy"] for n in player_counts]

    plt.figure()  # type: ignore[misc]
    plt.bar(x - bar_w / 2, solve_rates, width=bar_w, label="solved by propagation")  # type: ignore[misc]
    plt.bar(x + bar_w / 2, accuracies, width=bar_w, label="top solution correct")  # type: ignore[misc]
    plt.xticks(x, labels)  # type: ignore[misc]
    plt.xlabel("Players")  # type: ignore[misc]
    plt.ylabel("Rate")  # type: ignore[misc]
    plt.ylim(0.0, 1.0)  # type: ignore[misc]
    plt.title("Solver success by table size")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    # 2) Turns needed when the solution was found
    avg_turns = [results[n]["avg_turns_to_solve"] for n in player_counts]
    std_turns = [results[n]["std_turns_to_solve"] for n in player_counts]

    plt.figure()  # type: ignore[misc]
    plt.bar(x, avg_turns, yerr=std_turns, capsize=4)  # type: ignore[misc]
    plt.xticks(x, labels)  # type: ignore[misc]
    plt.xlabel("Players")  # type: ignore[misc]
    plt.ylabel("Suggestions")  # type: ignore[misc]
    plt.title("Average suggestions until the solution is known")  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    return results
