"""
Quickstart example for the Cluedo Solver.

This script demonstrates basic usage of the solver.
"""

import random

from cluedo import (
    Card,
    CluedoError,
    GameSession,
    PlayerData,
    Suggestion,
    format_solutions,
    format_solver_knowledge,
    run_solver_many_tests,
)


def main():
    print("=" * 60)
    print("Cluedo Solver - Quickstart Example")
    print("=" * 60)

    # Example 1: Track a game from the first player's seat
    print("\n1. Tracking a 3-player game from Alice's seat...")
    print("-" * 60)

    session = GameSession(
        [PlayerData("Alice", 6), PlayerData("Bob", 6), PlayerData("Carol", 6)],
        trial_budget=5_000,
        rng=random.Random(7),
    )

    for card in (Card.GREEN, Card.KNIFE, Card.ROPE, Card.HALL, Card.STUDY, Card.LOUNGE):
        session.learn_player_card_state(0, card, True)

    session.learn_from_suggestion(
        Suggestion(0, Card.PLUM, Card.PIPE, Card.KITCHEN, 1, Card.PLUM)
    )
    session.learn_from_suggestion(
        Suggestion(1, Card.SCARLET, Card.WRENCH, Card.LIBRARY, 2)
    )

    for description in session.descriptions():
        print(f"- {description}")

    # Example 2: Contradictions are rolled back
    print("\n2. Rejecting contradictory information...")
    print("-" * 60)
    try:
        session.learn_player_card_state(1, Card.GREEN, True)
    except CluedoError as exc:
        print(f"Rejected: {exc}")

    # Example 3: Knowledge grid and solution ranking
    print("\n3. What the solver knows:")
    print("-" * 60)
    print(format_solver_knowledge(session.solver))

    print("\nMost likely solutions:")
    print(format_solutions(session.refresh_solutions(), limit=5))

    # Example 4: Self-play statistics
    print("\n4. Running 10 self-play games with 4 players...")
    print("-" * 60)

    results = run_solver_many_tests([5, 5, 4, 4], runs=10, seed=1, trial_budget=500)
    print(f"Solved by propagation: {results['solve_rate']*100:.1f}%")
    print(f"Top solution correct: {results['top_solution_accuracy']*100:.1f}%")
    print(f"Average suggestions to solve: {results['avg_turns_to_solve']:.1f}")

    print("\n" + "=" * 60)
    print("Done!")
    print("=" * 60)


if __name__ == "__main__":
    main()
