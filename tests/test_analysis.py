import math

import pytest

from cluedo import (
    Card,
    PlayerData,
    Solver,
    format_solutions,
    format_solver_knowledge,
    run_solver_many_tests,
    run_solver_single_test,
)


def test_knowledge_grid_marks():
    solver = Solver.create([PlayerData("Alice", 6), PlayerData("Bob", 6), PlayerData("Carol", 6)])
    solver.learn_player_card_state(0, Card.KNIFE, True)
    solver.learn_player_has_any_of_cards(1, [Card.PLUM, Card.ROPE])

    lines = format_solver_knowledge(solver).splitlines()
    rows = {line.split("|")[0].strip(): line.split("|")[1].split() for line in lines[2:]}

    assert "Alice" in lines[0] and "Solution" in lines[0]
    assert rows["Knife"] == ["X", "-", "-", "-"]
    assert rows["Plum"] == [".", "?", ".", "."]
    assert rows["Rope"] == [".", "?", ".", "."]
    assert rows["SUSPECT"] == []


def test_format_solutions():
    text = format_solutions(
        [((Card.GREEN, Card.KNIFE, Card.HALL), 0.75), ((Card.PLUM, Card.ROPE, Card.STUDY), 0.25)],
        limit=1,
    )
    assert text == " 75.00%  Green, Knife, Hall"


def test_single_game_stays_consistent(toy_catalog):
    result = run_solver_single_test([2, 2, 2], seed=11, trial_budget=500, catalog=toy_catalog)

    assert result["consistent"] is True
    assert 0 <= result["turns"] <= 200
    assert 0.0 <= result["true_solution_probability"] <= 1.0
    if result["solved"]:
        assert result["candidate_solutions"] == 1
        assert result["top_solution_correct"] is True


def test_many_games_aggregate(toy_catalog):
    results = run_solver_many_tests([2, 2, 2], runs=4, seed=0, trial_budget=300, catalog=toy_catalog)

    assert results["consistency_rate"] == 1.0
    assert 0.0 <= results["solve_rate"] <= 1.0
    assert 0.0 <= results["avg_true_solution_probability"] <= 1.0
    if results["solve_rate"] > 0:
        assert results["avg_turns_to_solve"] >= 1.0
    else:
        assert math.isnan(results["avg_turns_to_solve"])


def test_many_games_needs_runs():
    with pytest.raises(ValueError):
        run_solver_many_tests([6, 6, 6], runs=0)
