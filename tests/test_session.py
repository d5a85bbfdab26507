import random

import pytest

from cluedo import Card, CluedoError, Error, GameSession, PlayerData, Suggestion
from cluedo.session import describe_suggestion


def make_session(**kwargs):
    return GameSession(
        [PlayerData("Alice", 6), PlayerData("Bob", 6), PlayerData("Carol", 6)], **kwargs
    )


def test_invalid_game_raises():
    with pytest.raises(CluedoError) as excinfo:
        GameSession([PlayerData("Alice", 18)])
    assert excinfo.value.error is Error.INVALID_NUMBER_OF_PLAYERS

    with pytest.raises(CluedoError) as excinfo:
        GameSession([PlayerData("Alice", 6), PlayerData("Bob", 6)])
    assert excinfo.value.error is Error.INVALID_NUMBER_OF_CARDS


def test_default_card_counts():
    session = GameSession.with_default_card_counts(["Alice", "Bob", "Carol", "Dave"])

    assert session.player_summaries() == [("Alice", 5), ("Bob", 5), ("Carol", 4), ("Dave", 4)]

    with pytest.raises(CluedoError):
        GameSession.with_default_card_counts([])


def test_facts_are_described_and_recorded():
    session = make_session()

    assert session.learn_player_card_state(0, Card.KNIFE, True) == "Alice has got Knife"
    assert session.learn_player_card_state(1, Card.BILLIARD_ROOM, False) == (
        "Bob hasn't got Billiard Room"
    )
    assert session.learn_player_has_any_of_cards(2, [Card.PLUM, Card.ROPE]) == (
        "Carol has got one of Plum, Rope"
    )

    assert len(session.history) == 3
    assert session.descriptions()[0] == "Alice has got Knife"


def test_suggestion_descriptions():
    session = make_session()
    solver = session.solver

    assert describe_suggestion(
        solver, Suggestion(0, Card.GREEN, Card.KNIFE, Card.HALL, 1, Card.KNIFE)
    ) == "Alice suggested Green, Knife, Hall and Bob responded with Knife"
    assert describe_suggestion(
        solver, Suggestion(0, Card.GREEN, Card.KNIFE, Card.HALL, 1)
    ) == "Alice suggested Green, Knife, Hall and Bob responded"
    assert describe_suggestion(
        solver, Suggestion(2, Card.GREEN, Card.KNIFE, Card.HALL)
    ) == "Carol suggested Green, Knife, Hall and no one responded"


def test_contradiction_is_rolled_back():
    session = make_session()
    session.learn_player_card_state(0, Card.GREEN, True)

    with pytest.raises(CluedoError) as excinfo:
        session.learn_player_card_state(1, Card.GREEN, True)

    assert excinfo.value.error is Error.INVALID_INFORMATION
    assert len(session.history) == 1
    assert session.solver.player(1).has_card(Card.GREEN) is False
    assert session.solver.are_constraints_satisfied()


def test_suggestion_validation():
    session = make_session()

    with pytest.raises(CluedoError) as excinfo:
        session.learn_from_suggestion(Suggestion(1, Card.GREEN, Card.KNIFE, Card.HALL, 1))
    assert excinfo.value.error is Error.SUGGESTING_PLAYER_EQUAL_TO_RESPONDING_PLAYER

    with pytest.raises(CluedoError) as excinfo:
        session.learn_from_suggestion(
            Suggestion(0, Card.GREEN, Card.KNIFE, Card.HALL, 1, Card.ROPE)
        )
    assert excinfo.value.error is Error.INVALID_INFORMATION

    with pytest.raises(CluedoError) as excinfo:
        session.learn_from_suggestion(
            Suggestion(0, Card.GREEN, Card.KNIFE, Card.HALL, None, Card.KNIFE)
        )
    assert excinfo.value.error is Error.INVALID_INFORMATION

    assert session.history == []


def test_failed_call_leaves_solver_untouched():
    session = make_session()

    with pytest.raises(IndexError):
        session.learn_from_suggestion(Suggestion(5, Card.GREEN, Card.KNIFE, Card.HALL))

    assert session.history == []
    assert session.solver.player(0).has_card(Card.GREEN) is None


def test_undo_restores_previous_state():
    session = make_session()
    session.learn_player_card_state(0, Card.GREEN, True)
    session.learn_from_suggestion(Suggestion(0, Card.PLUM, Card.ROPE, Card.HALL, 1, Card.ROPE))

    assert session.undo() == "Alice suggested Plum, Rope, Hall and Bob responded with Rope"

    assert session.solver.player(1).has_card(Card.ROPE) is None
    assert session.solver.player(0).has_card(Card.GREEN) is True
    assert session.descriptions() == ["Alice has got Green"]

    session.undo()
    with pytest.raises(IndexError):
        session.undo()


def test_refresh_solutions(toy_catalog):
    toy = toy_catalog.card_type
    session = GameSession(
        [PlayerData("Alice", 2), PlayerData("Bob", 2), PlayerData("Carol", 2)],
        toy_catalog,
        trial_budget=540,
        rng=random.Random(3),
    )
    session.learn_player_card_state(0, toy.MUSTARD, True)

    solutions = session.refresh_solutions()

    assert session.solutions is solutions
    assert len(solutions) == 18
    assert sum(p for _, p in solutions) == pytest.approx(1.0)
