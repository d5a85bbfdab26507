import pytest

from cluedo import CardCatalog, CardCategory, PlayerData, Solver


@pytest.fixture(scope="session")
def toy_catalog():
    """Nine cards, three per category: small enough to reason about by hand."""
    return CardCatalog.from_names(
        "ToyCard",
        {
            CardCategory.SUSPECT: ["MUSTARD", "PLUM", "SCARLET"],
            CardCategory.WEAPON: ["KNIFE", "ROPE", "PIPE"],
            CardCategory.ROOM: ["HALL", "STUDY", "LOUNGE"],
        },
    )


@pytest.fixture
def toy_solver(toy_catalog):
    """Three players holding two cards each."""
    solver = Solver.create(
        [PlayerData("Alice", 2), PlayerData("Bob", 2), PlayerData("Carol", 2)],
        toy_catalog,
    )
    assert isinstance(solver, Solver)
    return solver


@pytest.fixture
def four_player_solver():
    solver = Solver.create(
        [
            PlayerData("Alice", 5),
            PlayerData("Bob", 5),
            PlayerData("Carol", 4),
            PlayerData("Dave", 4),
        ]
    )
    assert isinstance(solver, Solver)
    return solver
