"""
Cluedo Solver

A deduction engine for Cluedo built on constraint propagation:
- Elimination: a card has exactly one owner among the seats
- Category completion: the solution holds one card of each category
- Shared possibilities: k players sharing the same k-card possibility own those cards
- Monte-Carlo search: probability of each solution under all known constraints
"""

from .cards import Card, CardCatalog, CardCategory, CardSet, STANDARD_CATALOG
from .errors import CluedoError, Error
from .player import Player
from .solver import (
    DEFAULT_TRIAL_BUDGET,
    MAX_PLAYER_COUNT,
    MIN_PLAYER_COUNT,
    PlayerData,
    Solver,
    Suggestion,
)
from .engine import CluedoGame
from .session import GameSession
from .analysis import (
    format_solutions,
    format_solver_knowledge,
    run_solver_single_test,
    run_solver_many_tests,
    run_solver_player_count_analysis,
)

__version__ = "1.0.0"

__all__ = [
    # Cards
    "Card",
    "CardCatalog",
    "CardCategory",
    "CardSet",
    "STANDARD_CATALOG",
    # Core classes
    "Player",
    "PlayerData",
    "Solver",
    "Suggestion",
    "DEFAULT_TRIAL_BUDGET",
    "MAX_PLAYER_COUNT",
    "MIN_PLAYER_COUNT",
    # Errors
    "CluedoError",
    "Error",
    # Game and session
    "CluedoGame",
    "GameSession",
    # Analysis functions
    "format_solutions",
    "format_solver_knowledge",
    "run_solver_single_test",
    "run_solver_many_tests",
    "run_solver_player_count_analysis",
]
