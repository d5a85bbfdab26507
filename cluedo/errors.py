"""Errors reported by the solver and by the code that feeds it."""

import enum


class Error(enum.Enum):
    """Closed set of errors a caller may have to report."""

    INVALID_NUMBER_OF_PLAYERS = "InvalidNumberOfPlayers"
    INVALID_NUMBER_OF_CARDS = "InvalidNumberOfCards"
    SUGGESTING_PLAYER_EQUAL_TO_RESPONDING_PLAYER = (
        "SuggestingPlayerEqualToRespondingPlayer"
    )
    INVALID_INFORMATION = "InvalidInformation"


_MESSAGES = {
    Error.INVALID_NUMBER_OF_PLAYERS: "invalid number of players",
    Error.INVALID_NUMBER_OF_CARDS: "invalid number of cards",
    Error.SUGGESTING_PLAYER_EQUAL_TO_RESPONDING_PLAYER: (
        "the suggesting player cannot also be the responding player"
    ),
    Error.INVALID_INFORMATION: "the information contradicts what is already known",
}


class CluedoError(ValueError):
    """Raised at the caller boundary; ``error`` holds the Error member."""

    def __init__(self, error: Error) -> None:
        super().__init__(_MESSAGES[error])
        self.error: Error = error
