"""Exceptions raised by the play engine and its adapters."""


class PlayEngineError(Exception):
    """Base class for all engine errors"""


class PlayerNotFoundError(PlayEngineError, KeyError):
    """No player with the given id exists in the play"""

    def __init__(self, player_id: str):
        self.player_id = player_id
        super().__init__(f"Unknown player: {player_id}")

    def __str__(self) -> str:
        return f"Unknown player: {self.player_id}"


class DrawingError(PlayEngineError):
    """Freehand route drawing was used out of order or finished too early"""


class PersistenceError(PlayEngineError):
    """A play could not be loaded from or written to the play store"""


class CoachSheetError(PlayEngineError):
    """The coach sheet model did not return the expected tool response"""
