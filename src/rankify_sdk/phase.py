# Area: Core
"""
rankify_sdk.phase — Game phase classification
=============================================

A game's phase is never stored; it is derived from raw on-chain state
flags every time it is asked for. Precedence (first match wins):

    has_ended              -> FINISHED
    is_overtime            -> OVERTIME
    is_last_turn           -> LAST_TURN
    started_at > 0         -> STARTED
    registration_open_at   -> OPEN
    created_by != 0x0      -> CREATED
    otherwise              -> NOT_FOUND

A finished game that went to overtime reports FINISHED.
"""

from dataclasses import dataclass
from enum import Enum

from eth_utils import is_address

from .errors import MalformedInputError

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class GamePhase(Enum):
    """The seven mutually exclusive phases of a game."""
    CREATED = "CREATED"
    OPEN = "OPEN"
    STARTED = "STARTED"
    LAST_TURN = "LAST_TURN"
    OVERTIME = "OVERTIME"
    FINISHED = "FINISHED"
    NOT_FOUND = "NOT_FOUND"

    @property
    def display(self) -> str:
        """Human readable label for terminal output."""
        return PHASE_DISPLAY_NAMES[self]


PHASE_DISPLAY_NAMES = {
    GamePhase.CREATED: "Game created",
    GamePhase.OPEN: "Registration open",
    GamePhase.STARTED: "In progress",
    GamePhase.LAST_TURN: "Playing last turn",
    GamePhase.OVERTIME: "Playing in overtime",
    GamePhase.FINISHED: "Finished",
    GamePhase.NOT_FOUND: "Not found",
}


@dataclass(frozen=True)
class PhaseFlags:
    """
    Raw state flags a phase is derived from.

    Attributes:
        has_ended: Game over flag
        is_overtime: Scores tied after the last turn
        is_last_turn: Current turn is the final one
        started_at: Start timestamp, 0 if not started
        registration_open_at: Registration timestamp, 0 if never opened
        created_by: Creator address, zero address if the game does not exist
    """

    has_ended: bool = False
    is_overtime: bool = False
    is_last_turn: bool = False
    started_at: int = 0
    registration_open_at: int = 0
    created_by: str = ZERO_ADDRESS


def _is_zero_address(address: str) -> bool:
    if not address:
        return True
    if not is_address(address):
        raise MalformedInputError("created_by", "not a valid address", address)
    return int(address, 16) == 0


def classify_game_phase(flags: PhaseFlags) -> GamePhase:
    """
    Map raw state flags to exactly one phase.

    Args:
        flags: A PhaseFlags, or any object exposing the same attributes
            (e.g. events.GameState)

    Returns:
        The phase with the highest precedence whose condition holds
    """
    if flags.has_ended:
        return GamePhase.FINISHED
    if flags.is_overtime:
        return GamePhase.OVERTIME
    if flags.is_last_turn:
        return GamePhase.LAST_TURN
    if flags.started_at > 0:
        return GamePhase.STARTED
    if flags.registration_open_at > 0:
        return GamePhase.OPEN
    if not _is_zero_address(flags.created_by):
        return GamePhase.CREATED
    return GamePhase.NOT_FOUND
