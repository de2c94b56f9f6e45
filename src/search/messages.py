"""Values exchanged between the host and the search worker.

Host -> worker: ``MoveCommand``, ``StopCommand``.
Worker -> host: ``MoveResult``, ``ErrorResult``.

Boards are copied before they are put on a channel, so neither side keeps a
reference to the other's grid.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from src.engine.board import Board


@dataclass(frozen=True)
class MoveCommand:
    """The board after the opponent's move."""

    board: Board


@dataclass(frozen=True)
class StopCommand:
    pass


@dataclass(frozen=True)
class MoveResult:
    """The board after the worker's chosen reply."""

    board: Board


@dataclass(frozen=True)
class ErrorResult:
    """The worker could not answer.

    ``advanced`` is set when the opponent's move was applied before the
    failure; the worker's root is then the position after that move.
    """

    message: str
    advanced: bool = False


Command = Union[MoveCommand, StopCommand]
Result = Union[MoveResult, ErrorResult]
