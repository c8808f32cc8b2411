"""Tile-merge game: board engine, input mapping and sessions."""

from .board import DIRECTIONS, Board, MoveResult, Phase, Tile, can_move, slide_line
from .controls import classify_swipe, direction_for_key
from .session import GameSession

__all__ = [
    "DIRECTIONS",
    "Board",
    "MoveResult",
    "Phase",
    "Tile",
    "can_move",
    "slide_line",
    "classify_swipe",
    "direction_for_key",
    "GameSession",
]
