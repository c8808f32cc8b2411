#!/usr/bin/env python3
"""
Game board logic for the tile-merge game.
Defines the board engine: directional moves, merges, spawns and the
terminal-state check.

Tiles carry an identity that survives moves. When two tiles merge, the one
nearer the leading edge keeps its id and doubles its value; the trailing one
is removed. Every move reports which ids were removed and where each
remaining id ended up, so a renderer can animate without guessing.
"""

import random
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from ..utils import config

logger = logging.getLogger(__name__)

DIRECTIONS = ("up", "down", "left", "right")

# (surviving tile id, removed tile id, merged value)
Merge = Tuple[int, int, int]


class Phase(Enum):
    """Board engine states."""

    IDLE = "idle"
    RESOLVING = "resolving"
    SETTLED = "settled"
    TERMINAL = "terminal"


@dataclass
class Tile:
    id: int
    value: int
    x: int
    y: int

    def to_dict(self):
        return {"id": self.id, "value": self.value, "x": self.x, "y": self.y}


@dataclass
class MoveResult:
    """Outcome of a single `Board.move` call. Truthy only if the board changed."""

    direction: str
    moved: bool = False
    rejected: bool = False
    score_gain: int = 0
    merges: List[Merge] = field(default_factory=list)
    removed_ids: List[int] = field(default_factory=list)
    positions: Dict[int, Tuple[int, int]] = field(default_factory=dict)
    spawned: Optional[Tile] = None
    game_over: bool = False

    def __bool__(self):
        return self.moved

    def to_dict(self):
        return {
            "direction": self.direction,
            "moved": self.moved,
            "rejected": self.rejected,
            "score_gain": self.score_gain,
            "merges": [list(m) for m in self.merges],
            "removed_ids": list(self.removed_ids),
            "positions": {str(tile_id): list(pos) for tile_id, pos in self.positions.items()},
            "spawned": self.spawned.to_dict() if self.spawned else None,
            "game_over": self.game_over,
        }


def line_cells(size, direction, index):
    """
    Coordinates of one line, ordered from the leading edge of `direction`.
    Lines are rows for left/right and columns for up/down.
    """
    if direction == "left":
        return [(index, j) for j in range(size)]
    if direction == "right":
        return [(index, size - 1 - j) for j in range(size)]
    if direction == "up":
        return [(j, index) for j in range(size)]
    if direction == "down":
        return [(size - 1 - j, index) for j in range(size)]
    raise ValueError(f"Unknown direction: {direction!r}")


def _collapse(entries):
    """
    Merge a gap-free sequence of (value, tile_id) pairs, leading edge first.
    A merged entry is never examined again in the same pass.
    Returns the collapsed pairs, the score gained and the merges.
    """
    collapsed = []
    merges = []
    gain = 0
    i = 0
    while i < len(entries):
        value, tile_id = entries[i]
        if i + 1 < len(entries) and entries[i + 1][0] == value:
            merged_value = value * 2
            collapsed.append((merged_value, tile_id))
            merges.append((tile_id, entries[i + 1][1], merged_value))
            gain += merged_value
            i += 2
        else:
            collapsed.append((value, tile_id))
            i += 1
    return collapsed, gain, merges


def slide_line(values):
    """
    Slide one line toward its start, merging equal neighbours once.
    Returns the new line and the score it earns.

    >>> slide_line([2, 0, 2, 2])
    ([4, 2, 0, 0], 4)
    """
    entries = [(int(v), None) for v in values if v]
    collapsed, gain, _ = _collapse(entries)
    new_values = [value for value, _ in collapsed]
    return new_values + [0] * (len(values) - len(new_values)), gain


def can_move(grid):
    """Check if any valid moves remain: an empty cell or two equal orthogonal neighbours."""
    grid = np.asarray(grid)
    if np.any(grid == 0):
        return True
    if np.any(grid[:, 1:] == grid[:, :-1]):
        return True
    return bool(np.any(grid[1:, :] == grid[:-1, :]))


class Board:
    """
    A single game: value grid, tile registry, score and move state machine.

    Moves run synchronously: IDLE -> RESOLVING -> SETTLED -> IDLE, or TERMINAL
    when no move is left. Moves arriving while the board is busy or terminal
    are rejected; only `reset()` leaves TERMINAL.
    """

    def __init__(self, size=None, rng=None, spawn_four_probability=None, start=True):
        self.size = config.GRID_SIZE if size is None else size
        if self.size < 2:
            raise ValueError("Board size must be at least 2")
        self.spawn_four_probability = (
            config.SPAWN_FOUR_PROBABILITY if spawn_four_probability is None else spawn_four_probability
        )
        self._rng = rng or random.Random()
        self._next_id = 1
        self._settle_listeners: List[Callable[["Board", MoveResult], None]] = []

        self.grid = np.zeros((self.size, self.size), dtype=np.int64)
        self.tiles: Dict[int, Tile] = {}
        self.score = 0
        self.phase = Phase.IDLE
        self.last_spawned: Optional[Tile] = None

        if start:
            self.reset()

    @classmethod
    def from_grid(cls, rows, score=0, rng=None, spawn_four_probability=None):
        """Build a board from explicit cell values (0 for empty), tiles numbered row by row."""
        grid = np.array(rows, dtype=np.int64)
        if grid.ndim != 2 or grid.shape[0] != grid.shape[1]:
            raise ValueError("Board must be square")
        for value in grid[grid != 0]:
            if value < 2 or int(value) & (int(value) - 1):
                raise ValueError(f"Tile values must be powers of 2, got {int(value)}")

        board = cls(size=grid.shape[0], rng=rng, spawn_four_probability=spawn_four_probability, start=False)
        for x, y in zip(*np.nonzero(grid)):
            board._place(int(x), int(y), int(grid[x, y]))
        board.score = score
        board.phase = Phase.IDLE if board.can_move() else Phase.TERMINAL
        return board

    # ---------------- state ----------------

    @property
    def busy(self):
        return self.phase in (Phase.RESOLVING, Phase.SETTLED)

    @property
    def game_over(self):
        return self.phase is Phase.TERMINAL

    def max_tile(self):
        return int(self.grid.max())

    def has_won(self):
        return self.max_tile() >= config.WIN_TILE

    def empty_cells(self):
        return [(int(x), int(y)) for x, y in zip(*np.nonzero(self.grid == 0))]

    def can_move(self):
        return can_move(self.grid)

    def snapshot(self):
        """JSON-friendly view of the board for renderers."""
        return {
            "size": self.size,
            "grid": self.grid.tolist(),
            "tiles": [self.tiles[tile_id].to_dict() for tile_id in sorted(self.tiles)],
            "score": self.score,
            "max_tile": self.max_tile(),
            "won": self.has_won(),
            "game_over": self.game_over,
        }

    def add_settle_listener(self, callback):
        """
        Call `callback(board, result)` after a move's merges are final and before
        the spawn. Returns a function that unregisters it.
        """
        self._settle_listeners.append(callback)

        def remove():
            if callback in self._settle_listeners:
                self._settle_listeners.remove(callback)

        return remove

    # ---------------- operations ----------------

    def reset(self):
        """Start a new game: empty grid, zero score, START_TILES random tiles."""
        self.grid = np.zeros((self.size, self.size), dtype=np.int64)
        self.tiles = {}
        self.score = 0
        self.last_spawned = None
        self.phase = Phase.IDLE
        for _ in range(config.START_TILES):
            self.spawn_random()
        logger.debug("Board reset: %s", self.grid.tolist())

    def spawn_random(self):
        """Add a random tile (2 or 4) to an empty cell. Returns False if the board is full."""
        empty = self.empty_cells()
        if not empty:
            return False
        x, y = self._rng.choice(empty)
        value = 4 if self._rng.random() < self.spawn_four_probability else 2
        self.last_spawned = self._place(x, y, value)
        return True

    def move(self, direction):
        """
        Apply a move in `direction` ('up', 'down', 'left', 'right').
        On change, spawns one tile and re-evaluates the terminal state.
        Returns a MoveResult; unknown directions are ignored.
        """
        if direction not in DIRECTIONS:
            logger.debug("Ignoring unknown direction %r", direction)
            return MoveResult(direction=str(direction), game_over=self.game_over)
        if self.busy or self.game_over:
            return MoveResult(direction=direction, rejected=True, game_over=self.game_over)

        self.phase = Phase.RESOLVING
        try:
            result = self._resolve(direction)
            if not result.moved:
                self.phase = Phase.IDLE
                return result

            self.phase = Phase.SETTLED
            for callback in list(self._settle_listeners):
                callback(self, result)

            if self.spawn_random():
                result.spawned = self.last_spawned
            result.positions = {tile_id: (tile.x, tile.y) for tile_id, tile in self.tiles.items()}

            if self.can_move():
                self.phase = Phase.IDLE
            else:
                self.phase = Phase.TERMINAL
                logger.info("No moves left, final score %d", self.score)
            result.game_over = self.game_over
            return result
        finally:
            if self.busy:
                self.phase = Phase.IDLE

    # ---------------- internals ----------------

    def _place(self, x, y, value):
        tile = Tile(id=self._next_id, value=value, x=x, y=y)
        self._next_id += 1
        self.grid[x, y] = value
        self.tiles[tile.id] = tile
        return tile

    def _resolve(self, direction):
        """Collapse every line; commit grid, tiles and score only if something changed."""
        id_at = {(tile.x, tile.y): tile.id for tile in self.tiles.values()}
        new_grid = np.zeros_like(self.grid)
        placements = {}
        merges = []
        gain = 0

        for index in range(self.size):
            cells = line_cells(self.size, direction, index)
            entries = [(int(self.grid[x, y]), id_at[(x, y)]) for x, y in cells if self.grid[x, y]]
            collapsed, line_gain, line_merges = _collapse(entries)
            for (x, y), (value, tile_id) in zip(cells, collapsed):
                new_grid[x, y] = value
                placements[tile_id] = (x, y, value)
            gain += line_gain
            merges.extend(line_merges)

        result = MoveResult(direction=direction)
        if np.array_equal(new_grid, self.grid):
            return result

        for _, removed_id, _ in merges:
            del self.tiles[removed_id]
        for tile_id, (x, y, value) in placements.items():
            tile = self.tiles[tile_id]
            tile.x, tile.y, tile.value = x, y, value
        self.grid = new_grid
        self.score += gain

        result.moved = True
        result.score_gain = gain
        result.merges = merges
        result.removed_ids = [removed_id for _, removed_id, _ in merges]
        return result
