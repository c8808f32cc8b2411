import numpy as np
import pytest

from gastos.game.board import Board
from gastos.ui.web import create_app


class FixedRandom:
    """Deterministic stand-in for `random.Random`: first empty cell, fixed draw."""

    def __init__(self, draw: float = 0.5) -> None:
        self.draw = draw

    def choice(self, seq):
        return seq[0]

    def random(self) -> float:
        return self.draw


def assert_consistent(board: Board) -> None:
    """Every non-zero cell has exactly one tile with matching position and value."""
    assert np.count_nonzero(board.grid) == len(board.tiles)
    positions = set()
    for tile_id, tile in board.tiles.items():
        assert tile.id == tile_id
        assert board.grid[tile.x, tile.y] == tile.value
        positions.add((tile.x, tile.y))
    assert len(positions) == len(board.tiles)


def grid_without_spawn(board: Board, result) -> np.ndarray:
    grid = board.grid.copy()
    if result.spawned is not None:
        grid[result.spawned.x, result.spawned.y] = 0
    return grid


@pytest.fixture
def app(tmp_path):
    app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test-secret",
            "APP_PASSWORD": "shared-secret",
            "LEDGER_DATA_PATH": str(tmp_path / "ledger.json"),
            "BEST_SCORE_PATH": str(tmp_path / "best.json"),
        }
    )
    return app


@pytest.fixture
def client(app):
    return app.test_client()
