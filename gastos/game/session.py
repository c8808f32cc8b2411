"""Game session: one board plus the persisted best score."""

import logging
import threading

from .board import Board, MoveResult
from .controls import classify_swipe, direction_for_key

logger = logging.getLogger(__name__)


class GameSession:
    """
    Couples a `Board` with a `BestScoreStore`.

    Move requests are serialized with a non-blocking lock: a request that
    arrives while another one is still being processed is rejected, the same
    way the board rejects moves while it is busy.
    """

    def __init__(self, best_store, board=None):
        self.best_store = best_store
        self.board = board if board is not None else Board()
        self._lock = threading.Lock()

    @property
    def best_score(self):
        return max(self.best_store.best, self.board.score)

    def new_game(self):
        with self._lock:
            self.board.reset()
        return self.state()

    def move(self, direction):
        """Apply a move and record the score if it is a new best."""
        if not self._lock.acquire(blocking=False):
            return MoveResult(direction=str(direction), rejected=True, game_over=self.board.game_over)
        try:
            result = self.board.move(direction)
            if result.moved:
                self.best_store.record(self.board.score)
            return result
        finally:
            self._lock.release()

    def handle_input(self, payload):
        """
        Resolve a UI payload into a move: {'direction': ...}, {'key': ...} or
        {'dx': ..., 'dy': ...}. Returns None when the payload names no move.
        """
        if not isinstance(payload, dict):
            return None
        direction = payload.get("direction")
        if direction is None and "key" in payload:
            direction = direction_for_key(payload["key"])
        if direction is None and "dx" in payload and "dy" in payload:
            try:
                direction = classify_swipe(float(payload["dx"]), float(payload["dy"]))
            except (TypeError, ValueError):
                direction = None
        if direction is None:
            return None
        return self.move(direction)

    def state(self):
        snapshot = self.board.snapshot()
        snapshot["best_score"] = self.best_score
        return snapshot
