#!/usr/bin/env python3
"""
Persistence helpers for gastos.
Atomic JSON files and the best score store used by the game.
"""

import os
import json
import time
import logging
import tempfile
import threading

logger = logging.getLogger(__name__)

_write_lock = threading.RLock()


def read_json(path, default):
    """Read a JSON document, returning `default` if it is missing or unreadable."""
    if not os.path.exists(path):
        return default
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return default


def atomic_write_json(path, data):
    """Write a JSON document through a temp file so readers never see a partial file."""
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    with _write_lock:
        with tempfile.NamedTemporaryFile("w", delete=False, dir=directory, encoding="utf-8", suffix=".tmp") as tmp:
            json.dump(data, tmp, ensure_ascii=False, indent=2)
            tmp.flush()
            os.fsync(tmp.fileno())
            tmp_path = tmp.name
        os.replace(tmp_path, path)


class BestScoreStore:
    """Best score so far, kept in a small JSON file next to the app."""

    def __init__(self, path):
        self.path = path
        self._best = None
        self._lock = threading.Lock()

    @property
    def best(self):
        if self._best is None:
            self._best = self.load()
        return self._best

    def load(self):
        """
        Load the best score from disk.

        Returns:
            The stored score, or 0 if there is none or it cannot be read
        """
        data = read_json(self.path, {})
        try:
            best = int(data.get("best_score", 0)) if isinstance(data, dict) else 0
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed best score in %s", self.path)
            best = 0
        return max(best, 0)

    def save(self, score):
        """
        Save the best score with a timestamp.

        Returns:
            True if successful, False otherwise
        """
        try:
            atomic_write_json(self.path, {"best_score": int(score), "updated": time.time()})
        except OSError as e:
            logger.warning("Error saving best score to %s: %s", self.path, e)
            return False
        self._best = int(score)
        return True

    def record(self, score):
        """Store `score` if it beats the current best. Returns True on a new best."""
        with self._lock:
            if score <= self.best:
                return False
            # In-memory best is updated even when the write fails
            if not self.save(score):
                self._best = int(score)
        logger.info("New best score: %d", score)
        return True
