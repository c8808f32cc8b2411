#!/usr/bin/env python3
"""
Configuration for gastos.
Centralizes all settings and provides functions for applying overrides.
"""

import os
import logging
import secrets

# ---------------- CONFIGURATION PARAMETERS ----------------
# Game parameters
GRID_SIZE = 4                  # Board is GRID_SIZE x GRID_SIZE
SPAWN_FOUR_PROBABILITY = 0.1   # Chance that a spawned tile is a 4 instead of a 2
START_TILES = 2                # Tiles placed by a reset
WIN_TILE = 2048                # Shown as a milestone, does not end the game
SWIPE_THRESHOLD = 20           # Minimum swipe distance in pixels

# Server parameters
DEFAULT_PORT = 8082
DEFAULT_HOST = "0.0.0.0"

# Storage
BEST_SCORE_PATH = "best_score.json"
LEDGER_DATA_PATH = "data.local.json"

# Auth
APP_PASSWORD = ""              # Legacy shared password (empty disables it)
AUTH_SECRET = secrets.token_hex(32)
SESSION_COOKIE_NAME = "gastos_auth"
SESSION_DAYS = 14

# Logging
LOG_LEVEL = "INFO"
LOG_FILE = None
LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

# Environment variable -> (setting, type)
ENVIRONMENT_OVERRIDES = {
    "PORT": ("port", int),
    "APP_PASSWORD": ("app_password", str),
    "AUTH_SECRET": ("auth_secret", str),
    "GASTOS_GRID_SIZE": ("grid_size", int),
    "GASTOS_BEST_SCORE_PATH": ("best_score_path", str),
    "GASTOS_DATA_PATH": ("ledger_data_path", str),
    "GASTOS_LOG_LEVEL": ("log_level", str),
    "GASTOS_LOG_FILE": ("log_file", str),
}


def setup_logging(level=None, log_file=None):
    """Configure the root logger once for the whole process."""
    level = (level or LOG_LEVEL).upper()
    log_file = log_file or LOG_FILE

    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="a"))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)


def load_environment(environ=None):
    """
    Read overrides from environment variables.
    Returns the list of applied settings.
    """
    environ = os.environ if environ is None else environ

    overrides = {}
    for variable, (name, cast) in ENVIRONMENT_OVERRIDES.items():
        raw = environ.get(variable)
        if raw is None or raw == "":
            continue
        try:
            overrides[name] = cast(raw)
        except ValueError:
            logging.getLogger(__name__).warning("Ignoring %s=%r: expected %s", variable, raw, cast.__name__)

    return apply_overrides(overrides)


def apply_overrides(overrides):
    """
    Apply settings to the global configuration.
    Takes a dictionary of setting names and values.
    Returns a list of applied settings.
    """
    if not overrides:
        return []

    global GRID_SIZE, SPAWN_FOUR_PROBABILITY, SWIPE_THRESHOLD, WIN_TILE
    global DEFAULT_PORT, BEST_SCORE_PATH, LEDGER_DATA_PATH
    global APP_PASSWORD, AUTH_SECRET, SESSION_DAYS
    global LOG_LEVEL, LOG_FILE

    applied = []

    # Game parameters
    if 'grid_size' in overrides:
        if overrides['grid_size'] < 2:
            raise ValueError("grid_size must be at least 2")
        GRID_SIZE = overrides['grid_size']
        applied.append('grid_size')
    if 'spawn_four_probability' in overrides:
        SPAWN_FOUR_PROBABILITY = overrides['spawn_four_probability']
        applied.append('spawn_four_probability')
    if 'swipe_threshold' in overrides:
        SWIPE_THRESHOLD = overrides['swipe_threshold']
        applied.append('swipe_threshold')
    if 'win_tile' in overrides:
        WIN_TILE = overrides['win_tile']
        applied.append('win_tile')

    # Server and storage
    if 'port' in overrides:
        DEFAULT_PORT = overrides['port']
        applied.append('port')
    if 'best_score_path' in overrides:
        BEST_SCORE_PATH = overrides['best_score_path']
        applied.append('best_score_path')
    if 'ledger_data_path' in overrides:
        LEDGER_DATA_PATH = overrides['ledger_data_path']
        applied.append('ledger_data_path')

    # Auth
    if 'app_password' in overrides:
        APP_PASSWORD = overrides['app_password']
        applied.append('app_password')
    if 'auth_secret' in overrides:
        AUTH_SECRET = overrides['auth_secret']
        applied.append('auth_secret')
    if 'session_days' in overrides:
        SESSION_DAYS = overrides['session_days']
        applied.append('session_days')

    # Logging
    if 'log_level' in overrides:
        LOG_LEVEL = overrides['log_level']
        applied.append('log_level')
    if 'log_file' in overrides:
        LOG_FILE = overrides['log_file']
        applied.append('log_file')

    return applied
