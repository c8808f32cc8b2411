#!/usr/bin/env python3
"""
Console interface for the tile game.
Provides a terminal-based UI for playing with the arrow keys or WASD.
"""

import curses

from ..utils import config
from ..utils.persistence import BestScoreStore
from ..game.board import Board
from ..game.session import GameSession

HELP_TEXT = "Arrows/WASD: move   r: new game   q: quit"

CURSES_KEY_DIRECTIONS = {
    curses.KEY_LEFT: "left",
    curses.KEY_RIGHT: "right",
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    ord("a"): "left",
    ord("d"): "right",
    ord("w"): "up",
    ord("s"): "down",
}


def display_board(stdscr, state, message=""):
    """Display the game board in the console."""
    # Clear screen
    stdscr.clear()

    # Print game info
    stdscr.addstr(0, 0, f"Score: {state['score']}")
    stdscr.addstr(1, 0, f"Best: {state['best_score']}")
    stdscr.addstr(2, 0, f"Max Tile: {state['max_tile']}")

    # Calculate column width based on max tile
    col_width = max(6, len(str(state['max_tile'])) + 2)

    # Print board
    top = 4
    for i, row in enumerate(state['grid']):
        for j, cell in enumerate(row):
            text = "." if cell == 0 else str(cell)
            stdscr.addstr(top + i, j * col_width, text + " " * (col_width - len(text)))

    # Print status and instructions
    bottom = top + len(state['grid']) + 1
    if state['game_over']:
        stdscr.addstr(bottom, 0, "Game Over! Press 'r' to play again.")
    elif message:
        stdscr.addstr(bottom, 0, message)
    stdscr.addstr(bottom + 1, 0, HELP_TEXT)

    # Refresh screen
    stdscr.refresh()


def run_play_mode(stdscr, session):
    """Run the interactive game loop until the player quits."""
    curses.curs_set(0)  # Hide cursor
    stdscr.keypad(True)

    message = ""
    display_board(stdscr, session.state())

    while True:
        key = stdscr.getch()
        if key == ord('q'):
            break
        if key == ord('r'):
            session.new_game()
            message = ""
        else:
            direction = CURSES_KEY_DIRECTIONS.get(key)
            if direction is None:
                continue
            result = session.move(direction)
            if result.moved and result.score_gain:
                message = f"+{result.score_gain}"
            elif not result.moved:
                message = "Can't move that way"
            else:
                message = ""
        display_board(stdscr, session.state(), message)


def run_console_ui(best_score_path=None, size=None):
    """Run the console UI."""
    store = BestScoreStore(best_score_path or config.BEST_SCORE_PATH)
    session = GameSession(store, board=Board(size=size))
    curses.wrapper(run_play_mode, session)
    return session.board.score
