#!/usr/bin/env python3
"""
gastos - monthly household expense tracker

Serves the expense ledger (monthly expense/income entries, CSV export,
password-gated multi-user mode) and a bundled tile-merge game.

Usage:
    python main.py              # Web UI (ledger at /, game at /game)
    python main.py --console    # Play the game in the terminal
    python main.py --port 8080  # Use custom port for Web UI
"""

import argparse
import logging

from gastos.utils import config


def main(argv=None):
    parser = argparse.ArgumentParser(description="gastos - household expense tracker")
    parser.add_argument('--console', action='store_true',
                      help="Play the tile game in the terminal instead of starting the web server")
    parser.add_argument('--port', type=int, default=None,
                      help="Port to run the web server on")
    parser.add_argument('--debug', action='store_true',
                      help="Run in debug mode (web interface only)")
    parser.add_argument('--no-browser', action='store_true',
                      help="Don't open browser automatically (web interface only)")
    parser.add_argument('--log-level', default=None,
                      help="Logging level (DEBUG, INFO, WARNING, ...)")
    args = parser.parse_args(argv)

    # Initialize configuration
    config.load_environment()
    if args.log_level:
        config.apply_overrides({'log_level': args.log_level})
    config.setup_logging()

    if args.console:
        from gastos.ui.console import run_console_ui
        score = run_console_ui()
        logging.getLogger("gastos").info("Final score: %d", score)
    else:
        from gastos.ui.web import run_server
        run_server(args.port, args.debug, not args.no_browser)


if __name__ == "__main__":
    main()
