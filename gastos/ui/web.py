#!/usr/bin/env python3
"""
Web interface for gastos.
Uses Flask for the ledger pages and REST API, and SocketIO for the game.
"""

import os
import socket
import logging
import threading
import webbrowser
from datetime import timedelta

from flask import Blueprint, Flask, current_app, jsonify, render_template, request
from flask_socketio import SocketIO, emit

from ..utils import config
from ..utils.persistence import BestScoreStore
from ..game.board import Board
from ..game.session import GameSession
from ..ledger import auth
from ..ledger.api import ledger_api
from ..ledger.store import LedgerStore

logger = logging.getLogger(__name__)

ROOT_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
TEMPLATE_DIR = os.path.join(ROOT_DIR, 'templates')

socketio = SocketIO(cors_allowed_origins="*", async_mode="threading")

# One game per connected client, keyed by SocketIO session id
game_sessions = {}
_sessions_lock = threading.Lock()

pages = Blueprint("pages", __name__)


# Get local IP address
def get_local_ip():
    s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        # doesn't need to be reachable
        s.connect(('10.255.255.255', 1))
        ip = s.getsockname()[0]
    except OSError:
        ip = '127.0.0.1'
    finally:
        s.close()
    return ip


def create_app(settings=None):
    """
    Build the Flask app.

    Args:
        settings: Optional Flask config values overriding the defaults taken
            from `gastos.utils.config`
    """
    app = Flask(__name__, template_folder=TEMPLATE_DIR, static_folder=None)
    app.config.update(
        SECRET_KEY=config.AUTH_SECRET,
        APP_PASSWORD=config.APP_PASSWORD,
        GRID_SIZE=config.GRID_SIZE,
        BEST_SCORE_PATH=config.BEST_SCORE_PATH,
        LEDGER_DATA_PATH=config.LEDGER_DATA_PATH,
        SESSION_COOKIE_NAME=config.SESSION_COOKIE_NAME,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
        PERMANENT_SESSION_LIFETIME=timedelta(days=config.SESSION_DAYS),
    )
    if settings:
        app.config.update(settings)
    app.json.sort_keys = False
    app.url_map.strict_slashes = False

    app.extensions["ledger_store"] = LedgerStore(app.config["LEDGER_DATA_PATH"])
    app.extensions["best_score_store"] = BestScoreStore(app.config["BEST_SCORE_PATH"])

    app.register_blueprint(ledger_api)
    app.register_blueprint(pages)
    socketio.init_app(app)

    if not app.config["APP_PASSWORD"]:
        logger.info("APP_PASSWORD not set, only account logins are available")
    logger.info("Ledger data file: %s", app.config["LEDGER_DATA_PATH"])
    return app


# Flask routes
@pages.route('/')
def index():
    if auth.current_user_id() is None:
        return render_template('login.html')
    return render_template('ledger.html')


@pages.route('/game')
def game():
    return render_template('game.html')


@pages.route('/api/game/best')
def best_score():
    return jsonify({"best_score": current_app.extensions["best_score_store"].best})


# SocketIO event handlers
def _game_session():
    """Game of the current client, created on first use."""
    with _sessions_lock:
        session = game_sessions.get(request.sid)
        if session is None:
            board = Board(size=current_app.config["GRID_SIZE"])
            session = GameSession(current_app.extensions["best_score_store"], board=board)
            game_sessions[request.sid] = session
    return session


@socketio.on('connect')
def handle_connect():
    logger.info("Client connected: %s", request.sid)


@socketio.on('disconnect')
def handle_disconnect(*args):
    with _sessions_lock:
        game_sessions.pop(request.sid, None)
    logger.info("Client disconnected: %s", request.sid)


@socketio.on('new_game')
def handle_new_game(data=None):
    emit('game_state', _game_session().new_game())


@socketio.on('get_state')
def handle_get_state(data=None):
    emit('game_state', _game_session().state())


@socketio.on('move')
def handle_move(data):
    session = _game_session()
    result = session.handle_input(data)
    if result is None:
        return
    payload = result.to_dict()
    payload["state"] = session.state()
    emit('move_result', payload)


def run_server(port_number=None, debug=False, open_browser=True, settings=None):
    """
    Run the gastos web interface.

    Args:
        port_number: Port to run the server on
        debug: Whether to run in debug mode
        open_browser: Whether to open the browser automatically
        settings: Optional Flask config overrides
    """
    port = port_number or config.DEFAULT_PORT
    app = create_app(settings)

    # Get local IP
    local_ip = get_local_ip()
    server_url = f"http://{local_ip}:{port}"
    logger.info("Starting gastos web server at %s", server_url)

    # Open browser if requested
    if open_browser:
        threading.Timer(1.0, lambda: webbrowser.open(server_url)).start()

    # Start the server
    socketio.run(app, host=config.DEFAULT_HOST, port=port, debug=debug, allow_unsafe_werkzeug=True)
