# memory_match/server.py
from __future__ import annotations
import logging
import uuid
from threading import RLock
from typing import Dict

from flask import Flask, request, jsonify

from . import commands
from .config import GameSettings, get_config

logger = logging.getLogger(__name__)

app = Flask(__name__)

# In-memory games keyed by id. One lock serializes every call into the engines.
GAMES: Dict[str, commands.GameState] = {}
_LOCK = RLock()


def _error(message: str, code: int = 400):
    return jsonify({"status": "error", "message": message}), code


def _json_object():
    """The request body as a dict; None when it is valid JSON but not an object."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        return None
    return data


def _get_state(game_id: str):
    state = GAMES.get(game_id)
    if state is None:
        return None, _error("game not found", 404)
    return state, None


@app.get("/health")
def health():
    return jsonify({"status": "ok", "games": len(GAMES)})


@app.post("/games")
def api_new():
    data = _json_object()
    if data is None:
        return _error("request body must be a JSON object")
    try:
        settings = GameSettings.from_dict(data)
    except (ValueError, TypeError) as e:
        return _error(str(e))

    game_id = uuid.uuid4().hex
    with _LOCK:
        GAMES[game_id] = commands.new_game(settings)
        state = commands.snapshot(GAMES[game_id])
    logger.info("created game %s (%dx%d, two_player=%s)",
                game_id, settings.board_size, settings.board_size, settings.two_player)
    return jsonify({"status": "ok", "game_id": game_id, "state": state}), 201


@app.get("/games/<game_id>")
def api_state(game_id: str):
    with _LOCK:
        state, err = _get_state(game_id)
        if err:
            return err
        return jsonify({"status": "ok", "state": commands.snapshot(state)})


@app.post("/games/<game_id>/pick")
def api_pick(game_id: str):
    data = _json_object()
    if data is None:
        return _error("request body must be a JSON object")
    try:
        r = int(data["row"])
        c = int(data["col"])
    except (KeyError, TypeError, ValueError):
        return _error("row and col are required integers")

    with _LOCK:
        state, err = _get_state(game_id)
        if err:
            return err
        try:
            return jsonify(commands.pick(state, (r, c)))
        except ValueError as e:
            return _error(str(e))


@app.post("/games/<game_id>/resolve")
def api_resolve(game_id: str):
    with _LOCK:
        state, err = _get_state(game_id)
        if err:
            return err
        return jsonify(commands.resolve_mismatch(state))


@app.post("/games/<game_id>/tick")
def api_tick(game_id: str):
    data = _json_object()
    if data is None:
        return _error("request body must be a JSON object")
    try:
        seconds = int(data.get("seconds", 1))
    except (TypeError, ValueError):
        return _error("seconds must be an integer")

    with _LOCK:
        state, err = _get_state(game_id)
        if err:
            return err
        try:
            return jsonify(commands.tick(state, seconds))
        except ValueError as e:
            return _error(str(e))


@app.post("/games/<game_id>/reset")
def api_reset(game_id: str):
    with _LOCK:
        state, err = _get_state(game_id)
        if err:
            return err
        result = commands.restart(state)
        result["state"] = commands.snapshot(state)
        return jsonify(result)


@app.delete("/games/<game_id>")
def api_delete(game_id: str):
    with _LOCK:
        if GAMES.pop(game_id, None) is None:
            return _error("game not found", 404)
    return jsonify({"status": "ok"})


def main() -> None:
    config = get_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # debug=True only for development
    app.run(host=config.host, port=config.port, debug=config.debug)


if __name__ == "__main__":
    main()
