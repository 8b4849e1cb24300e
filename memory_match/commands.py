# memory_match/commands.py
from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .board import Coord
from .config import GameSettings
from .engine import MatchEngine
from .helpers import get_time_str

logger = logging.getLogger(__name__)


@dataclass
class GameState:
    engine: MatchEngine
    settings: GameSettings
    time_remaining: int
    # set while a mismatched pair waits to be hidden, and once time runs out
    paused: bool = False
    best_score: int = 0
    # the mismatched pair waiting to be hidden, oldest pick first
    pending_hide: Optional[List[Coord]] = None


def new_game(settings: GameSettings, rng: Optional[random.Random] = None,
             clock: Optional[Callable[[], float]] = None) -> GameState:
    kwargs: Dict[str, Any] = {"rng": rng}
    if clock is not None:
        kwargs["clock"] = clock
    engine = MatchEngine(settings.board_size, settings.time_limit, settings.two_player, **kwargs)
    return GameState(engine=engine, settings=settings, time_remaining=settings.time_limit)


def is_finished(state: GameState) -> bool:
    return state.engine.is_game_over() or state.time_remaining <= 0


def _record_best(state: GameState) -> None:
    state.best_score = max(state.best_score, state.engine.get_winner()[1])


def pick(state: GameState, pos: Coord) -> Dict:
    """
    Flip a card for whoever's turn it is and apply the turn rules.
    Return a JSON-serializable dict for API response.
    """
    if state.time_remaining <= 0:
        raise ValueError("time is up")
    if state.paused:
        raise ValueError("board is paused; resolve the mismatch first")

    engine = state.engine
    r, c = pos
    if not engine.is_card_flippable(r, c):
        return {"status": "ok", "flipped": None, "match": None}

    first_flip = engine.is_first_flip()
    player = engine.get_current_player_turn()
    matched = engine.flip_card(r, c)
    result: Dict[str, Any] = {
        "status": "ok",
        "flipped": [r, c],
        "value": engine.board[r][c],
        "player": player,
        "match": None,
    }
    if first_flip:
        return result

    if matched:
        engine.change_turn()
        result.update(match=True, score=engine.get_score(player), game_over=engine.is_game_over())
        if engine.is_game_over():
            _record_best(state)
            result["winner"] = list(engine.get_winner())
        return result

    # Not a match: both stay face up until the caller resolves
    state.paused = True
    state.pending_hide = [engine.second_pick, engine.first_pick]
    result.update(match=False, pending_hide=[list(p) for p in state.pending_hide],
                  flip_wait=state.settings.flip_wait)
    return result


def resolve_mismatch(state: GameState) -> Dict:
    """If the last attempt was a mismatch, flip both back down."""
    engine = state.engine
    if engine.first_pick is None or engine.second_pick is None:
        return {"status": "ok", "resolved": False}

    hidden = [list(engine.second_pick), list(engine.first_pick)]
    engine.reset_flipped_cards()
    state.pending_hide = None
    if state.time_remaining > 0:
        state.paused = False
    return {"status": "ok", "resolved": True, "hidden": hidden}


def tick(state: GameState, seconds: int = 1) -> Dict:
    """Advance the countdown. At zero the board freezes and the winner is final."""
    if seconds < 0:
        raise ValueError("seconds must not be negative")
    if not is_finished(state):
        state.time_remaining = max(state.time_remaining - seconds, 0)
        if state.time_remaining == 0:
            state.paused = True
            logger.info("time is up")

    result: Dict[str, Any] = {
        "status": "ok",
        "time_remaining": state.time_remaining,
        "game_over": is_finished(state),
    }
    if result["game_over"]:
        result["winner"] = list(state.engine.get_winner())
    return result


def restart(state: GameState) -> Dict:
    """Deal a new board with the same settings, keeping the session best score."""
    if is_finished(state):
        _record_best(state)
    state.engine.reset_game()
    state.time_remaining = state.settings.time_limit
    state.paused = False
    state.pending_hide = None
    return {"status": "ok", "best_score": state.best_score}


def snapshot(state: GameState) -> Dict:
    """Everything a renderer needs; face-down values are withheld."""
    engine = state.engine
    values = engine.board
    cells = []
    for r in range(engine.board_size):
        row = []
        for c in range(engine.board_size):
            flipped = engine.is_card_flipped(r, c)
            row.append({
                "value": values[r][c] if flipped else None,
                "flipped": flipped,
                "in_turn": engine.is_card_part_of_turn(r, c),
            })
        cells.append(row)

    return {
        "board_size": engine.board_size,
        "cells": cells,
        "players": list(engine.players),
        "scores": engine.scores,
        "current_player": engine.get_current_player_turn(),
        "first_flip": engine.is_first_flip(),
        "pairs_remaining": engine.pairs_remaining,
        "time_limit": state.settings.time_limit,
        "time_remaining": state.time_remaining,
        "time_str": get_time_str(state.time_remaining),
        "paused": state.paused,
        "pending_hide": [list(p) for p in state.pending_hide or []],
        "flip_wait": state.settings.flip_wait,
        "game_over": is_finished(state),
        "winner": list(engine.get_winner()),
        "best_score": state.best_score,
    }
