# memory_match/engine.py
from __future__ import annotations
import logging
import math
import random
import time
from typing import Callable, Dict, List, Optional, Set, Tuple

from .board import Board, Coord

logger = logging.getLogger(__name__)

PLAYER_ONE = "Player 1"
PLAYER_TWO = "Player 2"
TIE = "Tie"


class MatchEngine:
    """
    Game state for one memory match: board, scores, turn and flip bookkeeping.

    The engine never schedules anything. Whoever drives it owns the
    countdown and the pause before mismatched cards are hidden, and must
    serialize calls into a single instance.

    Turn states:
      no pick yet -> first picked -> match   -> (change_turn) no pick yet, next player
                                  -> no match -> (reset_flipped_cards) no pick yet, same player
    """

    def __init__(self, board_size: int, time_limit: int, two_player: bool,
                 clock: Callable[[], float] = time.monotonic,
                 rng: Optional[random.Random] = None):
        if board_size <= 0 or board_size % 2 != 0:
            raise ValueError("board size must be a positive even number")

        self.board_size = board_size
        # informational only, the caller runs the clock
        self.time_limit = time_limit
        self.two_player = two_player
        self.players: Tuple[str, ...] = (PLAYER_ONE, PLAYER_TWO) if two_player else (PLAYER_ONE,)

        self._clock = clock
        self._rng = rng or random.Random()

        self._board: Board
        self._scores: Dict[str, int] = {}
        self.pairs_remaining = 0
        self.active_turn_index = 0
        self.first_pick: Optional[Coord] = None
        self.second_pick: Optional[Coord] = None
        self._matched: Set[Coord] = set()
        self.attempts_this_turn = 0
        self.turn_start_time = 0.0

        self.reset_game()

    def reset_game(self) -> None:
        """Deal a fresh board and zero every score, keeping the configuration."""
        self._board = Board(self.board_size, rng=self._rng)
        self._scores = {player: 0 for player in self.players}
        self.pairs_remaining = self._board.pair_count()
        self.active_turn_index = 0
        self.first_pick = None
        self.second_pick = None
        self._matched = set()
        self.attempts_this_turn = 0
        self.turn_start_time = self._clock()
        logger.debug("new %dx%d game for %d player(s)",
                     self.board_size, self.board_size, len(self.players))

    @property
    def board(self) -> List[List[int]]:
        return self._board.values()

    @property
    def revealed(self) -> List[List[bool]]:
        return self._board.revealed()

    @property
    def scores(self) -> Dict[str, int]:
        return dict(self._scores)

    def flip_card(self, row: int, col: int) -> bool:
        """
        Flip the card at (row, col). Returns True only when it completes a pair.

        A card that is off the board or already face-up is ignored.
        On a mismatch both cards stay face-up until reset_flipped_cards().
        """
        if not self.is_card_flippable(row, col):
            return False

        pos = (row, col)
        self._board.reveal(pos)

        # a pick left over from a match whose turn never changed starts a new attempt
        if self.first_pick is None or self.first_pick in self._matched:
            self.first_pick = pos
            self.second_pick = None
            self.attempts_this_turn = 0
            return False

        self.attempts_this_turn += 2
        previous = self.first_pick
        self.second_pick = previous
        self.first_pick = pos

        if self._board.value_at(pos) != self._board.value_at(previous):
            return False

        self.pairs_remaining -= 1
        self._matched.update((previous, pos))
        player = self.get_current_player_turn()
        points = self.calculate_score()
        self._scores[player] += points
        logger.debug("%s matched %s and %s for %d points", player, previous, pos, points)
        if self.is_game_over():
            logger.info("game over, winner %s", self.get_winner())
        return True

    def calculate_score(self) -> int:
        # Uses pairs_remaining after the decrement for the current match.
        elapsed = self._clock() - self.turn_start_time
        tiles_bonus = max(0, self.pairs_remaining * 2 * 20)
        time_bonus = max(0, (15 - elapsed) * 8)
        tries_bonus = max(0, (self.board_size * self.board_size - self.attempts_this_turn) * 10)
        difficulty_bonus = 1000 * self.board_size
        # halves round up
        return math.floor(tiles_bonus + time_bonus + tries_bonus + difficulty_bonus + 0.5)

    def reset_flipped_cards(self) -> None:
        """Turn the two cards of a failed attempt face-down again."""
        if self.first_pick is None or self.second_pick is None:
            return
        # a matched pair stays face-up for good
        if self.first_pick in self._matched or self.second_pick in self._matched:
            return
        self._board.hide(self.first_pick)
        self._board.hide(self.second_pick)
        self.first_pick = None
        self.second_pick = None

    def change_turn(self) -> None:
        self.active_turn_index = (self.active_turn_index + 1) % len(self.players)
        self.first_pick = None
        self.second_pick = None
        self.attempts_this_turn = 0
        self.turn_start_time = self._clock()

    def is_card_flippable(self, row: int, col: int) -> bool:
        return self._board.in_bounds((row, col)) and not self._board.is_revealed((row, col))

    def is_card_flipped(self, row: int, col: int) -> bool:
        return self._board.is_revealed((row, col))

    def is_card_part_of_turn(self, row: int, col: int) -> bool:
        return (row, col) in (self.first_pick, self.second_pick)

    def is_first_flip(self) -> bool:
        return self.first_pick is None

    def is_game_over(self) -> bool:
        return self.pairs_remaining == 0

    def get_current_player_turn(self) -> str:
        return self.players[self.active_turn_index]

    def get_score(self, player: str) -> int:
        return self._scores.get(player, 0)

    def get_winner(self) -> Tuple[str, int]:
        """Return (label, score); a two-player draw is ("Tie", score)."""
        if len(self.players) == 1:
            return (PLAYER_ONE, self._scores[PLAYER_ONE])
        one = self._scores[PLAYER_ONE]
        two = self._scores[PLAYER_TWO]
        if one == two:
            return (TIE, one)
        if one < two:
            return (PLAYER_TWO, two)
        return (PLAYER_ONE, one)

    def __str__(self) -> str:
        return self._board.to_string()
