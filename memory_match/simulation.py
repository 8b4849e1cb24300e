# memory_match/simulation.py
# Bot players playing complete games against the engine.

from __future__ import annotations

import argparse
import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from . import commands
from .board import Coord
from .config import DIFFICULTIES, GameSettings, get_config

logger = logging.getLogger(__name__)


@dataclass
class Stats:
    total_flips: int = 0
    successful_matches: int = 0
    mismatches: int = 0
    turns: int = 0
    winner: Optional[List] = None
    scores: Dict[str, int] = field(default_factory=dict)


class Bot:
    """
    Picks cards for one player.

    With probability `recall` the bot remembers a card it has seen and
    uses that memory to complete a pair; otherwise it plays blind.
    """

    def __init__(self, recall: float, rng: random.Random):
        self.recall = recall
        self.rng = rng
        self.seen: Dict[Coord, int] = {}

    def observe(self, pos: Coord, value: int) -> None:
        if self.rng.random() < self.recall:
            self.seen[pos] = value

    def forget(self, pos: Coord) -> None:
        self.seen.pop(pos, None)

    def choose(self, state: commands.GameState, first: Optional[Coord]) -> Coord:
        engine = state.engine
        hidden = [(r, c) for r in range(engine.board_size) for c in range(engine.board_size)
                  if engine.is_card_flippable(r, c)]
        known = {pos: v for pos, v in self.seen.items() if pos in hidden}

        if first is None:
            by_value: Dict[int, List[Coord]] = {}
            for pos, value in known.items():
                by_value.setdefault(value, []).append(pos)
            for positions in by_value.values():
                if len(positions) == 2:
                    return positions[0]
        else:
            first_value = engine.board[first[0]][first[1]]
            for pos, value in known.items():
                if value == first_value:
                    return pos

        unknown = [pos for pos in hidden if pos not in known]
        return self.rng.choice(unknown or hidden)


def play_game(settings: GameSettings, recall: float = 0.5, seed: Optional[int] = None,
              max_turns: int = 10_000) -> Stats:
    """Play one game to the end, one bot per player, and return its stats."""
    rng = random.Random(seed)
    state = commands.new_game(settings, rng=random.Random(rng.random()))
    engine = state.engine
    bots = {player: Bot(recall, random.Random(rng.random())) for player in engine.players}
    stats = Stats()

    while not engine.is_game_over() and stats.turns < max_turns:
        stats.turns += 1
        player = engine.get_current_player_turn()
        bot = bots[player]

        first = bot.choose(state, None)
        result = commands.pick(state, first)
        stats.total_flips += 1
        for other in bots.values():
            other.observe(first, result["value"])

        second = bot.choose(state, first)
        result = commands.pick(state, second)
        stats.total_flips += 1
        for other in bots.values():
            other.observe(second, result["value"])

        if result["match"]:
            stats.successful_matches += 1
            for other in bots.values():
                other.forget(first)
                other.forget(second)
        else:
            stats.mismatches += 1
            commands.resolve_mismatch(state)

    stats.scores = engine.scores
    stats.winner = list(engine.get_winner())
    logger.debug("game finished after %d turns: %s", stats.turns, stats.winner)
    return stats


async def simulation_main(games: int, settings: GameSettings, recall: float,
                          seed: Optional[int] = None) -> List[Stats]:
    print("MEMORY MATCH - SIMULATION")
    print(f"\nPlaying {games} game(s) on a {settings.board_size}x{settings.board_size} board, "
          f"{'two players' if settings.two_player else 'one player'}, recall {recall}\n")

    colors = ["\x1b[31m", "\x1b[32m", "\x1b[33m", "\x1b[34m"]  # red/green/yellow/blue
    reset = "\x1b[0m"

    async def run(game_number: int) -> Stats:
        game_seed = None if seed is None else seed + game_number
        stats = await asyncio.to_thread(play_game, settings, recall, game_seed)
        color = colors[game_number % len(colors)]
        label, score = stats.winner
        print(f"{color}[game{game_number}] {stats.turns} turns, {stats.successful_matches} matches, "
              f"{stats.mismatches} misses -> {label} with {score}{reset}")
        return stats

    results = await asyncio.gather(*(run(i) for i in range(games)))

    print("\nSIMULATION COMPLETE")
    print(f"Total flips: {sum(s.total_flips for s in results)}")
    print(f"Successful matches: {sum(s.successful_matches for s in results)}")
    print(f"Mismatches: {sum(s.mismatches for s in results)}")
    print(f"Best score: {max(s.winner[1] for s in results)}")
    return list(results)


def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(description="Simulate memory match games with bot players")
    ap.add_argument("--games", type=int, default=4)
    ap.add_argument("--difficulty", choices=sorted(DIFFICULTIES), default="EASY")
    ap.add_argument("--two-player", action="store_true")
    ap.add_argument("--recall", type=float, default=0.5)
    ap.add_argument("--seed", type=int, default=None)
    a = ap.parse_args(argv)

    logging.basicConfig(
        level=get_config().log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    settings = GameSettings(board_size=DIFFICULTIES[a.difficulty], two_player=a.two_player)
    asyncio.run(simulation_main(a.games, settings, a.recall, a.seed))


if __name__ == "__main__":
    main()
