"""Game settings and process configuration."""
from __future__ import annotations
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict

# seconds
TIME_LIMITS: Dict[str, int] = {
    "THREE": 180,
    "FIVE": 300,
    "SEVEN": 420,
    "TEN": 600,
}

# board size, n x n
DIFFICULTIES: Dict[str, int] = {
    "EASY": 4,
    "MEDIUM": 6,
    "HARD": 8,
}

DEFAULT_TIME_LIMIT = TIME_LIMITS["FIVE"]
DEFAULT_BOARD_SIZE = DIFFICULTIES["EASY"]

# how long a mismatched pair stays visible before it is hidden
FLIP_WAIT_SECONDS = 1.0

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off", "")


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
    raise ValueError(f"not a boolean: {value!r}")


@dataclass(frozen=True)
class GameSettings:
    board_size: int = DEFAULT_BOARD_SIZE
    time_limit: int = DEFAULT_TIME_LIMIT
    two_player: bool = False
    flip_wait: float = FLIP_WAIT_SECONDS

    def __post_init__(self) -> None:
        if self.board_size <= 0 or self.board_size % 2 != 0:
            raise ValueError("board_size must be a positive even number")
        if self.time_limit <= 0:
            raise ValueError("time_limit must be positive")
        if self.flip_wait < 0:
            raise ValueError("flip_wait must not be negative")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameSettings":
        """
        Build settings from a JSON body.

        Accepts "difficulty" (EASY/MEDIUM/HARD) or "board_size", and
        "time_limit" as a name (THREE/FIVE/SEVEN/TEN) or seconds.
        """
        if not isinstance(data, dict):
            raise ValueError("settings must be a JSON object")
        if "difficulty" in data:
            name = str(data["difficulty"]).upper()
            if name not in DIFFICULTIES:
                raise ValueError(f"unknown difficulty: {data['difficulty']}")
            board_size = DIFFICULTIES[name]
        else:
            board_size = int(data.get("board_size", DEFAULT_BOARD_SIZE))

        limit = data.get("time_limit", DEFAULT_TIME_LIMIT)
        if isinstance(limit, str) and not limit.isdigit():
            if limit.upper() not in TIME_LIMITS:
                raise ValueError(f"unknown time limit: {limit}")
            time_limit = TIME_LIMITS[limit.upper()]
        else:
            time_limit = int(limit)

        return cls(
            board_size=board_size,
            time_limit=time_limit,
            two_player=parse_bool(data.get("two_player", False)),
            flip_wait=float(data.get("flip_wait", FLIP_WAIT_SECONDS)),
        )


@dataclass(frozen=True)
class Config:
    host: str
    port: int
    debug: bool
    log_level: str


@lru_cache
def get_config() -> Config:
    return Config(
        host=os.environ.get("MEMORY_MATCH_HOST", "127.0.0.1"),
        port=int(os.environ.get("MEMORY_MATCH_PORT", "5000")),
        debug=parse_bool(os.environ.get("MEMORY_MATCH_DEBUG", "0")),
        log_level=os.environ.get("MEMORY_MATCH_LOG_LEVEL", "INFO").upper(),
    )
