# tests/conftest.py
import pytest


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


def find_pair(engine):
    """Return two coordinates holding the same face-down value."""
    seen = {}
    for r, row in enumerate(engine.board):
        for c, value in enumerate(row):
            if engine.is_card_flipped(r, c):
                continue
            if value in seen:
                return seen[value], (r, c)
            seen[value] = (r, c)
    raise AssertionError("no face-down pair left")


def find_mismatch(engine):
    """Return two face-down coordinates holding different values."""
    board = engine.board
    cells = [(r, c) for r in range(engine.board_size) for c in range(engine.board_size)
             if not engine.is_card_flipped(r, c)]
    first = cells[0]
    for pos in cells[1:]:
        if board[pos[0]][pos[1]] != board[first[0]][first[1]]:
            return first, pos
    raise AssertionError("no mismatched cells left")
