# memory_match/board.py
from __future__ import annotations
import random
from typing import List, Optional, Tuple

Coord = Tuple[int, int]  # (row, col)


def shuffled_pairs(size: int, rng: random.Random) -> List[List[int]]:
    """
    Fill a size x size grid from the multiset {1,1,2,2,...,N,N}, N = size*size/2.

    Each cell draws a random index from what is left and removes it,
    so every value lands exactly twice.
    """
    remaining: List[int] = []
    for value in range(1, size * size // 2 + 1):
        remaining.extend((value, value))

    grid: List[List[int]] = []
    for _ in range(size):
        row = []
        for _ in range(size):
            index = rng.randrange(len(remaining))
            row.append(remaining.pop(index))
        grid.append(row)
    return grid


class Board:
    """
    Mutable square Board ADT.

    Rep:
      - grid is size x size, size even and positive
      - every value in [1, size*size/2] appears exactly twice
      - revealed is a parallel size x size grid of bools
    Safety:
      - grid values never change after construction; callers only
        ever flip revealed flags through reveal/hide
    """

    def __init__(self, size: int, values: Optional[List[List[int]]] = None,
                 rng: Optional[random.Random] = None):
        if size <= 0 or size % 2 != 0:
            raise ValueError("board size must be a positive even number")

        self._size = size
        if values is None:
            values = shuffled_pairs(size, rng or random.Random())
        self._grid: List[List[int]] = [list(row) for row in values]
        self._revealed: List[List[bool]] = [[False] * size for _ in range(size)]

        self._check_rep()

    def _check_rep(self) -> None:
        assert len(self._grid) == self._size
        assert len(self._revealed) == self._size
        counts = {}
        for r in range(self._size):
            assert len(self._grid[r]) == self._size
            assert len(self._revealed[r]) == self._size
            for value in self._grid[r]:
                counts[value] = counts.get(value, 0) + 1
        assert sorted(counts) == list(range(1, self.pair_count() + 1))
        assert all(n == 2 for n in counts.values())

    @property
    def size(self) -> int:
        return self._size

    def pair_count(self) -> int:
        return self._size * self._size // 2

    def in_bounds(self, pos: Coord) -> bool:
        r, c = pos
        return 0 <= r < self._size and 0 <= c < self._size

    def value_at(self, pos: Coord) -> int:
        self._validate_coord(pos)
        return self._grid[pos[0]][pos[1]]

    def is_revealed(self, pos: Coord) -> bool:
        if not self.in_bounds(pos):
            return False
        return self._revealed[pos[0]][pos[1]]

    def reveal(self, pos: Coord) -> int:
        """Turn a card face-up and return its value."""
        self._validate_coord(pos)
        self._revealed[pos[0]][pos[1]] = True
        return self._grid[pos[0]][pos[1]]

    def hide(self, pos: Coord) -> None:
        self._validate_coord(pos)
        self._revealed[pos[0]][pos[1]] = False

    def values(self) -> List[List[int]]:
        return [list(row) for row in self._grid]

    def revealed(self) -> List[List[bool]]:
        return [list(row) for row in self._revealed]

    def to_string(self) -> str:
        width = len(str(self.pair_count()))
        lines = []
        for r in range(self._size):
            cells = []
            for c in range(self._size):
                if self._revealed[r][c]:
                    cells.append(str(self._grid[r][c]).rjust(width))
                else:
                    cells.append("*".rjust(width))
            lines.append(" ".join(cells))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.to_string()

    def _validate_coord(self, pos: Coord) -> None:
        if not self.in_bounds(pos):
            raise ValueError("invalid coordinate")
