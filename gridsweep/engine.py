from __future__ import annotations
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple, Optional, Iterable, FrozenSet

Coordinate = Tuple[int, int]


class CellState(Enum):
    CONCEALED = 'concealed'
    FLAGGED = 'flagged'
    OPEN = 'open'


@dataclass(frozen=True)
class Cell:
    state: CellState = CellState.CONCEALED
    # Adjacent mine count, only meaningful once the cell is open
    count: int = 0

    @classmethod
    def opened(cls, count: int) -> 'Cell':
        return cls(CellState.OPEN, count)

    @property
    def is_concealed(self) -> bool:
        return self.state is CellState.CONCEALED

    @property
    def is_flagged(self) -> bool:
        return self.state is CellState.FLAGGED

    @property
    def is_open(self) -> bool:
        return self.state is CellState.OPEN


CONCEALED = Cell()
FLAGGED = Cell(CellState.FLAGGED)


class Phase(Enum):
    UNINITIALIZED = 'uninitialized'
    ACTIVE = 'active'
    LOST = 'lost'
    EXITED = 'exited'


class Outcome(Enum):
    CONTINUED = 'continued'
    LOST = 'lost'
    EXITED = 'exited'


def to_index(row: int, col: int, col_count: int) -> int:
    return row * col_count + col


def to_coords(index: int, col_count: int) -> Coordinate:
    return divmod(index, col_count)


def neighbors(index: int, row_count: int, col_count: int) -> FrozenSet[int]:
    # Row and column are derived explicitly so the first and last cells of
    # adjacent rows never count as neighbours of each other.
    row, col = to_coords(index, col_count)
    found = set()
    for dr in (-1, 0, 1):
        for dc in (-1, 0, 1):
            if dr == 0 and dc == 0:
                continue
            nr, nc = row + dr, col + dc
            if 0 <= nr < row_count and 0 <= nc < col_count:
                found.add(to_index(nr, nc, col_count))
    return frozenset(found)


def place_mines(mine_count: int, origin: int, row_count: int, col_count: int,
                rng: Optional[random.Random] = None) -> FrozenSet[int]:
    rng = rng if rng is not None else random.Random()
    excluded = neighbors(origin, row_count, col_count) | {origin}
    candidates = [idx for idx in range(row_count * col_count) if idx not in excluded]
    # Small grids may not have room for every requested mine
    return frozenset(rng.sample(candidates, min(mine_count, len(candidates))))


class Board:
    def __init__(self, row_count: int, col_count: int):
        self.row_count = row_count
        self.col_count = col_count
        self.cells: List[Cell] = [CONCEALED] * (row_count * col_count)

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, index: int) -> Cell:
        return self.cells[index]

    def neighbors(self, index: int) -> FrozenSet[int]:
        return neighbors(index, self.row_count, self.col_count)

    def toggle_flag(self, index: int) -> Cell:
        c = self.cells[index]
        if c.is_flagged:
            self.cells[index] = CONCEALED
        elif c.is_concealed:
            self.cells[index] = FLAGGED
        return self.cells[index]

    def reveal_one(self, index: int, mines: FrozenSet[int]) -> Optional[int]:
        """Open a single concealed cell and return its adjacent mine count.

        Returns None when the cell is flagged or already open. A zero
        count tells the caller to keep cascading from this cell.
        """
        if not self.cells[index].is_concealed:
            return None
        count = len(self.neighbors(index) & mines)
        self.cells[index] = Cell.opened(count)
        return count

    def concealed_count(self) -> int:
        return sum(1 for c in self.cells if c.is_concealed)

    def snapshot(self) -> Tuple[Cell, ...]:
        return tuple(self.cells)

    def render_ascii(self) -> str:
        rows = []
        for r in range(self.row_count):
            row = []
            for c in self.cells[r * self.col_count:(r + 1) * self.col_count]:
                if c.is_flagged:
                    row.append('F')
                elif c.is_concealed:
                    row.append('#')
                else:
                    row.append(str(c.count))
            rows.append(' '.join(row))
        return '\n'.join(rows)


def reveal(board: Board, origin: int, mines: FrozenSet[int]) -> int:
    """Open ``origin`` and cascade through connected zero-count cells.

    Works in waves: every concealed cell of the current frontier is opened,
    and the concealed neighbours of the zero-count ones form the next
    frontier. Mines are not checked here. Returns the number of cells opened.
    """
    opened = 0
    frontier = {origin}
    while frontier:
        next_frontier = set()
        for idx in frontier:
            count = board.reveal_one(idx, mines)
            if count is None:
                continue
            opened += 1
            if count == 0:
                next_frontier.update(n for n in board.neighbors(idx) if board[n].is_concealed)
        frontier = next_frontier
    return opened


class GameSession:
    def __init__(self, row_count: int, col_count: int, mine_count: int = 1,
                 rng: Optional[random.Random] = None, mines: Optional[Iterable[int]] = None):
        assert row_count > 0 and col_count > 0
        assert mine_count >= 0
        self.row_count = row_count
        self.col_count = col_count
        self.mine_count = mine_count
        self.rng = rng if rng is not None else random.Random()
        self.board = Board(row_count, col_count)
        self._mines: Optional[FrozenSet[int]] = None
        self._phase = Phase.UNINITIALIZED
        if mines is not None:
            # Pre-seeded layout, mostly for tests and replays
            self._mines = frozenset(mines)
            self.mine_count = len(self._mines)
            self._phase = Phase.ACTIVE

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def mines(self) -> Optional[FrozenSet[int]]:
        return self._mines

    @property
    def is_over(self) -> bool:
        return self._phase in (Phase.LOST, Phase.EXITED)

    def _terminal_outcome(self) -> Outcome:
        return Outcome.LOST if self._phase is Phase.LOST else Outcome.EXITED

    def flag(self, index: int) -> None:
        if self.is_over:
            return
        self.board.toggle_flag(index)

    def open(self, index: int) -> Outcome:
        if self.is_over:
            return self._terminal_outcome()
        # A flag has to be removed before the cell can be opened
        if self.board[index].is_flagged:
            return Outcome.CONTINUED
        if self._mines is None:
            self._mines = place_mines(self.mine_count, index, self.row_count, self.col_count, self.rng)
            self._phase = Phase.ACTIVE
        if index in self._mines:
            self._phase = Phase.LOST
            return Outcome.LOST
        reveal(self.board, index, self._mines)
        return Outcome.CONTINUED

    def exit(self) -> Outcome:
        self._phase = Phase.EXITED
        return Outcome.EXITED

    def snapshot(self) -> Tuple[Cell, ...]:
        return self.board.snapshot()

    def render_ascii(self) -> str:
        return self.board.render_ascii()


def new_session(row_count: int, col_count: int, mine_count: int = 1,
                rng: Optional[random.Random] = None) -> GameSession:
    return GameSession(row_count, col_count, mine_count, rng=rng)
