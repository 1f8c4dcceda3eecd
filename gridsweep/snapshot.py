from __future__ import annotations
from typing import Dict, Union
import numpy as np

from .engine import Board, GameSession

# Board encoding for renderers and statistics:
# - open cells hold their adjacent mine count 0..8
# - concealed cells are CONCEALED_VALUE
# - flagged cells are FLAGGED_VALUE
CONCEALED_VALUE = -1
FLAGGED_VALUE = -2


def snapshot_array(source: Union[Board, GameSession]) -> np.ndarray:
    board = source.board if isinstance(source, GameSession) else source
    grid = np.full(len(board), CONCEALED_VALUE, dtype=np.int8)
    for idx, c in enumerate(board.snapshot()):
        if c.is_flagged:
            grid[idx] = FLAGGED_VALUE
        elif c.is_open:
            grid[idx] = c.count
    return grid.reshape(board.row_count, board.col_count)


def board_stats(grid: np.ndarray) -> Dict[str, int]:
    return {
        'open': int(np.count_nonzero(grid >= 0)),
        'flagged': int(np.count_nonzero(grid == FLAGGED_VALUE)),
        'concealed': int(np.count_nonzero(grid == CONCEALED_VALUE)),
    }
