from typing import List, Optional, Sequence, Tuple

from gribli.constants import MIN_RUN_LENGTH
from gribli.systems.match import has_run

Position = Tuple[int, int]
Swap = Tuple[Position, Position]


def _candidate_swaps(rows: int, cols: int):
    for row in range(rows):
        for col in range(cols):
            if col + 1 < cols:
                yield (row, col), (row, col + 1)
            if row + 1 < rows:
                yield (row, col), (row + 1, col)


def predict_swap_creates_match(
    kinds: Sequence[Sequence[str]],
    src: Position,
    dst: Position,
    min_length: int = MIN_RUN_LENGTH,
) -> bool:
    """Return True if swapping src/dst in a copy of kinds leaves any run on the board."""
    view = [list(row) for row in kinds]
    return _swap_has_run(view, src, dst, min_length)


def _swap_has_run(view: List[List[str]], src: Position, dst: Position, min_length: int) -> bool:
    (r1, c1), (r2, c2) = src, dst
    view[r1][c1], view[r2][c2] = view[r2][c2], view[r1][c1]
    try:
        return has_run(view, min_length)
    finally:
        view[r1][c1], view[r2][c2] = view[r2][c2], view[r1][c1]


def iter_valid_swaps(kinds: Sequence[Sequence[str]], min_length: int = MIN_RUN_LENGTH):
    """Yield legal swaps in scan order: each cell with its right neighbour, then the one below.

    Works on a private copy of kinds; the caller's view and the live board are never touched.
    Only meaningful on a settled board.
    """
    view = [list(row) for row in kinds]
    rows = len(view)
    cols = len(view[0]) if rows else 0
    for src, dst in _candidate_swaps(rows, cols):
        if _swap_has_run(view, src, dst, min_length):
            yield src, dst


def find_valid_swaps(kinds: Sequence[Sequence[str]], min_length: int = MIN_RUN_LENGTH) -> List[Swap]:
    return list(iter_valid_swaps(kinds, min_length))


def find_hint(kinds: Sequence[Sequence[str]], min_length: int = MIN_RUN_LENGTH) -> Optional[Swap]:
    return next(iter_valid_swaps(kinds, min_length), None)


def has_legal_move(kinds: Sequence[Sequence[str]], min_length: int = MIN_RUN_LENGTH) -> bool:
    return find_hint(kinds, min_length) is not None
