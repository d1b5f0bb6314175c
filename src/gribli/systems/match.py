from typing import List, Optional, Sequence, Set, Tuple

from esper import World

from gribli.constants import MIN_RUN_LENGTH
from gribli.systems.board_ops import get_board, kind_grid

Position = Tuple[int, int]
KindView = Sequence[Sequence[Optional[str]]]


def find_runs(kinds: KindView, min_length: int = MIN_RUN_LENGTH) -> List[List[Position]]:
    """Detect all maximal horizontal or vertical runs of length >= min_length.

    Rows are scanned left to right, then columns top to bottom. None never matches.
    """
    rows = len(kinds)
    cols = len(kinds[0]) if rows else 0
    runs: List[List[Position]] = []
    # Horizontal runs
    for r in range(rows):
        c = 0
        while c < cols:
            tval = kinds[r][c]
            end = c + 1
            while end < cols and tval is not None and kinds[r][end] == tval:
                end += 1
            if tval is not None and end - c >= min_length:
                runs.append([(r, cc) for cc in range(c, end)])
            c = end
    # Vertical runs
    for c in range(cols):
        r = 0
        while r < rows:
            tval = kinds[r][c]
            end = r + 1
            while end < rows and tval is not None and kinds[end][c] == tval:
                end += 1
            if tval is not None and end - r >= min_length:
                runs.append([(rr, c) for rr in range(r, end)])
            r = end
    return runs


def has_run(kinds: KindView, min_length: int = MIN_RUN_LENGTH) -> bool:
    """Short-circuit variant of find_runs."""
    rows = len(kinds)
    cols = len(kinds[0]) if rows else 0
    for r in range(rows):
        length = 1
        for c in range(1, cols):
            if kinds[r][c] is not None and kinds[r][c] == kinds[r][c - 1]:
                length += 1
                if length >= min_length:
                    return True
            else:
                length = 1
    for c in range(cols):
        length = 1
        for r in range(1, rows):
            if kinds[r][c] is not None and kinds[r][c] == kinds[r - 1][c]:
                length += 1
                if length >= min_length:
                    return True
            else:
                length = 1
    return False


def find_match_positions(kinds: KindView, min_length: int = MIN_RUN_LENGTH) -> Set[Position]:
    """Union of every run; a cell in both a horizontal and a vertical run appears once."""
    return {pos for run in find_runs(kinds, min_length) for pos in run}


def find_matches(world: World, min_length: int = MIN_RUN_LENGTH) -> Set[int]:
    """Return the ids of every tile that belongs to a run on the live board."""
    board = get_board(world)
    positions = find_match_positions(kind_grid(world), min_length)
    return {board.slots[row][col] for row, col in positions}
