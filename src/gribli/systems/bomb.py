from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Set, Tuple

from esper import World

from gribli.constants import BOMB_RADIUS
from gribli.components.board import Board
from gribli.systems.board_ops import get_board, is_bomb, iter_slots

Position = Tuple[int, int]


@dataclass(slots=True)
class BombExpansion:
    """Tiles cleared once bombs are taken into account.

    waves holds one neighbourhood per detonation in scan order; it only paces
    presentation and carries no game logic.
    """
    expanded: Set[int] = field(default_factory=set)
    waves: List[FrozenSet[int]] = field(default_factory=list)

    @property
    def fired(self) -> bool:
        return bool(self.waves)


def blast_area(board: Board, row: int, col: int, radius: int = BOMB_RADIUS) -> List[Position]:
    """Square neighbourhood around (row, col), clipped at the board edges."""
    area: List[Position] = []
    for r in range(row - radius, row + radius + 1):
        for c in range(col - radius, col + radius + 1):
            if board.in_bounds(r, c):
                area.append((r, c))
    return area


def contains_bomb(world: World, entities: Iterable[int]) -> bool:
    return any(is_bomb(world, entity) for entity in entities)


def expand_bombs(world: World, initial: Iterable[int], radius: int = BOMB_RADIUS) -> BombExpansion:
    """Grow initial through every bomb it contains, transitively.

    Each pass scans the board row-major; a bomb that is in the expanded set
    and not yet processed adds its whole neighbourhood and records it as one
    wave. Passes repeat until one adds nothing new.
    """
    board = get_board(world)
    expanded: Set[int] = set(initial)
    processed: Set[int] = set()
    waves: List[FrozenSet[int]] = []
    changed = True
    while changed:
        changed = False
        for row, col, entity in iter_slots(board):
            if entity in processed or entity not in expanded or not is_bomb(world, entity):
                continue
            processed.add(entity)
            area = frozenset(board.slots[r][c] for r, c in blast_area(board, row, col, radius))
            if not area <= expanded:
                changed = True
            expanded |= area
            waves.append(area)
    return BombExpansion(expanded=expanded, waves=waves)
