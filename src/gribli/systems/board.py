from typing import List, Sequence, Tuple

from esper import World

from gribli.constants import GRID_COLS, GRID_ROWS, RESPAWN_MAX_ATTEMPTS
from gribli.components.board import Board
from gribli.events.bus import EventBus, EVENT_BOARD_BUILT
from gribli.systems.board_ops import generate_layout, get_board, populate_board, spawnable_kinds, swap_tiles
from gribli.systems.match import has_run
from gribli.systems.move_validator import has_legal_move
from gribli.systems.state_utils import ensure_idle
from gribli.world import get_rng

Position = Tuple[int, int]


def respawn_full_board(world: World, *, max_attempts: int = RESPAWN_MAX_ATTEMPTS) -> List[int]:
    """Fill the entire board with fresh tiles that contain no matches and at least one valid move."""

    board = get_board(world)
    kinds = spawnable_kinds(world)
    rng = get_rng(world)
    for _ in range(max_attempts):
        layout = generate_layout(kinds, board.rows, board.cols, rng)
        if layout is None:
            continue
        if has_run(layout):
            continue
        if not has_legal_move(layout):
            continue
        return populate_board(world, layout)

    raise RuntimeError("Unable to respawn board without matches and valid swaps")


class BoardSystem:
    """Owns the single Board entity and its (re)construction."""

    def __init__(self, world: World, event_bus: EventBus, rows: int = GRID_ROWS, cols: int = GRID_COLS,
                 *, build: bool = True):
        if rows < 1 or cols < 1:
            raise ValueError(f"Board must have at least one row and column, got {rows}x{cols}")
        self.world = world
        self.event_bus = event_bus
        self.board_entity = self.world.create_entity()
        self.world.add_component(self.board_entity, Board(rows=rows, cols=cols))
        if build:
            self.build(reason="initial")

    @property
    def board(self) -> Board:
        return self.world.component_for_entity(self.board_entity, Board)

    def build(self, reason: str = "new_game") -> List[int]:
        ensure_idle(self.world)
        entities = respawn_full_board(self.world)
        self._emit_built(reason, entities)
        return entities

    def load_layout(self, layout: Sequence[Sequence[str]], reason: str = "layout") -> List[int]:
        """Replace the board with an explicit layout (replays, editors, tests).

        The layout is taken as-is: it may contain runs or have no legal move.
        """
        ensure_idle(self.world)
        entities = populate_board(self.world, layout)
        self._emit_built(reason, entities)
        return entities

    def in_bounds(self, pos: Position) -> bool:
        return self.board.in_bounds(pos[0], pos[1])

    @staticmethod
    def is_adjacent(a: Position, b: Position) -> bool:
        ar, ac = a
        br, bc = b
        return abs(ar - br) + abs(ac - bc) == 1

    def swap_tiles(self, a: Position, b: Position) -> None:
        swap_tiles(self.world, a, b)

    def _emit_built(self, reason: str, entities: List[int]) -> None:
        board = self.board
        self.event_bus.emit(EVENT_BOARD_BUILT, rows=board.rows, cols=board.cols, reason=reason, entities=entities)
