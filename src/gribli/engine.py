"""Synchronous facade over the board, resolution and score systems.

The engine never waits and never schedules anything. A UI drives it with
``try_swap`` and reads ``snapshot()`` (or listens on ``event_bus``) to animate
what happened; when to accept input, timers and persistence stay outside.
"""
from __future__ import annotations

import random
from typing import Iterable, List, Optional, Sequence, Tuple

from gribli.constants import GRID_COLS, GRID_ROWS
from gribli.events.bus import EventBus, EVENT_TILE_SWAP_REQUEST, EVENT_TILE_SWAP_REVERTED
from gribli.systems.board import BoardSystem
from gribli.systems.board_ops import CellSnapshot, board_snapshot, get_entity_at, kind_grid, snapshot_entity
from gribli.systems.match_resolution import CascadeResult, MatchOutcome, MatchResolutionSystem
from gribli.systems.move_validator import find_hint, find_valid_swaps, has_legal_move
from gribli.systems.score import ScoreSystem
from gribli.systems.state_utils import get_or_create_score
from gribli.world import create_world

Position = Tuple[int, int]

__all__ = ["GameEngine", "CellSnapshot"]


class GameEngine:
    def __init__(
        self,
        rows: int = GRID_ROWS,
        cols: int = GRID_COLS,
        *,
        rng: random.Random | None = None,
        event_bus: EventBus | None = None,
        token_kinds: Iterable[str] | None = None,
        best_score: int = 0,
    ):
        self.event_bus = event_bus or EventBus()
        self.world = create_world(self.event_bus, token_kinds=token_kinds, rng=rng, best_score=best_score)
        self.board_system = BoardSystem(self.world, self.event_bus, rows, cols)
        self.score_system = ScoreSystem(self.world, self.event_bus)
        self.resolution = MatchResolutionSystem(self.world, self.event_bus)

    @property
    def rows(self) -> int:
        return self.board_system.board.rows

    @property
    def cols(self) -> int:
        return self.board_system.board.cols

    @property
    def score(self) -> int:
        return get_or_create_score(self.world).current

    @property
    def best_score(self) -> int:
        return get_or_create_score(self.world).best

    @property
    def is_new_best(self) -> bool:
        return get_or_create_score(self.world).is_new_best

    def build(self) -> List[List[CellSnapshot]]:
        """Fill the board with fresh tiles: no runs, at least one legal move."""
        self.board_system.build()
        return self.snapshot()

    def reset(self) -> List[List[CellSnapshot]]:
        """Start a new game: score back to zero (best kept) and a fresh board."""
        self.board_system.build()
        self.score_system.reset()
        return self.snapshot()

    def load_layout(self, layout: Sequence[Sequence[str]]) -> List[List[CellSnapshot]]:
        self.board_system.load_layout(layout)
        return self.snapshot()

    def try_swap(self, src: Position, dst: Position, *, revert: bool = True) -> MatchOutcome:
        """Swap two adjacent tiles and resolve the cascade it triggers.

        Out-of-range or non-adjacent positions are a caller bug and raise
        ValueError. On no match the tiles are swapped back unless revert is
        False, in which case the caller owns the revert.
        """
        self._require_adjacent(src, dst)
        self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=src, dst=dst)
        outcome = self.resolution.resolve_swap(src, dst)
        if outcome.no_match and revert:
            self.board_system.swap_tiles(src, dst)
            self.event_bus.emit(EVENT_TILE_SWAP_REVERTED, src=src, dst=dst)
        return outcome

    def resolve_board(self) -> CascadeResult:
        return self.resolution.resolve_board()

    def has_legal_move(self) -> bool:
        return has_legal_move(kind_grid(self.world))

    def find_hint(self) -> Optional[Tuple[Position, Position]]:
        return find_hint(kind_grid(self.world))

    def find_valid_swaps(self) -> List[Tuple[Position, Position]]:
        return find_valid_swaps(kind_grid(self.world))

    def snapshot(self) -> List[List[CellSnapshot]]:
        return board_snapshot(self.world)

    def cells(self) -> List[CellSnapshot]:
        return [cell for row in self.snapshot() for cell in row]

    def cell_at(self, row: int, col: int) -> CellSnapshot:
        return snapshot_entity(self.world, get_entity_at(self.world, row, col))

    def _require_adjacent(self, src: Position, dst: Position) -> None:
        for pos in (src, dst):
            if not self.board_system.in_bounds(pos):
                raise ValueError(f"Position {pos} is outside the {self.rows}x{self.cols} board")
        if not BoardSystem.is_adjacent(src, dst):
            raise ValueError(f"Positions {src} and {dst} are not adjacent")
