from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from esper import World

from gribli.components.board import Board
from gribli.components.board_position import BoardPosition
from gribli.components.bomb import Bomb
from gribli.components.match_flag import MatchFlag
from gribli.components.tile import TileType
from gribli.components.tile_type_registry import TileTypeRegistry
from gribli.components.tile_types import TileTypes
from gribli.world import get_rng

Position = Tuple[int, int]
KindGrid = List[List[str]]
TypeEntry = Tuple[int, int, str]


@dataclass(slots=True)
class GravityMove:
    entity: int
    source: Position
    target: Position
    type_name: str


@dataclass(frozen=True, slots=True)
class CellSnapshot:
    """Read-only view of one tile for renderers and tests."""

    id: int
    kind: str
    row: int
    col: int
    is_matched: bool
    is_bomb: bool


def get_tile_registry(world: World) -> TileTypes:
    for entity, _ in world.get_component(TileTypeRegistry):
        return world.component_for_entity(entity, TileTypes)
    raise RuntimeError("TileTypes definitions not found")


def spawnable_kinds(world: World) -> List[str]:
    kinds = get_tile_registry(world).all_types()
    if not kinds:
        raise RuntimeError("Token set is empty; cannot spawn tiles")
    return kinds


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board not found; create a BoardSystem first")


def _check_in_bounds(board: Board, pos: Position) -> None:
    row, col = pos
    if not board.in_bounds(row, col):
        raise IndexError(f"Position {pos} is outside the {board.rows}x{board.cols} board")


def get_entity_at(world: World, row: int, col: int) -> int:
    """Return the tile entity owning slot (row, col)."""
    board = get_board(world)
    _check_in_bounds(board, (row, col))
    return board.slots[row][col]


def tile_kind(world: World, entity: int) -> str:
    return world.component_for_entity(entity, TileType).type_name


def is_bomb(world: World, entity: int) -> bool:
    return world.has_component(entity, Bomb)


def is_matched(world: World, entity: int) -> bool:
    return world.component_for_entity(entity, MatchFlag).matched


def is_descending(world: World, entity: int) -> bool:
    return world.component_for_entity(entity, BoardPosition).row < 0


def set_bomb(world: World, row: int, col: int, value: bool = True) -> int:
    """Flag or unflag the tile at (row, col) as a bomb and return its entity."""
    entity = get_entity_at(world, row, col)
    if value and not world.has_component(entity, Bomb):
        world.add_component(entity, Bomb())
    elif not value and world.has_component(entity, Bomb):
        world.remove_component(entity, Bomb)
    return entity


def iter_slots(board: Board) -> Iterable[Tuple[int, int, int]]:
    """Yield (row, col, entity) in row-major slot order."""
    for row in range(board.rows):
        for col in range(board.cols):
            yield row, col, board.slots[row][col]


def kind_grid(world: World) -> KindGrid:
    """Return a detached kind-only copy of the board in slot order."""
    board = get_board(world)
    return [
        [world.component_for_entity(entity, TileType).type_name for entity in row_slots]
        for row_slots in board.slots
    ]


def generate_layout(
    kinds: Sequence[str],
    rows: int,
    cols: int,
    rng: random.Random,
) -> Optional[KindGrid]:
    """Pick a kind for every cell so that no choice completes a run of three.

    Only the two cells to the left and the two cells above are considered.
    Returns None when some cell has no legal kind left (possible with fewer
    than three kinds); callers retry with a fresh layout.
    """
    if not kinds:
        raise RuntimeError("Token set is empty; cannot build a board")
    layout: KindGrid = []
    for row in range(rows):
        row_values: List[str] = []
        for col in range(cols):
            available = list(kinds)
            if col >= 2:
                left1 = row_values[col - 1]
                left2 = row_values[col - 2]
                if left1 == left2 and left1 in available:
                    available = [t for t in available if t != left1]
            if row >= 2:
                up1 = layout[row - 1][col]
                up2 = layout[row - 2][col]
                if up1 == up2 and up1 in available:
                    available = [t for t in available if t != up1]
            if not available:
                return None
            row_values.append(rng.choice(available))
        layout.append(row_values)
    return layout


def create_tile(world: World, type_name: str, row: int, col: int) -> int:
    return world.create_entity(BoardPosition(row=row, col=col), TileType(type_name=type_name), MatchFlag())


def populate_board(world: World, layout: Sequence[Sequence[str]]) -> List[int]:
    """Replace every tile on the board with fresh tiles following layout.

    All previous tile entities are deleted, so every cell gets a new id.
    Returns the new entities in row-major order.
    """
    board = get_board(world)
    if len(layout) != board.rows or any(len(row) != board.cols for row in layout):
        raise ValueError(f"Layout does not match the {board.rows}x{board.cols} board")
    registry = get_tile_registry(world)
    for row_values in layout:
        for type_name in row_values:
            if type_name not in registry:
                raise ValueError(f"Unknown tile kind {type_name!r}")
    for row_slots in board.slots:
        for entity in row_slots:
            world.delete_entity(entity, immediate=True)
    created: List[int] = []
    slots: List[List[int]] = []
    for row in range(board.rows):
        row_slots: List[int] = []
        for col in range(board.cols):
            entity = create_tile(world, layout[row][col], row, col)
            row_slots.append(entity)
            created.append(entity)
        slots.append(row_slots)
    board.slots = slots
    return created


def swap_tiles(world: World, src: Position, dst: Position) -> None:
    """Exchange the tiles in two slots; each tile keeps its id and takes the other slot's coordinates.

    Adjacency is not checked here.
    """
    board = get_board(world)
    _check_in_bounds(board, src)
    _check_in_bounds(board, dst)
    src_entity = board.slots[src[0]][src[1]]
    dst_entity = board.slots[dst[0]][dst[1]]
    board.slots[src[0]][src[1]] = dst_entity
    board.slots[dst[0]][dst[1]] = src_entity
    src_pos: BoardPosition = world.component_for_entity(src_entity, BoardPosition)
    dst_pos: BoardPosition = world.component_for_entity(dst_entity, BoardPosition)
    src_pos.row, src_pos.col = dst
    dst_pos.row, dst_pos.col = src


def mark_matched(world: World, entities: Iterable[int]) -> List[int]:
    """Flag every board tile whose id is in entities. Idempotent."""
    targets: Set[int] = set(entities)
    board = get_board(world)
    flagged: List[int] = []
    for _, _, entity in iter_slots(board):
        if entity in targets:
            world.component_for_entity(entity, MatchFlag).matched = True
            flagged.append(entity)
    return flagged


def matched_entities(world: World) -> List[int]:
    board = get_board(world)
    return [entity for _, _, entity in iter_slots(board) if is_matched(world, entity)]


def describe_tiles(world: World, entities: Iterable[int]) -> List[TypeEntry]:
    """Return sorted (row, col, type_name) entries for the given tiles."""
    entries: List[TypeEntry] = []
    for entity in entities:
        position = world.component_for_entity(entity, BoardPosition)
        entries.append((position.row, position.col, tile_kind(world, entity)))
    return sorted(entries)


def apply_gravity_and_refill(world: World) -> Tuple[List[GravityMove], List[int]]:
    """Drop surviving tiles to the bottom of each column and spawn new tiles above them.

    Surviving tiles keep their relative order. Matched tiles are deleted.
    New tiles get the vacated top slots but a negative row (row - vacated count)
    until settle_new_tiles runs. New kinds are random and may form runs.
    """
    board = get_board(world)
    kinds = spawnable_kinds(world)
    rng = get_rng(world)
    moves: List[GravityMove] = []
    spawned: List[int] = []
    for col in range(board.cols):
        surviving: List[int] = []
        removed: List[int] = []
        for row in reversed(range(board.rows)):
            entity = board.slots[row][col]
            if is_matched(world, entity):
                removed.append(entity)
            else:
                surviving.append(entity)
        if not removed:
            continue
        for index, entity in enumerate(surviving):
            new_row = board.rows - 1 - index
            position: BoardPosition = world.component_for_entity(entity, BoardPosition)
            if position.row != new_row:
                moves.append(GravityMove(
                    entity=entity,
                    source=(position.row, col),
                    target=(new_row, col),
                    type_name=tile_kind(world, entity),
                ))
            position.row = new_row
            position.col = col
            board.slots[new_row][col] = entity
        for entity in removed:
            world.delete_entity(entity, immediate=True)
        empty_count = board.rows - len(surviving)
        for row in range(empty_count):
            entity = create_tile(world, rng.choice(kinds), row - empty_count, col)
            board.slots[row][col] = entity
            spawned.append(entity)
    return moves, spawned


def descending_entities(world: World) -> List[int]:
    board = get_board(world)
    return [entity for _, _, entity in iter_slots(board) if is_descending(world, entity)]


def settle_new_tiles(world: World) -> List[int]:
    """Snap every descending tile to its slot row."""
    board = get_board(world)
    settled: List[int] = []
    for row, _, entity in iter_slots(board):
        position: BoardPosition = world.component_for_entity(entity, BoardPosition)
        if position.row < 0:
            position.row = row
            settled.append(entity)
    return settled


def spawn_bomb(world: World) -> int | None:
    """Turn one random descending tile into a bomb. No-op when nothing is descending."""
    candidates = descending_entities(world)
    if not candidates:
        return None
    entity = get_rng(world).choice(candidates)
    if not world.has_component(entity, Bomb):
        world.add_component(entity, Bomb())
    return entity


def is_settled(world: World) -> bool:
    board = get_board(world)
    for _, _, entity in iter_slots(board):
        if is_matched(world, entity) or is_descending(world, entity):
            return False
    return True


def snapshot_entity(world: World, entity: int) -> CellSnapshot:
    position: BoardPosition = world.component_for_entity(entity, BoardPosition)
    return CellSnapshot(
        id=entity,
        kind=tile_kind(world, entity),
        row=position.row,
        col=position.col,
        is_matched=is_matched(world, entity),
        is_bomb=is_bomb(world, entity),
    )


def board_snapshot(world: World) -> List[List[CellSnapshot]]:
    """Return every tile as CellSnapshot, one list per slot row."""
    board = get_board(world)
    return [[snapshot_entity(world, entity) for entity in row_slots] for row_slots in board.slots]
