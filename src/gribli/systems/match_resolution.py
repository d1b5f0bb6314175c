from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Tuple

from esper import World

from gribli.constants import BOMB_SPAWN_CHAIN, POINTS_PER_TILE
from gribli.events.bus import (EventBus, EVENT_TILE_SWAP_VALID, EVENT_TILE_SWAP_INVALID,
                               EVENT_MATCH_FOUND, EVENT_BOMB_DETONATED, EVENT_MATCH_CLEARED,
                               EVENT_CASCADE_STEP, EVENT_GRAVITY_APPLIED, EVENT_REFILL_COMPLETED,
                               EVENT_BOMB_SPAWNED, EVENT_TILES_SETTLED, EVENT_CASCADE_COMPLETE,
                               EVENT_BOARD_RESHUFFLED)
from gribli.systems.board import respawn_full_board
from gribli.systems.board_ops import (apply_gravity_and_refill, describe_tiles, kind_grid, mark_matched,
                                      settle_new_tiles, spawn_bomb, swap_tiles)
from gribli.systems.bomb import contains_bomb, expand_bombs
from gribli.systems.match import find_matches
from gribli.systems.move_validator import has_legal_move
from gribli.systems.state_utils import ensure_idle, get_or_create_cascade_state

Position = Tuple[int, int]


@dataclass(slots=True)
class RoundResult:
    """One match -> remove -> refill step of a cascade."""

    chain: int
    raw_count: int
    removed_count: int
    points: int
    bomb_fired: bool = False


@dataclass(slots=True)
class CascadeResult:
    chain_depth: int = 0
    score: int = 0
    bomb_fired: bool = False
    waves: List[FrozenSet[int]] = field(default_factory=list)
    rounds: List[RoundResult] = field(default_factory=list)
    reshuffled: bool = False


@dataclass(slots=True)
class MatchOutcome:
    """Result of a swap: either no match, or the cascade it triggered."""

    cascade: Optional[CascadeResult] = None

    @property
    def matched(self) -> bool:
        return self.cascade is not None

    @property
    def no_match(self) -> bool:
        return self.cascade is None


class MatchResolutionSystem:
    """Runs cascades to completion.

    States per swap: matching -> (expanding) -> removing -> scoring -> settling,
    looping back to matching until the board is stable, then a stalemate check
    that rebuilds the board when no legal move is left. Everything runs
    synchronously inside one call; events are emitted along the way so callers
    can pace animations after the fact.
    """
    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus

    def resolve_swap(self, src: Position, dst: Position) -> MatchOutcome:
        """Swap two tiles and resolve the resulting cascade.

        When the swap creates no match the board is left swapped and the
        outcome reports no match; reverting is the caller's decision.
        """
        ensure_idle(self.world)
        swap_tiles(self.world, src, dst)
        if not find_matches(self.world):
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst)
            return MatchOutcome()
        self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst)
        return MatchOutcome(cascade=self._run_cascade(source="swap"))

    def resolve_board(self, reason: str = "board_changed") -> CascadeResult:
        """Resolve whatever runs the board holds right now, then repair a stalemate."""
        ensure_idle(self.world)
        return self._run_cascade(source=reason)

    def _run_cascade(self, source: str) -> CascadeResult:
        state = get_or_create_cascade_state(self.world)
        state.active = True
        state.depth = 0
        state.source = source
        result = CascadeResult()
        try:
            chain = 1
            while True:
                raw = find_matches(self.world)
                if not raw:
                    break
                state.depth = chain
                self._resolve_round(raw, chain, result)
                chain += 1
                moves, new_tiles = apply_gravity_and_refill(self.world)
                self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=moves)
                self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=new_tiles)
                if chain >= BOMB_SPAWN_CHAIN:
                    bomb_entity = spawn_bomb(self.world)
                    if bomb_entity is not None:
                        self.event_bus.emit(EVENT_BOMB_SPAWNED, entity=bomb_entity)
                settled = settle_new_tiles(self.world)
                self.event_bus.emit(EVENT_TILES_SETTLED, entities=settled)
            result.chain_depth = chain - 1

            if not has_legal_move(kind_grid(self.world)):
                entities = respawn_full_board(self.world)
                result.reshuffled = True
                self.event_bus.emit(EVENT_BOARD_RESHUFFLED, reason="no_moves", entities=entities)
        finally:
            state.active = False

        if result.chain_depth:
            self.event_bus.emit(
                EVENT_CASCADE_COMPLETE,
                depth=result.chain_depth,
                score=result.score,
                bomb_fired=result.bomb_fired,
                source=state.source,
            )
        return result

    def _resolve_round(self, raw: set[int], chain: int, result: CascadeResult) -> None:
        self.event_bus.emit(EVENT_MATCH_FOUND, entities=sorted(raw), size=len(raw), depth=chain)
        bomb_fired = False
        removal = set(raw)
        if contains_bomb(self.world, raw):
            expansion = expand_bombs(self.world, raw)
            removal = expansion.expanded
            bomb_fired = expansion.fired
            result.waves.extend(expansion.waves)
            self.event_bus.emit(
                EVENT_BOMB_DETONATED,
                waves=[sorted(wave) for wave in expansion.waves],
                depth=chain,
            )
        # Captured before gravity deletes the tiles.
        types = describe_tiles(self.world, removal)
        mark_matched(self.world, removal)
        # Bomb-cleared extras are free: points use the raw run count.
        points = len(raw) * POINTS_PER_TILE * chain
        result.score += points
        result.bomb_fired = result.bomb_fired or bomb_fired
        result.rounds.append(RoundResult(
            chain=chain,
            raw_count=len(raw),
            removed_count=len(removal),
            points=points,
            bomb_fired=bomb_fired,
        ))
        self.event_bus.emit(EVENT_MATCH_CLEARED, entities=sorted(removal), types=types, depth=chain)
        self.event_bus.emit(
            EVENT_CASCADE_STEP,
            world=self.world,
            depth=chain,
            raw_count=len(raw),
            removed_count=len(removal),
            points=points,
            bomb_fired=bomb_fired,
        )
