from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems alive even when nobody holds the system.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# BOARD LIFECYCLE
# ============================================================================
EVENT_BOARD_BUILT = "board_built"              # payload: rows=int, cols=int, reason=str, entities=list[int]
EVENT_BOARD_RESHUFFLED = "board_reshuffled"    # payload: reason=str, entities=list[int]


# ============================================================================
# SWAPS
# ============================================================================
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_REVERTED = "tile_swap_reverted"    # payload: src=(r,c), dst=(r,c)


# ============================================================================
# CASCADE
# ============================================================================
EVENT_MATCH_FOUND = "match_found"                  # payload: entities=list[int], size=int, depth=int
EVENT_BOMB_DETONATED = "bomb_detonated"            # payload: waves=list[list[int]], depth=int
EVENT_MATCH_CLEARED = "match_cleared"              # payload: entities=list[int], types=list[(r,c,type_name)], depth=int
EVENT_CASCADE_STEP = "cascade_step"                # payload: world=World, depth=int, raw_count=int, removed_count=int, points=int, bomb_fired=bool
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=list[GravityMove]
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=list[int]
EVENT_BOMB_SPAWNED = "bomb_spawned"                # payload: entity=int
EVENT_TILES_SETTLED = "tiles_settled"              # payload: entities=list[int]
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int, score=int, bomb_fired=bool, source=str


# ============================================================================
# SCORE
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: score=int, best=int, delta=int, is_new_best=bool
