import random
from typing import Iterable

from esper import World
from gribli.events.bus import EventBus
from gribli.constants import TOKEN_KINDS
from gribli.components.tile_type_registry import TileTypeRegistry
from gribli.components.tile_types import TileTypes
from gribli.components.score import Score
from gribli.components.cascade_state import CascadeState


def create_world(
    event_bus: EventBus,
    *,
    token_kinds: Iterable[str] | None = None,
    rng: random.Random | None = None,
    best_score: int = 0,
) -> World:
    """Create the ECS world shared by the board, resolution and score systems.

    The board itself is created by BoardSystem; this only registers the
    singleton resources (token set, score, cascade state) and the random source.
    """
    world = World()
    setattr(world, "random", rng or random.Random())

    kinds = TileTypes(types=list(TOKEN_KINDS if token_kinds is None else token_kinds))
    if not kinds.all_types():
        raise RuntimeError("Token set is empty; at least one tile kind is required")
    world.create_entity(TileTypeRegistry(), kinds)

    world.create_entity(Score(best=max(0, best_score)))
    world.create_entity(CascadeState())
    return world


def get_rng(world: World) -> random.Random:
    rng = getattr(world, "random", None)
    if rng is None:
        raise RuntimeError("World has no random source; build it with create_world")
    return rng
