from esper import World

from gribli.components.cascade_state import CascadeState
from gribli.components.score import Score


def get_or_create_cascade_state(world: World) -> CascadeState:
    """Return the shared CascadeState component, creating it if absent."""
    existing = list(world.get_component(CascadeState))
    if existing:
        return existing[0][1]
    world.create_entity(CascadeState())
    return list(world.get_component(CascadeState))[0][1]


def get_or_create_score(world: World) -> Score:
    """Return the shared Score component, creating it if absent."""
    existing = list(world.get_component(Score))
    if existing:
        return existing[0][1]
    world.create_entity(Score())
    return list(world.get_component(Score))[0][1]


def ensure_idle(world: World) -> None:
    """Raise RuntimeError while a cascade is being resolved on this world."""
    if get_or_create_cascade_state(world).active:
        raise RuntimeError("A cascade is already being resolved")
