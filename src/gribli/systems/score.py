from esper import World

from gribli.events.bus import EventBus, EVENT_CASCADE_STEP, EVENT_SCORE_CHANGED
from gribli.systems.state_utils import get_or_create_score


class ScoreSystem:
    """Accumulates cascade points into the session score.

    Logic:
      - On EVENT_CASCADE_STEP from this world: add the round's points, raise best
        when exceeded. Steps from other worlds sharing the bus are ignored.
      - reset(): new game; the best score is kept.
    The best score only lives in memory; loading/saving it is up to the caller.
    """
    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_CASCADE_STEP, self.on_cascade_step)

    def on_cascade_step(self, sender, **kwargs):
        if kwargs.get('world') is not self.world:
            return
        points = kwargs.get('points', 0)
        if not points:
            return
        score = get_or_create_score(self.world)
        score.add(points)
        self._emit_changed(points)

    def reset(self) -> None:
        score = get_or_create_score(self.world)
        score.reset()
        self._emit_changed(0)

    def _emit_changed(self, delta: int) -> None:
        score = get_or_create_score(self.world)
        self.event_bus.emit(
            EVENT_SCORE_CHANGED,
            score=score.current,
            best=score.best,
            delta=delta,
            is_new_best=score.is_new_best,
        )
