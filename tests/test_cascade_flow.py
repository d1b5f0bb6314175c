from gribli.components.bomb import Bomb
from gribli.events.bus import (EVENT_BOMB_DETONATED, EVENT_BOMB_SPAWNED, EVENT_CASCADE_COMPLETE, EVENT_CASCADE_STEP,
                               EVENT_MATCH_CLEARED, EVENT_MATCH_FOUND, EVENT_REFILL_COMPLETED, EVENT_TILE_SWAP_VALID)
from gribli.systems.board_ops import is_settled, set_bomb
from tests.helpers import A, C, L, G, O, P, LAYOUT_5, has_any_run, kinds_of, make_engine


def _collect(bus, name):
    events = []
    bus.subscribe(name, lambda s, **k: events.append(k))
    return events


def test_two_step_cascade_scores_with_chain_multiplier():
    engine = make_engine(5, 5, layout=LAYOUT_5)
    # Round 1 refill completes a four-run on row 0; round 2 refill is quiet.
    engine.world.random.queue(G, G, G, P, C, L, A)
    steps = _collect(engine.event_bus, EVENT_CASCADE_STEP)
    complete = _collect(engine.event_bus, EVENT_CASCADE_COMPLETE)

    outcome = engine.try_swap((0, 2), (1, 2))

    assert outcome.matched
    cascade = outcome.cascade
    assert cascade.chain_depth == 2
    assert [r.raw_count for r in cascade.rounds] == [3, 4]
    assert [r.points for r in cascade.rounds] == [30, 80]
    assert cascade.score == 3 * 10 * 1 + 4 * 10 * 2 == 110
    assert not cascade.bomb_fired
    assert cascade.waves == []
    assert not cascade.reshuffled
    assert [evt['depth'] for evt in steps] == [1, 2]
    assert complete == [{'depth': 2, 'score': 110, 'bomb_fired': False, 'source': 'swap'}]
    assert engine.score == 110
    assert kinds_of(engine)[0] == [P, C, L, A, L]
    assert is_settled(engine.world)


def test_bomb_in_match_clears_neighbourhood_but_scores_raw_count():
    engine = make_engine(5, 5, layout=LAYOUT_5)
    set_bomb(engine.world, 0, 1)
    blast_ids = {engine.cell_at(r, c).id for r in (0, 1) for c in (0, 1, 2)}
    engine.world.random.queue(P, A, A, C, C, L)
    detonations = _collect(engine.event_bus, EVENT_BOMB_DETONATED)
    cleared = _collect(engine.event_bus, EVENT_MATCH_CLEARED)

    outcome = engine.try_swap((0, 2), (1, 2))

    cascade = outcome.cascade
    assert cascade.chain_depth == 1
    assert cascade.bomb_fired
    assert cascade.score == 30
    assert cascade.rounds[0].raw_count == 3
    assert cascade.rounds[0].removed_count == 6
    assert cascade.waves == [frozenset(blast_ids)]
    assert detonations[0]['waves'] == [sorted(blast_ids)]
    assert set(cleared[0]['entities']) == blast_ids
    assert {(r, c) for r, c, _ in cleared[0]['types']} == {(r, c) for r in (0, 1) for c in (0, 1, 2)}
    assert not any(cell.is_bomb for cell in engine.cells())


def test_deep_cascade_spawns_one_bomb_among_new_tiles():
    engine = make_engine(5, 5, layout=LAYOUT_5)
    engine.world.random.queue(G, G, G, A, A, A, P, O, C, L)
    refills = _collect(engine.event_bus, EVENT_REFILL_COMPLETED)
    spawned = _collect(engine.event_bus, EVENT_BOMB_SPAWNED)

    cascade = engine.try_swap((0, 2), (1, 2)).cascade

    assert cascade.chain_depth == 3
    assert [r.raw_count for r in cascade.rounds] == [3, 4, 3]
    assert cascade.score == 30 + 80 + 90
    assert len(spawned) == 1
    bomb = spawned[0]['entity']
    assert bomb in refills[-1]['new_tiles']
    bombs = [entity for entity, _ in engine.world.get_component(Bomb)]
    assert bombs == [bomb]
    assert bomb in {engine.cell_at(0, c).id for c in range(3)}
    assert kinds_of(engine)[0] == [O, C, L, P, L]


def test_cascade_events_in_order():
    engine = make_engine(5, 5, layout=LAYOUT_5)
    engine.world.random.queue(G, G, G, P, C, L, A)
    order = []
    for name in (EVENT_TILE_SWAP_VALID, EVENT_MATCH_FOUND, EVENT_MATCH_CLEARED, EVENT_CASCADE_STEP,
                 EVENT_REFILL_COMPLETED, EVENT_CASCADE_COMPLETE):
        engine.event_bus.subscribe(name, lambda s, _name=name, **k: order.append(_name))
    engine.try_swap((0, 2), (1, 2))
    round_events = [EVENT_MATCH_FOUND, EVENT_MATCH_CLEARED, EVENT_CASCADE_STEP, EVENT_REFILL_COMPLETED]
    assert order == [EVENT_TILE_SWAP_VALID] + round_events * 2 + [EVENT_CASCADE_COMPLETE]


def test_settled_board_after_cascade_has_no_runs_and_a_move():
    engine = make_engine(5, 5, layout=LAYOUT_5)
    engine.try_swap((0, 2), (1, 2))
    assert not has_any_run(kinds_of(engine))
    assert engine.has_legal_move()
    assert is_settled(engine.world)
