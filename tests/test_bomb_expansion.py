from gribli.systems.board_ops import get_entity_at, set_bomb
from gribli.systems.bomb import blast_area, contains_bomb, expand_bombs
from tests.helpers import base_layout, load_layout


def _ids(world, positions):
    return {get_entity_at(world, r, c) for r, c in positions}


def _block(rows, cols):
    return [(r, c) for r in rows for c in cols]


def test_interior_bomb_clears_three_by_three():
    bus, world, board = load_layout(base_layout(8, 8))
    bomb = set_bomb(world, 3, 3)
    expansion = expand_bombs(world, {bomb})
    assert expansion.expanded == _ids(world, _block(range(2, 5), range(2, 5)))
    assert len(expansion.expanded) == 9
    assert expansion.waves == [frozenset(expansion.expanded)]
    assert expansion.fired


def test_blast_is_clipped_at_edges():
    bus, world, board = load_layout(base_layout(8, 8))
    corner = set_bomb(world, 0, 0)
    assert len(expand_bombs(world, {corner}).expanded) == 4
    bus, world, board = load_layout(base_layout(8, 8))
    edge = set_bomb(world, 0, 3)
    assert len(expand_bombs(world, {edge}).expanded) == 6
    assert len(blast_area(board.board, 7, 7)) == 4


def test_no_bomb_leaves_matches_unchanged():
    bus, world, board = load_layout(base_layout(8, 8))
    matches = _ids(world, [(7, 0), (7, 1), (7, 2)])
    expansion = expand_bombs(world, matches)
    assert expansion.expanded == matches
    assert expansion.waves == []
    assert not expansion.fired
    assert not contains_bomb(world, matches)


def test_bomb_outside_matches_does_not_fire():
    bus, world, board = load_layout(base_layout(8, 8))
    set_bomb(world, 0, 7)
    matches = _ids(world, [(7, 0), (7, 1), (7, 2)])
    assert expand_bombs(world, matches).expanded == matches


def test_adjacent_bombs_in_one_match_merge():
    bus, world, board = load_layout(base_layout(8, 8))
    first = set_bomb(world, 3, 3)
    second = set_bomb(world, 3, 4)
    expansion = expand_bombs(world, {first, second})
    assert expansion.expanded == _ids(world, _block(range(2, 5), range(2, 6)))
    assert len(expansion.expanded) == 12
    assert len(expansion.waves) == 2


def test_bomb_caught_in_blast_detonates_too():
    bus, world, board = load_layout(base_layout(8, 8))
    first = set_bomb(world, 3, 3)
    set_bomb(world, 4, 4)
    expansion = expand_bombs(world, {first})
    expected = _ids(world, _block(range(2, 5), range(2, 5))) | _ids(world, _block(range(3, 6), range(3, 6)))
    assert expansion.expanded == expected
    assert len(expansion.expanded) == 14
    assert len(expansion.waves) == 2


def test_waves_follow_scan_order():
    bus, world, board = load_layout(base_layout(8, 8))
    trigger = set_bomb(world, 5, 5)
    set_bomb(world, 4, 4)
    expansion = expand_bombs(world, {trigger})
    # (4,4) comes first in row-major order but only joins once (5,5) has fired.
    assert expansion.waves[0] == frozenset(_ids(world, _block(range(4, 7), range(4, 7))))
    assert expansion.waves[1] == frozenset(_ids(world, _block(range(3, 6), range(3, 6))))


def test_each_bomb_fires_once():
    bus, world, board = load_layout(base_layout(8, 8))
    bombs = {set_bomb(world, 2, 2), set_bomb(world, 2, 3), set_bomb(world, 3, 2)}
    expansion = expand_bombs(world, bombs)
    assert len(expansion.waves) == 3
