from __future__ import annotations

import random
from typing import List, Sequence

from gribli.engine import GameEngine
from gribli.events.bus import EventBus
from gribli.systems.board import BoardSystem
from gribli.world import create_world

# Token kinds in registry order, short aliases for hand-written layouts.
A, C, L, G, O, P = "apple", "cherry", "lemon", "grape", "coconut", "peach"
KINDS = [A, C, L, G, O, P]


class ScriptedRandom(random.Random):
    """Random source whose choice() follows a script.

    choice(seq) returns the next scripted value when it is one of seq; otherwise
    (script exhausted, or e.g. picking among entity ids) it falls back to the
    seeded generator.
    """

    def __init__(self, seed: int = 0):
        super().__init__(seed)
        self.script: List = []

    def queue(self, *values) -> None:
        self.script.extend(values)

    def choice(self, seq):
        if self.script and self.script[0] in seq:
            return self.script.pop(0)
        return super().choice(seq)


def base_layout(rows: int = 8, cols: int = 8) -> List[List[str]]:
    """Run-free layout: kind index (2*row + col) % 6."""
    return [[KINDS[(2 * r + c) % 6] for c in range(cols)] for r in range(rows)]


def make_engine(rows: int = 8, cols: int = 8, seed: int = 0, layout: Sequence[Sequence[str]] | None = None,
                **kwargs) -> GameEngine:
    engine = GameEngine(rows, cols, rng=ScriptedRandom(seed), **kwargs)
    if layout is not None:
        engine.load_layout(layout)
    return engine


def load_layout(layout: Sequence[Sequence[str]], seed: int = 0):
    """Create a bare world + board holding layout; returns (bus, world, board_system)."""
    bus = EventBus()
    world = create_world(bus, rng=ScriptedRandom(seed))
    board = BoardSystem(world, bus, len(layout), len(layout[0]), build=False)
    board.load_layout(layout)
    return bus, world, board


def kinds_of(engine: GameEngine) -> List[List[str]]:
    return [[cell.kind for cell in row] for row in engine.snapshot()]


# 5x5 run-free layout; swapping (0,2) with (1,2) completes apple on row 0, cols 0-2.
LAYOUT_5 = [
    [A, A, C, G, L],
    [C, L, A, O, P],
    [L, G, O, P, C],
    [G, O, P, C, L],
    [O, P, C, L, G],
]


def stalemate_layout(rows: int = 5, cols: int = 5) -> List[List[str]]:
    """Three kinds on diagonals: no runs and no swap can create one."""
    pattern = [A, C, L]
    return [[pattern[(r + c) % 3] for c in range(cols)] for r in range(rows)]


def has_any_run(kinds: Sequence[Sequence[str]]) -> bool:
    rows = len(kinds)
    cols = len(kinds[0])
    for r in range(rows):
        for c in range(cols - 2):
            if kinds[r][c] == kinds[r][c + 1] == kinds[r][c + 2]:
                return True
    for c in range(cols):
        for r in range(rows - 2):
            if kinds[r][c] == kinds[r + 1][c] == kinds[r + 2][c]:
                return True
    return False
