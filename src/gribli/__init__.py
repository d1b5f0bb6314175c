"""Gribli match-three engine.

The engine is an esper ECS world plus a handful of systems. Most callers only
need :class:`gribli.engine.GameEngine`.
"""
from gribli.engine import GameEngine, CellSnapshot
from gribli.systems.match_resolution import CascadeResult, MatchOutcome, RoundResult

__all__ = [
    "GameEngine",
    "CellSnapshot",
    "CascadeResult",
    "MatchOutcome",
    "RoundResult",
]
