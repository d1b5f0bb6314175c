from dataclasses import dataclass


@dataclass(slots=True)
class CascadeState:
    """Tracks the cascade currently being resolved, shared across systems."""

    active: bool = False
    depth: int = 0
    source: str | None = None
