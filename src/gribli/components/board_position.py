from dataclasses import dataclass

@dataclass(slots=True)
class BoardPosition:
    """Current grid coordinates of a tile entity.

    row < 0 is a transient state: the tile was just spawned above the visible
    grid and has not settled into its slot yet.
    """
    row: int
    col: int
