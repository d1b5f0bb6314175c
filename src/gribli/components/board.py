from dataclasses import dataclass, field
from typing import List

@dataclass(slots=True)
class Board:
    """Board dimensions plus the slot matrix.

    slots[row][col] holds the entity id of the tile that owns that slot. A tile
    that is still descending keeps its slot here while its BoardPosition.row is negative.
    """
    rows: int
    cols: int
    slots: List[List[int]] = field(default_factory=list)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols
