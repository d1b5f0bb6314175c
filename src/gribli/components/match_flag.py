from dataclasses import dataclass

@dataclass(slots=True)
class MatchFlag:
    """Per-tile removal flag.

    matched: True once the tile was flagged for removal in the current resolution pass.
    Flagged tiles stay on the board until gravity replaces them.
    """
    matched: bool = False
