from dataclasses import dataclass

@dataclass(slots=True)
class TileTypeRegistry:
    """Empty tag component marking the single entity that stores the token set.

    The same entity also has a TileTypes component listing the kinds.
    """
    pass
