from dataclasses import dataclass

@dataclass(slots=True)
class TileType:
    """Per-tile token kind.

    Stores only the kind name. Matched and bomb state live in MatchFlag and Bomb.
    The set of valid kinds resides in the singleton entity with TileTypeRegistry + TileTypes.
    """
    type_name: str
