from dataclasses import dataclass

@dataclass(slots=True)
class Bomb:
    """Tag component: the tile clears its neighbourhood when matched."""
    pass
