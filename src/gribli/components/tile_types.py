from dataclasses import dataclass, field
from typing import List

@dataclass(slots=True)
class TileTypes:
    """Canonical token kinds stored on a single entity.

    This component lives alongside TileTypeRegistry (tag). Duplicate names are
    dropped while preserving order.
    """
    types: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        seen: set[str] = set()
        filtered: List[str] = []
        for name in self.types:
            if name and name not in seen:
                filtered.append(name)
                seen.add(name)
        self.types = filtered

    def all_types(self) -> List[str]:
        return list(self.types)

    def __contains__(self, type_name: str) -> bool:
        return type_name in self.types
