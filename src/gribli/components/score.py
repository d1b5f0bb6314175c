from dataclasses import dataclass


@dataclass(slots=True)
class Score:
    """Running score of the current game plus the best score seen."""

    current: int = 0
    best: int = 0
    is_new_best: bool = False

    def add(self, points: int) -> None:
        self.current += points
        if self.current > self.best:
            self.best = self.current
            self.is_new_best = True

    def reset(self) -> None:
        self.current = 0
        self.is_new_best = False
