from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)
    points_per_level: int = 1000
    speed_factor: float = 1.5

    def score_for_lines(self, lines: int) -> int:
        if 1 <= lines <= len(self.line_clear_scores):
            return self.line_clear_scores[lines - 1]
        return 0

    def level_for_score(self, score: int) -> int:
        return score // self.points_per_level + 1

    def fall_interval_ms(self, level: int, base_ms: float = 1000.0) -> float:
        return base_ms / (level * self.speed_factor)
