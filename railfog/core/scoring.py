"""최종 점수 집계"""

from __future__ import annotations

from dataclasses import dataclass

from railfog.core.balance import DEFAULT_CONFIG, GameConfig
from railfog.core.state import GameStats


@dataclass(frozen=True)
class ScoreLine:
    label: str
    value: int
    multiplier: int

    @property
    def points(self) -> int:
        return self.value * self.multiplier


@dataclass(frozen=True)
class ScoreBreakdown:
    lines: tuple[ScoreLine, ...]

    @property
    def total(self) -> int:
        return sum(line.points for line in self.lines)

    def to_dict(self) -> dict:
        return {
            "lines": [
                {"label": l.label, "value": l.value, "multiplier": l.multiplier, "points": l.points}
                for l in self.lines
            ],
            "total": self.total,
        }


def calculate_score(
    stats: GameStats, gold: int = 0, config: GameConfig = DEFAULT_CONFIG
) -> ScoreBreakdown:
    s = config.scoring
    return ScoreBreakdown(
        lines=(
            ScoreLine("Sectors passed", stats.sectors_passed, s.per_sector),
            ScoreLine("Wood gathered", stats.wood, s.per_wood),
            ScoreLine("Stone gathered", stats.stone, s.per_stone),
            ScoreLine("Enemies defeated", stats.enemies_defeated, s.per_enemy),
            ScoreLine("Items crafted", stats.items_crafted, s.per_craft),
            ScoreLine("Passengers rescued", stats.npcs_rescued, s.per_npc),
            ScoreLine("Gold", gold, s.per_gold),
        )
    )
