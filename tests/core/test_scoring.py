"""최종 점수 + 구조 버프 테스트"""

from railfog.core.effects import StatDelta
from railfog.core.scoring import calculate_score
from railfog.core.state import (
    GameStats,
    RescuedNPC,
    buffed_attack,
    buffed_max_health,
    buffed_max_stamina,
)
from railfog.core.world.tile import BuffType


class TestScore:
    def test_breakdown(self) -> None:
        stats = GameStats(
            wood=10,
            stone=4,
            enemies_defeated=2,
            items_crafted=1,
            sectors_passed=3,
            npcs_rescued=1,
        )
        breakdown = calculate_score(stats, gold=7)
        assert len(breakdown.lines) == 7
        assert breakdown.total == 1500 + 100 + 60 + 200 + 50 + 200 + 7

    def test_empty_run_scores_zero(self) -> None:
        assert calculate_score(GameStats()).total == 0

    def test_to_dict(self) -> None:
        data = calculate_score(GameStats(sectors_passed=1)).to_dict()
        assert data["total"] == 500
        assert data["lines"][0] == {
            "label": "Sectors passed",
            "value": 1,
            "multiplier": 500,
            "points": 500,
        }


class TestStats:
    def test_apply_delta(self) -> None:
        stats = GameStats(wood=2).apply(StatDelta(wood=3) + StatDelta(npcs_rescued=1))
        assert stats.wood == 5
        assert stats.npcs_rescued == 1


class TestBuffs:
    def test_buffs_stack_per_npc(self) -> None:
        rescued = (
            RescuedNPC(BuffType.STAMINA),
            RescuedNPC(BuffType.STAMINA),
            RescuedNPC(BuffType.HEALTH),
            RescuedNPC(BuffType.ATTACK),
        )
        assert buffed_max_stamina(rescued) == 70
        assert buffed_max_health(rescued) == 25
        assert buffed_attack(rescued) == 3

    def test_no_rescues(self) -> None:
        assert buffed_max_stamina(()) == 50
        assert buffed_max_health(()) == 20
        assert buffed_attack(()) == 2
