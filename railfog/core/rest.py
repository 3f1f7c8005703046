"""
Railfog Core - Rest & Encounter
===============================
휴식 2단계 처리

1단계: 조우 판정 (주사위 또는 확률 모드) → 스폰 수
2단계: 보고서 계산 → 확인 시 한 번에 적용

휴식은 HP를 회복하지 않는다.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from enum import Enum

from railfog.core.balance import DEFAULT_CONFIG, GameConfig
from railfog.core.dice import roll_d6
from railfog.core.effects import LogEntry, LogLevel
from railfog.core.logging import get_logger
from railfog.core.world.enemies import calculate_enemy_level, roll_enemy_stats
from railfog.core.world.grid import Grid
from railfog.core.world.tile import Tile, TileKind
from railfog.core.world.visibility import update_peek_status

logger = get_logger(__name__)


class EncounterMode(str, Enum):
    DICE = "dice"
    PROBABILITY = "probability"


@dataclass(frozen=True)
class EncounterRoll:
    mode: EncounterMode
    spawn_count: int
    dice: tuple[int, ...] = ()
    spawn_rate: float = 0.0

    @property
    def total(self) -> int:
        return sum(self.dice)


def roll_encounter_dice(
    rng: random.Random, sanity: int, config: GameConfig = DEFAULT_CONFIG
) -> EncounterRoll:
    """(1 + sanity // 100)개의 d6, 스폰 수 = 합 // 5"""
    rest = config.rest
    dice = tuple(roll_d6(rng, 1 + max(0, sanity) // rest.sanity_per_die))
    return EncounterRoll(
        mode=EncounterMode.DICE,
        spawn_count=sum(dice) // rest.pips_per_enemy,
        dice=dice,
    )


def spawn_rate(sector: int, sanity: int, config: GameConfig = DEFAULT_CONFIG) -> float:
    """스폰 확률(%). 100을 넘으면 여러 마리."""
    rest = config.rest
    return (
        rest.spawn_rate_base
        + sector * rest.spawn_rate_per_sector
        + max(0, sanity) * rest.spawn_rate_per_sanity
    )


def roll_encounter_probability(
    rng: random.Random, sector: int, sanity: int, config: GameConfig = DEFAULT_CONFIG
) -> EncounterRoll:
    """확률 막대 방식. 100%마다 막대 하나, i번째 막대는 min(100, rate - 100*i)% 확률."""
    rate = spawn_rate(sector, sanity, config)
    bars = max(0, math.ceil(rate / 100))
    count = 0
    for i in range(bars):
        if rng.random() * 100 < min(100.0, rate - 100 * i):
            count += 1
    return EncounterRoll(mode=EncounterMode.PROBABILITY, spawn_count=count, spawn_rate=rate)


def roll_encounter(
    rng: random.Random,
    mode: EncounterMode,
    sector: int,
    sanity: int,
    config: GameConfig = DEFAULT_CONFIG,
) -> EncounterRoll:
    if mode == EncounterMode.PROBABILITY:
        return roll_encounter_probability(rng, sector, sanity, config)
    return roll_encounter_dice(rng, sanity, config)


@dataclass(frozen=True)
class RestReport:
    """휴식 결과 미리보기. 확인 전에는 아무것도 바뀌지 않는다."""

    encounter: EncounterRoll
    stamina: int  # 휴식 후 스태미나 (버프 최대치)
    damage: int  # 공개된 미처치 적의 공격 합
    pressure_loss: int
    spawns: tuple[Tile, ...] = field(default_factory=tuple)
    heal: int = 0


def calculate_rest_outcome(
    grid: Grid,
    pressure: int,
    max_stamina: int,
    sector: int,
    sanity: int,
    encounter: EncounterRoll,
    rng: random.Random,
    config: GameConfig = DEFAULT_CONFIG,
) -> RestReport:
    """보고서 계산. 스폰 위치는 정리된 지면 중 비복원 추출."""
    damage = sum(t.attack for t in grid.hostiles())
    pressure_loss = min(max(pressure, 0), config.train.decay_on_rest)

    candidates = grid.cleared_ground()
    count = min(encounter.spawn_count, len(candidates))
    chosen = rng.sample(candidates, count) if count else []

    level = calculate_enemy_level(sector, sanity, config)
    spawns = []
    for tile in chosen:
        attack, hp = roll_enemy_stats(
            rng, level, config, config.rest.ambush_attack, config.rest.ambush_hp
        )
        spawns.append(
            tile.evolve(
                kind=TileKind.ENEMY,
                revealed=True,
                peeked=False,
                cleared=False,
                scavenge_left=0,
                search_count=0,
                attack=attack,
                hp=hp,
                max_hp=hp,
                attack_progress=0,
            )
        )

    if encounter.spawn_count > count:
        logger.debug("Spawn count %d capped to %d cleared tiles", encounter.spawn_count, count)

    return RestReport(
        encounter=encounter,
        stamina=max_stamina,
        damage=damage,
        pressure_loss=pressure_loss,
        spawns=tuple(spawns),
    )


@dataclass(frozen=True)
class RestOutcome:
    grid: Grid
    stamina: int
    health: int
    pressure: int
    day: int
    minutes: int
    sanity: int
    logs: tuple[LogEntry, ...] = field(default_factory=tuple)


def apply_rest(
    report: RestReport,
    grid: Grid,
    health: int,
    pressure: int,
    day: int,
    sanity: int,
    config: GameConfig = DEFAULT_CONFIG,
) -> RestOutcome:
    """보고서를 한 번에 적용한 새 값 묶음"""
    new_grid = update_peek_status(grid.replace_many(report.spawns))
    logs = [LogEntry(f"Day {day + 1} begins. Stamina restored.", LogLevel.IMPORTANT)]
    if report.damage:
        logs.append(
            LogEntry(f"Enemies attacked during the night! (-{report.damage} HP)", LogLevel.ERROR)
        )
    if report.spawns:
        logs.append(
            LogEntry(f"{len(report.spawns)} enemies appeared nearby!", LogLevel.WARNING)
        )
    if report.pressure_loss:
        logs.append(LogEntry(f"Boiler lost {report.pressure_loss} pressure."))

    return RestOutcome(
        grid=new_grid,
        stamina=report.stamina,
        health=health - report.damage,
        pressure=pressure - report.pressure_loss,
        day=day + 1,
        minutes=0,
        sanity=sanity + config.rest.sanity_increment,
        logs=tuple(logs),
    )
