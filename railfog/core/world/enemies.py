"""적 규칙 - 레벨, 능력치 판정, 시간 경과 공격"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional

from railfog.core.balance import DEFAULT_CONFIG, GameConfig
from railfog.core.dice import roll_range
from railfog.core.effects import LogEntry, LogLevel
from railfog.core.logging import get_logger

from .grid import Grid
from .tile import Tile

logger = get_logger(__name__)


def calculate_enemy_level(sector: int, sanity: int, config: GameConfig = DEFAULT_CONFIG) -> int:
    """섹터와 san 누적에 따른 적 레벨 (0부터)"""
    cfg = config.enemies
    return max(0, (sector - 1) // cfg.level_sector_step) + max(0, sanity) // cfg.level_sanity_step


def roll_enemy_stats(
    rng: random.Random,
    level: int,
    config: GameConfig = DEFAULT_CONFIG,
    attack_range: Optional[tuple[int, int]] = None,
    hp_range: Optional[tuple[int, int]] = None,
) -> tuple[int, int]:
    """(attack, hp). attack 판정 → hp 판정 순서로 난수 소비."""
    cfg = config.enemies
    attack = roll_range(rng, attack_range or cfg.attack) + level
    hp = roll_range(rng, hp_range or cfg.hp) + level * cfg.hp_per_level
    return attack, hp


def key_drop_chance(level: int, config: GameConfig = DEFAULT_CONFIG) -> float:
    cfg = config.enemies
    return min(1.0, cfg.key_chance_base + level * cfg.key_chance_per_level)


@dataclass(frozen=True)
class EnemyTickResult:
    grid: Grid
    damage: int
    logs: tuple[LogEntry, ...] = field(default_factory=tuple)


def update_enemy_attack_progress(
    grid: Grid, minutes_passed: int, config: GameConfig = DEFAULT_CONFIG
) -> EnemyTickResult:
    """공개된 적이 시간 경과에 따라 공격 게이지를 채운다.

    게이지가 주기(passive_attack_interval)에 도달하면 공격하고
    초과분은 다음 주기로 이월된다.
    """
    interval = config.enemies.passive_attack_interval
    if minutes_passed <= 0 or interval <= 0:
        return EnemyTickResult(grid=grid, damage=0)

    damage = 0
    logs: list[LogEntry] = []
    updated: list[Tile] = []

    for tile in grid.hostiles():
        progress = tile.attack_progress + minutes_passed
        strikes, progress = divmod(progress, interval)
        if strikes:
            hit = tile.attack * strikes
            damage += hit
            logs.append(
                LogEntry(
                    f"Enemy at ({tile.x}, {tile.y}) attacked! (-{hit} HP)",
                    LogLevel.WARNING,
                )
            )
        updated.append(tile.evolve(attack_progress=progress))

    if damage:
        logger.debug("Passive enemy damage: %d", damage)
    return EnemyTickResult(grid=grid.replace_many(updated), damage=damage, logs=tuple(logs))
