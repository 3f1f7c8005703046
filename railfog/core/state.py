"""
Railfog Core - Game State
=========================
세션 전체 상태 집합체 (GameEngine 소유)

Core 함수는 이 집합체 전체가 아니라 필요한 필드만 인자로 받는다.
GameState 역시 불변이며, 엔진은 dataclasses.replace로 새 상태를 만든다.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Optional

from railfog.core.balance import DEFAULT_CONFIG, GameConfig
from railfog.core.effects import StatDelta
from railfog.core.item.inventory import Inventory
from railfog.core.world.grid import Grid
from railfog.core.world.tile import BuffType


class Weather(str, Enum):
    SUNNY = "sunny"
    RAIN = "rain"
    WINDY = "windy"


class ViewState(str, Enum):
    MAP = "map"
    SHOP = "shop"
    GAMEOVER = "gameover"


@dataclass(frozen=True)
class RescuedNPC:
    buff: BuffType
    origin: str = ""  # 구조된 타일 id (x-y)


@dataclass(frozen=True)
class GameStats:
    """누적 통계"""

    wood: int = 0
    stone: int = 0
    enemies_defeated: int = 0
    items_crafted: int = 0
    sectors_passed: int = 0
    npcs_rescued: int = 0

    def apply(self, delta: StatDelta) -> "GameStats":
        return GameStats(
            wood=self.wood + delta.wood,
            stone=self.stone + delta.stone,
            enemies_defeated=self.enemies_defeated + delta.enemies_defeated,
            items_crafted=self.items_crafted + delta.items_crafted,
            sectors_passed=self.sectors_passed + delta.sectors_passed,
            npcs_rescued=self.npcs_rescued + delta.npcs_rescued,
        )


def count_buffs(rescued: Iterable[RescuedNPC], buff: BuffType) -> int:
    return sum(1 for npc in rescued if npc.buff == buff)


def buffed_max_stamina(rescued: Iterable[RescuedNPC], config: GameConfig = DEFAULT_CONFIG) -> int:
    avatar = config.avatar
    return avatar.max_stamina + count_buffs(rescued, BuffType.STAMINA) * avatar.stamina_buff


def buffed_max_health(rescued: Iterable[RescuedNPC], config: GameConfig = DEFAULT_CONFIG) -> int:
    avatar = config.avatar
    return avatar.max_health + count_buffs(rescued, BuffType.HEALTH) * avatar.health_buff


def buffed_attack(rescued: Iterable[RescuedNPC], config: GameConfig = DEFAULT_CONFIG) -> int:
    """근접 공격력 (활 미사용 시)"""
    avatar = config.avatar
    return avatar.base_attack + count_buffs(rescued, BuffType.ATTACK) * avatar.attack_buff


@dataclass(frozen=True)
class GameState:
    grid: Grid
    inventory: Inventory
    cargo: Inventory

    sector: int = 1
    day: int = 1
    minutes: int = 0

    stamina: int = 0
    health: int = 0
    gold: int = 0

    pressure: int = 0
    target_pressure: int = 0
    carriage_level: int = 0

    rescued: tuple[RescuedNPC, ...] = field(default_factory=tuple)
    stats: GameStats = GameStats()
    sanity: int = 0

    weather: Weather = Weather.SUNNY
    view: ViewState = ViewState.MAP
    selected_slot: Optional[int] = None

    @property
    def is_over(self) -> bool:
        return self.view == ViewState.GAMEOVER

    def max_stamina(self, config: GameConfig = DEFAULT_CONFIG) -> int:
        return buffed_max_stamina(self.rescued, config)

    def max_health(self, config: GameConfig = DEFAULT_CONFIG) -> int:
        return buffed_max_health(self.rescued, config)

    def attack(self, config: GameConfig = DEFAULT_CONFIG) -> int:
        return buffed_attack(self.rescued, config)

    def evolve(self, **changes) -> "GameState":
        return replace(self, **changes)
