"""
Railfog Core - Train
====================
보일러 압력, 연료, 승객 정원, 출발/섹터 전환 규칙
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional

from railfog.core.balance import DEFAULT_CONFIG, GameConfig
from railfog.core.dice import weighted_choice
from railfog.core.effects import LogEntry, LogLevel, Refusal, RefusalReason
from railfog.core.item.inventory import Inventory, consume_combined
from railfog.core.item.models import ItemKind, ItemRequirement
from railfog.core.logging import get_logger
from railfog.core.state import Weather
from railfog.core.world.grid import Grid

logger = get_logger(__name__)


def fuel_values(config: GameConfig = DEFAULT_CONFIG) -> dict[ItemKind, int]:
    """연료로 쓸 수 있는 아이템 → 1개당 압력 증가량"""
    return {
        ItemKind.WOOD: config.train.fuel_gain_wood,
        ItemKind.CHARCOAL: config.train.fuel_gain_charcoal,
    }


def target_pressure(sector: int, config: GameConfig = DEFAULT_CONFIG) -> int:
    """섹터별 출발 필요 압력"""
    return config.train.pressure_base + max(0, sector - 1) * config.train.pressure_per_sector


def passenger_capacity(carriage_level: int, config: GameConfig = DEFAULT_CONFIG) -> int:
    return config.train.passenger_base + carriage_level * config.train.passenger_per_carriage


@dataclass(frozen=True)
class FuelResult:
    success: bool
    inventory: Inventory
    cargo: Inventory
    pressure: int
    refusal: Optional[Refusal] = None
    logs: tuple[LogEntry, ...] = field(default_factory=tuple)


def add_fuel(
    kind: ItemKind,
    inventory: Inventory,
    cargo: Inventory,
    pressure: int,
    target: int,
    config: GameConfig = DEFAULT_CONFIG,
) -> FuelResult:
    """연료 1개를 보일러에 넣는다. 개인 인벤토리 우선, 부족하면 화물칸."""
    gain = fuel_values(config).get(kind)
    if gain is None:
        refusal = Refusal(RefusalReason.NOTHING_TO_DO, f"{kind.value} cannot be burned.")
    elif pressure >= target:
        refusal = Refusal(RefusalReason.ALREADY_FULL, "Boiler is already at full pressure.")
    else:
        refusal = None

    if refusal is not None:
        return FuelResult(False, inventory, cargo, pressure, refusal=refusal)

    consumed = consume_combined(inventory, cargo, [ItemRequirement(kind, 1)])
    if not consumed.success:
        return FuelResult(
            False,
            inventory,
            cargo,
            pressure,
            refusal=Refusal(RefusalReason.INSUFFICIENT_RESOURCES, f"No {kind.value} to burn."),
        )

    new_pressure = pressure + gain
    return FuelResult(
        True,
        consumed.primary,
        consumed.secondary,
        new_pressure,
        logs=(LogEntry(f"Burned {kind.value}. Pressure {new_pressure}/{target}", LogLevel.SUCCESS),),
    )


def check_departure(pressure: int, target: int, grid: Grid) -> Optional[Refusal]:
    """출발 가능 여부. 가능하면 None."""
    if pressure < target:
        return Refusal(
            RefusalReason.PRESSURE_LOW, f"Pressure too low ({pressure}/{target})."
        )
    broken = grid.broken_tracks()
    if broken:
        return Refusal(
            RefusalReason.TRACK_BROKEN, f"{len(broken)} broken track(s) must be repaired first."
        )
    return None


def retained_stamina(stamina: int, max_stamina: int, config: GameConfig = DEFAULT_CONFIG) -> int:
    """섹터 전환 후 남는 스태미나"""
    return min(max_stamina, int(stamina * config.train.stamina_retain_pct))


def roll_weather(rng: random.Random, config: GameConfig = DEFAULT_CONFIG) -> Weather:
    weights = config.weather.weights
    options = [Weather(name) for name in weights]
    weather = weighted_choice(rng, options, [weights[w.value] for w in options])
    logger.debug("Weather rolled: %s", weather.value)
    return weather
