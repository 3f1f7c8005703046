"""제작 - 개인 인벤토리 + 화물칸 합산 재료로 생산 또는 수리"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from railfog.core.effects import LogEntry, LogLevel, Refusal, RefusalReason, StatDelta

from .inventory import Inventory, add_item, consume_combined, count_combined
from .models import Recipe
from .registry import ItemRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CraftResult:
    success: bool
    primary: Inventory
    secondary: Inventory
    stamina_cost: int = 0
    refusal: Optional[Refusal] = None
    repaired: bool = False
    added: int = 0
    overflow: int = 0
    stats: StatDelta = StatDelta()
    logs: tuple[LogEntry, ...] = field(default_factory=tuple)


def _find_repairable(inventory: Inventory, recipe: Recipe) -> Optional[int]:
    for i, slot in inventory.occupied():
        if slot.kind == recipe.output.kind and slot.durability is not None:
            return i
    return None


def _top_up(inventory: Inventory, index: int, durability: int) -> Inventory:
    slot = inventory[index]
    return inventory.replace_slot(
        index, replace(slot, durability=durability, max_durability=durability)
    )


def craft_item(
    recipe: Recipe,
    primary: Inventory,
    secondary: Inventory,
    stamina: int,
    registry: ItemRegistry,
) -> CraftResult:
    """레시피 실행.

    1. 스태미나 부족 → 거절
    2. 두 인벤토리 합산 재료 부족 → 거절
    3. 재료 소모 (개인 → 화물칸 순)
    4. 같은 종류 내구도 도구가 이미 있으면 내구도를 출력값까지 회복 (수리),
       없으면 새로 추가 (제작). 다 들어가지 못하면 overflow 보고.
    """
    if stamina < recipe.stamina_cost:
        return CraftResult(
            success=False,
            primary=primary,
            secondary=secondary,
            refusal=Refusal(RefusalReason.INSUFFICIENT_STAMINA, "Too tired to craft."),
        )

    consumed = consume_combined(primary, secondary, recipe.inputs)
    if not consumed.success:
        missing = ", ".join(
            f"{req.count - count_combined(primary, secondary, req.kind)} {req.kind.value}"
            for req in recipe.inputs
            if count_combined(primary, secondary, req.kind) < req.count
        )
        return CraftResult(
            success=False,
            primary=primary,
            secondary=secondary,
            refusal=Refusal(
                RefusalReason.INSUFFICIENT_RESOURCES,
                f"Insufficient resources (missing {missing}).",
            ),
        )

    new_primary = consumed.primary
    new_secondary = consumed.secondary
    output = recipe.output
    stats = StatDelta(items_crafted=1)

    if output.durability is not None:
        repaired = False
        idx = _find_repairable(new_primary, recipe)
        if idx is not None:
            new_primary = _top_up(new_primary, idx, output.durability)
            repaired = True
        else:
            idx = _find_repairable(new_secondary, recipe)
            if idx is not None:
                new_secondary = _top_up(new_secondary, idx, output.durability)
                repaired = True

        if repaired:
            logger.debug("Repaired %s (slot %d)", output.kind.value, idx)
            return CraftResult(
                success=True,
                primary=new_primary,
                secondary=new_secondary,
                stamina_cost=recipe.stamina_cost,
                repaired=True,
                stats=stats,
                logs=(LogEntry(f"Repaired: {output.kind.value}", LogLevel.SUCCESS),),
            )

    result = add_item(new_primary, output.kind, output.count, registry, output.durability)
    logs = [LogEntry(f"Crafted: {recipe.recipe_id}", LogLevel.SUCCESS)]
    if result.overflow > 0:
        logs.append(
            LogEntry(
                f"Inventory full! {result.overflow} {output.kind.value} discarded.",
                LogLevel.WARNING,
            )
        )

    return CraftResult(
        success=True,
        primary=result.inventory,
        secondary=new_secondary,
        stamina_cost=recipe.stamina_cost,
        added=result.added,
        overflow=result.overflow,
        stats=stats,
        logs=tuple(logs),
    )
