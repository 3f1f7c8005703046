"""내구도 시스템"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from .inventory import Inventory
from .models import ItemKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DurabilityResult:
    inventory: Inventory
    broken: bool
    kind: Optional[ItemKind]
    new_durability: Optional[int]
    selected_slot: Optional[int]


def decrease_tool_durability(
    inventory: Inventory,
    slot_index: int,
    selected_slot: Optional[int] = None,
) -> DurabilityResult:
    """도구 사용 시 내구도 1 감소.

    durability None (내구도 없음) 또는 빈 슬롯: 변화 없음.
    0 이하가 되면 슬롯을 비우고, 그 슬롯이 선택 중이었다면 선택도 해제.
    """
    slot = inventory[slot_index]
    if slot is None or slot.durability is None:
        return DurabilityResult(
            inventory=inventory,
            broken=False,
            kind=slot.kind if slot else None,
            new_durability=None,
            selected_slot=selected_slot,
        )

    new_dur = slot.durability - 1
    if new_dur <= 0:
        logger.info("Tool %s in slot %d broke", slot.kind.value, slot_index)
        return DurabilityResult(
            inventory=inventory.replace_slot(slot_index, None),
            broken=True,
            kind=slot.kind,
            new_durability=0,
            selected_slot=None if selected_slot == slot_index else selected_slot,
        )

    return DurabilityResult(
        inventory=inventory.replace_slot(slot_index, replace(slot, durability=new_dur)),
        broken=False,
        kind=slot.kind,
        new_durability=new_dur,
        selected_slot=selected_slot,
    )


def get_durability_ratio(inventory: Inventory, slot_index: int) -> float:
    """현재 내구도 비율 (0.0~1.0). 내구도 없는 아이템은 1.0."""
    slot = inventory[slot_index]
    if slot is None or slot.durability is None or not slot.max_durability:
        return 1.0
    return slot.durability / slot.max_durability
