"""인벤토리 원장 - 고정 길이 슬롯 배열, 스택 규칙

모든 연산은 새 Inventory를 반환한다 (원본 불변).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from .models import InventorySlot, ItemKind, ItemRequirement
from .registry import ItemRegistry

logger = logging.getLogger(__name__)

Slots = tuple[Optional[InventorySlot], ...]


@dataclass(frozen=True)
class Inventory:
    """슬롯 튜플 스냅샷. 빈 슬롯은 None."""

    slots: Slots

    @classmethod
    def empty(cls, size: int) -> "Inventory":
        if size <= 0:
            raise ValueError(f"Inventory size must be positive: {size}")
        return cls(slots=(None,) * size)

    def __len__(self) -> int:
        return len(self.slots)

    def __getitem__(self, index: int) -> Optional[InventorySlot]:
        return self.slots[index]

    def __iter__(self) -> Iterator[Optional[InventorySlot]]:
        return iter(self.slots)

    def count_of(self, kind: ItemKind) -> int:
        """해당 종류의 전 슬롯 합계"""
        return sum(s.count for s in self.slots if s is not None and s.kind == kind)

    def occupied(self) -> list[tuple[int, InventorySlot]]:
        return [(i, s) for i, s in enumerate(self.slots) if s is not None]

    def free_slots(self) -> int:
        return sum(1 for s in self.slots if s is None)

    def find_slot(self, kind: ItemKind) -> Optional[int]:
        for i, s in enumerate(self.slots):
            if s is not None and s.kind == kind:
                return i
        return None

    def replace_slot(self, index: int, slot: Optional[InventorySlot]) -> "Inventory":
        new_slots = list(self.slots)
        new_slots[index] = slot
        return Inventory(slots=tuple(new_slots))


@dataclass(frozen=True)
class AddResult:
    inventory: Inventory
    added: int
    requested: int

    @property
    def overflow(self) -> int:
        """수용하지 못하고 버려진 수량"""
        return self.requested - self.added


@dataclass(frozen=True)
class RemoveResult:
    inventory: Inventory
    success: bool


@dataclass(frozen=True)
class CombinedResult:
    primary: Inventory
    secondary: Inventory
    success: bool


@dataclass(frozen=True)
class TransferResult:
    source: Inventory
    target: Inventory
    moved: int


def add_item(
    inventory: Inventory,
    kind: ItemKind,
    count: int,
    registry: ItemRegistry,
    durability: Optional[int] = None,
) -> AddResult:
    """아이템 추가. 반환: 실제 추가된 수량 포함 AddResult.

    1. 같은 종류의 여유 있는 스택을 앞에서부터 채운다
    2. 남으면 빈 슬롯에 새 스택 생성 (슬롯당 max_stack까지)
    3. 인벤토리가 가득 차면 중단 → added < requested
    """
    spec = registry.require(kind)
    if count <= 0:
        return AddResult(inventory=inventory, added=0, requested=max(count, 0))

    remaining = count
    slots = list(inventory.slots)

    for i, slot in enumerate(slots):
        if remaining <= 0:
            break
        if slot is not None and slot.kind == kind and slot.count < spec.max_stack:
            add = min(remaining, spec.max_stack - slot.count)
            slots[i] = slot.with_count(slot.count + add)
            remaining -= add

    for i, slot in enumerate(slots):
        if remaining <= 0:
            break
        if slot is None:
            add = min(remaining, spec.max_stack)
            slots[i] = InventorySlot(
                kind=kind,
                count=add,
                durability=durability,
                max_durability=spec.max_durability if durability is not None else None,
            )
            remaining -= add

    added = count - remaining
    if remaining > 0:
        logger.debug("Inventory full: %d/%d %s added", added, count, kind.value)
    return AddResult(inventory=Inventory(slots=tuple(slots)), added=added, requested=count)


def _take_back_to_front(
    slots: list[Optional[InventorySlot]], kind: ItemKind, amount: int
) -> int:
    """뒤쪽 슬롯부터 소모. 반환: 소모하지 못한 잔량."""
    remaining = amount
    for i in range(len(slots) - 1, -1, -1):
        if remaining <= 0:
            break
        slot = slots[i]
        if slot is None or slot.kind != kind:
            continue
        if slot.count > remaining:
            slots[i] = slot.with_count(slot.count - remaining)
            remaining = 0
        else:
            remaining -= slot.count
            slots[i] = None
    return remaining


def remove_item(inventory: Inventory, kind: ItemKind, count: int) -> RemoveResult:
    """전부 아니면 전무. 보유량 부족 시 원본 그대로 success=False."""
    if count <= 0:
        return RemoveResult(inventory=inventory, success=True)
    if inventory.count_of(kind) < count:
        return RemoveResult(inventory=inventory, success=False)

    slots = list(inventory.slots)
    _take_back_to_front(slots, kind, count)
    return RemoveResult(inventory=Inventory(slots=tuple(slots)), success=True)


def has_resources(inventory: Inventory, requirements: Iterable[ItemRequirement]) -> bool:
    return all(inventory.count_of(req.kind) >= req.count for req in requirements)


def consume_resources(
    inventory: Inventory, requirements: Iterable[ItemRequirement]
) -> RemoveResult:
    """요구 목록 전체를 원자적으로 소모."""
    requirements = list(requirements)
    if not has_resources(inventory, requirements):
        return RemoveResult(inventory=inventory, success=False)

    slots = list(inventory.slots)
    for req in requirements:
        _take_back_to_front(slots, req.kind, req.count)
    return RemoveResult(inventory=Inventory(slots=tuple(slots)), success=True)


def count_combined(primary: Inventory, secondary: Inventory, kind: ItemKind) -> int:
    return primary.count_of(kind) + secondary.count_of(kind)


def consume_combined(
    primary: Inventory,
    secondary: Inventory,
    requirements: Iterable[ItemRequirement],
) -> CombinedResult:
    """두 인벤토리(개인 + 화물칸) 합산 소모.

    모든 요구 항목의 합계를 먼저 확인한 뒤에만 변경한다.
    개인 인벤토리 우선 소모, 부족분만 화물칸에서 보충.
    """
    requirements = list(requirements)
    for req in requirements:
        if count_combined(primary, secondary, req.kind) < req.count:
            return CombinedResult(primary=primary, secondary=secondary, success=False)

    p_slots = list(primary.slots)
    s_slots = list(secondary.slots)
    for req in requirements:
        shortfall = _take_back_to_front(p_slots, req.kind, req.count)
        if shortfall > 0:
            _take_back_to_front(s_slots, req.kind, shortfall)

    return CombinedResult(
        primary=Inventory(slots=tuple(p_slots)),
        secondary=Inventory(slots=tuple(s_slots)),
        success=True,
    )


def find_tool_index(
    inventory: Inventory, kind: ItemKind, selected_slot: Optional[int] = None
) -> Optional[int]:
    """선택 슬롯이 해당 도구면 그 슬롯, 아니면 사용 가능한 첫 슬롯."""
    if selected_slot is not None and 0 <= selected_slot < len(inventory):
        selected = inventory[selected_slot]
        if selected is not None and selected.kind == kind and selected.is_usable:
            return selected_slot

    for i, slot in enumerate(inventory.slots):
        if slot is not None and slot.kind == kind and slot.is_usable:
            return i
    return None


def transfer_slot(
    source: Inventory, target: Inventory, index: int, registry: ItemRegistry
) -> TransferResult:
    """source[index] 내용을 target으로 이동. 들어가지 못한 잔량은 source에 남는다."""
    slot = source[index]
    if slot is None:
        return TransferResult(source=source, target=target, moved=0)

    result = add_item(target, slot.kind, slot.count, registry, durability=slot.durability)
    left = slot.count - result.added
    new_source = source.replace_slot(index, slot.with_count(left) if left > 0 else None)
    return TransferResult(source=new_source, target=result.inventory, moved=result.added)
