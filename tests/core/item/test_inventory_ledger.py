"""인벤토리 원장 테스트: 추가/제거, 스택, 합산 소모, 도구 탐색, 이동, 내구도"""

from __future__ import annotations

from railfog.core.item.durability import decrease_tool_durability, get_durability_ratio
from railfog.core.item.inventory import (
    Inventory,
    add_item,
    consume_combined,
    consume_resources,
    find_tool_index,
    remove_item,
    transfer_slot,
)
from railfog.core.item.models import InventorySlot, ItemKind, ItemRequirement
from railfog.core.item.registry import ItemRegistry


def _inv(*slots: InventorySlot | None, size: int = 8) -> Inventory:
    filled = list(slots) + [None] * (size - len(slots))
    return Inventory(slots=tuple(filled))


def _tool(kind: ItemKind, durability: int = 5) -> InventorySlot:
    return InventorySlot(kind=kind, count=1, durability=durability, max_durability=5)


# ── Add ───────────────────────────────────────────────────────


class TestAddItem:
    def test_add_to_empty(self, registry: ItemRegistry) -> None:
        result = add_item(Inventory.empty(8), ItemKind.WOOD, 5, registry)
        assert result.added == 5
        assert result.overflow == 0
        assert result.inventory[0] == InventorySlot(ItemKind.WOOD, 5)

    def test_fills_existing_stack_first(self, registry: ItemRegistry) -> None:
        inv = _inv(None, InventorySlot(ItemKind.WOOD, 18))
        result = add_item(inv, ItemKind.WOOD, 5, registry)
        # 앞쪽 빈 슬롯보다 기존 스택이 우선
        assert result.inventory[1].count == 20
        assert result.inventory[0] == InventorySlot(ItemKind.WOOD, 3)

    def test_splits_across_slots(self, registry: ItemRegistry) -> None:
        result = add_item(Inventory.empty(8), ItemKind.WOOD, 45, registry)
        counts = [s.count for _, s in result.inventory.occupied()]
        assert counts == [20, 20, 5]

    def test_overflow_when_full(self, registry: ItemRegistry) -> None:
        result = add_item(Inventory.empty(2), ItemKind.STONE, 50, registry)
        assert result.added == 40
        assert result.requested == 50
        assert result.overflow == 10

    def test_full_inventory_adds_nothing(self, registry: ItemRegistry) -> None:
        inv = _inv(InventorySlot(ItemKind.STONE, 20), size=1)
        result = add_item(inv, ItemKind.WOOD, 3, registry)
        assert result.added == 0
        assert result.inventory == inv

    def test_stack_limit_never_exceeded(self, registry: ItemRegistry) -> None:
        inv = Inventory.empty(8)
        for kind, n in [(ItemKind.CHARCOAL, 7), (ItemKind.CHARCOAL, 9), (ItemKind.BERRY, 23)]:
            inv = add_item(inv, kind, n, registry).inventory
        for _, slot in inv.occupied():
            assert 1 <= slot.count <= registry.max_stack(slot.kind)

    def test_tool_gets_durability(self, registry: ItemRegistry) -> None:
        result = add_item(Inventory.empty(8), ItemKind.AXE, 1, registry, durability=5)
        slot = result.inventory[0]
        assert slot.durability == 5
        assert slot.max_durability == 5

    def test_original_untouched(self, registry: ItemRegistry) -> None:
        inv = Inventory.empty(8)
        add_item(inv, ItemKind.WOOD, 3, registry)
        assert inv.count_of(ItemKind.WOOD) == 0


# ── Remove ────────────────────────────────────────────────────


class TestRemoveItem:
    def test_round_trip(self, registry: ItemRegistry) -> None:
        base = _inv(InventorySlot(ItemKind.STONE, 4))
        added = add_item(base, ItemKind.WOOD, 27, registry)
        removed = remove_item(added.inventory, ItemKind.WOOD, added.added)
        assert removed.success
        assert removed.inventory.count_of(ItemKind.WOOD) == 0
        assert removed.inventory == base

    def test_insufficient_is_atomic(self) -> None:
        inv = _inv(InventorySlot(ItemKind.WOOD, 3), InventorySlot(ItemKind.WOOD, 2))
        result = remove_item(inv, ItemKind.WOOD, 6)
        assert not result.success
        assert result.inventory is inv

    def test_consumes_back_to_front(self) -> None:
        inv = _inv(InventorySlot(ItemKind.WOOD, 5), None, InventorySlot(ItemKind.WOOD, 3))
        result = remove_item(inv, ItemKind.WOOD, 4)
        assert result.inventory[2] is None
        assert result.inventory[0].count == 4

    def test_emptied_slot_is_none(self) -> None:
        inv = _inv(InventorySlot(ItemKind.KEY, 1))
        result = remove_item(inv, ItemKind.KEY, 1)
        assert result.inventory[0] is None

    def test_consume_resources_all_or_nothing(self) -> None:
        inv = _inv(InventorySlot(ItemKind.WOOD, 5), InventorySlot(ItemKind.STONE, 1))
        reqs = [ItemRequirement(ItemKind.WOOD, 3), ItemRequirement(ItemKind.STONE, 2)]
        result = consume_resources(inv, reqs)
        assert not result.success
        assert result.inventory.count_of(ItemKind.WOOD) == 5


# ── Combined (개인 + 화물칸) ──────────────────────────────────


class TestConsumeCombined:
    def test_primary_first_then_spill(self) -> None:
        primary = _inv(InventorySlot(ItemKind.WOOD, 5))
        secondary = _inv(InventorySlot(ItemKind.WOOD, 2), size=10)
        result = consume_combined(primary, secondary, [ItemRequirement(ItemKind.WOOD, 6)])
        assert result.success
        assert result.primary.count_of(ItemKind.WOOD) == 0
        assert result.secondary.count_of(ItemKind.WOOD) == 1

    def test_sum_checked_before_mutation(self) -> None:
        primary = _inv(InventorySlot(ItemKind.WOOD, 5), InventorySlot(ItemKind.STONE, 1))
        secondary = _inv(InventorySlot(ItemKind.WOOD, 2))
        reqs = [ItemRequirement(ItemKind.WOOD, 6), ItemRequirement(ItemKind.STONE, 3)]
        result = consume_combined(primary, secondary, reqs)
        assert not result.success
        assert result.primary is primary
        assert result.secondary is secondary

    def test_secondary_untouched_when_primary_suffices(self) -> None:
        primary = _inv(InventorySlot(ItemKind.STONE, 4))
        secondary = _inv(InventorySlot(ItemKind.STONE, 4))
        result = consume_combined(primary, secondary, [ItemRequirement(ItemKind.STONE, 4)])
        assert result.secondary == secondary


# ── Tools / transfer ──────────────────────────────────────────


class TestFindTool:
    def test_selected_slot_preferred(self) -> None:
        inv = _inv(_tool(ItemKind.AXE), None, _tool(ItemKind.AXE, 2))
        assert find_tool_index(inv, ItemKind.AXE, selected_slot=2) == 2

    def test_falls_back_to_any_slot(self) -> None:
        inv = _inv(InventorySlot(ItemKind.WOOD, 3), _tool(ItemKind.PICKAXE))
        assert find_tool_index(inv, ItemKind.PICKAXE, selected_slot=0) == 1

    def test_zero_durability_not_usable(self) -> None:
        inv = _inv(_tool(ItemKind.AXE, durability=0))
        assert find_tool_index(inv, ItemKind.AXE) is None

    def test_no_durability_item_counts(self) -> None:
        inv = _inv(InventorySlot(ItemKind.KEY, 1))
        assert find_tool_index(inv, ItemKind.KEY) == 0


class TestTransferSlot:
    def test_moves_whole_stack(self, registry: ItemRegistry) -> None:
        source = _inv(InventorySlot(ItemKind.WOOD, 7))
        result = transfer_slot(source, Inventory.empty(10), 0, registry)
        assert result.moved == 7
        assert result.source[0] is None
        assert result.target.count_of(ItemKind.WOOD) == 7

    def test_partial_move_leaves_remainder(self, registry: ItemRegistry) -> None:
        source = _inv(InventorySlot(ItemKind.WOOD, 10))
        target = _inv(InventorySlot(ItemKind.WOOD, 16), size=1)
        result = transfer_slot(source, target, 0, registry)
        assert result.moved == 4
        assert result.source[0].count == 6

    def test_tool_keeps_durability(self, registry: ItemRegistry) -> None:
        source = _inv(_tool(ItemKind.BOW, durability=3))
        result = transfer_slot(source, Inventory.empty(10), 0, registry)
        assert result.target[0].durability == 3


# ── Durability ────────────────────────────────────────────────


class TestDurability:
    def test_decrease_by_one(self) -> None:
        inv = _inv(_tool(ItemKind.AXE, 3))
        result = decrease_tool_durability(inv, 0, selected_slot=0)
        assert result.inventory[0].durability == 2
        assert not result.broken
        assert result.selected_slot == 0

    def test_break_removes_and_clears_selection(self) -> None:
        inv = _inv(_tool(ItemKind.AXE, 1))
        result = decrease_tool_durability(inv, 0, selected_slot=0)
        assert result.broken
        assert result.inventory[0] is None
        assert result.selected_slot is None

    def test_break_keeps_other_selection(self) -> None:
        inv = _inv(_tool(ItemKind.AXE, 1), _tool(ItemKind.BOW))
        result = decrease_tool_durability(inv, 0, selected_slot=1)
        assert result.selected_slot == 1

    def test_no_durability_unchanged(self) -> None:
        inv = _inv(InventorySlot(ItemKind.KEY, 2))
        result = decrease_tool_durability(inv, 0)
        assert result.inventory == inv
        assert not result.broken

    def test_ratio(self) -> None:
        inv = _inv(_tool(ItemKind.AXE, 2), InventorySlot(ItemKind.WOOD, 1))
        assert get_durability_ratio(inv, 0) == 0.4
        assert get_durability_ratio(inv, 1) == 1.0
