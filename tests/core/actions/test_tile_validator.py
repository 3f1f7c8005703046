"""타일 행동 검증기 테스트: 클릭 가능 여부, 비용, 요구 조건"""

from __future__ import annotations

from typing import Optional

import pytest

from railfog.core.actions.validator import (
    TileActionContext,
    calculate_tile_cost,
    can_click_tile,
    validate_tile_action,
)
from railfog.core.effects import RefusalReason
from railfog.core.item.inventory import Inventory
from railfog.core.item.models import InventorySlot, ItemKind
from railfog.core.state import Weather
from railfog.core.world.grid import Grid
from railfog.core.world.tile import BuffType, Tile, TileKind


def _inv(*slots: InventorySlot) -> Inventory:
    return Inventory(slots=tuple(list(slots) + [None] * (8 - len(slots))))


def _grid_with(*tiles: Tile, size: int = 3) -> Grid:
    by_pos = {(t.x, t.y): t for t in tiles}
    return Grid(
        size=size,
        tiles=tuple(
            by_pos.get((x, y), Tile(x, y, TileKind.SEARCH, revealed=True, cleared=True))
            for y in range(size)
            for x in range(size)
        ),
    )


def _ctx(
    tile: Tile,
    inventory: Optional[Inventory] = None,
    stamina: int = 50,
    extra: tuple[Tile, ...] = (),
    **kw,
) -> TileActionContext:
    return TileActionContext(
        tile=tile,
        grid=_grid_with(tile, *extra),
        inventory=inventory or Inventory.empty(8),
        stamina=stamina,
        **kw,
    )


def _npc(**kw) -> Tile:
    return Tile(
        1,
        1,
        TileKind.NPC,
        revealed=True,
        npc_buff=BuffType.HEALTH,
        rescue_progress=2,
        max_rescue_progress=2,
        **kw,
    )


KEY = InventorySlot(ItemKind.KEY, 1)
AXE = InventorySlot(ItemKind.AXE, 1, durability=5, max_durability=5)


# ── Clickability ──────────────────────────────────────────────


class TestCanClickTile:
    @pytest.mark.parametrize(
        "tile,expected",
        [
            (Tile(0, 0, TileKind.TREE, peeked=True), True),
            (Tile(0, 0, TileKind.TREE), False),
            (Tile(0, 0, TileKind.VOID, revealed=True), False),
            (Tile(0, 0, TileKind.LOCOMOTIVE, revealed=True, cleared=True), False),
            (Tile(0, 0, TileKind.TRACK, revealed=True), False),
            (Tile(0, 0, TileKind.TRACK, revealed=True, is_broken=True), True),
            (Tile(0, 0, TileKind.BRIDGE, revealed=True, is_broken=True), True),
            (Tile(0, 0, TileKind.ENEMY, revealed=True, hp=3), True),
            (Tile(0, 0, TileKind.SEARCH, revealed=True, cleared=True), False),
            (Tile(0, 0, TileKind.SEARCH, revealed=True, cleared=True, scavenge_left=2), True),
        ],
    )
    def test_gate(self, tile: Tile, expected: bool) -> None:
        assert can_click_tile(tile) is expected

    def test_game_over_blocks_everything(self) -> None:
        assert not can_click_tile(Tile(0, 0, TileKind.TREE, peeked=True), game_over=True)


# ── Cost ──────────────────────────────────────────────────────


class TestCost:
    def test_exploration_ignores_weather_and_kind(self) -> None:
        for kind in (TileKind.ENEMY, TileKind.TREE, TileKind.ROCK):
            tile = Tile(0, 0, kind, peeked=True)
            assert calculate_tile_cost(tile, Weather.WINDY) == 8

    def test_ground_cost_non_increasing_and_floored(self) -> None:
        costs = [
            calculate_tile_cost(
                Tile(0, 0, TileKind.SEARCH, revealed=True, cleared=True, search_count=n)
            )
            for n in range(10)
        ]
        assert costs == sorted(costs, reverse=True)
        assert costs[0] == 6
        assert costs[-1] == 2

    def test_tree_uses_search_curve(self) -> None:
        tile = Tile(0, 0, TileKind.TREE, revealed=True, search_count=2)
        assert calculate_tile_cost(tile, Weather.WINDY) == 4

    def test_enemy_fixed_cost(self) -> None:
        tile = Tile(0, 0, TileKind.ENEMY, revealed=True)
        assert calculate_tile_cost(tile, Weather.WINDY) == calculate_tile_cost(tile) == 10

    def test_windy_at_least_sunny(self) -> None:
        rock = Tile(0, 0, TileKind.ROCK, revealed=True)
        assert calculate_tile_cost(rock, Weather.WINDY) >= calculate_tile_cost(rock, Weather.SUNNY)
        assert calculate_tile_cost(rock, Weather.WINDY) == 12
        assert calculate_tile_cost(rock, Weather.RAIN) == 8


# ── Requirements ──────────────────────────────────────────────


class TestNpcRequirements:
    def test_blocked_by_revealed_enemy(self) -> None:
        enemy = Tile(0, 0, TileKind.ENEMY, revealed=True, attack=2, hp=3)
        ctx = _ctx(_npc(), _inv(KEY), extra=(enemy,), passenger_capacity=2)
        result = validate_tile_action(ctx)
        assert not result.can_proceed
        assert result.refusal.reason == RefusalReason.NPC_BLOCKED

    def test_hidden_enemy_does_not_block(self) -> None:
        enemy = Tile(0, 0, TileKind.ENEMY, attack=2, hp=3)
        ctx = _ctx(_npc(), _inv(KEY), extra=(enemy,), passenger_capacity=2)
        assert validate_tile_action(ctx).can_proceed

    def test_roster_full(self) -> None:
        ctx = _ctx(_npc(), _inv(KEY), rescued_count=2, passenger_capacity=2)
        assert validate_tile_action(ctx).refusal.reason == RefusalReason.CAPACITY_EXCEEDED

    def test_needs_key(self) -> None:
        ctx = _ctx(_npc(), passenger_capacity=2)
        assert validate_tile_action(ctx).refusal.reason == RefusalReason.MISSING_TOOL


class TestToolRequirements:
    def test_tree_needs_axe(self) -> None:
        ctx = _ctx(Tile(1, 1, TileKind.TREE, revealed=True, scavenge_left=2))
        result = validate_tile_action(ctx)
        assert result.refusal.reason == RefusalReason.MISSING_TOOL
        assert "axe" in result.refusal.message

    def test_tree_with_axe(self) -> None:
        ctx = _ctx(Tile(1, 1, TileKind.TREE, revealed=True, scavenge_left=2), _inv(AXE))
        result = validate_tile_action(ctx)
        assert result.can_proceed
        assert result.cost == 6

    def test_worn_out_tool_rejected(self) -> None:
        worn = InventorySlot(ItemKind.PICKAXE, 1, durability=0, max_durability=5)
        ctx = _ctx(Tile(1, 1, TileKind.ROCK, revealed=True), _inv(worn))
        assert validate_tile_action(ctx).refusal.reason == RefusalReason.MISSING_TOOL

    def test_enemy_needs_no_bow(self) -> None:
        ctx = _ctx(Tile(1, 1, TileKind.ENEMY, revealed=True, attack=2, hp=3))
        assert validate_tile_action(ctx).can_proceed

    def test_exploring_skips_tool_check(self) -> None:
        ctx = _ctx(Tile(1, 1, TileKind.TREE, peeked=True))
        assert validate_tile_action(ctx).can_proceed


class TestRepairRequirements:
    BROKEN = Tile(1, 1, TileKind.TRACK, revealed=True, is_broken=True, max_repair_progress=2)

    def test_insufficient_materials(self) -> None:
        inv = _inv(InventorySlot(ItemKind.WOOD, 3), InventorySlot(ItemKind.STONE, 1))
        result = validate_tile_action(_ctx(self.BROKEN, inv))
        assert result.refusal.reason == RefusalReason.INSUFFICIENT_RESOURCES

    def test_materials_summed_across_slots(self) -> None:
        inv = _inv(
            InventorySlot(ItemKind.WOOD, 2),
            InventorySlot(ItemKind.WOOD, 1),
            InventorySlot(ItemKind.STONE, 2),
        )
        assert validate_tile_action(_ctx(self.BROKEN, inv)).can_proceed


# ── Stamina / game over ───────────────────────────────────────


class TestStaminaAndGameOver:
    def test_insufficient_stamina(self) -> None:
        ctx = _ctx(Tile(1, 1, TileKind.ENEMY, revealed=True, attack=2, hp=3), stamina=9)
        result = validate_tile_action(ctx)
        assert not result.can_proceed
        assert result.cost == 10
        assert result.refusal.reason == RefusalReason.INSUFFICIENT_STAMINA

    def test_stamina_checked_before_requirements(self) -> None:
        # 도끼도 없고 스태미나도 없으면 스태미나 부족이 먼저
        ctx = _ctx(Tile(1, 1, TileKind.TREE, revealed=True, scavenge_left=2), stamina=0)
        result = validate_tile_action(ctx)
        assert result.refusal.reason == RefusalReason.INSUFFICIENT_STAMINA
        assert result.cost == 6

    def test_requirements_checked_once_stamina_suffices(self) -> None:
        ctx = _ctx(Tile(1, 1, TileKind.TREE, revealed=True, scavenge_left=2), stamina=6)
        assert validate_tile_action(ctx).refusal.reason == RefusalReason.MISSING_TOOL

    def test_exact_stamina_allowed(self) -> None:
        ctx = _ctx(Tile(1, 1, TileKind.ENEMY, revealed=True, attack=2, hp=3), stamina=10)
        assert validate_tile_action(ctx).can_proceed

    def test_game_over(self) -> None:
        ctx = _ctx(Tile(1, 1, TileKind.TREE, peeked=True), game_over=True)
        assert validate_tile_action(ctx).refusal.reason == RefusalReason.GAME_OVER

    def test_not_clickable(self) -> None:
        ctx = _ctx(Tile(1, 1, TileKind.SEARCH, revealed=True, cleared=True))
        assert validate_tile_action(ctx).refusal.reason == RefusalReason.NOT_CLICKABLE
