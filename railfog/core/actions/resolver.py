"""
Railfog Core - Actions: Interaction Resolver
============================================
검증을 통과한 타일 행동의 실제 상태 변경

종류별 분기:
- 탐험: 진행도 +1, 완료 시 공개 + 첫 공개 보상 + 매복 판정
- 전투: 활/근접 피해, 처치 시 전리품, 반격
- 채집: 나무/바위/지면
- NPC 구조: 카운트다운, 완료 시 열쇠 소모 + 버프
- 선로/다리 수리: 진행도 +1, 완료 시 재료 소모

모든 전리품은 인벤토리 원장의 add_item을 거친다.
통계는 실제로 들어간 양만 기록한다.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Optional

from railfog.core.balance import DEFAULT_CONFIG, GameConfig
from railfog.core.dice import roll_chance, roll_range
from railfog.core.effects import LogEntry, LogLevel, Refusal, RefusalReason, StatDelta
from railfog.core.item.durability import decrease_tool_durability
from railfog.core.item.inventory import (
    Inventory,
    add_item,
    consume_resources,
    find_tool_index,
    remove_item,
)
from railfog.core.item.models import ItemKind, ItemRequirement
from railfog.core.item.registry import ItemRegistry
from railfog.core.logging import get_logger
from railfog.core.world.enemies import calculate_enemy_level, key_drop_chance
from railfog.core.world.grid import Grid
from railfog.core.world.tile import TILE_TOOLS, BuffType, Tile, TileKind
from railfog.core.world.visibility import newly_peeked, update_peek_status

from .validator import TileActionContext

logger = get_logger(__name__)


@dataclass(frozen=True)
class InteractionResult:
    """해결 결과. 엔진이 GameState에 반영한다."""

    grid: Grid
    inventory: Inventory
    selected_slot: Optional[int]
    damage: int = 0
    gold: int = 0
    stats: StatDelta = StatDelta()
    logs: tuple[LogEntry, ...] = field(default_factory=tuple)

    revealed: Optional[Tile] = None
    defeated: Optional[Tile] = None
    rescued: Optional[BuffType] = None
    repaired: Optional[Tile] = None
    ambushers: tuple[Tile, ...] = field(default_factory=tuple)
    broken_tools: tuple[ItemKind, ...] = field(default_factory=tuple)


class _Loot:
    """한 행동 동안의 인벤토리/통계/로그 누적기"""

    def __init__(self, ctx: TileActionContext, registry: ItemRegistry) -> None:
        self.registry = registry
        self.inventory = ctx.inventory
        self.selected_slot = ctx.selected_slot
        self.stats = StatDelta()
        self.logs: list[LogEntry] = []
        self.broken: list[ItemKind] = []

    def log(self, text: str, level: LogLevel = LogLevel.NEUTRAL) -> None:
        self.logs.append(LogEntry(text, level))

    def add(self, kind: ItemKind, count: int) -> int:
        if count <= 0:
            return 0
        result = add_item(self.inventory, kind, count, self.registry)
        self.inventory = result.inventory
        if kind == ItemKind.WOOD:
            self.stats = self.stats + StatDelta(wood=result.added)
        elif kind == ItemKind.STONE:
            self.stats = self.stats + StatDelta(stone=result.added)

        if result.added:
            self.log(f"+{result.added} {kind.value}", LogLevel.SUCCESS)
        if result.overflow:
            self.log(
                f"Inventory full! {result.overflow} {kind.value} discarded.", LogLevel.WARNING
            )
        return result.added

    def wear(self, slot_index: Optional[int]) -> None:
        if slot_index is None:
            return
        result = decrease_tool_durability(self.inventory, slot_index, self.selected_slot)
        self.inventory = result.inventory
        self.selected_slot = result.selected_slot
        if result.broken and result.kind is not None:
            self.broken.append(result.kind)
            self.log(f"Your {result.kind.value} broke!", LogLevel.WARNING)

    def finish(self, grid: Grid, **extra) -> InteractionResult:
        return InteractionResult(
            grid=grid,
            inventory=self.inventory,
            selected_slot=self.selected_slot,
            stats=self.stats + extra.pop("stats", StatDelta()),
            logs=tuple(self.logs),
            broken_tools=tuple(self.broken),
            **extra,
        )


def _active_bow(ctx: TileActionContext) -> Optional[int]:
    """선택 슬롯이 사용 가능한 활이면 그 인덱스"""
    idx = ctx.selected_slot
    if idx is None or not 0 <= idx < len(ctx.inventory):
        return None
    slot = ctx.inventory[idx]
    if slot is not None and slot.kind == ItemKind.BOW and slot.is_usable:
        return idx
    return None


# ── 탐험 ─────────────────────────────────────────────────────


def explore_tile(
    ctx: TileActionContext,
    rng: random.Random,
    registry: ItemRegistry,
    config: GameConfig = DEFAULT_CONFIG,
) -> InteractionResult:
    loot = _Loot(ctx, registry)
    tile = ctx.tile
    progress = tile.exploration_progress + 1

    if progress < tile.max_exploration:
        loot.log(f"Exploring... ({progress}/{tile.max_exploration})")
        return loot.finish(ctx.grid.replace(tile.evolve(exploration_progress=progress)))

    revealed = tile.evolve(
        revealed=True,
        peeked=False,
        exploration_progress=progress,
        cleared=tile.cleared or tile.kind == TileKind.SEARCH,
    )
    loot.log(f"Discovered: {tile.kind.value}", LogLevel.IMPORTANT)

    reward = config.loot.reveal_rewards.get(tile.kind.value)
    if reward is not None:
        item, amount = reward
        loot.add(ItemKind(item), amount)

    if tile.kind == TileKind.SEARCH and roll_chance(rng, config.loot.berry_chance):
        loot.add(ItemKind.BERRY, roll_range(rng, config.loot.berry_amount))

    before = ctx.grid.replace(revealed)
    after = update_peek_status(before)
    ambushers = tuple(t for t in newly_peeked(before, after) if t.kind == TileKind.ENEMY)
    damage = sum(t.attack for t in ambushers)
    for enemy in ambushers:
        loot.log(
            f"Ambush! Enemy at ({enemy.x}, {enemy.y}) strikes (-{enemy.attack} HP)",
            LogLevel.ERROR,
        )

    return loot.finish(
        after,
        revealed=after.at(tile.x, tile.y),
        ambushers=ambushers,
        damage=damage,
    )


# ── 전투 ─────────────────────────────────────────────────────


def fight_enemy(
    ctx: TileActionContext,
    rng: random.Random,
    registry: ItemRegistry,
    config: GameConfig = DEFAULT_CONFIG,
) -> InteractionResult:
    """전투 한 합.

    활이 활성 상태면 반격 없음. 활 내구도는 결과와 무관하게 1 감소.
    처치 시 난수 순서: 나무 → 돌 → 골드 → 열쇠.
    """
    loot = _Loot(ctx, registry)
    tile = ctx.tile
    bow = _active_bow(ctx)
    dealt = config.actions.bow_damage if bow is not None else ctx.attack
    hp = tile.hp - dealt
    retaliation = 0 if bow is not None else tile.attack

    loot.wear(bow)

    if hp > 0:
        loot.log(f"Hit enemy for {dealt}. ({hp}/{tile.max_hp} HP left)")
        if retaliation:
            loot.log(f"Enemy strikes back! (-{retaliation} HP)", LogLevel.ERROR)
        return loot.finish(ctx.grid.replace(tile.evolve(hp=hp)), damage=retaliation)

    enemies = config.enemies
    level = calculate_enemy_level(ctx.sector, ctx.sanity, config)
    wood = roll_range(rng, enemies.loot_wood)
    stone = roll_range(rng, enemies.loot_stone)
    gold = roll_range(rng, enemies.loot_gold)
    key = roll_chance(rng, key_drop_chance(level, config))

    if retaliation:
        loot.log(f"Enemy defeated, but it hit you first! (-{retaliation} HP)", LogLevel.WARNING)
    else:
        loot.log("Enemy defeated!", LogLevel.SUCCESS)
    loot.add(ItemKind.WOOD, wood)
    loot.add(ItemKind.STONE, stone)
    loot.log(f"+{gold} gold", LogLevel.SUCCESS)
    if key:
        loot.add(ItemKind.KEY, 1)

    grid = update_peek_status(ctx.grid.replace(tile.to_ground()))
    return loot.finish(
        grid,
        damage=retaliation,
        gold=gold,
        defeated=tile,
        stats=StatDelta(enemies_defeated=1),
    )


# ── 채집 ─────────────────────────────────────────────────────


def chop_tree(
    ctx: TileActionContext,
    rng: random.Random,
    registry: ItemRegistry,
    config: GameConfig = DEFAULT_CONFIG,
) -> InteractionResult:
    loot = _Loot(ctx, registry)
    tile = ctx.tile
    tool = find_tool_index(ctx.inventory, TILE_TOOLS[TileKind.TREE], ctx.selected_slot)

    loot.add(ItemKind.WOOD, roll_range(rng, config.loot.tree_wood))
    loot.wear(tool)

    left = tile.scavenge_left - 1
    if left <= 0:
        loot.log("The tree is gone.")
        updated = tile.to_ground()
    else:
        updated = tile.evolve(scavenge_left=left, search_count=tile.search_count + 1)
    return loot.finish(update_peek_status(ctx.grid.replace(updated)))


def mine_rock(
    ctx: TileActionContext,
    rng: random.Random,
    registry: ItemRegistry,
    config: GameConfig = DEFAULT_CONFIG,
) -> InteractionResult:
    loot = _Loot(ctx, registry)
    tool = find_tool_index(ctx.inventory, TILE_TOOLS[TileKind.ROCK], ctx.selected_slot)

    loot.add(ItemKind.STONE, roll_range(rng, config.loot.rock_stone))
    loot.wear(tool)
    return loot.finish(update_peek_status(ctx.grid.replace(ctx.tile.to_ground())))


def scavenge_ground(
    ctx: TileActionContext,
    rng: random.Random,
    registry: ItemRegistry,
    config: GameConfig = DEFAULT_CONFIG,
) -> InteractionResult:
    """정리된 지면 뒤지기: 나무 조각 / 돌 / 없음"""
    loot = _Loot(ctx, registry)
    tile = ctx.tile
    roll = rng.random()
    if roll < config.loot.ground_wood_chance:
        loot.add(ItemKind.WOOD, 1)
    elif roll < config.loot.ground_stone_threshold:
        loot.add(ItemKind.STONE, 1)
    else:
        loot.log("Found nothing.")

    updated = tile.evolve(scavenge_left=tile.scavenge_left - 1, search_count=tile.search_count + 1)
    return loot.finish(ctx.grid.replace(updated))


# ── 구조 / 수리 ──────────────────────────────────────────────


def rescue_npc(
    ctx: TileActionContext,
    rng: random.Random,
    registry: ItemRegistry,
    config: GameConfig = DEFAULT_CONFIG,
) -> InteractionResult:
    loot = _Loot(ctx, registry)
    tile = ctx.tile
    left = tile.rescue_progress - 1

    if left > 0:
        loot.log(f"Unlocking the shackles... ({left} more)")
        return loot.finish(ctx.grid.replace(tile.evolve(rescue_progress=left)))

    removed = remove_item(loot.inventory, ItemKind.KEY, 1)
    loot.inventory = removed.inventory
    buff = tile.npc_buff or BuffType.STAMINA
    loot.log(f"Passenger rescued! (+{buff.value})", LogLevel.IMPORTANT)

    grid = update_peek_status(ctx.grid.replace(tile.to_ground()))
    return loot.finish(grid, rescued=buff, stats=StatDelta(npcs_rescued=1))


def repair_track(
    ctx: TileActionContext,
    rng: random.Random,
    registry: ItemRegistry,
    config: GameConfig = DEFAULT_CONFIG,
) -> InteractionResult:
    """수리 진행도 +1. 완료 시점에 재료를 소모한다."""
    loot = _Loot(ctx, registry)
    tile = ctx.tile
    progress = tile.repair_progress + 1

    if progress < tile.max_repair_progress:
        loot.log(f"Repairing... ({progress}/{tile.max_repair_progress})")
        return loot.finish(ctx.grid.replace(tile.evolve(repair_progress=progress)))

    m = config.map
    consumed = consume_resources(
        loot.inventory,
        [
            ItemRequirement(ItemKind.WOOD, m.repair_cost_wood),
            ItemRequirement(ItemKind.STONE, m.repair_cost_stone),
        ],
    )
    if not consumed.success:
        refusal = Refusal(
            RefusalReason.INSUFFICIENT_RESOURCES, "Not enough materials to finish the repair."
        )
        loot.logs.append(refusal.to_log())
        return loot.finish(ctx.grid)

    loot.inventory = consumed.inventory
    repaired = tile.evolve(is_broken=False, repair_progress=progress)
    loot.log(f"{tile.kind.value.capitalize()} repaired!", LogLevel.SUCCESS)
    return loot.finish(update_peek_status(ctx.grid.replace(repaired)), repaired=repaired)


Resolver = Callable[[TileActionContext, random.Random, ItemRegistry, GameConfig], InteractionResult]

REVEALED_RESOLVERS: dict[TileKind, Resolver] = {
    TileKind.ENEMY: fight_enemy,
    TileKind.TREE: chop_tree,
    TileKind.ROCK: mine_rock,
    TileKind.SEARCH: scavenge_ground,
    TileKind.NPC: rescue_npc,
    TileKind.TRACK: repair_track,
    TileKind.BRIDGE: repair_track,
}


def resolve_tile_action(
    ctx: TileActionContext,
    rng: random.Random,
    registry: ItemRegistry,
    config: GameConfig = DEFAULT_CONFIG,
) -> InteractionResult:
    """검증된 행동 실행. validate_tile_action 이후에만 호출한다."""
    tile = ctx.tile
    if tile.is_explorable:
        return explore_tile(ctx, rng, registry, config)

    resolver = REVEALED_RESOLVERS.get(tile.kind)
    if resolver is None:
        raise ValueError(f"No interaction for tile kind: {tile.kind.value}")
    result = resolver(ctx, rng, registry, config)
    logger.debug("Resolved %s at %s (damage=%d)", tile.kind.value, tile.id, result.damage)
    return result


# ── 아이템 사용 ──────────────────────────────────────────────


@dataclass(frozen=True)
class ConsumeResult:
    success: bool
    inventory: Inventory
    health: int
    stamina: int
    refusal: Optional[Refusal] = None
    logs: tuple[LogEntry, ...] = field(default_factory=tuple)


def consume_berry(
    inventory: Inventory,
    health: int,
    stamina: int,
    max_health: int,
    max_stamina: int,
    config: GameConfig = DEFAULT_CONFIG,
) -> ConsumeResult:
    """열매 1개 섭취. 체력/스태미나 둘 다 가득이면 거절."""
    if health >= max_health and stamina >= max_stamina:
        return ConsumeResult(
            False,
            inventory,
            health,
            stamina,
            refusal=Refusal(RefusalReason.ALREADY_FULL, "You are not hungry."),
        )

    removed = remove_item(inventory, ItemKind.BERRY, 1)
    if not removed.success:
        return ConsumeResult(
            False,
            inventory,
            health,
            stamina,
            refusal=Refusal(RefusalReason.NOTHING_TO_DO, "No berries to eat."),
        )

    effects = config.items
    new_health = min(max_health, health + effects.berry_heal)
    new_stamina = min(max_stamina, stamina + effects.berry_stamina)
    return ConsumeResult(
        True,
        removed.inventory,
        new_health,
        new_stamina,
        logs=(
            LogEntry(
                f"Ate a berry. (+{new_health - health} HP, +{new_stamina - stamina} stamina)",
                LogLevel.SUCCESS,
            ),
        ),
    )
