"""
Railfog Core - Actions: Tile Action Validator
=============================================
타일 클릭 전 검증 - 클릭 가능 여부, 스태미나 비용, 요구 조건

부작용 없음. 거절은 예외가 아니라 Refusal 값으로 반환된다.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from railfog.core.balance import DEFAULT_CONFIG, GameConfig
from railfog.core.effects import Refusal, RefusalReason
from railfog.core.item.inventory import Inventory, find_tool_index
from railfog.core.item.models import ItemKind
from railfog.core.logging import get_logger
from railfog.core.state import Weather
from railfog.core.world.grid import Grid
from railfog.core.world.tile import TILE_TOOLS, Tile, TileKind

logger = get_logger(__name__)


@dataclass(frozen=True)
class TileActionContext:
    """검증/해결에 필요한 상태 조각"""

    tile: Tile
    grid: Grid
    inventory: Inventory
    stamina: int
    weather: Weather = Weather.SUNNY
    selected_slot: Optional[int] = None
    attack: int = 0  # 근접 공격력 (버프 포함)
    sector: int = 1
    sanity: int = 0
    rescued_count: int = 0
    passenger_capacity: int = 0
    game_over: bool = False


@dataclass(frozen=True)
class TileActionResult:
    can_proceed: bool
    cost: int = 0
    refusal: Optional[Refusal] = None


RequirementValidator = Callable[[TileActionContext, GameConfig], Optional[Refusal]]


def can_click_tile(tile: Tile, game_over: bool = False) -> bool:
    """클릭 가능 여부.

    - 안개 윤곽(peeked, 미공개): 탐험 시작/계속
    - 공개 + void 아님 + (미정리 / 정리됐지만 채집 가능 / 부서진 선로·다리)
    - 온전한 선로·다리, 열차 칸은 클릭 불가
    """
    if game_over:
        return False
    if tile.is_explorable:
        return True
    if not tile.revealed or tile.kind == TileKind.VOID or tile.is_spine:
        return False
    if tile.kind in (TileKind.TRACK, TileKind.BRIDGE):
        return tile.is_broken
    if not tile.cleared:
        return True
    return tile.is_harvestable


def calculate_tile_cost(
    tile: Tile, weather: Weather = Weather.SUNNY, config: GameConfig = DEFAULT_CONFIG
) -> int:
    """행동 스태미나 비용.

    탐험은 날씨/종류와 무관하게 기본 비용.
    지면/나무 채집은 반복할수록 감소 (하한 있음).
    """
    actions = config.actions
    if tile.is_explorable:
        return actions.cost_base
    if tile.kind in (TileKind.SEARCH, TileKind.TREE):
        decayed = actions.search_cost_initial - tile.search_count * actions.search_cost_decay
        return max(actions.search_cost_min, decayed)
    if tile.kind == TileKind.ENEMY:
        return actions.enemy_cost
    if weather == Weather.WINDY:
        return actions.cost_windy
    return actions.cost_base


# ── 요구 조건 검증기 ─────────────────────────────────────────


def require_no_hostiles(ctx: TileActionContext, config: GameConfig) -> Optional[Refusal]:
    if ctx.grid.has_hostiles():
        return Refusal(
            RefusalReason.NPC_BLOCKED, "Cannot rescue while enemies are nearby!"
        )
    return None


def require_passenger_room(ctx: TileActionContext, config: GameConfig) -> Optional[Refusal]:
    if ctx.rescued_count >= ctx.passenger_capacity:
        return Refusal(
            RefusalReason.CAPACITY_EXCEEDED,
            f"Train is full ({ctx.rescued_count}/{ctx.passenger_capacity} passengers).",
        )
    return None


def require_tool(ctx: TileActionContext, config: GameConfig) -> Optional[Refusal]:
    tool = TILE_TOOLS.get(ctx.tile.kind)
    if tool is None:
        return None
    if find_tool_index(ctx.inventory, tool, ctx.selected_slot) is None:
        return Refusal(RefusalReason.MISSING_TOOL, f"You need a {tool.value}!")
    return None


def require_repair_materials(ctx: TileActionContext, config: GameConfig) -> Optional[Refusal]:
    m = config.map
    wood = ctx.inventory.count_of(ItemKind.WOOD)
    stone = ctx.inventory.count_of(ItemKind.STONE)
    if wood < m.repair_cost_wood or stone < m.repair_cost_stone:
        return Refusal(
            RefusalReason.INSUFFICIENT_RESOURCES,
            f"Repair needs {m.repair_cost_wood} wood and {m.repair_cost_stone} stone.",
        )
    return None


# 공개된 타일 종류별 검증기 (순서대로 첫 거절 반환)
TILE_VALIDATORS: dict[TileKind, tuple[RequirementValidator, ...]] = {
    TileKind.NPC: (require_no_hostiles, require_passenger_room, require_tool),
    TileKind.TREE: (require_tool,),
    TileKind.ROCK: (require_tool,),
    TileKind.TRACK: (require_repair_materials,),
    TileKind.BRIDGE: (require_repair_materials,),
}


def validate_tile_action(
    ctx: TileActionContext, config: GameConfig = DEFAULT_CONFIG
) -> TileActionResult:
    """클릭 검증 + 비용 계산.

    1. 게임 종료 / 클릭 불가 → 거절
    2. 비용 계산
    3. 스태미나 부족 → 거절
    4. (탐험이 아니면) 종류별 요구 조건
    """
    tile = ctx.tile
    if ctx.game_over:
        return TileActionResult(
            can_proceed=False, refusal=Refusal(RefusalReason.GAME_OVER, "Game over.")
        )
    if not can_click_tile(tile):
        return TileActionResult(
            can_proceed=False,
            refusal=Refusal(RefusalReason.NOT_CLICKABLE, "Nothing to do here."),
        )

    cost = calculate_tile_cost(tile, ctx.weather, config)

    if ctx.stamina < cost:
        return TileActionResult(
            can_proceed=False,
            cost=cost,
            refusal=Refusal(
                RefusalReason.INSUFFICIENT_STAMINA,
                f"Exhausted! You need to rest. (need {cost}, have {ctx.stamina})",
            ),
        )

    if not tile.is_explorable:
        for validator in TILE_VALIDATORS.get(tile.kind, ()):
            refusal = validator(ctx, config)
            if refusal is not None:
                logger.debug("Refused %s at %s: %s", tile.kind.value, tile.id, refusal.reason.value)
                return TileActionResult(can_proceed=False, cost=cost, refusal=refusal)

    return TileActionResult(can_proceed=True, cost=cost)
