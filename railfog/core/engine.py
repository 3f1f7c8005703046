"""
Railfog Core Engine - Main Entry Point
======================================
Railfog 핵심 엔진 통합 모듈

이 모듈은 모든 하위 시스템을 통합하여
한 판의 게임 세션(GameState)을 관리합니다.
하위 시스템은 새 값을 반환하고, 엔진이 그것을 상태에 반영합니다.
"""

import random
from dataclasses import dataclass, field
from typing import Any, Optional

from railfog.core.actions.resolver import InteractionResult, consume_berry, resolve_tile_action
from railfog.core.actions.validator import TileActionContext, validate_tile_action
from railfog.core.balance import DEFAULT_CONFIG, GameConfig
from railfog.core.effects import LogEntry, LogLevel, Refusal, RefusalReason, StatDelta
from railfog.core.event_bus import EventBus, GameEvent
from railfog.core.event_types import EventTypes
from railfog.core.item.crafting import craft_item
from railfog.core.item.durability import get_durability_ratio
from railfog.core.item.inventory import Inventory, transfer_slot
from railfog.core.item.models import ItemKind
from railfog.core.item.registry import ItemRegistry, RecipeBook
from railfog.core.logging import get_logger
from railfog.core.rest import (
    EncounterMode,
    RestReport,
    apply_rest,
    calculate_rest_outcome,
    roll_encounter,
)
from railfog.core.scoring import ScoreBreakdown, calculate_score
from railfog.core.state import GameState, RescuedNPC, ViewState, Weather
from railfog.core.train import (
    add_fuel,
    check_departure,
    passenger_capacity,
    retained_stamina,
    roll_weather,
    target_pressure,
)
from railfog.core.world.enemies import update_enemy_attack_progress
from railfog.core.world.generator import SectorGenerator

logger = get_logger(__name__)


@dataclass
class ActionResult:
    """행동 결과"""

    success: bool
    action_type: str
    refusal: Optional[Refusal] = None
    logs: tuple[LogEntry, ...] = field(default_factory=tuple)
    data: Optional[dict] = None

    @property
    def message(self) -> str:
        if self.refusal is not None:
            return self.refusal.message
        return self.logs[-1].text if self.logs else ""

    def to_dict(self) -> dict:
        result: dict[str, Any] = {
            "success": self.success,
            "action": self.action_type,
            "message": self.message,
        }
        if self.refusal is not None:
            result["reason"] = self.refusal.reason.value
        if self.data:
            result["data"] = self.data
        return result


class GameEngine:
    """
    Railfog 메인 엔진

    모든 Core 시스템을 통합하고 GameState를 소유합니다.
    난수는 주입된 random.Random 하나에서만 뽑습니다.
    """

    VERSION = "0.1.0"
    SOURCE = "engine"

    def __init__(
        self,
        config: GameConfig = DEFAULT_CONFIG,
        registry: Optional[ItemRegistry] = None,
        recipes: Optional[RecipeBook] = None,
        rng: Optional[random.Random] = None,
        event_bus: Optional[EventBus] = None,
        encounter_mode: EncounterMode = EncounterMode.DICE,
    ):
        """
        엔진 초기화

        Args:
            config: 밸런스 상수
            registry: 아이템 레지스트리 (None이면 기본 items.json)
            recipes: 레시피 북 (None이면 기본 recipes.json)
            rng: 난수 생성기 (재현성)
            event_bus: 표시 레이어로의 이벤트 버스
            encounter_mode: 휴식 조우 판정 방식
        """
        self.config = config
        self.registry = registry or ItemRegistry.default()
        self.recipes = recipes or RecipeBook.default(self.registry)
        self.rng = rng or random.Random()
        self.event_bus = event_bus or EventBus()
        self.encounter_mode = encounter_mode
        self.generator = SectorGenerator(config, self.rng)

        self._state: Optional[GameState] = None
        self._pending_rest: Optional[RestReport] = None

        logger.info(
            "Railfog engine v%s ready (%d items, %d recipes, encounter=%s)",
            self.VERSION,
            self.registry.count(),
            len(self.recipes.get_all()),
            encounter_mode.value,
        )

    # === 상태 ===

    @property
    def state(self) -> GameState:
        if self._state is None:
            raise RuntimeError("Game not started")
        return self._state

    @property
    def pending_rest(self) -> Optional[RestReport]:
        return self._pending_rest

    def new_game(self) -> GameState:
        """1섹터부터 새 게임 시작"""
        cfg = self.config
        state = GameState(
            grid=self.generator.generate(1, 0),
            inventory=Inventory.empty(cfg.inventory.size),
            cargo=Inventory.empty(cfg.inventory.cargo_size),
            stamina=cfg.avatar.max_stamina,
            health=cfg.avatar.max_health,
            target_pressure=target_pressure(1, cfg),
            weather=Weather.SUNNY,
        )
        self._state = state
        self._pending_rest = None
        logger.info("New game started")
        self._publish(EventTypes.SECTOR_ENTERED, sector=1, weather=state.weather.value)
        self._finish()
        return state

    # === 타일 ===

    def build_context(self, x: int, y: int) -> Optional[TileActionContext]:
        state = self.state
        tile = state.grid.get(x, y)
        if tile is None:
            return None
        return TileActionContext(
            tile=tile,
            grid=state.grid,
            inventory=state.inventory,
            stamina=state.stamina,
            weather=state.weather,
            selected_slot=state.selected_slot,
            attack=state.attack(self.config),
            sector=state.sector,
            sanity=state.sanity,
            rescued_count=len(state.rescued),
            passenger_capacity=passenger_capacity(state.carriage_level, self.config),
            game_over=state.is_over,
        )

    def click_tile(self, x: int, y: int) -> ActionResult:
        """타일 클릭: 검증 → 해결 → 시간 경과 → 사망 판정"""
        if self._pending_rest is not None:
            return self._refuse("click_tile", self._rest_pending_refusal())
        ctx = self.build_context(x, y)
        if ctx is None:
            return self._refuse(
                "click_tile", Refusal(RefusalReason.NOT_CLICKABLE, f"Out of map: ({x}, {y})")
            )

        check = validate_tile_action(ctx, self.config)
        if not check.can_proceed:
            return self._refuse("click_tile", check.refusal)

        result = resolve_tile_action(ctx, self.rng, self.registry, self.config)
        self._apply_interaction(result, check.cost, ctx.tile.id)
        logs = list(result.logs)
        logs.extend(self._advance_clock(self.config.actions.minutes_per_action))

        self._publish_logs(logs)
        self._publish_interaction(result)
        self._check_game_over()
        self._finish()
        return ActionResult(
            success=True,
            action_type="click_tile",
            logs=tuple(logs),
            data={"x": x, "y": y, "cost": check.cost, "damage": result.damage},
        )

    def _apply_interaction(self, result: InteractionResult, cost: int, origin: str) -> None:
        state = self.state
        rescued = state.rescued
        if result.rescued is not None:
            rescued = rescued + (RescuedNPC(result.rescued, origin=origin),)
        self._state = state.evolve(
            grid=result.grid,
            inventory=result.inventory,
            selected_slot=result.selected_slot,
            stamina=state.stamina - cost,
            health=state.health - result.damage,
            gold=state.gold + result.gold,
            stats=state.stats.apply(result.stats),
            rescued=rescued,
        )

    def _publish_interaction(self, result: InteractionResult) -> None:
        if result.revealed is not None:
            self._publish(
                EventTypes.TILE_REVEALED,
                x=result.revealed.x,
                y=result.revealed.y,
                kind=result.revealed.kind.value,
                ambushers=len(result.ambushers),
            )
        if result.defeated is not None:
            self._publish(EventTypes.ENEMY_DEFEATED, x=result.defeated.x, y=result.defeated.y)
        if result.rescued is not None:
            self._publish(EventTypes.NPC_RESCUED, buff=result.rescued.value)
        for kind in result.broken_tools:
            self._publish(EventTypes.ITEM_BROKEN, kind=kind.value)

    # === 인벤토리 ===

    def select_slot(self, index: Optional[int]) -> Optional[int]:
        """슬롯 선택. 같은 슬롯을 다시 고르거나 빈 슬롯이면 선택 해제."""
        state = self.state
        if index is not None and not 0 <= index < len(state.inventory):
            raise IndexError(f"Inventory slot out of range: {index}")

        selected = index
        if index is None or index == state.selected_slot or state.inventory[index] is None:
            selected = None
        self._state = state.evolve(selected_slot=selected)
        return selected

    def inventory_view(self) -> list[Optional[dict]]:
        """표시 레이어용 슬롯 목록. 빈 슬롯은 None."""
        inventory = self.state.inventory
        view: list[Optional[dict]] = []
        for index, slot in enumerate(inventory):
            if slot is None:
                view.append(None)
                continue
            view.append(
                {
                    "index": index,
                    "kind": slot.kind.value,
                    "count": slot.count,
                    "durability": slot.durability,
                    "durability_ratio": get_durability_ratio(inventory, index),
                    "selected": index == self.state.selected_slot,
                }
            )
        return view

    def eat(self) -> ActionResult:
        """열매 섭취"""
        refusal = self._guard()
        if refusal:
            return self._refuse("eat", refusal)

        state = self.state
        result = consume_berry(
            state.inventory,
            state.health,
            state.stamina,
            state.max_health(self.config),
            state.max_stamina(self.config),
            self.config,
        )
        if not result.success:
            return self._refuse("eat", result.refusal)

        self._state = state.evolve(
            inventory=result.inventory, health=result.health, stamina=result.stamina
        )
        self._publish_logs(result.logs)
        self._finish()
        return ActionResult(success=True, action_type="eat", logs=result.logs)

    def craft(self, recipe_id: str) -> ActionResult:
        """레시피 실행 (개인 인벤토리 + 화물칸 재료)"""
        recipe = self.recipes.get(recipe_id)
        if recipe is None:
            raise ValueError(f"Unknown recipe: {recipe_id}")
        refusal = self._guard()
        if refusal:
            return self._refuse("craft", refusal)

        state = self.state
        result = craft_item(recipe, state.inventory, state.cargo, state.stamina, self.registry)
        if not result.success:
            return self._refuse("craft", result.refusal)

        self._state = state.evolve(
            inventory=result.primary,
            cargo=result.secondary,
            stamina=state.stamina - result.stamina_cost,
            stats=state.stats.apply(result.stats),
        )
        self._publish_logs(result.logs)
        self._finish()
        return ActionResult(
            success=True,
            action_type="craft",
            logs=result.logs,
            data={"recipe": recipe_id, "repaired": result.repaired, "overflow": result.overflow},
        )

    def store_in_cargo(self, index: int) -> ActionResult:
        """개인 인벤토리 슬롯 → 화물칸"""
        return self._transfer(index, to_cargo=True)

    def retrieve_from_cargo(self, index: int) -> ActionResult:
        """화물칸 슬롯 → 개인 인벤토리"""
        return self._transfer(index, to_cargo=False)

    def _transfer(self, index: int, to_cargo: bool) -> ActionResult:
        action = "store_in_cargo" if to_cargo else "retrieve_from_cargo"
        refusal = self._guard()
        if refusal:
            return self._refuse(action, refusal)

        state = self.state
        source, target = (state.inventory, state.cargo) if to_cargo else (state.cargo, state.inventory)
        if source[index] is None:
            return self._refuse(action, Refusal(RefusalReason.NOTHING_TO_DO, "That slot is empty."))

        result = transfer_slot(source, target, index, self.registry)
        if result.moved == 0:
            where = "Cargo" if to_cargo else "Inventory"
            return self._refuse(
                action, Refusal(RefusalReason.CAPACITY_EXCEEDED, f"{where} is full.")
            )

        kind = source[index].kind
        if to_cargo:
            selected = state.selected_slot
            if selected == index and result.source[index] is None:
                selected = None
            self._state = state.evolve(
                inventory=result.source, cargo=result.target, selected_slot=selected
            )
        else:
            self._state = state.evolve(cargo=result.source, inventory=result.target)

        logs = (LogEntry(f"Moved {result.moved} {kind.value}."),)
        self._publish_logs(logs)
        self._finish()
        return ActionResult(success=True, action_type=action, logs=logs, data={"moved": result.moved})

    # === 휴식 ===

    def preview_rest(self) -> ActionResult:
        """조우 판정 + 보고서 계산. 확인 전에는 상태를 바꾸지 않는다.

        보고서가 대기 중이면 다시 굴리지 않고 같은 보고서를 돌려준다.
        대기 중에는 확인 외의 행동이 거절된다.
        """
        refusal = self._guard(allow_pending=True)
        if refusal:
            return self._refuse("preview_rest", refusal)
        if self._pending_rest is not None:
            return self._rest_preview_result(self._pending_rest)

        state = self.state
        encounter = roll_encounter(
            self.rng, self.encounter_mode, state.sector, state.sanity, self.config
        )
        report = calculate_rest_outcome(
            state.grid,
            state.pressure,
            state.max_stamina(self.config),
            state.sector,
            state.sanity,
            encounter,
            self.rng,
            self.config,
        )
        self._pending_rest = report
        logger.debug(
            "Rest preview: spawns=%d damage=%d pressure_loss=%d",
            len(report.spawns),
            report.damage,
            report.pressure_loss,
        )
        return self._rest_preview_result(report)

    def _rest_preview_result(self, report: RestReport) -> ActionResult:
        return ActionResult(
            success=True,
            action_type="preview_rest",
            data={
                "damage": report.damage,
                "pressure_loss": report.pressure_loss,
                "stamina": report.stamina,
                "spawns": [t.id for t in report.spawns],
                "dice": list(report.encounter.dice),
            },
        )

    def confirm_rest(self) -> ActionResult:
        """미리보기 보고서를 한 번에 적용"""
        report = self._pending_rest
        if report is None:
            return self._refuse(
                "confirm_rest", Refusal(RefusalReason.NOTHING_TO_DO, "No rest to confirm.")
            )
        refusal = self._guard(allow_pending=True)
        if refusal:
            return self._refuse("confirm_rest", refusal)

        state = self.state
        outcome = apply_rest(
            report, state.grid, state.health, state.pressure, state.day, state.sanity, self.config
        )
        self._state = state.evolve(
            grid=outcome.grid,
            stamina=outcome.stamina,
            health=outcome.health,
            pressure=outcome.pressure,
            day=outcome.day,
            minutes=outcome.minutes,
            sanity=outcome.sanity,
        )
        self._pending_rest = None

        self._publish_logs(outcome.logs)
        self._publish(
            EventTypes.REST_COMPLETED,
            day=outcome.day,
            damage=report.damage,
            spawns=len(report.spawns),
        )
        self._check_game_over()
        self._finish()
        return ActionResult(success=True, action_type="confirm_rest", logs=outcome.logs)

    # === 열차 ===

    def add_fuel(self, kind: ItemKind) -> ActionResult:
        """보일러에 연료 1개 투입"""
        refusal = self._guard()
        if refusal:
            return self._refuse("add_fuel", refusal)

        state = self.state
        result = add_fuel(
            kind, state.inventory, state.cargo, state.pressure, state.target_pressure, self.config
        )
        if not result.success:
            return self._refuse("add_fuel", result.refusal)

        self._state = state.evolve(
            inventory=result.inventory, cargo=result.cargo, pressure=result.pressure
        )
        self._publish_logs(result.logs)
        self._finish()
        return ActionResult(success=True, action_type="add_fuel", logs=result.logs)

    def depart(self) -> ActionResult:
        """압력과 선로 상태를 확인한 뒤 다음 섹터로"""
        refusal = self._guard()
        if refusal is None:
            refusal = check_departure(
                self.state.pressure, self.state.target_pressure, self.state.grid
            )
        if refusal:
            return self._refuse("depart", refusal)

        state = self.next_sector()
        logs = (LogEntry(f"Arrived at sector {state.sector}.", LogLevel.IMPORTANT),)
        self._publish_logs(logs)
        self._finish()
        return ActionResult(
            success=True, action_type="depart", logs=logs, data={"sector": state.sector}
        )

    def next_sector(self) -> GameState:
        """섹터 전환 (검증 없음). 새 그리드, 압력 초기화, 스태미나 일부 유지, 날씨 판정."""
        state = self.state
        sector = state.sector + 1
        weather = roll_weather(self.rng, self.config)
        grid = self.generator.generate(sector, state.sanity)
        self._state = state.evolve(
            sector=sector,
            grid=grid,
            pressure=0,
            target_pressure=target_pressure(sector, self.config),
            stamina=retained_stamina(state.stamina, state.max_stamina(self.config), self.config),
            weather=weather,
            stats=state.stats.apply(StatDelta(sectors_passed=1)),
        )
        self._pending_rest = None
        logger.info("Entered sector %d (weather=%s)", sector, weather.value)
        self._publish(EventTypes.SECTOR_ENTERED, sector=sector, weather=weather.value)
        return self._state

    # === 점수 ===

    def final_score(self) -> ScoreBreakdown:
        state = self.state
        return calculate_score(state.stats, state.gold, self.config)

    # === 내부 ===

    def _advance_clock(self, minutes: int) -> list[LogEntry]:
        """시간 경과 + 공개된 적의 주기 공격"""
        state = self.state
        tick = update_enemy_attack_progress(state.grid, minutes, self.config)
        self._state = state.evolve(
            minutes=state.minutes + minutes,
            grid=tick.grid,
            health=state.health - tick.damage,
        )
        return list(tick.logs)

    def _guard(self, allow_pending: bool = False) -> Optional[Refusal]:
        if self.state.is_over:
            return Refusal(RefusalReason.GAME_OVER, "Game over.")
        if not allow_pending and self._pending_rest is not None:
            return self._rest_pending_refusal()
        return None

    def _rest_pending_refusal(self) -> Refusal:
        return Refusal(RefusalReason.REST_PENDING, "Finish resting first.")

    def _check_game_over(self) -> None:
        state = self.state
        if state.health > 0 or state.is_over:
            return
        self._state = state.evolve(view=ViewState.GAMEOVER)
        logger.info("Game over in sector %d, day %d", state.sector, state.day)
        self._publish_logs([LogEntry("You have fallen.", LogLevel.IMPORTANT)])
        self._publish(EventTypes.GAME_OVER, sector=state.sector, day=state.day)

    def _refuse(self, action: str, refusal: Optional[Refusal]) -> ActionResult:
        if refusal is None:
            refusal = Refusal(RefusalReason.NOTHING_TO_DO, "Nothing happened.")
        logger.debug("%s refused: %s", action, refusal.reason.value)
        log = refusal.to_log()
        self._publish_logs([log])
        self._finish()
        return ActionResult(success=False, action_type=action, refusal=refusal, logs=(log,))

    def _publish(self, event_type: str, **data: Any) -> None:
        self.event_bus.emit(GameEvent(event_type=event_type, data=data, source=self.SOURCE))

    def _publish_logs(self, logs) -> None:
        for entry in logs:
            self._publish(EventTypes.LOG, text=entry.text, level=entry.level.value)

    def _finish(self) -> None:
        self.event_bus.reset_chain()
