"""
Railfog Core - World: Tile
==========================
섹터 그리드의 단일 셀

타일은 불변 값이며, 모든 변경은 evolve()로 새 타일을 만든다.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional

from railfog.core.item.models import ItemKind


class TileKind(str, Enum):
    VOID = "void"
    TRACK = "track"
    BRIDGE = "bridge"
    SEARCH = "search"  # 지면 (정리된 땅)
    TREE = "tree"
    ROCK = "rock"
    ENEMY = "enemy"
    NPC = "npc"
    LOCOMOTIVE = "locomotive"
    WORKSHOP_CAR = "workshop_carriage"
    CARGO_CAR = "cargo_carriage"


class Visibility(str, Enum):
    """안개 3단계"""

    HIDDEN = "hidden"
    PEEKED = "peeked"  # 윤곽만 보임, 탐험 시작만 가능
    REVEALED = "revealed"


class BuffType(str, Enum):
    STAMINA = "stamina"
    HEALTH = "health"
    ATTACK = "attack"


# 열차 칸 - 항상 투명, 생성 시점부터 공개
SPINE_KINDS = frozenset({TileKind.LOCOMOTIVE, TileKind.WORKSHOP_CAR, TileKind.CARGO_CAR})

# 상호작용에 필요한 도구 (enemy의 bow는 선택 사항이라 검증 대상 아님)
TILE_TOOLS: dict[TileKind, ItemKind] = {
    TileKind.TREE: ItemKind.AXE,
    TileKind.ROCK: ItemKind.PICKAXE,
    TileKind.NPC: ItemKind.KEY,
    TileKind.ENEMY: ItemKind.BOW,
}

REPAIRABLE_KINDS = frozenset({TileKind.TRACK, TileKind.BRIDGE})


@dataclass(frozen=True)
class Tile:
    x: int
    y: int
    kind: TileKind

    revealed: bool = False
    peeked: bool = False
    cleared: bool = False

    # 채집
    scavenge_left: int = 0
    search_count: int = 0

    # 전투 (enemy 전용)
    attack: int = 0
    hp: int = 0
    max_hp: int = 0
    attack_progress: int = 0  # 분 단위 누적, 주기마다 공격

    # 탐험
    exploration_progress: int = 0
    max_exploration: int = 1

    # NPC
    npc_buff: Optional[BuffType] = None
    rescue_progress: int = 0
    max_rescue_progress: int = 0

    # 선로/다리
    is_broken: bool = False
    repair_progress: int = 0
    max_repair_progress: int = 0

    @property
    def id(self) -> str:
        return f"{self.x}-{self.y}"

    @property
    def coordinate(self) -> tuple[int, int]:
        return (self.x, self.y)

    @property
    def visibility(self) -> Visibility:
        if self.revealed:
            return Visibility.REVEALED
        if self.peeked:
            return Visibility.PEEKED
        return Visibility.HIDDEN

    @property
    def is_spine(self) -> bool:
        return self.kind in SPINE_KINDS

    @property
    def is_explorable(self) -> bool:
        """안개 속 윤곽 상태 - 탐험으로만 공개된다"""
        return self.peeked and not self.revealed

    @property
    def is_hostile(self) -> bool:
        """공개되었고 아직 처치되지 않은 적"""
        return self.kind == TileKind.ENEMY and self.revealed and not self.cleared

    @property
    def is_harvestable(self) -> bool:
        """정리된 뒤에도 채집이 남은 지면/나무"""
        return self.kind in (TileKind.SEARCH, TileKind.TREE) and self.scavenge_left > 0

    @property
    def needs_repair(self) -> bool:
        return self.kind in REPAIRABLE_KINDS and self.is_broken

    def evolve(self, **changes: Any) -> "Tile":
        return replace(self, **changes)

    def to_ground(self) -> "Tile":
        """처치/고갈/구조 완료 후 정리된 지면으로 전환"""
        return replace(
            self,
            kind=TileKind.SEARCH,
            cleared=True,
            scavenge_left=0,
            attack=0,
            hp=0,
            max_hp=0,
            attack_progress=0,
            npc_buff=None,
            rescue_progress=0,
            max_rescue_progress=0,
        )

    def to_dict(self) -> dict[str, Any]:
        """디버그/표시 레이어용 평면 dict"""
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "kind": self.kind.value,
            "visibility": self.visibility.value,
            "cleared": self.cleared,
            "scavenge_left": self.scavenge_left,
            "search_count": self.search_count,
            "attack": self.attack,
            "hp": self.hp,
            "max_hp": self.max_hp,
            "exploration": [self.exploration_progress, self.max_exploration],
            "npc_buff": self.npc_buff.value if self.npc_buff else None,
            "rescue": [self.rescue_progress, self.max_rescue_progress],
            "is_broken": self.is_broken,
            "repair": [self.repair_progress, self.max_repair_progress],
        }
