"""아이템 도메인 모델"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class ItemKind(str, Enum):
    WOOD = "wood"
    STONE = "stone"
    CHARCOAL = "charcoal"
    AXE = "axe"
    PICKAXE = "pickaxe"
    BOW = "bow"
    KEY = "key"
    BERRY = "berry"


@dataclass(frozen=True)
class ItemSpec:
    """아이템 종류별 정적 설정 - 불변. items.json에서 로드."""

    kind: ItemKind
    max_stack: int
    has_durability: bool = False
    max_durability: int = 0  # has_durability == False 면 0

    # 표시용
    name: str = ""


@dataclass(frozen=True)
class InventorySlot:
    """점유된 슬롯 하나. 빈 슬롯은 None으로 표현한다.

    count는 항상 1 이상 max_stack 이하.
    durability None = 내구도 없음 (무제한 사용).
    """

    kind: ItemKind
    count: int
    durability: Optional[int] = None
    max_durability: Optional[int] = None

    @property
    def is_usable(self) -> bool:
        return self.durability is None or self.durability > 0

    def with_count(self, count: int) -> "InventorySlot":
        return replace(self, count=count)


@dataclass(frozen=True)
class ItemRequirement:
    """레시피 입력/수리 비용 한 줄"""

    kind: ItemKind
    count: int


@dataclass(frozen=True)
class RecipeOutput:
    kind: ItemKind
    count: int = 1
    durability: Optional[int] = None


@dataclass(frozen=True)
class Recipe:
    """제작법 - 입력은 순서가 있는 목록, 소모도 이 순서로 진행된다."""

    recipe_id: str
    inputs: tuple[ItemRequirement, ...]
    output: RecipeOutput
    stamina_cost: int = 0
    desc: str = ""
