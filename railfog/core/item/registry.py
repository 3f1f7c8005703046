"""아이템/레시피 테이블 저장소 - JSON 로드

잘못된 설정은 게임 도중이 아니라 로드 시점에 ValueError로 실패한다.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from .models import ItemKind, ItemRequirement, ItemSpec, Recipe, RecipeOutput

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parents[2] / "data"
DEFAULT_ITEMS_PATH = DATA_DIR / "items.json"
DEFAULT_RECIPES_PATH = DATA_DIR / "recipes.json"


def _read_json_list(path: Path) -> list[dict]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a JSON array")
    return raw


class ItemRegistry:
    """
    아이템 종류별 설정 저장소.
    ItemKind 전 종류가 등록되어 있어야 완전한 상태로 본다.
    """

    def __init__(self) -> None:
        self._specs: dict[ItemKind, ItemSpec] = {}

    @classmethod
    def default(cls) -> "ItemRegistry":
        registry = cls()
        registry.load_from_json(DEFAULT_ITEMS_PATH)
        return registry

    def load_from_json(self, path: str | Path) -> int:
        """items.json 로드. 반환: 로드된 수량.

        kind는 문자열 → ItemKind 변환. 알 수 없는 kind, 누락 필드,
        max_stack <= 0, 내구도 아이템의 max_durability <= 0 은 ValueError.
        로드 후 누락된 ItemKind가 있으면 ValueError.
        """
        path = Path(path)
        count = 0
        for raw in _read_json_list(path):
            try:
                spec = ItemSpec(
                    kind=ItemKind(raw["kind"]),
                    max_stack=int(raw["max_stack"]),
                    has_durability=bool(raw.get("has_durability", False)),
                    max_durability=int(raw.get("max_durability", 0)),
                    name=raw.get("name", ""),
                )
            except (KeyError, ValueError) as e:
                raise ValueError(
                    f"Invalid item entry in {path}: {raw.get('kind', '?')} - {e}"
                ) from e
            self.register(spec)
            count += 1

        missing = [k.value for k in ItemKind if k not in self._specs]
        if missing:
            raise ValueError(f"{path}: missing item kinds {missing}")

        logger.info("Loaded %d item specs from %s", count, path)
        return count

    def register(self, spec: ItemSpec) -> None:
        if spec.max_stack <= 0:
            raise ValueError(f"max_stack must be positive: {spec.kind.value}")
        if spec.has_durability and spec.max_durability <= 0:
            raise ValueError(f"durable item needs max_durability: {spec.kind.value}")
        if spec.kind in self._specs:
            logger.warning("Overwriting existing item spec: %s", spec.kind.value)
        self._specs[spec.kind] = spec

    def get(self, kind: ItemKind) -> Optional[ItemSpec]:
        return self._specs.get(kind)

    def require(self, kind: ItemKind) -> ItemSpec:
        """등록되지 않은 kind는 설정 오류."""
        spec = self._specs.get(kind)
        if spec is None:
            raise ValueError(f"Unknown item kind: {kind}")
        return spec

    def max_stack(self, kind: ItemKind) -> int:
        return self.require(kind).max_stack

    def get_all(self) -> list[ItemSpec]:
        return list(self._specs.values())

    def count(self) -> int:
        return len(self._specs)


class RecipeBook:
    """레시피 테이블. 삽입 순서 = 표시 순서."""

    def __init__(self, registry: ItemRegistry) -> None:
        self._registry = registry
        self._recipes: dict[str, Recipe] = {}

    @classmethod
    def default(cls, registry: ItemRegistry) -> "RecipeBook":
        book = cls(registry)
        book.load_from_json(DEFAULT_RECIPES_PATH)
        return book

    def load_from_json(self, path: str | Path) -> int:
        path = Path(path)
        count = 0
        for raw in _read_json_list(path):
            try:
                out = raw["output"]
                recipe = Recipe(
                    recipe_id=raw["recipe_id"],
                    inputs=tuple(
                        ItemRequirement(ItemKind(i["kind"]), int(i["count"]))
                        for i in raw["inputs"]
                    ),
                    output=RecipeOutput(
                        kind=ItemKind(out["kind"]),
                        count=int(out.get("count", 1)),
                        durability=out.get("durability"),
                    ),
                    stamina_cost=int(raw.get("stamina_cost", 0)),
                    desc=raw.get("desc", ""),
                )
            except (KeyError, ValueError, TypeError) as e:
                raise ValueError(
                    f"Invalid recipe in {path}: {raw.get('recipe_id', '?')} - {e}"
                ) from e
            self.register(recipe)
            count += 1

        logger.info("Loaded %d recipes from %s", count, path)
        return count

    def register(self, recipe: Recipe) -> None:
        out_spec = self._registry.require(recipe.output.kind)
        for req in recipe.inputs:
            self._registry.require(req.kind)
            if req.count <= 0:
                raise ValueError(f"{recipe.recipe_id}: input count must be positive")
        if recipe.output.durability is not None and not out_spec.has_durability:
            raise ValueError(
                f"{recipe.recipe_id}: {out_spec.kind.value} does not carry durability"
            )
        self._recipes[recipe.recipe_id] = recipe

    def get(self, recipe_id: str) -> Optional[Recipe]:
        return self._recipes.get(recipe_id)

    def get_all(self) -> list[Recipe]:
        return list(self._recipes.values())
