"""타일 행동 Core - 검증기와 해결기"""

from .validator import (
    TileActionContext,
    TileActionResult,
    calculate_tile_cost,
    can_click_tile,
    validate_tile_action,
)
from .resolver import InteractionResult, consume_berry, resolve_tile_action

__all__ = [
    "TileActionContext",
    "TileActionResult",
    "calculate_tile_cost",
    "can_click_tile",
    "validate_tile_action",
    "InteractionResult",
    "consume_berry",
    "resolve_tile_action",
]
