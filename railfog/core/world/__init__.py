"""섹터 월드 Core - 타일, 그리드, 시야, 생성, 적 규칙"""

from .tile import BuffType, Tile, TileKind, Visibility
from .grid import Grid
from .visibility import is_light_source, newly_peeked, update_peek_status
from .enemies import calculate_enemy_level, roll_enemy_stats, update_enemy_attack_progress
from .generator import SectorGenerator

__all__ = [
    "BuffType",
    "Tile",
    "TileKind",
    "Visibility",
    "Grid",
    "is_light_source",
    "newly_peeked",
    "update_peek_status",
    "calculate_enemy_level",
    "roll_enemy_stats",
    "update_enemy_attack_progress",
    "SectorGenerator",
]
