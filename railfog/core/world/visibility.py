"""
Railfog Core - World: Visibility
================================
안개(Fog of War) 전파

광원: 열차 칸, 또는 정리(cleared)/공개(revealed)된 타일.
부서진 다리는 공개되어도 수리 전까지 시야를 막는다.

광원에 직교 인접한 미공개 타일만 peeked가 된다.
이 모듈은 절대 타일을 공개하지 않는다 (공개는 탐험으로만).
"""

from __future__ import annotations

from railfog.core.logging import get_logger

from .grid import NEIGHBOR_OFFSETS, Grid
from .tile import Tile, TileKind

logger = get_logger(__name__)


def is_light_source(tile: Tile) -> bool:
    if tile.is_spine:
        return True
    if tile.kind == TileKind.BRIDGE and tile.is_broken:
        return False
    return tile.cleared or tile.revealed


def update_peek_status(grid: Grid) -> Grid:
    """peeked 플래그 재계산. 새 Grid 반환.

    revealed 타일과 열차 칸은 항상 peeked=False.
    """
    lights = {t.coordinate for t in grid if is_light_source(t)}

    def _peek(tile: Tile) -> Tile:
        if tile.revealed or tile.is_spine:
            peeked = False
        else:
            peeked = any((tile.x + dx, tile.y + dy) in lights for dx, dy in NEIGHBOR_OFFSETS)
        if peeked == tile.peeked:
            return tile
        return tile.evolve(peeked=peeked)

    return grid.map(_peek)


def newly_peeked(before: Grid, after: Grid) -> list[Tile]:
    """이번 갱신으로 새로 peeked가 된 타일"""
    return [
        new
        for old, new in zip(before.tiles, after.tiles)
        if new.peeked and not old.peeked
    ]
