"""섹터 그리드 - 행 우선 순서의 타일 튜플 (copy-on-write)"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional

from .tile import Tile, TileKind

# 상, 하, 좌, 우
NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = ((0, -1), (0, 1), (-1, 0), (1, 0))


@dataclass(frozen=True)
class Grid:
    size: int
    tiles: tuple[Tile, ...]

    def __post_init__(self) -> None:
        if len(self.tiles) != self.size * self.size:
            raise ValueError(
                f"Grid of size {self.size} needs {self.size * self.size} tiles, got {len(self.tiles)}"
            )

    def __iter__(self) -> Iterator[Tile]:
        return iter(self.tiles)

    def __len__(self) -> int:
        return len(self.tiles)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def get(self, x: int, y: int) -> Optional[Tile]:
        if not self.in_bounds(x, y):
            return None
        return self.tiles[y * self.size + x]

    def at(self, x: int, y: int) -> Tile:
        tile = self.get(x, y)
        if tile is None:
            raise IndexError(f"Out of grid: ({x}, {y})")
        return tile

    def neighbors(self, x: int, y: int) -> list[Tile]:
        """직교 이웃 (그리드 밖 제외)"""
        result = []
        for dx, dy in NEIGHBOR_OFFSETS:
            tile = self.get(x + dx, y + dy)
            if tile is not None:
                result.append(tile)
        return result

    def replace(self, tile: Tile) -> "Grid":
        return self.replace_many([tile])

    def replace_many(self, tiles: Iterable[Tile]) -> "Grid":
        new_tiles = list(self.tiles)
        for tile in tiles:
            if not self.in_bounds(tile.x, tile.y):
                raise IndexError(f"Out of grid: ({tile.x}, {tile.y})")
            new_tiles[tile.y * self.size + tile.x] = tile
        return Grid(size=self.size, tiles=tuple(new_tiles))

    def map(self, fn: Callable[[Tile], Tile]) -> "Grid":
        return Grid(size=self.size, tiles=tuple(fn(t) for t in self.tiles))

    def filter(self, predicate: Callable[[Tile], bool]) -> list[Tile]:
        return [t for t in self.tiles if predicate(t)]

    def of_kind(self, kind: TileKind) -> list[Tile]:
        return [t for t in self.tiles if t.kind == kind]

    def hostiles(self) -> list[Tile]:
        return [t for t in self.tiles if t.is_hostile]

    def has_hostiles(self) -> bool:
        return any(t.is_hostile for t in self.tiles)

    def cleared_ground(self) -> list[Tile]:
        return [t for t in self.tiles if t.kind == TileKind.SEARCH and t.cleared]

    def broken_tracks(self) -> list[Tile]:
        return [t for t in self.tiles if t.needs_repair]
