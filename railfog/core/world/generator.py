"""
Railfog Core - World: Sector Generation
=======================================
섹터(8×8) 절차적 생성기

난수 소비 순서 (시드 고정 시 재현 보장):
1. 스파인 밖 셀마다 void 판정 1회 (행 우선)
2. 열차 위/아래 안전 지면의 채집량
3. NPC 배치 (후보 선택 → 버프 → 구조 턴수) × min_npcs
4. 덱 셔플
5. 풀 순서대로 타일별 능력치 판정
6. 선로 셔플 (부서진 선로 선택)
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional

from railfog.core.balance import DEFAULT_CONFIG, GameConfig
from railfog.core.dice import roll_range
from railfog.core.logging import get_logger

from .enemies import calculate_enemy_level, roll_enemy_stats
from .grid import Grid
from .tile import BuffType, Tile, TileKind
from .visibility import update_peek_status

logger = get_logger(__name__)


@dataclass(frozen=True)
class DeckCounts:
    trees: int
    rocks: int
    enemies: int
    ground: int


class SectorGenerator:
    """
    절차적 섹터 생성기

    주요 기능:
    1. 중앙 행 고정 스파인 (화물칸 / 작업칸 / 기관차 + 선로)
    2. 중심 거리 기반 void 분포 (안전 띠 안에서는 0)
    3. 최소 개수가 보장된 셔플 덱 (나무 / 바위 / 적 / 지면)
    4. 섹터 비례 부서진 선로
    """

    # 스파인 배치: 중심 x 기준 오프셋
    SPINE_LAYOUT = {
        -1: TileKind.CARGO_CAR,
        0: TileKind.WORKSHOP_CAR,
        1: TileKind.LOCOMOTIVE,
    }

    NPC_BUFFS = (BuffType.STAMINA, BuffType.HEALTH, BuffType.ATTACK)

    def __init__(self, config: GameConfig = DEFAULT_CONFIG, rng: Optional[random.Random] = None):
        self.config = config
        self.rng = rng or random.Random()

    @property
    def size(self) -> int:
        return self.config.map.grid_size

    @property
    def center(self) -> int:
        return self.size // 2 - 1

    def distance(self, x: int, y: int) -> int:
        """중심까지 맨해튼 거리"""
        return abs(x - self.center) + abs(y - self.center)

    def void_chance(self, x: int, y: int) -> float:
        m = self.config.map
        if abs(y - self.center) <= m.safe_zone_offset:
            return 0.0
        return max(0.0, (self.distance(x, y) - m.void_dist_threshold) * m.void_chance_mult)

    def deck_counts(self, pool_size: int) -> DeckCounts:
        """덱 구성. 각 종류는 최소값 보장, 나머지는 지면, 풀 크기로 잘라낸다."""
        m = self.config.map
        trees = max(int(pool_size * m.tree_pct), m.min_trees)
        rocks = max(int(pool_size * m.rock_pct), m.min_rocks)
        enemies = max(int(pool_size * m.enemy_pct), m.min_enemies)

        # 최소값 때문에 풀을 넘으면 뒤쪽(적 → 바위 → 나무)부터 잘린다
        budget = pool_size
        trees = min(trees, budget)
        budget -= trees
        rocks = min(rocks, budget)
        budget -= rocks
        enemies = min(enemies, budget)
        budget -= enemies
        return DeckCounts(trees=trees, rocks=rocks, enemies=enemies, ground=budget)

    def generate(self, sector: int, sanity: int = 0) -> Grid:
        """
        새 섹터 그리드 생성

        Args:
            sector: 섹터 번호 (1부터)
            sanity: 누적 san (적 레벨 상승)

        Returns:
            peeked 상태까지 계산된 Grid
        """
        tiles = self._lay_out_base()
        pool = [
            i
            for i, t in enumerate(tiles)
            if t.kind not in (TileKind.VOID, TileKind.TRACK) and not t.is_spine
        ]

        pool = self._place_safe_start(tiles, pool)
        pool = self._place_npcs(tiles, pool)
        self._deal_deck(tiles, pool, calculate_enemy_level(sector, sanity, self.config))
        self._set_exploration_clicks(tiles)
        broken = self._break_tracks(tiles, sector)

        grid = update_peek_status(Grid(size=self.size, tiles=tuple(tiles)))
        logger.info(
            "Generated sector %d (san=%d): %d void, %d enemies, %d npcs, %d broken tracks",
            sector,
            sanity,
            len(grid.of_kind(TileKind.VOID)),
            len(grid.of_kind(TileKind.ENEMY)),
            len(grid.of_kind(TileKind.NPC)),
            broken,
        )
        return grid

    def _lay_out_base(self) -> List[Tile]:
        """1단계: 스파인 + void/지면 자리 표시"""
        tiles: List[Tile] = []
        c = self.center
        for y in range(self.size):
            for x in range(self.size):
                if y == c:
                    spine_kind = self.SPINE_LAYOUT.get(x - c)
                    if spine_kind is not None:
                        tiles.append(Tile(x, y, spine_kind, revealed=True, cleared=True))
                    else:
                        tiles.append(Tile(x, y, TileKind.TRACK))
                    continue

                kind = TileKind.SEARCH
                if self.rng.random() < self.void_chance(x, y):
                    kind = TileKind.VOID
                tiles.append(Tile(x, y, kind))
        return tiles

    def _place_safe_start(self, tiles: List[Tile], pool: List[int]) -> List[int]:
        """열차 바로 위/아래는 안전 지면. 덱에서 제외."""
        c = self.center
        safe: set[int] = set()
        for y in (c - 1, c + 1):
            idx = y * self.size + c
            if tiles[idx].kind == TileKind.VOID:
                continue
            tiles[idx] = tiles[idx].evolve(
                kind=TileKind.SEARCH,
                scavenge_left=roll_range(self.rng, self.config.map.safe_start_yield),
            )
            safe.add(idx)
        return [i for i in pool if i not in safe]

    def _place_npcs(self, tiles: List[Tile], pool: List[int]) -> List[int]:
        """최소 거리 이상 후보 중 균등 선택. 선택된 타일은 풀에서 제거."""
        m = self.config.map
        for _ in range(m.min_npcs):
            candidates = [
                i for i in pool if self.distance(tiles[i].x, tiles[i].y) >= m.npc_min_distance
            ]
            if not candidates:
                logger.warning("No NPC candidates at distance >= %d", m.npc_min_distance)
                break
            idx = self.rng.choice(candidates)
            buff = self.rng.choice(self.NPC_BUFFS)
            turns = roll_range(self.rng, m.rescue_turns)
            tiles[idx] = tiles[idx].evolve(
                kind=TileKind.NPC,
                npc_buff=buff,
                rescue_progress=turns,
                max_rescue_progress=turns,
            )
            pool = [i for i in pool if i != idx]
        return pool

    def _deal_deck(self, tiles: List[Tile], pool: List[int], level: int) -> None:
        """덱 셔플 후 풀 순서대로 배정, 이어서 타일별 능력치 판정"""
        counts = self.deck_counts(len(pool))
        deck = (
            [TileKind.TREE] * counts.trees
            + [TileKind.ROCK] * counts.rocks
            + [TileKind.ENEMY] * counts.enemies
            + [TileKind.SEARCH] * counts.ground
        )
        self.rng.shuffle(deck)

        loot = self.config.loot
        for idx, kind in zip(pool, deck):
            tile = tiles[idx].evolve(kind=kind)
            if kind == TileKind.ENEMY:
                attack, hp = roll_enemy_stats(self.rng, level, self.config)
                tile = tile.evolve(attack=attack, hp=hp, max_hp=hp)
            elif kind == TileKind.TREE:
                tile = tile.evolve(scavenge_left=roll_range(self.rng, loot.tree_harvests))
            elif kind == TileKind.SEARCH:
                tile = tile.evolve(scavenge_left=roll_range(self.rng, loot.ground_scavenge))
            tiles[idx] = tile

    def _set_exploration_clicks(self, tiles: List[Tile]) -> None:
        clicks = self.config.map.exploration_clicks
        for i, tile in enumerate(tiles):
            if tile.is_spine or tile.kind == TileKind.VOID:
                continue
            tiles[i] = tile.evolve(max_exploration=max(1, clicks.get(tile.kind.value, 1)))

    def _break_tracks(self, tiles: List[Tile], sector: int) -> int:
        m = self.config.map
        track_idx = [i for i, t in enumerate(tiles) if t.kind == TileKind.TRACK]
        count = min(len(track_idx), m.broken_tracks_base + sector * m.broken_tracks_per_sector)
        self.rng.shuffle(track_idx)
        for idx in track_idx[:count]:
            tiles[idx] = tiles[idx].evolve(is_broken=True, max_repair_progress=m.repair_clicks)
        return max(count, 0)
