"""게임 밸런스 상수 - 순수 Python, 불변

모든 Core 함수는 GameConfig를 명시적으로 받는다 (기본값 DEFAULT_CONFIG).
범위 값은 (최소, 최대) 포함 구간.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AvatarConfig:
    max_stamina: int = 50
    max_health: int = 20
    base_attack: int = 2

    # 구조한 NPC 1명당 증가량
    stamina_buff: int = 10
    health_buff: int = 5
    attack_buff: int = 1


@dataclass(frozen=True)
class ActionConfig:
    cost_base: int = 8
    cost_windy: int = 12
    enemy_cost: int = 10

    # 같은 타일 반복 채집 시 비용 감소 곡선
    search_cost_initial: int = 6
    search_cost_decay: int = 1
    search_cost_min: int = 2

    bow_damage: int = 5
    minutes_per_action: int = 30


@dataclass(frozen=True)
class InventoryConfig:
    size: int = 8
    cargo_size: int = 10
    max_tool_durability: int = 5


@dataclass(frozen=True)
class TrainConfig:
    pressure_base: int = 100
    pressure_per_sector: int = 50
    fuel_gain_wood: int = 5
    fuel_gain_charcoal: int = 15
    decay_on_rest: int = 10

    # 승객 정원 = base + carriage_level * per_carriage
    passenger_base: int = 2
    passenger_per_carriage: int = 2

    stamina_retain_pct: float = 0.8


@dataclass(frozen=True)
class MapConfig:
    grid_size: int = 8
    safe_zone_offset: int = 1  # 중앙 선로로부터의 거리

    void_dist_threshold: int = 3
    void_chance_mult: float = 0.4

    # 덱 구성
    tree_pct: float = 0.25
    rock_pct: float = 0.20
    enemy_pct: float = 0.15
    min_trees: int = 4
    min_rocks: int = 3
    min_enemies: int = 3
    min_npcs: int = 1

    npc_min_distance: int = 4
    rescue_turns: tuple[int, int] = (2, 4)

    safe_start_yield: tuple[int, int] = (2, 3)

    broken_tracks_base: int = 0
    broken_tracks_per_sector: int = 1
    repair_cost_wood: int = 3
    repair_cost_stone: int = 2
    repair_clicks: int = 2

    # 탐험 완료까지 필요한 클릭 수 (TileKind 값 기준, 없으면 1)
    exploration_clicks: dict[str, int] = field(
        default_factory=lambda: {"tree": 2, "rock": 2, "npc": 2, "enemy": 1, "search": 1}
    )


@dataclass(frozen=True)
class LootConfig:
    tree_wood: tuple[int, int] = (2, 4)
    rock_stone: tuple[int, int] = (3, 4)
    tree_harvests: tuple[int, int] = (1, 3)
    ground_scavenge: tuple[int, int] = (1, 3)

    # 지면 채집: roll < wood → 나무, roll < stone_threshold → 돌, 그 외 없음
    ground_wood_chance: float = 0.45
    ground_stone_threshold: float = 0.80

    berry_chance: float = 0.3
    berry_amount: tuple[int, int] = (1, 2)

    # 첫 공개 보상 (kind → (item, count))
    reveal_rewards: dict[str, tuple[str, int]] = field(
        default_factory=lambda: {"tree": ("wood", 1), "rock": ("stone", 1)}
    )


@dataclass(frozen=True)
class EnemyConfig:
    attack: tuple[int, int] = (2, 4)
    hp: tuple[int, int] = (3, 5)
    hp_per_level: int = 2

    # 레벨 = (sector - 1) // sector_step + sanity // sanity_step
    level_sector_step: int = 2
    level_sanity_step: int = 50

    loot_wood: tuple[int, int] = (1, 3)
    loot_stone: tuple[int, int] = (1, 2)
    loot_gold: tuple[int, int] = (2, 6)
    key_chance_base: float = 0.05
    key_chance_per_level: float = 0.02

    passive_attack_interval: int = 120  # 분


@dataclass(frozen=True)
class RestConfig:
    heal_amount: int = 30  # 예약값, 휴식은 HP를 회복하지 않는다
    sanity_increment: int = 10
    sanity_per_die: int = 100
    pips_per_enemy: int = 5

    # 확률 모드
    spawn_rate_base: float = 40.0
    spawn_rate_per_sector: float = 10.0
    spawn_rate_per_sanity: float = 0.5

    ambush_attack: tuple[int, int] = (3, 5)
    ambush_hp: tuple[int, int] = (3, 5)


@dataclass(frozen=True)
class ItemEffectConfig:
    berry_heal: int = 3
    berry_stamina: int = 10


@dataclass(frozen=True)
class WeatherConfig:
    # Weather 값 → 가중치
    weights: dict[str, int] = field(
        default_factory=lambda: {"sunny": 60, "rain": 25, "windy": 15}
    )


@dataclass(frozen=True)
class ScoringConfig:
    per_wood: int = 10
    per_stone: int = 15
    per_enemy: int = 100
    per_craft: int = 50
    per_sector: int = 500
    per_npc: int = 200
    per_gold: int = 1


@dataclass(frozen=True)
class GameConfig:
    avatar: AvatarConfig = AvatarConfig()
    actions: ActionConfig = ActionConfig()
    inventory: InventoryConfig = InventoryConfig()
    train: TrainConfig = TrainConfig()
    map: MapConfig = MapConfig()
    loot: LootConfig = LootConfig()
    enemies: EnemyConfig = EnemyConfig()
    rest: RestConfig = RestConfig()
    items: ItemEffectConfig = ItemEffectConfig()
    weather: WeatherConfig = WeatherConfig()
    scoring: ScoringConfig = ScoringConfig()


DEFAULT_CONFIG = GameConfig()
