"""주사위/범위 판정 헬퍼

모든 난수는 호출자가 주입한 random.Random에서만 뽑는다.
"""

import random
from typing import List, Sequence, Tuple, TypeVar

T = TypeVar("T")


def roll_range(rng: random.Random, bounds: Tuple[int, int]) -> int:
    """(최소, 최대) 포함 구간 정수"""
    low, high = bounds
    return rng.randint(low, high)


def roll_chance(rng: random.Random, chance: float) -> bool:
    return rng.random() < chance


def roll_d6(rng: random.Random, count: int) -> List[int]:
    """d6 count개 (최소 1개)"""
    return [rng.randint(1, 6) for _ in range(max(1, count))]


def weighted_choice(rng: random.Random, options: Sequence[T], weights: Sequence[int]) -> T:
    if not options or len(options) != len(weights):
        raise ValueError("options and weights must be non-empty and aligned")
    total = sum(weights)
    roll = rng.random() * total
    acc = 0.0
    for option, weight in zip(options, weights):
        acc += weight
        if roll < acc:
            return option
    return options[-1]
