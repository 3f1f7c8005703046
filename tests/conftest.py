"""Shared test fixtures."""

import random

import pytest

from railfog.core.balance import DEFAULT_CONFIG, GameConfig
from railfog.core.item.registry import ItemRegistry, RecipeBook


@pytest.fixture()
def config() -> GameConfig:
    return DEFAULT_CONFIG


@pytest.fixture()
def registry() -> ItemRegistry:
    """기본 items.json을 로드한 레지스트리"""
    return ItemRegistry.default()


@pytest.fixture()
def recipe_book(registry: ItemRegistry) -> RecipeBook:
    return RecipeBook.default(registry)


@pytest.fixture()
def rng() -> random.Random:
    """시드 고정 난수 (재현 가능한 판정)"""
    return random.Random(1234)
