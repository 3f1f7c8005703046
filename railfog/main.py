"""Engine bootstrap: settings → logging → registries → GameEngine."""

import random
from typing import Optional

from railfog.config import Settings, settings
from railfog.core.engine import GameEngine
from railfog.core.event_bus import EventBus
from railfog.core.item.registry import ItemRegistry, RecipeBook
from railfog.core.logging import get_logger, setup_logging

logger = get_logger(__name__)


def create_engine(
    app_settings: Optional[Settings] = None,
    event_bus: Optional[EventBus] = None,
) -> GameEngine:
    """설정에 따라 데이터 테이블을 로드하고 엔진을 만든다.

    잘못된 데이터 파일은 여기서 ValueError로 실패한다.
    """
    cfg = app_settings or settings
    setup_logging(cfg.LOG_LEVEL)

    registry = ItemRegistry()
    registry.load_from_json(cfg.ITEM_DATA_PATH)
    recipes = RecipeBook(registry)
    recipes.load_from_json(cfg.RECIPE_DATA_PATH)

    rng = random.Random(cfg.GAME_SEED)
    logger.info("Bootstrapping engine (seed=%s)", cfg.GAME_SEED)
    return GameEngine(
        registry=registry,
        recipes=recipes,
        rng=rng,
        event_bus=event_bus,
        encounter_mode=cfg.ENCOUNTER_MODE,
    )


def main() -> None:
    engine = create_engine()
    state = engine.new_game()
    logger.info(
        "Sector %d ready: stamina %d, health %d, target pressure %d",
        state.sector,
        state.stamina,
        state.health,
        state.target_pressure,
    )


if __name__ == "__main__":
    main()
