"""Railfog Core Engine"""
__version__ = "0.1.0"

from railfog.core.balance import DEFAULT_CONFIG, GameConfig
from railfog.core.effects import LogEntry, LogLevel, Refusal, RefusalReason, StatDelta
from railfog.core.state import GameState, GameStats, RescuedNPC, ViewState, Weather
from railfog.core.world.generator import SectorGenerator
from railfog.core.world.grid import Grid
from railfog.core.world.tile import BuffType, Tile, TileKind, Visibility
from railfog.core.rest import EncounterMode, RestReport
from railfog.core.scoring import ScoreBreakdown, ScoreLine, calculate_score
from railfog.core.engine import ActionResult, GameEngine

__all__ = [
    "DEFAULT_CONFIG",
    "GameConfig",
    "LogEntry",
    "LogLevel",
    "Refusal",
    "RefusalReason",
    "StatDelta",
    "GameState",
    "GameStats",
    "RescuedNPC",
    "ViewState",
    "Weather",
    "SectorGenerator",
    "Grid",
    "BuffType",
    "Tile",
    "TileKind",
    "Visibility",
    "EncounterMode",
    "RestReport",
    "ScoreBreakdown",
    "ScoreLine",
    "calculate_score",
    "ActionResult",
    "GameEngine",
]
