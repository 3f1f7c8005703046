"""Core 연산 결과 값 - 로그 항목, 거절 사유, 통계 변동"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LogLevel(str, Enum):
    NEUTRAL = "neutral"
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    IMPORTANT = "important"


@dataclass(frozen=True)
class LogEntry:
    """플레이어에게 보여줄 로그 한 줄 (표시는 외부 레이어 담당)"""

    text: str
    level: LogLevel = LogLevel.NEUTRAL


class RefusalReason(str, Enum):
    NOT_CLICKABLE = "not_clickable"
    GAME_OVER = "game_over"
    INSUFFICIENT_STAMINA = "insufficient_stamina"
    MISSING_TOOL = "missing_tool"
    INSUFFICIENT_RESOURCES = "insufficient_resources"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    NPC_BLOCKED = "npc_blocked"
    ALREADY_FULL = "already_full"
    PRESSURE_LOW = "pressure_low"
    TRACK_BROKEN = "track_broken"
    NOTHING_TO_DO = "nothing_to_do"
    REST_PENDING = "rest_pending"


@dataclass(frozen=True)
class Refusal:
    """예상 가능한 게임플레이 실패. 예외가 아니라 값으로 반환된다."""

    reason: RefusalReason
    message: str

    def to_log(self) -> LogEntry:
        return LogEntry(self.message, LogLevel.ERROR)


@dataclass(frozen=True)
class StatDelta:
    """누적 통계 변동분. GameStats.apply()로 합산."""

    wood: int = 0
    stone: int = 0
    enemies_defeated: int = 0
    items_crafted: int = 0
    sectors_passed: int = 0
    npcs_rescued: int = 0

    def __add__(self, other: "StatDelta") -> "StatDelta":
        return StatDelta(
            wood=self.wood + other.wood,
            stone=self.stone + other.stone,
            enemies_defeated=self.enemies_defeated + other.enemies_defeated,
            items_crafted=self.items_crafted + other.items_crafted,
            sectors_passed=self.sectors_passed + other.sectors_passed,
            npcs_rescued=self.npcs_rescued + other.npcs_rescued,
        )
