"""이벤트 유형 상수

표시 레이어는 이 이름으로 EventBus를 구독한다.
"""


class EventTypes:
    """이벤트 유형 문자열 상수"""

    # 플레이어용 로그 한 줄 (data: text, level)
    LOG = "log"

    # world
    TILE_REVEALED = "tile_revealed"
    ENEMY_DEFEATED = "enemy_defeated"
    NPC_RESCUED = "npc_rescued"

    # item
    ITEM_BROKEN = "item_broken"

    # session
    REST_COMPLETED = "rest_completed"
    SECTOR_ENTERED = "sector_entered"
    GAME_OVER = "game_over"
