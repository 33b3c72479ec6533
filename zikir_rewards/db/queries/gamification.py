"""Gamification database queries"""
import logging
from typing import Iterable, Optional, Tuple

import psycopg
import pydantic

from zikir_rewards.db.connection import db
from zikir_rewards.exceptions import wrap_external_exception
from zikir_rewards.gamification.engine import AccrualEngine
from zikir_rewards.models.gamification import AccrualEvent, AccrualResult, PlayerState

logger = logging.getLogger(__name__)


_ENSURE_PLAYER = """
    INSERT INTO player_progress (user_id)
    VALUES (%s)
    ON CONFLICT (user_id) DO NOTHING
"""

_SELECT_PLAYER = """
    SELECT user_id, amal_score, barakah_coins, noor_tokens, level, total_lifetime_count
    FROM player_progress
    WHERE user_id = %s
"""

_SELECT_BADGES = """
    SELECT badge_id
    FROM user_badges
    WHERE user_id = %s
"""


def row_to_player_state(row: dict, badge_rows: Iterable[dict]) -> PlayerState:
    """Validate a player_progress row plus its badge rows into a PlayerState"""
    return PlayerState(
        amal_score=row["amal_score"],
        barakah_coins=row["barakah_coins"],
        noor_tokens=row["noor_tokens"],
        level=row["level"],
        total_lifetime_count=row["total_lifetime_count"],
        unlocked_badge_ids=frozenset(badge["badge_id"] for badge in badge_rows),
    )


async def get_player_state(user_id: str) -> PlayerState:
    """
    Get a player's progress (creates a default record if it doesn't exist)

    Returns:
        Validated PlayerState
    """
    try:
        async with db.connection() as conn:
            async with conn.transaction():
                async with conn.cursor() as cur:
                    await cur.execute(_ENSURE_PLAYER, (user_id,))
                    if cur.rowcount:
                        logger.info(f"Created new progress record for user {user_id}")

                    await cur.execute(_SELECT_PLAYER, (user_id,))
                    row = await cur.fetchone()

                    await cur.execute(_SELECT_BADGES, (user_id,))
                    badge_rows = await cur.fetchall()

        return row_to_player_state(row, badge_rows)

    except (psycopg.Error, pydantic.ValidationError) as e:
        raise wrap_external_exception(e, operation="get_player_state", user_id=user_id)


async def apply_accrual(
    user_id: str,
    engine: AccrualEngine,
    event: AccrualEvent,
) -> Tuple[PlayerState, AccrualResult]:
    """
    Apply an accrual event to a stored player atomically

    The player row is locked with SELECT ... FOR UPDATE for the whole
    transaction, so concurrent accruals for the same player are serialized.
    Any failure (including an invalid event) rolls the transaction back.

    Args:
        user_id: Player identifier
        engine: Accrual engine holding the active rules
        event: Zikir increment to apply

    Returns:
        (next_state, result)
    """
    try:
        async with db.connection() as conn:
            async with conn.transaction():
                async with conn.cursor() as cur:
                    await cur.execute(_ENSURE_PLAYER, (user_id,))
                    await cur.execute(_SELECT_PLAYER + " FOR UPDATE", (user_id,))
                    row = await cur.fetchone()

                    await cur.execute(_SELECT_BADGES, (user_id,))
                    badge_rows = await cur.fetchall()

                    state = row_to_player_state(row, badge_rows)
                    next_state, result = engine.apply(state, event)

                    await cur.execute(
                        """
                        UPDATE player_progress
                        SET amal_score = %s,
                            barakah_coins = %s,
                            noor_tokens = %s,
                            level = %s,
                            total_lifetime_count = %s,
                            updated_at = CURRENT_TIMESTAMP
                        WHERE user_id = %s
                        """,
                        (
                            next_state.amal_score,
                            next_state.barakah_coins,
                            next_state.noor_tokens,
                            next_state.level,
                            next_state.total_lifetime_count,
                            user_id,
                        )
                    )

                    if result.new_badges:
                        await cur.executemany(
                            """
                            INSERT INTO user_badges (user_id, badge_id)
                            VALUES (%s, %s)
                            ON CONFLICT (user_id, badge_id) DO NOTHING
                            """,
                            [(user_id, badge.id) for badge in result.new_badges]
                        )

                    await _log_accrual(cur, user_id, event, result)

        return next_state, result

    except (psycopg.Error, pydantic.ValidationError) as e:
        raise wrap_external_exception(
            e,
            operation="apply_accrual",
            user_id=user_id,
            context={"zikir_count": event.zikir_count, "room_id": event.room_id}
        )


async def _log_accrual(cur, user_id: str, event: AccrualEvent, result: AccrualResult) -> None:
    """Record the accrual in accrual_log"""
    milestone_count: Optional[int] = result.milestone.trigger_count if result.milestone else None
    await cur.execute(
        """
        INSERT INTO accrual_log (
            user_id, zikir_count, room_id,
            amal_score_awarded, barakah_coins_awarded, noor_tokens_awarded,
            leveled_up, new_level, badge_ids, milestone_count
        )
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
        """,
        (
            user_id,
            event.zikir_count,
            event.room_id,
            result.points_awarded.amal_score,
            result.points_awarded.barakah_coins,
            result.points_awarded.noor_tokens,
            result.leveled_up,
            result.new_level.level if result.new_level else None,
            [badge.id for badge in result.new_badges],
            milestone_count,
        )
    )


async def ping() -> None:
    """Run a trivial query to check connectivity"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute("SELECT 1")
            await cur.fetchone()
