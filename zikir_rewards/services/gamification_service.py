"""
GamificationService - Gamification Business Logic

Orchestrates the player repository, the accrual engine and the notification
selector for the HTTP layer.
"""

import logging
from typing import Optional, Tuple

from zikir_rewards.db.repository import PlayerRepository
from zikir_rewards.gamification import (
    AccrualEngine,
    GamificationRules,
    build_summary,
    select_notification,
)
from zikir_rewards.models.gamification import (
    AccrualEvent,
    AccrualResult,
    Achievement,
    GamificationSummary,
)

logger = logging.getLogger(__name__)


class GamificationService:
    """
    Service for gamification features.

    Responsibilities:
    - Applying zikir accruals through the repository (serialized per player)
    - Choosing the achievement to surface for each accrual
    - Building read-only progress summaries
    """

    def __init__(
        self,
        repository: PlayerRepository,
        rules: GamificationRules,
        special_status_level: int,
    ):
        """
        Initialize GamificationService.

        Args:
            repository: Player progress store
            rules: Validated gamification rules
            special_status_level: Level from which players get special status
        """
        self.repository = repository
        self.rules = rules
        self.engine = AccrualEngine(rules)
        self.special_status_level = special_status_level
        logger.debug("GamificationService initialized")

    async def award_points(
        self,
        user_id: str,
        event: AccrualEvent,
    ) -> Tuple[AccrualResult, Optional[Achievement]]:
        """
        Award points for counted zikir.

        Args:
            user_id: Player identifier
            event: Zikir increment (count must be positive)

        Returns:
            (result, achievement) where achievement is the single notification
            to show, or None

        Raises:
            ValidationError: If the count is not positive; nothing is stored
            DatabaseError: If the accrual could not be persisted
        """
        _, result = await self.repository.apply_accrual(user_id, self.engine, event)
        achievement = select_notification(result)

        reward = result.points_awarded
        logger.info(
            f"Awarded points to user {user_id} for {event.zikir_count} zikir"
            f"{f' in room {event.room_id}' if event.room_id is not None else ''}: "
            f"+{reward.amal_score} amal, +{reward.barakah_coins} barakah, +{reward.noor_tokens} noor"
        )

        if result.leveled_up and result.new_level:
            logger.info(f"User {user_id} leveled up to {result.new_level.level} ({result.new_level.title})")
        for badge in result.new_badges:
            logger.info(f"User {user_id} unlocked badge: {badge.id} ({badge.name}) +{badge.points} amal")
        if result.milestone:
            logger.info(f"User {user_id} reached milestone {result.milestone.trigger_count}")

        return result, achievement

    async def get_summary(self, user_id: str) -> GamificationSummary:
        """Read-only progress summary for a player"""
        state = await self.repository.get_player_state(user_id)
        return build_summary(state, self.rules, self.special_status_level)
