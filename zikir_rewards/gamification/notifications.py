"""
Notification Selector

Picks the one achievement shown to the user after an accrual.

Priority (first match wins):
1. Level up
2. First newly unlocked badge
3. Milestone
4. Plain points toast, when any currency increased

Anything that loses is not queued; the UI owns any display queue.
"""

from typing import Callable, List, Optional, Tuple
import logging

from zikir_rewards.models.gamification import AccrualResult, Achievement, AchievementType

logger = logging.getLogger(__name__)


def _level_up(result: AccrualResult) -> Optional[Achievement]:
    if not (result.leveled_up and result.new_level):
        return None
    level = result.new_level
    return Achievement(
        type=AchievementType.LEVEL_UP,
        title=f"Level {level.level} Achieved!",
        title_ar=f"مستوى {level.level} تم تحقيقه!",
        description=f"You've reached {level.title}! Keep up your spiritual journey.",
        reward=result.points_awarded,
    )


def _badge(result: AccrualResult) -> Optional[Achievement]:
    if not result.new_badges:
        return None
    badge = result.new_badges[0]
    return Achievement(
        type=AchievementType.BADGE,
        title=f"{badge.name} Earned!",
        title_ar=f"تم كسب {badge.name_ar or badge.name}!",
        description=badge.description,
        reward=result.points_awarded,
    )


def _milestone(result: AccrualResult) -> Optional[Achievement]:
    if not result.milestone:
        return None
    milestone = result.milestone
    return Achievement(
        type=AchievementType.MILESTONE,
        title=milestone.title,
        title_ar=milestone.title_ar,
        description=milestone.description,
    )


def _points(result: AccrualResult) -> Optional[Achievement]:
    reward = result.points_awarded
    if not reward.has_any():
        return None
    return Achievement(
        type=AchievementType.POINTS,
        title="Rewards Earned!",
        description=f"+{reward.amal_score} Amal Score, +{reward.barakah_coins} Barakah Coins",
        reward=reward,
    )


NOTIFICATION_PRIORITY: List[Tuple[AchievementType, Callable[[AccrualResult], Optional[Achievement]]]] = [
    (AchievementType.LEVEL_UP, _level_up),
    (AchievementType.BADGE, _badge),
    (AchievementType.MILESTONE, _milestone),
    (AchievementType.POINTS, _points),
]


def select_notification(result: AccrualResult) -> Optional[Achievement]:
    """
    Choose the single achievement to surface for an accrual

    Args:
        result: Output of AccrualEngine.apply()

    Returns:
        The highest-priority achievement, or None if nothing was earned
    """
    for achievement_type, build in NOTIFICATION_PRIORITY:
        achievement = build(result)
        if achievement is not None:
            logger.debug(f"Selected {achievement_type.value} notification: {achievement.title}")
            return achievement
    return None
