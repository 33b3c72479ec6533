"""Unit tests for notification selection (zikir_rewards/gamification/notifications.py)"""
from zikir_rewards.gamification.badges import DEFAULT_BADGES
from zikir_rewards.gamification.milestones import DEFAULT_MILESTONES
from zikir_rewards.gamification.notifications import (
    NOTIFICATION_PRIORITY,
    select_notification,
)
from zikir_rewards.models.gamification import (
    AccrualResult,
    AchievementType,
    LevelDefinition,
    PointsReward,
)

LEVEL_4 = LevelDefinition(level=4, title="Guide", title_ar="مرشد", required_points=800)
REWARD = PointsReward(amal_score=400, barakah_coins=20, noor_tokens=0)


def make_result(**overrides) -> AccrualResult:
    fields = {
        "points_awarded": REWARD,
        "leveled_up": False,
        "new_level": LEVEL_4,
        "new_badges": [],
        "milestone": None,
    }
    fields.update(overrides)
    return AccrualResult(**fields)


def test_priority_order_is_explicit():
    assert [achievement_type for achievement_type, _ in NOTIFICATION_PRIORITY] == [
        AchievementType.LEVEL_UP,
        AchievementType.BADGE,
        AchievementType.MILESTONE,
        AchievementType.POINTS,
    ]


def test_level_up_beats_everything():
    result = make_result(
        leveled_up=True,
        new_badges=list(DEFAULT_BADGES[:2]),
        milestone=DEFAULT_MILESTONES[0],
    )

    achievement = select_notification(result)

    assert achievement.type == AchievementType.LEVEL_UP
    assert achievement.title == "Level 4 Achieved!"
    assert achievement.title_ar == "مستوى 4 تم تحقيقه!"
    assert "Guide" in achievement.description
    assert achievement.reward == REWARD


def test_first_badge_beats_milestone():
    result = make_result(new_badges=list(DEFAULT_BADGES[:2]), milestone=DEFAULT_MILESTONES[0])

    achievement = select_notification(result)

    assert achievement.type == AchievementType.BADGE
    assert achievement.title == "First Steps Earned!"
    assert achievement.title_ar == "تم كسب الخطوات الأولى!"
    assert achievement.description == DEFAULT_BADGES[0].description


def test_milestone_beats_points():
    achievement = select_notification(make_result(milestone=DEFAULT_MILESTONES[0]))

    assert achievement.type == AchievementType.MILESTONE
    assert achievement.title == "First Century"
    assert achievement.title_ar == "القرن الأول"
    assert achievement.reward is None


def test_points_toast_fallback():
    achievement = select_notification(make_result())

    assert achievement.type == AchievementType.POINTS
    assert achievement.title == "Rewards Earned!"
    assert achievement.description == "+400 Amal Score, +20 Barakah Coins"


def test_leveled_up_without_level_falls_through():
    achievement = select_notification(make_result(leveled_up=True, new_level=None))
    assert achievement.type == AchievementType.POINTS


def test_nothing_earned():
    assert select_notification(make_result(points_awarded=PointsReward())) is None
