"""
Progress projection

Composes a stored PlayerState with the level table for the read-only
gamification summary shown in the app's top bar.
"""

from zikir_rewards.gamification.rules import GamificationRules
from zikir_rewards.models.gamification import (
    GamificationSummary,
    NextLevelProgress,
    PlayerState,
)


def has_special_status(state: PlayerState, rules: GamificationRules, special_status_level: int) -> bool:
    """Special status: reached special_status_level, or holds every configured badge"""
    if rules.levels.level_for_score(state.amal_score).level >= special_status_level:
        return True
    configured = {rule.id for rule in rules.badges.rules}
    return bool(configured) and configured <= state.unlocked_badge_ids


def build_summary(
    state: PlayerState,
    rules: GamificationRules,
    special_status_level: int,
) -> GamificationSummary:
    """
    Build the gamification summary for a player

    The current level is derived from the Amal Score rather than trusted from
    the stored level column.
    """
    levels = rules.levels
    current = levels.level_for_score(state.amal_score)
    upcoming = levels.next_level(current)

    next_level = None
    if upcoming is not None:
        next_level = NextLevelProgress(
            level=upcoming.level,
            title=upcoming.title,
            title_ar=upcoming.title_ar,
            required_points=upcoming.required_points,
            progress_percentage=round(levels.progress_percentage(state.amal_score), 2),
            points_needed=levels.points_needed(state.amal_score),
        )

    # Declaration order; unlocks of badges no longer configured still count
    badges = [rule for rule in rules.badges.rules if rule.id in state.unlocked_badge_ids]

    return GamificationSummary(
        amal_score=state.amal_score,
        barakah_coins=state.barakah_coins,
        noor_tokens=state.noor_tokens,
        user_level=current.level,
        total_lifetime_count=state.total_lifetime_count,
        current_level=current,
        next_level=next_level,
        badges=badges,
        total_badges=len(state.unlocked_badge_ids),
        has_special_status=has_special_status(state, rules, special_status_level),
    )
