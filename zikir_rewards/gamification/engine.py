"""
Accrual Engine

Turns a zikir-count increment into currency deltas, level changes, badge
unlocks and milestones.

The engine is pure: it reads only its (state, event) arguments, never mutates
them, and returns a new PlayerState alongside the AccrualResult. Callers own
persistence and must serialize accruals per player.

Accrual Rules:
- Currencies: floor(new_total * rate) - floor(old_total * rate) per currency,
  so fractional rates add up across single-tap events
- Level-up bonus: reaching level N pays N * level_up_bonus_per_level Amal
  Score and a share of that in Barakah Coins
- Badges: evaluated on the post-accrual state; their points/coins rewards are
  credited in the same accrual
- Level-up bonuses and badge rewards can unlock further levels and badges;
  both are re-checked until nothing new is earned. Each level pays its bonus
  once and each badge unlocks once, so this always settles.
- Milestones: exact hit on the new lifetime total
"""

from decimal import Decimal
from math import floor
from typing import Tuple
import logging

from zikir_rewards.exceptions import ValidationError
from zikir_rewards.gamification.rules import GamificationRules
from zikir_rewards.models.gamification import (
    AccrualEvent,
    AccrualResult,
    PlayerState,
    PointsReward,
)

logger = logging.getLogger(__name__)


def accrued_amount(previous_total: int, new_total: int, rate: Decimal) -> int:
    """Whole units earned between two lifetime totals at a per-count rate"""
    return floor(new_total * rate) - floor(previous_total * rate)


class AccrualEngine:
    """Stateless scorer for accrual events; safe to share between tasks"""

    def __init__(self, rules: GamificationRules):
        self.rules = rules

    def calculate_currency(self, previous_total: int, new_total: int) -> PointsReward:
        """Currency earned by moving the lifetime count from previous_total to new_total"""
        rates = self.rules.rates
        return PointsReward(
            amal_score=accrued_amount(previous_total, new_total, rates.amal_score_per_count),
            barakah_coins=accrued_amount(previous_total, new_total, rates.barakah_coins_per_count),
            noor_tokens=accrued_amount(previous_total, new_total, rates.noor_tokens_per_count),
        )

    def apply(self, state: PlayerState, event: AccrualEvent) -> Tuple[PlayerState, AccrualResult]:
        """
        Apply an accrual event to a player state snapshot

        Args:
            state: Current player state (not modified)
            event: Zikir increment to score

        Returns:
            (next_state, result)

        Raises:
            ValidationError: If event.zikir_count is not positive; nothing is applied
        """
        if event.zikir_count <= 0:
            raise ValidationError(
                message="zikir count must be positive",
                field="zikir_count",
                value=event.zikir_count,
                operation="apply_accrual",
            )

        levels = self.rules.levels
        previous_total = state.total_lifetime_count
        new_total = previous_total + event.zikir_count

        # Currencies from the count itself
        earned = self.calculate_currency(previous_total, new_total)
        next_state = state.model_copy(update={
            "amal_score": state.amal_score + earned.amal_score,
            "barakah_coins": state.barakah_coins + earned.barakah_coins,
            "noor_tokens": state.noor_tokens + earned.noor_tokens,
            "total_lifetime_count": new_total,
        })

        # Level-up bonuses and badge rewards until nothing new is earned
        new_badges = []
        bonus_level = state.level
        while True:
            current_level = levels.level_for_score(next_state.amal_score)
            next_state = next_state.model_copy(update={"level": current_level.level})

            if current_level.level > bonus_level:
                bonus_level = current_level.level
                next_state = self._credit_level_up_bonus(next_state, current_level.level)
                continue

            # Badges are judged on the post-accrual state
            unlocked = self.rules.badges.evaluate(next_state, event)
            if not unlocked:
                break
            new_badges.extend(unlocked)
            next_state = next_state.model_copy(update={
                "amal_score": next_state.amal_score + sum(badge.points for badge in unlocked),
                "barakah_coins": next_state.barakah_coins + sum(badge.coins for badge in unlocked),
                "unlocked_badge_ids": next_state.unlocked_badge_ids | {badge.id for badge in unlocked},
            })

        milestone = self.rules.milestones.evaluate(previous_total, new_total)

        result = AccrualResult(
            points_awarded=PointsReward(
                amal_score=next_state.amal_score - state.amal_score,
                barakah_coins=next_state.barakah_coins - state.barakah_coins,
                noor_tokens=next_state.noor_tokens - state.noor_tokens,
            ),
            leveled_up=current_level.level > state.level,
            new_level=current_level,
            new_badges=new_badges,
            milestone=milestone,
        )

        logger.debug(
            f"Accrual of {event.zikir_count} zikir: total {previous_total} -> {new_total}, "
            f"amal {state.amal_score} -> {next_state.amal_score}, "
            f"level {state.level} -> {current_level.level}, "
            f"badges={[badge.id for badge in new_badges]}, "
            f"milestone={milestone.trigger_count if milestone else None}"
        )

        return next_state, result

    def _credit_level_up_bonus(self, state: PlayerState, level: int) -> PlayerState:
        rates = self.rules.rates
        bonus = level * rates.level_up_bonus_per_level
        return state.model_copy(update={
            "amal_score": state.amal_score + bonus,
            "barakah_coins": state.barakah_coins + floor(bonus * rates.level_up_bonus_coin_rate),
        })
