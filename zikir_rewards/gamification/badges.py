"""
Badge Rule Set

Badges are one-time unlocks checked after every accrual.

Criteria types:
- total_zikir: lifetime count (after the accrual) >= value
- session_zikir: zikir counted in this single event >= value
- room_zikir: event was counted inside a room and its count >= value
- amal_score: Amal Score (after the accrual and its rewards) >= value
- level: level (after the accrual and its rewards) >= value

Rules are evaluated in declaration order, so results are stable across calls.
"""

from typing import Callable, Dict, Iterable, List
import logging

from zikir_rewards.exceptions import ConfigurationError
from zikir_rewards.models.gamification import (
    AccrualEvent,
    BadgeCriteria,
    BadgeCriteriaType,
    BadgeRule,
    PlayerState,
)

logger = logging.getLogger(__name__)


def _check_total_zikir(state: PlayerState, event: AccrualEvent, criteria: BadgeCriteria) -> bool:
    return state.total_lifetime_count >= criteria.value


def _check_session_zikir(state: PlayerState, event: AccrualEvent, criteria: BadgeCriteria) -> bool:
    return event.zikir_count >= criteria.value


def _check_room_zikir(state: PlayerState, event: AccrualEvent, criteria: BadgeCriteria) -> bool:
    return event.room_id is not None and event.zikir_count >= criteria.value


def _check_amal_score(state: PlayerState, event: AccrualEvent, criteria: BadgeCriteria) -> bool:
    return state.amal_score >= criteria.value


def _check_level(state: PlayerState, event: AccrualEvent, criteria: BadgeCriteria) -> bool:
    return state.level >= criteria.value


CRITERIA_CHECKS: Dict[BadgeCriteriaType, Callable[[PlayerState, AccrualEvent, BadgeCriteria], bool]] = {
    BadgeCriteriaType.TOTAL_ZIKIR: _check_total_zikir,
    BadgeCriteriaType.SESSION_ZIKIR: _check_session_zikir,
    BadgeCriteriaType.ROOM_ZIKIR: _check_room_zikir,
    BadgeCriteriaType.AMAL_SCORE: _check_amal_score,
    BadgeCriteriaType.LEVEL: _check_level,
}


DEFAULT_BADGES = [
    BadgeRule(
        id="first_steps",
        name="First Steps",
        name_ar="الخطوات الأولى",
        description="Complete your first 50 zikir",
        criteria=BadgeCriteria(type=BadgeCriteriaType.TOTAL_ZIKIR, value=50),
        points=25,
        coins=25,
    ),
    BadgeRule(
        id="century_achiever",
        name="Century Achiever",
        name_ar="المئوي",
        description="Complete 100 zikir in one session",
        criteria=BadgeCriteria(type=BadgeCriteriaType.SESSION_ZIKIR, value=100),
        points=75,
        coins=75,
    ),
    BadgeRule(
        id="community_member",
        name="Community Member",
        name_ar="عضو المجتمع",
        description="Count zikir together with others in a room",
        criteria=BadgeCriteria(type=BadgeCriteriaType.ROOM_ZIKIR, value=1),
        points=100,
        coins=100,
    ),
    BadgeRule(
        id="steadfast_rememberer",
        name="Steadfast Rememberer",
        name_ar="الذاكر الثابت",
        description="Reach 1,000 lifetime zikir",
        criteria=BadgeCriteria(type=BadgeCriteriaType.TOTAL_ZIKIR, value=1000),
        points=150,
        coins=150,
    ),
    BadgeRule(
        id="rising_seeker",
        name="Rising Seeker",
        name_ar="الطالب الصاعد",
        description="Reach level 5",
        criteria=BadgeCriteria(type=BadgeCriteriaType.LEVEL, value=5),
        points=50,
        coins=50,
    ),
]


class BadgeRuleSet:
    """Immutable, ordered collection of badge rules"""

    def __init__(self, rules: Iterable[BadgeRule]):
        self._rules = tuple(rules)

        seen = set()
        for rule in self._rules:
            if rule.id in seen:
                raise ConfigurationError(f"Duplicate badge id: {rule.id}", config_key="badges")
            if rule.criteria.type not in CRITERIA_CHECKS:
                raise ConfigurationError(
                    f"Badge {rule.id} has unsupported criteria type: {rule.criteria.type}",
                    config_key="badges",
                )
            seen.add(rule.id)

        self._by_id = {rule.id: rule for rule in self._rules}

    @property
    def rules(self) -> tuple:
        return self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def get(self, badge_id: str):
        return self._by_id.get(badge_id)

    def evaluate(self, state: PlayerState, event: AccrualEvent) -> List[BadgeRule]:
        """
        Badges newly earned by state/event.

        Args:
            state: Player state after the accrual, including rewards credited so far
            event: The accrual event being processed

        Returns:
            Rules not yet in state.unlocked_badge_ids whose criteria hold,
            in declaration order. Nothing is persisted here.
        """
        earned = []
        for rule in self._rules:
            if rule.id in state.unlocked_badge_ids:
                continue
            if CRITERIA_CHECKS[rule.criteria.type](state, event, rule.criteria):
                earned.append(rule)
        return earned
