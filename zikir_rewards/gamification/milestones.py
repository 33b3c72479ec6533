"""
Milestone Rule Set

Milestones celebrate the lifetime count landing exactly on a trigger count.
A count that jumps over a trigger in one accrual does not fire it.
"""

from typing import Iterable, Optional
import logging

from zikir_rewards.exceptions import ConfigurationError
from zikir_rewards.models.gamification import MilestoneRule

logger = logging.getLogger(__name__)


DEFAULT_MILESTONES = [
    MilestoneRule(
        trigger_count=100,
        title="First Century",
        title_ar="القرن الأول",
        description="Completed your first 100 zikir!",
    ),
    MilestoneRule(
        trigger_count=500,
        title="Dedicated Devotee",
        title_ar="المتفاني المخلص",
        description="Reached 500 total zikir!",
    ),
    MilestoneRule(
        trigger_count=1000,
        title="Spiritual Warrior",
        title_ar="المحارب الروحي",
        description="Achieved 1,000 zikir milestone!",
    ),
    MilestoneRule(
        trigger_count=5000,
        title="Master of Remembrance",
        title_ar="سيد الذكر",
        description="Incredible! 5,000 zikir completed!",
    ),
    MilestoneRule(
        trigger_count=10000,
        title="Divine Champion",
        title_ar="بطل إلهي",
        description="Legendary achievement: 10,000 zikir!",
    ),
]


class MilestoneRuleSet:
    """Immutable collection of milestones keyed by trigger count"""

    def __init__(self, rules: Iterable[MilestoneRule]):
        self._rules = tuple(rules)
        self._by_count = {}
        for rule in self._rules:
            if rule.trigger_count in self._by_count:
                raise ConfigurationError(
                    f"Duplicate milestone trigger count: {rule.trigger_count}",
                    config_key="milestones",
                )
            self._by_count[rule.trigger_count] = rule

    @property
    def rules(self) -> tuple:
        return self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def evaluate(self, previous_total: int, new_total: int) -> Optional[MilestoneRule]:
        """Milestone whose trigger count equals new_total, if the total just advanced to it"""
        if previous_total >= new_total:
            return None
        return self._by_count.get(new_total)
