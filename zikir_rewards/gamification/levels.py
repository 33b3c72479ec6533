"""
Level Table

Maps Amal Score to levels and reports progress toward the next level.

Default Leveling Curve (50 levels):
- requiredPoints = (level - 1)^2 * 100
- Level 1-10: Seeker
- Level 11-20: Devoted
- Level 21-30: Committed
- Level 31-40: Guide
- Level 41-50: Master
"""

from bisect import bisect_right
from typing import Iterable, List, Optional
import logging

from zikir_rewards.exceptions import ConfigurationError
from zikir_rewards.models.gamification import LevelDefinition

logger = logging.getLogger(__name__)

MAX_DEFAULT_LEVEL = 50

# (last level of band, English title, Arabic title)
TITLE_BANDS = [
    (10, "Seeker", "مطلب"),
    (20, "Devoted", "متدين"),
    (30, "Committed", "ملتزم"),
    (40, "Guide", "مرشد"),
    (50, "Master", "أستاذ"),
]


def required_points_for_level(level: int) -> int:
    """Amal Score needed to reach a level on the default curve"""
    return (level - 1) ** 2 * 100


def default_levels(max_level: int = MAX_DEFAULT_LEVEL) -> List[LevelDefinition]:
    """Build the default 50-level table"""
    levels = []
    for level in range(1, max_level + 1):
        title, title_ar = TITLE_BANDS[-1][1], TITLE_BANDS[-1][2]
        for last_level, band_title, band_title_ar in TITLE_BANDS:
            if level <= last_level:
                title, title_ar = band_title, band_title_ar
                break

        levels.append(LevelDefinition(
            level=level,
            title=f"{title} {level}",
            title_ar=f"{title_ar} {level}",
            required_points=required_points_for_level(level),
        ))
    return levels


class LevelTable:
    """
    Ordered, immutable list of level thresholds.

    Levels and their required points must both be strictly increasing.
    An empty or unordered table raises ConfigurationError.
    """

    def __init__(self, levels: Iterable[LevelDefinition]):
        self._levels = tuple(levels)

        if not self._levels:
            raise ConfigurationError("Level table is empty", config_key="levels")

        for previous, current in zip(self._levels, self._levels[1:]):
            if current.level <= previous.level:
                raise ConfigurationError(
                    f"Levels must be strictly increasing: {previous.level} then {current.level}",
                    config_key="levels",
                )
            if current.required_points <= previous.required_points:
                raise ConfigurationError(
                    f"Required points must be strictly increasing: level {previous.level} needs "
                    f"{previous.required_points}, level {current.level} needs {current.required_points}",
                    config_key="levels",
                )

        self._thresholds = [level.required_points for level in self._levels]
        self._by_level = {level.level: index for index, level in enumerate(self._levels)}

    @property
    def levels(self) -> tuple:
        return self._levels

    @property
    def first(self) -> LevelDefinition:
        return self._levels[0]

    @property
    def last(self) -> LevelDefinition:
        return self._levels[-1]

    def __len__(self) -> int:
        return len(self._levels)

    def level_for_score(self, amal_score: int) -> LevelDefinition:
        """
        Highest level whose required points do not exceed amal_score.

        Scores below the first threshold map to the first level.
        """
        index = bisect_right(self._thresholds, amal_score) - 1
        return self._levels[max(index, 0)]

    def next_level(self, current: LevelDefinition) -> Optional[LevelDefinition]:
        """Level following current, or None at the top of the table"""
        index = self._by_level.get(current.level)
        if index is None:
            # Level no longer configured: fall back to its threshold
            index = bisect_right(self._thresholds, current.required_points) - 1
        if index + 1 >= len(self._levels):
            return None
        return self._levels[index + 1]

    def progress_percentage(self, amal_score: int) -> float:
        """
        Progress from the current level toward the next, clamped to [0, 100].

        Returns 100 once the top level is reached.
        """
        current = self.level_for_score(amal_score)
        upcoming = self.next_level(current)
        if upcoming is None:
            return 100.0

        span = upcoming.required_points - current.required_points
        percentage = (amal_score - current.required_points) / span * 100
        return min(100.0, max(0.0, percentage))

    def points_needed(self, amal_score: int) -> int:
        """Amal Score still missing for the next level (0 at the top)"""
        upcoming = self.next_level(self.level_for_score(amal_score))
        if upcoming is None:
            return 0
        return max(0, upcoming.required_points - amal_score)
