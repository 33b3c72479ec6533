"""Gamification models: player state, rule tables, accrual results"""
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Immutable model serialized with camelCase keys, as the web client expects"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class PlayerState(CamelModel):
    """Snapshot of a player's progress, owned by the persistence layer"""
    amal_score: int = Field(default=0, ge=0)
    barakah_coins: int = Field(default=0, ge=0)
    noor_tokens: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    unlocked_badge_ids: frozenset[str] = Field(default_factory=frozenset)
    total_lifetime_count: int = Field(default=0, ge=0)


class LevelDefinition(CamelModel):
    """One row of the level table"""
    level: int = Field(..., ge=1)
    title: str
    title_ar: Optional[str] = None
    required_points: int = Field(..., ge=0)


class BadgeCriteriaType(str, Enum):
    """Statistics a badge can be unlocked on"""
    TOTAL_ZIKIR = "total_zikir"
    SESSION_ZIKIR = "session_zikir"
    ROOM_ZIKIR = "room_zikir"
    AMAL_SCORE = "amal_score"
    LEVEL = "level"


class BadgeCriteria(CamelModel):
    """Declarative unlock condition: statistic >= value"""
    type: BadgeCriteriaType
    value: int = Field(..., ge=0)


class BadgeRule(CamelModel):
    """Badge definition with its unlock criteria and rewards"""
    id: str = Field(..., min_length=1)
    name: str
    name_ar: Optional[str] = None
    description: str
    criteria: BadgeCriteria
    points: int = Field(default=0, ge=0)
    coins: int = Field(default=0, ge=0)


class MilestoneRule(CamelModel):
    """One-time celebration when the lifetime count lands on trigger_count"""
    trigger_count: int = Field(..., gt=0)
    title: str
    title_ar: Optional[str] = None
    description: str


class ConversionRates(CamelModel):
    """Currency earned per counted zikir, plus the bonus paid on reaching a new level"""
    amal_score_per_count: Decimal = Field(default=Decimal("1"), ge=0)
    barakah_coins_per_count: Decimal = Field(default=Decimal("0.5"), ge=0)
    noor_tokens_per_count: Decimal = Field(default=Decimal("0.01"), ge=0)
    # Reaching level N pays N * level_up_bonus_per_level Amal Score
    level_up_bonus_per_level: int = Field(default=10, ge=0)
    # Barakah Coins paid per bonus Amal Score point (floored)
    level_up_bonus_coin_rate: Decimal = Field(default=Decimal("0.5"), ge=0)


class AccrualEvent(CamelModel):
    """A batch of counted zikir; the engine rejects non-positive counts"""
    zikir_count: int
    room_id: Optional[int] = None


class PointsReward(CamelModel):
    """Currency deltas awarded by one accrual"""
    amal_score: int = Field(default=0, ge=0)
    barakah_coins: int = Field(default=0, ge=0)
    noor_tokens: int = Field(default=0, ge=0)

    def has_any(self) -> bool:
        return self.amal_score > 0 or self.barakah_coins > 0 or self.noor_tokens > 0


class AccrualResult(CamelModel):
    """Everything a single accrual awarded or triggered"""
    points_awarded: PointsReward
    leveled_up: bool = False
    new_level: Optional[LevelDefinition] = None
    new_badges: list[BadgeRule] = Field(default_factory=list)
    milestone: Optional[MilestoneRule] = None


class AchievementType(str, Enum):
    """Kinds of notification handed to the UI"""
    LEVEL_UP = "level_up"
    BADGE = "badge"
    MILESTONE = "milestone"
    POINTS = "points"


class Achievement(CamelModel):
    """The single achievement surfaced to the user for one accrual"""
    type: AchievementType
    title: str
    title_ar: Optional[str] = None
    description: str
    reward: Optional[PointsReward] = None


class NextLevelProgress(CamelModel):
    """Next level plus how far the player is toward it"""
    level: int
    title: str
    title_ar: Optional[str] = None
    required_points: int
    progress_percentage: float = Field(..., ge=0, le=100)
    points_needed: int = Field(..., ge=0)


class GamificationSummary(CamelModel):
    """Read-only projection of a player's progress"""
    amal_score: int
    barakah_coins: int
    noor_tokens: int
    user_level: int
    total_lifetime_count: int
    current_level: LevelDefinition
    next_level: Optional[NextLevelProgress] = None
    badges: list[BadgeRule] = Field(default_factory=list)
    total_badges: int = 0
    has_special_status: bool = False
