"""Global test fixtures and utilities for zikir-rewards tests"""
import pytest

from zikir_rewards.gamification.badges import BadgeRuleSet
from zikir_rewards.gamification.engine import AccrualEngine
from zikir_rewards.gamification.levels import LevelTable
from zikir_rewards.gamification.milestones import DEFAULT_MILESTONES, MilestoneRuleSet
from zikir_rewards.gamification.rules import GamificationRules
from zikir_rewards.models.gamification import (
    ConversionRates,
    LevelDefinition,
    PlayerState,
)


# ============================================================================
# Rule Fixtures
# ============================================================================

@pytest.fixture
def small_level_table():
    """Four-level table: 0 / 200 / 400 / 800"""
    return LevelTable([
        LevelDefinition(level=1, title="Seeker", required_points=0),
        LevelDefinition(level=2, title="Devoted", required_points=200),
        LevelDefinition(level=3, title="Committed", required_points=400),
        LevelDefinition(level=4, title="Guide", required_points=800),
    ])


@pytest.fixture
def ten_per_count_rates():
    """10 Amal Score per zikir, no other currencies, no level-up bonus"""
    return ConversionRates(
        amal_score_per_count=10,
        barakah_coins_per_count=0,
        noor_tokens_per_count=0,
        level_up_bonus_per_level=0,
    )


@pytest.fixture
def scenario_rules(small_level_table, ten_per_count_rates):
    """Small level table, default milestones, no badges"""
    return GamificationRules(
        levels=small_level_table,
        badges=BadgeRuleSet([]),
        milestones=MilestoneRuleSet(DEFAULT_MILESTONES),
        rates=ten_per_count_rates,
    )


@pytest.fixture
def scenario_engine(scenario_rules):
    return AccrualEngine(scenario_rules)


@pytest.fixture
def default_engine():
    """Engine with the built-in rules"""
    return AccrualEngine(GamificationRules())


# ============================================================================
# Player Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "user-123456789"


@pytest.fixture
def scenario_state():
    """Level 3 player with 450 Amal Score, 5 zikir short of the 100 milestone"""
    return PlayerState(
        amal_score=450,
        level=3,
        total_lifetime_count=95,
        unlocked_badge_ids=frozenset(),
    )


@pytest.fixture
def test_api_key():
    """Standard test API key"""
    return "test_api_key_12345"
