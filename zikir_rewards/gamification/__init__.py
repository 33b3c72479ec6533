"""
Gamification system for Zikir Rewards

This module implements the reward side of zikir counting:
- Level table (Amal Score thresholds)
- Badge and milestone rule sets
- Accrual engine (pure: state + event -> next state + result)
- Notification selection and progress summaries
"""

from zikir_rewards.gamification.engine import AccrualEngine
from zikir_rewards.gamification.levels import LevelTable, default_levels
from zikir_rewards.gamification.badges import BadgeRuleSet, DEFAULT_BADGES
from zikir_rewards.gamification.milestones import MilestoneRuleSet, DEFAULT_MILESTONES
from zikir_rewards.gamification.rules import GamificationRules, load_rules
from zikir_rewards.gamification.notifications import select_notification
from zikir_rewards.gamification.progress import build_summary

__all__ = [
    "AccrualEngine",
    "LevelTable",
    "default_levels",
    "BadgeRuleSet",
    "DEFAULT_BADGES",
    "MilestoneRuleSet",
    "DEFAULT_MILESTONES",
    "GamificationRules",
    "load_rules",
    "select_notification",
    "build_summary",
]
