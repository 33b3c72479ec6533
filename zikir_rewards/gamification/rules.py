"""
Gamification rules loading

Rules are loaded once at startup, either from the built-in defaults or from a
JSON file of the form:

    {
        "levels": [{"level": 1, "title": "Seeker 1", "requiredPoints": 0}, ...],
        "badges": [{"id": "first_steps", "name": "First Steps", "description": "...",
                    "criteria": {"type": "total_zikir", "value": 50},
                    "points": 25, "coins": 25}, ...],
        "milestones": [{"triggerCount": 100, "title": "First Century", "description": "..."}],
        "conversionRates": {"amalScorePerCount": 1, "barakahCoinsPerCount": 0.5,
                            "noorTokensPerCount": 0.01,
                            "levelUpBonusPerLevel": 10, "levelUpBonusCoinRate": 0.5}
    }

Omitted sections fall back to the defaults. Any malformed content raises
ConfigurationError so the service never starts with a broken rule set.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
import json
import logging

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from zikir_rewards.exceptions import ConfigurationError
from zikir_rewards.gamification.badges import DEFAULT_BADGES, BadgeRuleSet
from zikir_rewards.gamification.levels import LevelTable, default_levels
from zikir_rewards.gamification.milestones import DEFAULT_MILESTONES, MilestoneRuleSet
from zikir_rewards.models.gamification import (
    BadgeRule,
    ConversionRates,
    LevelDefinition,
    MilestoneRule,
)

logger = logging.getLogger(__name__)

_levels_adapter = TypeAdapter(list[LevelDefinition])
_badges_adapter = TypeAdapter(list[BadgeRule])
_milestones_adapter = TypeAdapter(list[MilestoneRule])


@dataclass(frozen=True)
class GamificationRules:
    """Everything the accrual engine needs to score an event"""
    levels: LevelTable = field(default_factory=lambda: LevelTable(default_levels()))
    badges: BadgeRuleSet = field(default_factory=lambda: BadgeRuleSet(DEFAULT_BADGES))
    milestones: MilestoneRuleSet = field(default_factory=lambda: MilestoneRuleSet(DEFAULT_MILESTONES))
    rates: ConversionRates = field(default_factory=ConversionRates)


def rules_from_dict(data: Dict[str, Any]) -> GamificationRules:
    """
    Build rules from a parsed JSON document

    Raises:
        ConfigurationError: If any section is malformed
    """
    if not isinstance(data, dict):
        raise ConfigurationError("Gamification rules must be a JSON object", config_key="rules")

    unknown = set(data) - {"levels", "badges", "milestones", "conversionRates"}
    if unknown:
        raise ConfigurationError(
            f"Unknown gamification rule sections: {', '.join(sorted(unknown))}",
            config_key="rules",
        )

    try:
        levels = _levels_adapter.validate_python(data["levels"]) if "levels" in data else default_levels()
        badges = _badges_adapter.validate_python(data["badges"]) if "badges" in data else DEFAULT_BADGES
        milestones = (
            _milestones_adapter.validate_python(data["milestones"])
            if "milestones" in data else DEFAULT_MILESTONES
        )
        rates = (
            ConversionRates.model_validate(data["conversionRates"])
            if "conversionRates" in data else ConversionRates()
        )
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid gamification rules: {e}", config_key="rules", cause=e)

    return GamificationRules(
        levels=LevelTable(levels),
        badges=BadgeRuleSet(badges),
        milestones=MilestoneRuleSet(milestones),
        rates=rates,
    )


def load_rules(path: Optional[Path] = None) -> GamificationRules:
    """
    Load gamification rules

    Args:
        path: JSON rules file, or None for the built-in defaults

    Returns:
        Validated GamificationRules

    Raises:
        ConfigurationError: If the file is missing, unreadable or malformed
    """
    if path is None:
        rules = GamificationRules()
        logger.info(
            f"Loaded default gamification rules: {len(rules.levels)} levels, "
            f"{len(rules.badges)} badges, {len(rules.milestones)} milestones"
        )
        return rules

    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read gamification rules from {path}: {e}", config_key="rules", cause=e)

    rules = rules_from_dict(data)
    logger.info(
        f"Loaded gamification rules from {path}: {len(rules.levels)} levels, "
        f"{len(rules.badges)} badges, {len(rules.milestones)} milestones"
    )
    return rules
