"""
Database queries - re-exported for convenience.

Module organization:
- gamification.py: player progress, badge unlocks, accrual log
"""

from zikir_rewards.db.queries.gamification import (
    get_player_state,
    apply_accrual,
    ping,
)

__all__ = [
    "get_player_state",
    "apply_accrual",
    "ping",
]
