"""
Service Layer Package

Business logic between the HTTP layer (FastAPI routes) and the data access
layer (player repositories).

- GamificationService: point accrual, notifications, progress summaries
- ServiceContainer: wires repository and rules into services
"""

from zikir_rewards.services.container import ServiceContainer
from zikir_rewards.services.gamification_service import GamificationService

__all__ = [
    "ServiceContainer",
    "GamificationService",
]
