"""
Service Container - Dependency Injection Container

Holds the infrastructure (repository, rules) built at startup and lazily
creates services on first access.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from zikir_rewards.db.repository import PlayerRepository
from zikir_rewards.gamification.rules import GamificationRules

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """
    Simple dependency injection container for services.

    Services are lazy-loaded on first access via properties.
    Infrastructure dependencies (repository, rules) are injected.
    """

    # Infrastructure dependencies (injected)
    repository: PlayerRepository
    rules: GamificationRules
    special_status_level: int

    # Services (lazy-loaded via properties)
    _gamification_service: Optional[object] = field(default=None, init=False, repr=False)

    @property
    def gamification_service(self):
        """Get GamificationService instance (lazy-loaded)"""
        if self._gamification_service is None:
            from zikir_rewards.services.gamification_service import GamificationService
            self._gamification_service = GamificationService(
                self.repository, self.rules, self.special_status_level
            )
            logger.debug("GamificationService instantiated")
        return self._gamification_service

    async def startup(self) -> None:
        """Open infrastructure connections"""
        await self.repository.connect()

    async def shutdown(self) -> None:
        """Close infrastructure connections"""
        await self.repository.close()
