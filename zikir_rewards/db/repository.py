"""
Player repositories

Two interchangeable stores for player progress:
- InMemoryPlayerRepository: per-player asyncio.Lock, state lost on restart
- PostgresPlayerRepository: row lock inside one transaction per accrual

Both guarantee that accruals for the same player never interleave, which is
what keeps badges and milestones awarded at most once.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Dict, Tuple

from zikir_rewards.db import queries
from zikir_rewards.db.connection import db
from zikir_rewards.gamification.engine import AccrualEngine
from zikir_rewards.models.gamification import AccrualEvent, AccrualResult, PlayerState

logger = logging.getLogger(__name__)


class PlayerRepository(ABC):
    """Storage for player progress with per-player serialized accruals"""

    name: str = "abstract"

    @abstractmethod
    async def get_player_state(self, user_id: str) -> PlayerState:
        """Current state, creating a default record on first use"""

    @abstractmethod
    async def apply_accrual(
        self,
        user_id: str,
        engine: AccrualEngine,
        event: AccrualEvent,
    ) -> Tuple[PlayerState, AccrualResult]:
        """Load, apply and persist one accrual atomically"""

    async def connect(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def is_healthy(self) -> bool:
        return True


class InMemoryPlayerRepository(PlayerRepository):
    """In-process store for development and tests (NOT persisted)"""

    name = "memory"

    def __init__(self):
        self._states: Dict[str, PlayerState] = {}
        self._locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def get_player_state(self, user_id: str) -> PlayerState:
        if user_id not in self._states:
            self._states[user_id] = PlayerState()
            logger.debug(f"Created in-memory progress record for user {user_id}")
        return self._states[user_id]

    async def apply_accrual(
        self,
        user_id: str,
        engine: AccrualEngine,
        event: AccrualEvent,
    ) -> Tuple[PlayerState, AccrualResult]:
        async with self._locks[user_id]:
            state = await self.get_player_state(user_id)
            next_state, result = engine.apply(state, event)
            self._states[user_id] = next_state
        return next_state, result


class PostgresPlayerRepository(PlayerRepository):
    """PostgreSQL-backed store using the shared connection pool"""

    name = "postgres"

    async def connect(self) -> None:
        if db.is_initialized:
            return
        await db.init_pool()
        logger.info("Database pool initialized")

    async def close(self) -> None:
        await db.close_pool()
        logger.info("Database pool closed")

    async def get_player_state(self, user_id: str) -> PlayerState:
        return await queries.get_player_state(user_id)

    async def apply_accrual(
        self,
        user_id: str,
        engine: AccrualEngine,
        event: AccrualEvent,
    ) -> Tuple[PlayerState, AccrualResult]:
        return await queries.apply_accrual(user_id, engine, event)

    async def is_healthy(self) -> bool:
        try:
            await queries.ping()
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False


def create_repository(backend: str) -> PlayerRepository:
    """Repository for a STORAGE_BACKEND value"""
    if backend == "postgres":
        return PostgresPlayerRepository()
    if backend == "memory":
        logger.warning("Using in-memory player store - progress is NOT persisted across restarts")
        return InMemoryPlayerRepository()
    raise ValueError(f"Unknown storage backend: {backend}")
