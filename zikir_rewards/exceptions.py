"""
Exception hierarchy for zikir-rewards

Every error carries a request id, the player and operation it concerns, a
message safe to show in the app, and the HTTP status the API answers with.
Errors log themselves when created.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class ZikirRewardsError(Exception):
    """
    Base exception for all zikir-rewards errors

    Example:
        raise ZikirRewardsError(
            message="Failed to save player state",
            user_id="42",
            operation="apply_accrual",
            context={"zikir_count": 33}
        )
    """

    status_code = 500
    default_user_message = "An error occurred. Please try again."

    def __init__(
        self,
        message: str,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.user_id = user_id
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or self.default_user_message
        self.timestamp = datetime.now(timezone.utc)

        self._log_error()

    def _log_error(self) -> None:
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # 'message' is reserved by logging
            "request_id": self.request_id,
            "user_id": self.user_id,
            "operation": self.operation,
            "error_context": self.context,
        }
        logger.error(
            f"{self.__class__.__name__}: {self.message}",
            extra=log_data,
            exc_info=self.cause
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for API responses"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


class ValidationError(ZikirRewardsError):
    """An accrual request the engine refuses, e.g. a non-positive zikir count"""

    status_code = 400

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        kwargs.setdefault("user_message", f"Invalid {field}: {message}" if field else message)
        super().__init__(
            message=message,
            context={"field": field, "value": value},
            **kwargs
        )


class DatabaseError(ZikirRewardsError):
    """Player progress could not be read or written"""

    default_user_message = "Your progress could not be loaded. Please try again."


class ConnectionError(DatabaseError):
    """PostgreSQL is unreachable"""

    status_code = 503
    default_user_message = "Rewards are temporarily unavailable. Please try again in a moment."

    def __init__(self, message: str = "Database connection failed", **kwargs):
        super().__init__(message=message, **kwargs)


class QueryError(DatabaseError):
    """A statement failed; the accrual transaction was rolled back"""

    default_user_message = "We couldn't save your rewards. Please try again."


class ConfigurationError(ZikirRewardsError):
    """Gamification rules are malformed; raised at startup only"""

    default_user_message = "The system is not properly configured. Please contact support."

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            context={"config_key": config_key},
            **kwargs
        )


def wrap_external_exception(
    error: Exception,
    operation: str,
    user_id: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None
) -> ZikirRewardsError:
    """
    Wrap a psycopg or pydantic error raised while touching player storage

    Example:
        try:
            await cur.execute(query)
        except psycopg.Error as e:
            raise wrap_external_exception(e, operation="apply_accrual", user_id="42")
    """
    # Import here to avoid circular dependencies
    import psycopg
    import pydantic

    details = dict(user_id=user_id, operation=operation, context=context, cause=error)

    if isinstance(error, psycopg.OperationalError):
        return ConnectionError(f"Database connection failed: {error}", **details)
    if isinstance(error, psycopg.Error):
        return QueryError(f"Database query failed: {error}", **details)
    if isinstance(error, pydantic.ValidationError):
        # A stored row that violates PlayerState constraints
        return DatabaseError(f"Stored record is invalid: {error}", **details)
    return ZikirRewardsError(f"{operation} failed: {error}", **details)
