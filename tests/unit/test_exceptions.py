"""Unit tests for custom exception hierarchy"""
from datetime import datetime

import psycopg
import pydantic
import pytest

from zikir_rewards.exceptions import (
    ZikirRewardsError,
    ValidationError,
    DatabaseError,
    ConnectionError,
    QueryError,
    ConfigurationError,
    wrap_external_exception
)
from zikir_rewards.models.gamification import PlayerState


class TestZikirRewardsError:
    """Test base exception class"""

    def test_basic_exception(self):
        """Test basic exception creation"""
        error = ZikirRewardsError("Test error")
        assert error.message == "Test error"
        assert error.user_message == "An error occurred. Please try again."
        assert error.request_id is not None
        assert isinstance(error.timestamp, datetime)

    def test_exception_with_context(self):
        """Test exception with full context"""
        error = ZikirRewardsError(
            message="Save failed",
            user_id="42",
            operation="apply_accrual",
            context={"zikir_count": 33},
            user_message="Could not save your zikir"
        )
        assert error.user_id == "42"
        assert error.operation == "apply_accrual"
        assert error.context["zikir_count"] == 33
        assert error.user_message == "Could not save your zikir"

    def test_exception_with_cause(self):
        """Test exception wrapping another exception"""
        original_error = ValueError("Invalid value")
        error = ZikirRewardsError(
            message="Validation failed",
            cause=original_error
        )
        assert error.cause == original_error

    def test_to_dict(self):
        """Test exception serialization"""
        error = ZikirRewardsError(
            message="Test error",
            user_id="42"
        )
        error_dict = error.to_dict()
        assert error_dict["error"] == "ZikirRewardsError"
        assert error_dict["message"] == "Test error"
        assert error_dict["user_message"] == "An error occurred. Please try again."
        assert "request_id" in error_dict
        assert "timestamp" in error_dict

    def test_exception_is_logged(self, caplog):
        """Errors log themselves on creation"""
        with caplog.at_level("ERROR", logger="zikir_rewards.exceptions"):
            ZikirRewardsError("Logged error", user_id="42")
        assert "Logged error" in caplog.text


class TestValidationError:
    """Test validation error"""

    def test_validation_error(self):
        """Test validation error with field"""
        error = ValidationError(
            message="must be positive",
            field="zikir_count",
            value=0
        )
        assert error.field == "zikir_count"
        assert error.value == 0
        assert "Invalid zikir_count" in error.user_message
        assert error.context == {"field": "zikir_count", "value": 0}


class TestDatabaseErrors:
    """Test database-related errors"""

    def test_connection_error(self):
        """Test connection error"""
        error = ConnectionError()
        assert "connection" in error.message.lower()
        assert "unavailable" in error.user_message.lower()
        assert isinstance(error, DatabaseError)
        assert error.status_code == 503

    def test_query_error(self):
        """Test query error"""
        error = QueryError(message="Query failed", operation="apply_accrual")
        assert error.operation == "apply_accrual"
        assert "save your rewards" in error.user_message
        assert error.status_code == 500


class TestConfigurationError:
    """Test configuration errors"""

    def test_configuration_error(self):
        """Test configuration error"""
        error = ConfigurationError(
            message="Level table is empty",
            config_key="levels"
        )
        assert error.config_key == "levels"
        assert "configured" in error.user_message.lower()


class TestWrapExternalException:
    """Test mapping of third-party errors into the hierarchy"""

    def test_wraps_operational_error(self):
        error = wrap_external_exception(
            psycopg.OperationalError("server closed the connection"),
            operation="apply_accrual",
            user_id="42"
        )
        assert isinstance(error, ConnectionError)
        assert error.operation == "apply_accrual"
        assert error.user_id == "42"

    def test_wraps_query_error(self):
        error = wrap_external_exception(
            psycopg.errors.UniqueViolation("duplicate key"),
            operation="apply_accrual",
            context={"zikir_count": 33}
        )
        assert isinstance(error, QueryError)
        assert error.context == {"zikir_count": 33}

    def test_wraps_invalid_record(self):
        with pytest.raises(pydantic.ValidationError) as exc_info:
            PlayerState(amal_score=-1)

        error = wrap_external_exception(exc_info.value, operation="get_player_state")

        assert isinstance(error, DatabaseError)
        assert "invalid" in error.message.lower()

    def test_generic_fallback(self):
        original = RuntimeError("boom")
        error = wrap_external_exception(original, operation="get_summary")

        assert type(error) is ZikirRewardsError
        assert error.cause is original
        assert "get_summary failed" in error.message
