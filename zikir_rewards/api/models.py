"""Pydantic models for API request/response validation"""
from typing import Optional
from datetime import datetime, timezone
from pydantic import BaseModel, Field

from zikir_rewards.models.gamification import AccrualResult, Achievement, CamelModel


class AwardPointsRequest(CamelModel):
    """Request body for POST /api/user/award-points"""
    zikir_count: int = Field(..., description="Number of zikir counted; must be positive")
    room_id: Optional[int] = Field(default=None, description="Room the zikir was counted in")


class AwardPointsResponse(AccrualResult):
    """Accrual result plus the one achievement the client should display"""
    achievement: Optional[Achievement] = Field(
        default=None,
        description="Highest-priority achievement for this accrual, if any"
    )


class HealthCheckResponse(CamelModel):
    """Health check response"""
    status: str = Field(..., description="Service status")
    storage: str = Field(..., description="Storage backend status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response model"""
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    user_message: Optional[str] = Field(None, description="Message safe to show to users")
    request_id: Optional[str] = Field(None, description="Request identifier for tracing")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
