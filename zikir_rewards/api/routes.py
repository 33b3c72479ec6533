"""API routes for zikir rewards"""
import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, Request, status

from zikir_rewards.api.models import (
    AwardPointsRequest, AwardPointsResponse,
    HealthCheckResponse, ErrorResponse
)
from zikir_rewards.api.auth import verify_api_key, get_current_user_id
from zikir_rewards.api.middleware import limiter
from zikir_rewards.exceptions import ZikirRewardsError
from zikir_rewards.models.gamification import AccrualEvent, GamificationSummary
from zikir_rewards.services.gamification_service import GamificationService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_gamification_service(request: Request) -> GamificationService:
    """Gamification service from the application's service container"""
    return request.app.state.container.gamification_service


@router.post(
    "/api/user/award-points",
    response_model=AwardPointsResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
@limiter.limit("120/minute")
async def award_points(
    request: Request,
    payload: AwardPointsRequest,
    user_id: str = Depends(get_current_user_id),
    api_key: str = Depends(verify_api_key),
    service: GamificationService = Depends(get_gamification_service)
):
    """
    Award points for counted zikir

    Returns the accrual result (currencies, level-up, new badges, milestone)
    and the single achievement the client should celebrate.
    Rate limit: 120 requests per minute
    """
    try:
        event = AccrualEvent(zikir_count=payload.zikir_count, room_id=payload.room_id)
        result, achievement = await service.award_points(user_id, event)

        return AwardPointsResponse(
            points_awarded=result.points_awarded,
            leveled_up=result.leveled_up,
            new_level=result.new_level,
            new_badges=result.new_badges,
            milestone=result.milestone,
            achievement=achievement
        )

    except ZikirRewardsError:
        raise
    except Exception as e:
        logger.error(f"Error awarding points: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )


@router.get(
    "/api/user/gamification",
    response_model=GamificationSummary,
    responses={500: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
@limiter.limit("60/minute")
async def get_gamification(
    request: Request,
    user_id: str = Depends(get_current_user_id),
    api_key: str = Depends(verify_api_key),
    service: GamificationService = Depends(get_gamification_service)
):
    """Get the player's currencies, level progress and badges (Rate limit: 60/minute)"""
    try:
        return await service.get_summary(user_id)

    except ZikirRewardsError:
        raise
    except Exception as e:
        logger.error(f"Error getting gamification summary: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )


@router.get("/api/health", response_model=HealthCheckResponse)
@limiter.limit("60/minute")
async def health_check(request: Request):
    """Health check endpoint (Rate limit: 60/minute for monitoring systems)"""
    repository = request.app.state.container.repository
    healthy = await repository.is_healthy()

    return HealthCheckResponse(
        status="healthy" if healthy else "degraded",
        storage=f"{repository.name}:{'connected' if healthy else 'disconnected'}",
        timestamp=datetime.now(timezone.utc)
    )
