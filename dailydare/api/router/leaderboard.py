from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from dailydare.api.middleware.authentication.jwt_bearer import get_current_user_id
from dailydare.core.dependencies import get_leaderboard_service
from dailydare.core.service.leaderboard.leaderboard_service import LeaderboardEntry, LeaderboardService

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("", response_model=List[LeaderboardEntry])
async def get_leaderboard(
    search: Optional[str] = Query(None, max_length=50),
    limit: int = Query(50, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
    service: LeaderboardService = Depends(get_leaderboard_service)
) -> List[LeaderboardEntry]:
    return await service.top(limit=limit, search=search)
