"""
Dare activity repository using SQLAlchemy ORM
"""

from enum import Enum
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from dailydare.infra.models import DareActivityModel
from dailydare.core.logger.logger import get_logger

logger = get_logger(__name__)


class ActivityType(str, Enum):
    COMPLETION = "completion"
    BONUS_COMPLETION = "bonus_completion"
    REROLL = "reroll"
    TOKEN_PURCHASE = "token_purchase"
    DOUBLE_DARE = "double_dare"


class DareActivityRepository:
    """Repository for the dare activity ledger"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def log_activity(
        self,
        user_id: str,
        activity_type: ActivityType,
        success: bool,
        dare_id: Optional[str] = None,
        points_delta: int = 0,
        tokens_delta: int = 0,
        failure_reason: Optional[str] = None
    ) -> bool:
        """
        Log one economy action

        Args:
            user_id: Account the action was performed for
            activity_type: Kind of action
            success: Whether the action was applied
            dare_id: Dare involved, if any
            points_delta: Change in score (negative for spends)
            tokens_delta: Change in reroll tokens
            failure_reason: Failure kind when success is False

        Returns:
            True if successful, False otherwise
        """
        try:
            activity = DareActivityModel(
                user_id=user_id,
                activity_type=activity_type.value,
                dare_id=dare_id,
                points_delta=points_delta,
                tokens_delta=tokens_delta,
                success=success,
                failure_reason=failure_reason
            )

            self.session.add(activity)
            await self.session.commit()

            logger.debug(
                "Dare activity logged",
                extra={
                    "user_id": user_id,
                    "activity_type": activity_type.value,
                    "dare_id": dare_id,
                    "success": success
                }
            )
            return True

        except Exception as e:
            await self.session.rollback()
            logger.error(
                "Failed to log dare activity",
                extra={
                    "user_id": user_id,
                    "activity_type": activity_type.value,
                    "error": str(e)
                }
            )
            return False
