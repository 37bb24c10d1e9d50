import random
from datetime import date
from typing import List, Optional, Tuple, Type, TypeVar

import redis.asyncio as redis

from dailydare.core.service.dare.cache.profile_store import ProfileStore
from dailydare.core.service.dare.catalog_service import DareCatalogService
from dailydare.core.service.dare.clock import SystemClock
from dailydare.core.service.dare.models.dare import AssignedDare, DIFFICULTY_ORDER
from dailydare.core.service.dare.models.profile import AssignmentState, UserProfile
from dailydare.core.service.dare.models.results import (
    AssignmentResult,
    CompletionResult,
    EconomyResult,
    FailureKind,
    PurchaseResult,
    RerollPayment,
    RerollResult,
)
from dailydare.core.service.dare.selection import pick_personalized
from dailydare.core.exceptions.base import ProfileConflictError
from dailydare.infra.repository.dare_activity_repository import ActivityType
from dailydare.core.logger.logger import get_logger
from dailydare.infra.config.settings import settings

logger = get_logger(__name__)

ResultT = TypeVar("ResultT", bound=EconomyResult)

USER_NOT_FOUND_MESSAGE = "User profile not found."


class DareEconomyService:
    """
    Daily dare assignment, rerolls, token purchases and completion scoring.

    Every operation is one optimistic read-modify-write of the user's
    profile and returns a result object; expected failures are never raised.
    """

    def __init__(
        self,
        profile_store: ProfileStore,
        catalog_service: DareCatalogService,
        clock=None,
        rng: Optional[random.Random] = None,
        activity_repository=None
    ):
        self.profiles = profile_store
        self.catalog = catalog_service
        self.clock = clock or SystemClock()
        self.rng = rng or random.Random()
        self.activity_repository = activity_repository

        self.free_rerolls_per_day = settings.FREE_REROLLS_PER_DAY
        self.reroll_cost = settings.REROLL_COST
        self.token_cost = settings.REROLL_TOKEN_COST
        self.bonus_prefix = settings.BONUS_DARE_PREFIX

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _new_profile(self, user_id: str, today: date) -> UserProfile:
        return UserProfile(
            user_id=user_id,
            score=0,
            reroll_tokens=self.free_rerolls_per_day,
            tokens_reset_on=today,
            dares_completed_count=0,
            interests=[],
            daily_dares=[],
            onboarding_complete=False,
        )

    def is_bonus_dare(self, dare_id: str, is_bonus: bool = False) -> bool:
        return is_bonus or dare_id.startswith(self.bonus_prefix)

    def _transient_failure(self, result_cls: Type[ResultT], operation: str, user_id: str, error: Exception) -> ResultT:
        logger.error(
            f"{operation} failed on storage error",
            extra={"user_id": user_id, "error_type": type(error).__name__, "error": str(error)}
        )
        return result_cls(
            success=False,
            failure=FailureKind.TRANSIENT,
            message="Something went wrong saving your progress. Please try again."
        )

    async def _log_activity(self, user_id: str, activity_type: ActivityType, result: EconomyResult, **fields) -> None:
        """Write to the activity ledger; failures are logged and ignored"""
        if not self.activity_repository:
            return
        try:
            await self.activity_repository.log_activity(
                user_id=user_id,
                activity_type=activity_type,
                success=result.success,
                failure_reason=result.failure.value if result.failure else None,
                **fields
            )
        except Exception as db_error:
            logger.error(
                f"Failed to log dare activity: {db_error}",
                extra={"user_id": user_id, "activity_type": activity_type.value}
            )

    async def _build_daily_set(self, interests: List[str], today: date) -> List[AssignedDare]:
        """One dare per tier, skipping tiers with nothing left to pick"""
        chosen_ids = set()
        daily_dares = []

        for difficulty in DIFFICULTY_ORDER:
            candidates = await self.catalog.list_by_difficulty(difficulty)
            template = pick_personalized(candidates, interests, chosen_ids, self.rng)
            if template is None:
                logger.warning(
                    "Catalog exhausted for tier, leaving it unfilled",
                    extra={"difficulty": difficulty.value}
                )
                continue
            daily_dares.append(AssignedDare.from_template(template, today))
            chosen_ids.add(template.id)

        return daily_dares

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        return await self.profiles.get_profile(user_id)

    async def complete_onboarding(
        self,
        user_id: str,
        interests: List[str],
        display_name: Optional[str] = None
    ) -> UserProfile:
        """Store interests and flip the onboarding gate; creates the profile if needed"""
        today = self.clock.today()
        cleaned = list(dict.fromkeys(i.strip() for i in interests if i and i.strip()))

        async def mutate(profile: Optional[UserProfile]) -> Tuple[UserProfile, UserProfile]:
            profile = profile or self._new_profile(user_id, today)
            updates = {"interests": cleaned, "onboarding_complete": True}
            if display_name:
                updates["display_name"] = display_name
            updated = profile.model_copy(update=updates)
            return updated, updated

        profile = await self.profiles.update(user_id, mutate)
        logger.info("Onboarding completed", extra={"user_id": user_id, "interests": cleaned})
        return profile

    # ------------------------------------------------------------------
    # Economy operations
    # ------------------------------------------------------------------

    async def assign_daily_dares(self, user_id: str) -> AssignmentResult:
        """
        Assign one Easy, one Medium and one Hard dare for today.

        Calling this again on the same calendar day returns the existing set
        without writing anything.
        """
        today = self.clock.today()

        async def mutate(profile: Optional[UserProfile]) -> Tuple[Optional[UserProfile], AssignmentResult]:
            if profile is None:
                profile = self._new_profile(user_id, today)
                logger.info("Created new user profile", extra={"user_id": user_id})

            if profile.assignment_state(today) == AssignmentState.ASSIGNED_TODAY:
                return None, AssignmentResult(
                    success=True,
                    message="Daily dares already assigned for today.",
                    dares=profile.daily_dares,
                    assigned_date=today,
                    reassigned=False,
                    reroll_tokens=profile.reroll_tokens
                )

            updates = {}
            # The daily allotment only moves forward in time
            if profile.tokens_reset_on is None or profile.tokens_reset_on < today:
                updates["reroll_tokens"] = self.free_rerolls_per_day
                updates["tokens_reset_on"] = today

            daily_dares = await self._build_daily_set(profile.interests, today)
            updates["daily_dares"] = daily_dares
            updates["last_dare_assignment"] = today
            updated = profile.model_copy(update=updates)

            if daily_dares:
                message = f"Assigned {len(daily_dares)} daily dares."
            else:
                message = "No dares are available right now."

            return updated, AssignmentResult(
                success=True,
                message=message,
                dares=daily_dares,
                assigned_date=today,
                reassigned=True,
                reroll_tokens=updated.reroll_tokens
            )

        try:
            result = await self.profiles.update(user_id, mutate)
        except (redis.RedisError, ProfileConflictError) as e:
            return self._transient_failure(AssignmentResult, "Daily dare assignment", user_id, e)

        if result.reassigned:
            logger.info(
                "Assigned daily dares",
                extra={
                    "user_id": user_id,
                    "assigned_date": str(today),
                    "tiers": [d.difficulty.value for d in result.dares]
                }
            )
        return result

    async def complete_dare(
        self,
        user_id: str,
        dare_id: str,
        points: Optional[int] = None,
        is_bonus: bool = False
    ) -> CompletionResult:
        """
        Award points for a completed dare.

        Regular dares score at most once per day. Bonus dares (flagged, or
        carrying the bonus id prefix) bypass the daily list and are uncapped.

        Args:
            user_id: Account completing the dare
            dare_id: Id from today's set, or a bonus id
            points: Points to award; defaults to the assigned dare's points
            is_bonus: Force the bonus path

        Raises:
            ValueError: For negative points, or a bonus dare without points
        """
        bonus = self.is_bonus_dare(dare_id, is_bonus)
        if points is not None and points < 0:
            raise ValueError("points must not be negative")
        if bonus and points is None:
            raise ValueError("points are required for bonus dares")

        today = self.clock.today()

        async def mutate(profile: Optional[UserProfile]) -> Tuple[Optional[UserProfile], CompletionResult]:
            if profile is None:
                return None, CompletionResult(
                    success=False, failure=FailureKind.NOT_FOUND, message=USER_NOT_FOUND_MESSAGE,
                    dare_id=dare_id, is_bonus=bonus
                )

            if bonus:
                updated = profile.model_copy(update={
                    "score": profile.score + points,
                    "dares_completed_count": profile.dares_completed_count + 1,
                })
                return updated, CompletionResult(
                    success=True,
                    message=f"Overtime dare completed! {points} points awarded.",
                    dare_id=dare_id,
                    is_bonus=True,
                    points_awarded=points,
                    score=updated.score,
                    dares_completed_count=updated.dares_completed_count
                )

            index = profile.find_dare(dare_id)
            if index is None or profile.daily_dares[index].assigned_date != today:
                return None, CompletionResult(
                    success=False, failure=FailureKind.NOT_FOUND,
                    message="This dare is not part of today's assignment.",
                    dare_id=dare_id
                )

            dare = profile.daily_dares[index]
            if dare.completed:
                return None, CompletionResult(
                    success=False, failure=FailureKind.ALREADY_COMPLETED,
                    message="You already completed this dare today.",
                    dare_id=dare_id,
                    score=profile.score,
                    dares_completed_count=profile.dares_completed_count
                )

            awarded = dare.points if points is None else points
            daily_dares = list(profile.daily_dares)
            daily_dares[index] = dare.model_copy(update={"completed": True})
            updated = profile.model_copy(update={
                "daily_dares": daily_dares,
                "score": profile.score + awarded,
                "dares_completed_count": profile.dares_completed_count + 1,
            })
            return updated, CompletionResult(
                success=True,
                message=f"Dare completed! {awarded} points awarded.",
                dare_id=dare_id,
                points_awarded=awarded,
                score=updated.score,
                dares_completed_count=updated.dares_completed_count
            )

        try:
            result = await self.profiles.update(user_id, mutate)
        except (redis.RedisError, ProfileConflictError) as e:
            return self._transient_failure(CompletionResult, "Dare completion", user_id, e)

        logger.info(
            "Dare completion processed",
            extra={
                "user_id": user_id,
                "dare_id": dare_id,
                "is_bonus": bonus,
                "success": result.success,
                "failure": result.failure,
                "score": result.score
            }
        )
        await self._log_activity(
            user_id,
            ActivityType.BONUS_COMPLETION if bonus else ActivityType.COMPLETION,
            result,
            dare_id=dare_id,
            points_delta=result.points_awarded
        )
        return result

    async def reroll_dare(self, user_id: str, current_dare_id: str) -> RerollResult:
        """
        Swap one of today's dares for another of the same tier.

        A free token is spent first, then points. The spend is committed in
        the same write as the replacement, so any failure costs nothing.
        """
        today = self.clock.today()

        async def mutate(profile: Optional[UserProfile]) -> Tuple[Optional[UserProfile], RerollResult]:
            if profile is None:
                return None, RerollResult(success=False, failure=FailureKind.NOT_FOUND, message=USER_NOT_FOUND_MESSAGE)

            tokens, score = profile.reroll_tokens, profile.score
            if tokens > 0:
                tokens -= 1
                paid_with = RerollPayment.TOKEN
            elif score >= self.reroll_cost:
                score -= self.reroll_cost
                paid_with = RerollPayment.POINTS
            else:
                return None, RerollResult(
                    success=False,
                    failure=FailureKind.INSUFFICIENT_CURRENCY,
                    message=(
                        f"Not enough points or free tokens. Reroll costs {self.reroll_cost} points; "
                        f"you have {profile.score} points and {profile.reroll_tokens} tokens."
                    ),
                    remaining_tokens=profile.reroll_tokens,
                    score=profile.score
                )

            index = profile.find_dare(current_dare_id)
            if index is None:
                return None, RerollResult(
                    success=False, failure=FailureKind.NOT_FOUND,
                    message="Dare to reroll not found in the list.",
                    remaining_tokens=profile.reroll_tokens,
                    score=profile.score
                )

            current = profile.daily_dares[index]
            if current.assigned_date != today:
                return None, RerollResult(
                    success=False, failure=FailureKind.NOT_FOUND,
                    message="This dare is not part of today's assignment.",
                    remaining_tokens=profile.reroll_tokens,
                    score=profile.score
                )
            if current.completed:
                return None, RerollResult(
                    success=False, failure=FailureKind.ALREADY_COMPLETED,
                    message="Completed dares cannot be rerolled.",
                    remaining_tokens=profile.reroll_tokens,
                    score=profile.score
                )

            difficulty = profile.daily_dares[index].difficulty
            candidates = await self.catalog.list_by_difficulty(difficulty)
            template = pick_personalized(
                candidates,
                profile.interests,
                profile.assigned_ids() | {current_dare_id},
                self.rng
            )
            if template is None:
                return None, RerollResult(
                    success=False, failure=FailureKind.CATALOG_EXHAUSTED,
                    message=f"No other {difficulty.value} dares are available to reroll into.",
                    remaining_tokens=profile.reroll_tokens,
                    score=profile.score
                )

            new_dare = AssignedDare.from_template(template, today)
            daily_dares = list(profile.daily_dares)
            daily_dares[index] = new_dare
            updated = profile.model_copy(update={
                "daily_dares": daily_dares,
                "reroll_tokens": tokens,
                "score": score,
            })
            return updated, RerollResult(
                success=True,
                message=f"Rerolled to: {new_dare.title}. {tokens} free tokens remaining.",
                new_dare=new_dare,
                remaining_tokens=tokens,
                score=score,
                paid_with=paid_with
            )

        try:
            result = await self.profiles.update(user_id, mutate)
        except (redis.RedisError, ProfileConflictError) as e:
            return self._transient_failure(RerollResult, "Dare reroll", user_id, e)

        logger.info(
            "Dare reroll processed",
            extra={
                "user_id": user_id,
                "dare_id": current_dare_id,
                "success": result.success,
                "failure": result.failure,
                "paid_with": result.paid_with
            }
        )
        await self._log_activity(
            user_id,
            ActivityType.REROLL,
            result,
            dare_id=current_dare_id,
            points_delta=-self.reroll_cost if result.paid_with == RerollPayment.POINTS else 0,
            tokens_delta=-1 if result.paid_with == RerollPayment.TOKEN else 0
        )
        return result

    async def purchase_reroll_token(self, user_id: str) -> PurchaseResult:
        """Exchange points for one extra reroll token. Tokens are uncapped."""
        cost = self.token_cost

        async def mutate(profile: Optional[UserProfile]) -> Tuple[Optional[UserProfile], PurchaseResult]:
            if profile is None:
                return None, PurchaseResult(success=False, failure=FailureKind.NOT_FOUND, message=USER_NOT_FOUND_MESSAGE)

            if profile.score < cost:
                return None, PurchaseResult(
                    success=False,
                    failure=FailureKind.INSUFFICIENT_CURRENCY,
                    message=(
                        f"Not enough points! A reroll token costs {cost} points. "
                        f"You have {profile.score} ({cost - profile.score} short)."
                    ),
                    new_token_count=profile.reroll_tokens,
                    score=profile.score
                )

            updated = profile.model_copy(update={
                "score": profile.score - cost,
                "reroll_tokens": profile.reroll_tokens + 1,
            })
            return updated, PurchaseResult(
                success=True,
                message=f"Bought a reroll token for {cost} points. You now have {updated.reroll_tokens} rerolls.",
                new_token_count=updated.reroll_tokens,
                score=updated.score
            )

        try:
            result = await self.profiles.update(user_id, mutate)
        except (redis.RedisError, ProfileConflictError) as e:
            return self._transient_failure(PurchaseResult, "Reroll token purchase", user_id, e)

        logger.info(
            "Reroll token purchase processed",
            extra={"user_id": user_id, "success": result.success, "failure": result.failure}
        )
        await self._log_activity(
            user_id,
            ActivityType.TOKEN_PURCHASE,
            result,
            points_delta=-cost if result.success else 0,
            tokens_delta=1 if result.success else 0
        )
        return result
