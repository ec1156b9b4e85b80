"""
Shared rate limiter for the generative API.

States:
- Active: generative calls are allowed.
- Cooldown: calls are bypassed until `cooldown_until`. The transition back to
  Active is lazy; it happens on the first availability check after the deadline.

Quota errors rotate to the next key when the pool has more than one, and
otherwise start an exponential cooldown capped at 30 minutes. Any success
resets the limiter. The model tier degrades once more than two consecutive
quota errors have been recorded.
"""
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from loguru import logger

from app.core.constants import RateLimitConfig
from app.models import ModelTier, QuotaOutcome, RateLimiterState
from app.services.key_pool import ApiKeyPool


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def cooldown_minutes(error_count: int) -> int:
    """Exponential backoff in minutes for the k-th consecutive quota error."""
    return min(RateLimitConfig.MAX_COOLDOWN_MINUTES, 2 ** max(error_count - 1, 0))


class RateLimiter:
    """
    Error count, cooldown deadline and model tier for the generative API.

    Owns the ApiKeyPool so a quota transition (count, then rotate or cool down)
    happens in one critical section.
    """

    def __init__(self, key_pool: ApiKeyPool, clock: Callable[[], datetime] = utc_now):
        """
        Initialize the rate limiter.

        Args:
            key_pool: Credentials shared by every request.
            clock: Source of the current time (timezone-aware).
        """
        self.key_pool = key_pool
        self._clock = clock
        self._lock = threading.Lock()
        self._error_count = 0
        self._cooldown_until: Optional[datetime] = None

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def cooldown_until(self) -> Optional[datetime]:
        return self._cooldown_until

    @property
    def model_tier(self) -> ModelTier:
        if self._error_count > RateLimitConfig.DEGRADE_AFTER_ERRORS:
            return ModelTier.DEGRADED
        return ModelTier.STANDARD

    def is_available(self, now: Optional[datetime] = None) -> bool:
        """True unless a cooldown is set and has not yet expired."""
        cooldown_until = self._cooldown_until
        if cooldown_until is None:
            return True
        return (now or self._clock()) >= cooldown_until

    def record_success(self) -> None:
        with self._lock:
            if self._error_count or self._cooldown_until:
                logger.info("Generative API recovered; resetting rate limiter")
            self._error_count = 0
            self._cooldown_until = None

    def record_quota_error(self, key_index: Optional[int] = None) -> QuotaOutcome:
        """
        Apply the quota error transition.

        Args:
            key_index: Index of the key that hit the quota. A stale index does
                not rotate again.

        Returns:
            ROTATED when another key is available, COOLDOWN otherwise.
        """
        with self._lock:
            self._error_count += 1

            if self.key_pool.size > 1:
                self.key_pool.rotate(from_index=key_index)
                return QuotaOutcome.ROTATED

            minutes = cooldown_minutes(self._error_count)
            self._cooldown_until = self._clock() + timedelta(minutes=minutes)
            logger.warning(
                f"Setting API cooldown for {minutes} minutes until "
                f"{self._cooldown_until.isoformat()}"
            )
            return QuotaOutcome.COOLDOWN

    def rotate_after_error(self, key_index: Optional[int] = None) -> int:
        """Rotate to the next key after a non-quota failure."""
        with self._lock:
            return self.key_pool.rotate(from_index=key_index)

    def snapshot(self) -> RateLimiterState:
        with self._lock:
            return RateLimiterState(
                error_count=self._error_count,
                cooldown_until=self._cooldown_until,
                current_model_tier=self.model_tier,
                in_cooldown=not self.is_available(),
                key_index=self.key_pool.index,
                key_count=self.key_pool.size,
            )
