"""
Rate Limiter - Per-user cooldown gate for inbound messages.

A message is accepted only if the same user had no accepted message
within the cooldown window. Rejected messages are dropped silently by the
caller: no reply, no persistence.

Memory stays bounded under traffic from many distinct users:
- entries whose cooldown has elapsed are stale and purged periodically
- above max_entries the least recently accepted users are evicted

For production with multiple instances, upgrade to Redis-backed limiter.
"""
from collections import OrderedDict
from typing import Callable, Hashable, Optional
import threading
import time

from hith.core.logging_config import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """
    Cooldown limiter keyed by user id.

    Example:
        >>> limiter = RateLimiter(cooldown_seconds=5)
        >>> limiter.allow(42)  # True
        >>> limiter.allow(42)  # False, less than 5s later
    """

    def __init__(
        self,
        cooldown_seconds: float = 5.0,
        max_entries: int = 10000,
        cleanup_interval_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize the rate limiter.

        Args:
            cooldown_seconds: Minimum gap between accepted messages of a user
            max_entries: Maximum number of users tracked at once
            cleanup_interval_seconds: How often to purge stale entries
            clock: Monotonic time source in seconds
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")

        self.cooldown = cooldown_seconds
        self.max_entries = max_entries
        self.cleanup_interval = cleanup_interval_seconds
        self._clock = clock

        # user id -> last accepted time, oldest first
        self._last_accepted: "OrderedDict[Hashable, float]" = OrderedDict()
        self._lock = threading.RLock()
        self._last_cleanup = clock()

        logger.info(
            f"RateLimiter initialized: cooldown={cooldown_seconds}s, "
            f"max_entries={max_entries}"
        )

    def allow(self, user_id: Hashable) -> bool:
        """
        Check the gate for a user and record the message if accepted.

        A rejection leaves the stored timestamp untouched.

        Args:
            user_id: Platform user identifier

        Returns:
            True if the message may proceed, False if it must be dropped
        """
        with self._lock:
            now = self._clock()
            self._maybe_cleanup(now)

            last = self._last_accepted.get(user_id)
            if last is not None and now - last < self.cooldown:
                logger.debug(f"Rate limited user {user_id}")
                return False

            self._last_accepted[user_id] = now
            self._last_accepted.move_to_end(user_id)
            self._evict_overflow()
            return True

    def last_accepted(self, user_id: Hashable) -> Optional[float]:
        """Time of the last accepted message for a user, if tracked."""
        with self._lock:
            return self._last_accepted.get(user_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._last_accepted)

    def _maybe_cleanup(self, now: float) -> None:
        """Remove stale entries periodically."""
        if now - self._last_cleanup < self.cleanup_interval:
            return

        # Insertion order equals acceptance order, so stale entries lead
        while self._last_accepted:
            user_id, last = next(iter(self._last_accepted.items()))
            if now - last < self.cooldown:
                break
            del self._last_accepted[user_id]

        self._last_cleanup = now
        logger.debug(f"Rate limiter cleanup: {len(self._last_accepted)} tracked users")

    def _evict_overflow(self) -> None:
        while len(self._last_accepted) > self.max_entries:
            user_id, _ = self._last_accepted.popitem(last=False)
            logger.debug(f"Rate limiter evicted user {user_id}")


# Global rate limiter instance
_rate_limiter: Optional[RateLimiter] = None


def get_rate_limiter() -> RateLimiter:
    """Get or create the global rate limiter."""
    global _rate_limiter
    if _rate_limiter is None:
        from hith.core.config import get_settings
        settings = get_settings()
        _rate_limiter = RateLimiter(
            cooldown_seconds=settings.rate_limit_cooldown_seconds,
            max_entries=settings.rate_limit_max_entries
        )
    return _rate_limiter

