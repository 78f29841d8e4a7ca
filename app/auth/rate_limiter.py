from app.config import settings
from app.redis_client import get_redis_client


class RateLimiter:
    """Failed-login counter per email, kept in Redis with a sliding expiry"""

    def __init__(self, max_attempts: int, window_minutes: int):
        self.max_attempts = max_attempts
        self.window_minutes = window_minutes

    @property
    def redis(self):
        return get_redis_client()

    def _get_key(self, identifier: str) -> str:
        return f"rate_limit:login:{identifier.lower()}"

    def is_blocked(self, identifier: str) -> bool:
        attempts = self.redis.get(self._get_key(identifier))
        if attempts is None:
            return False
        return int(attempts) >= self.max_attempts

    def record_failed_attempt(self, identifier: str) -> int:
        """Record a failed login attempt and return current count"""
        key = self._get_key(identifier)
        pipe = self.redis.pipeline()
        pipe.incr(key)
        pipe.expire(key, self.window_minutes * 60)
        result = pipe.execute()
        return result[0]

    def reset(self, identifier: str):
        self.redis.delete(self._get_key(identifier))


rate_limiter = RateLimiter(
    max_attempts=settings.rate_limit_failed_logins,
    window_minutes=settings.rate_limit_window_minutes,
)
