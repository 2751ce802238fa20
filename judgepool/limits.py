from limits.aio.strategies import MovingWindowRateLimiter, RateLimiter
from limits.storage import storage_from_string

from judgepool.config import settings


def init_limits(storage_url: str) -> RateLimiter:
    storage = storage_from_string(storage_url)
    return MovingWindowRateLimiter(storage)


rate_limiter = init_limits(settings.rate_limit_storage_url)
