"""
Simple memory-based fixed-window rate limiter.
Counters live in-process, so limits are per worker.
"""
import time
from fastapi import Request
from fastapi import HTTPException
from typing import Dict, Tuple

# In-memory storage: {(scope, ip): (window_start, count)}
_rate_limit_store: Dict[Tuple[str, str], Tuple[float, int]] = {}


def rate_limit(scope: str, requests: int, window: int):
    """
    Dependency for rate limiting one group of endpoints.
    Example: Depends(rate_limit("login", requests=10, window=60))
    """
    def limiter(request: Request):
        ip = request.client.host if request.client else "unknown"
        key = (scope, ip)
        now = time.time()

        if key not in _rate_limit_store:
            _prune_expired(scope, window, now)
            _rate_limit_store[key] = (now, 1)
            return True

        window_start, count = _rate_limit_store[key]

        # Reset window if expired
        if now - window_start > window:
            _prune_expired(scope, window, now)
            _rate_limit_store[key] = (now, 1)
            return True

        if count >= requests:
            raise HTTPException(
                status_code=429,
                detail=f"Rate limit exceeded. Try again in {int(window - (now - window_start))} seconds.",
            )

        _rate_limit_store[key] = (window_start, count + 1)
        return True

    return limiter


def _prune_expired(scope: str, window: int, now: float) -> None:
    """Drop this scope's counters whose window has already closed."""
    expired = [
        key for key, (window_start, _) in _rate_limit_store.items()
        if key[0] == scope and now - window_start > window
    ]
    for key in expired:
        del _rate_limit_store[key]


def reset_rate_limits():
    """Forget every counter."""
    _rate_limit_store.clear()
