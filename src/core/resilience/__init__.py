"""
Resilience Module

Failure-isolation primitives used by the stream orchestrator:

- CircuitBreaker: per-stream failure isolation (closed / open / half-open)
- TokenBucketRateLimiter: per-upstream quota enforcement with back-pressure
- RetryPolicy: fetch timeout and delayed restart policy (tenacity)

Author: Senior Solution Architect
Date: 2025-12-09
"""

from .circuit_breaker import CircuitBreaker
from .rate_limiter import TokenBucketRateLimiter
from .retry_policy import RetryPolicy

__all__ = [
    "CircuitBreaker",
    "TokenBucketRateLimiter",
    "RetryPolicy",
]
