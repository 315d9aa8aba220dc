"""
Recovery strategies and retry delay policies.
"""
from .backoff import BackoffPolicy, ExponentialBackoff, FixedDelay
from .base import BaseRecoveryStrategy
from .fallback import ServiceFallbackStrategy
from .network_retry import NetworkRetryStrategy
from .rate_limit import RateLimitBackoffStrategy
from .token_refresh import (
    TokenRefreshStrategy,
    get_credential_refresher,
    set_credential_refresher,
)


__all__ = [
    'BaseRecoveryStrategy',
    'TokenRefreshStrategy',
    'RateLimitBackoffStrategy',
    'NetworkRetryStrategy',
    'ServiceFallbackStrategy',
    'BackoffPolicy',
    'ExponentialBackoff',
    'FixedDelay',
    'set_credential_refresher',
    'get_credential_refresher',
]
