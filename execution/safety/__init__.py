# Resilience & safety mechanisms
"""Safety and resilience mechanisms"""
from .retries import RetryStrategy, RetryConfig
from .timeout import TimeoutHandler
from .validators import ResponseValidator, ValidationResult

__all__ = [
    "RetryStrategy",
    "RetryConfig",
    "TimeoutHandler",
    "ResponseValidator",
    "ValidationResult",
]
