"""Retry policy for identity provider calls."""

from .retry_policy import ErrorClassifier, RetryExecutor, RetryPolicy

__all__ = [
    "ErrorClassifier",
    "RetryExecutor",
    "RetryPolicy",
]
