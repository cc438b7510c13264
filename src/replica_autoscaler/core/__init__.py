"""Core infrastructure and utilities.

Responsibility: Provides the error hierarchy, logging setup and retry helper
shared by the engine, the controller and the CLI.
"""

from .exceptions import AutoscalerError, EvaluatorFailure, NotFound, WriteConflict
from .logging import (
    configure_logging,
    correlation_scope,
    get_correlation_id,
    log_with_context,
)
from .retry import RetryError, RetryPolicy, retry_call

__all__ = [
    "AutoscalerError",
    "EvaluatorFailure",
    "NotFound",
    "WriteConflict",
    "configure_logging",
    "correlation_scope",
    "get_correlation_id",
    "log_with_context",
    "RetryError",
    "RetryPolicy",
    "retry_call",
]
