"""
Retry policy and driver for batch term resolution.

A RetryPolicy states how often a failing operation is retried, how long to
wait between attempts and what to do once retries run out. ``run_with_retry``
is the single driver shared by every batch mode.
"""

import time
from enum import Enum
from typing import Callable, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from biosample_analyzer.config.constants import (
    FIXED_ONTOLOGY_MAX_RETRIES,
    MULTI_RESULT_MAX_RETRIES,
)
from biosample_analyzer.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class ExhaustionAction(str, Enum):
    """What the batch runner does with a record whose retries ran out."""

    SKIP = "skip"  # abandon the record, continue with the next one
    ABORT = "abort"  # stop the whole run


class RetryExhaustedError(Exception):
    """Raised by run_with_retry when the policy's retry ceiling is exceeded."""

    def __init__(self, retries: int, last_error: Exception):
        self.retries = retries
        self.last_error = last_error
        super().__init__(f"Gave up after {retries} retries: {last_error}")


class RetryPolicy(BaseModel):
    """
    Retry settings for one batch run.

    Attributes:
        max_retries: Retries allowed after the first attempt
        backoff_seconds: Delay before each retry (0 disables waiting)
        on_exhaustion: Action once ``max_retries`` is exceeded
    """

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(default=MULTI_RESULT_MAX_RETRIES, ge=0)
    backoff_seconds: float = Field(default=0.0, ge=0.0)
    on_exhaustion: ExhaustionAction = ExhaustionAction.SKIP

    @classmethod
    def for_multi_result(cls, **overrides) -> "RetryPolicy":
        return cls(**{"max_retries": MULTI_RESULT_MAX_RETRIES, **overrides})

    @classmethod
    def for_fixed_ontology(cls, **overrides) -> "RetryPolicy":
        return cls(**{"max_retries": FIXED_ONTOLOGY_MAX_RETRIES, **overrides})


def run_with_retry(
    operation: Callable[[], T],
    policy: RetryPolicy,
    on_retry: Optional[Callable[[int, Exception], None]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Run ``operation`` until it succeeds or the policy gives up.

    Args:
        operation: Zero-argument callable to attempt
        policy: Retry settings
        on_retry: Called with (retry_number, error) before every retry;
            the batch runner uses it to replace its lookup client
        sleep: Delay function (injectable for tests)

    Returns:
        The operation's result

    Raises:
        RetryExhaustedError: When ``policy.max_retries`` retries all failed
    """
    retries = 0
    while True:
        try:
            return operation()
        except Exception as e:
            if retries >= policy.max_retries:
                raise RetryExhaustedError(retries, e) from e
            retries += 1
            logger.warning(
                f"Attempt failed ({e}); retry {retries}/{policy.max_retries}"
            )
            if policy.backoff_seconds > 0:
                sleep(policy.backoff_seconds)
            if on_retry is not None:
                on_retry(retries, e)
