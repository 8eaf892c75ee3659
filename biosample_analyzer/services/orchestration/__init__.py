"""Batch orchestration: resumable, retrying term resolution runs."""

from biosample_analyzer.services.orchestration.batch_term_resolution_service import (
    BatchMode,
    BatchRunSummary,
    BatchTermResolutionService,
    read_batch_input,
)
from biosample_analyzer.services.orchestration.checkpoint import (
    CheckpointError,
    CheckpointStore,
)
from biosample_analyzer.services.orchestration.retry_policy import (
    ExhaustionAction,
    RetryExhaustedError,
    RetryPolicy,
    run_with_retry,
)

__all__ = [
    "BatchMode",
    "BatchRunSummary",
    "BatchTermResolutionService",
    "read_batch_input",
    "CheckpointError",
    "CheckpointStore",
    "ExhaustionAction",
    "RetryExhaustedError",
    "RetryPolicy",
    "run_with_retry",
]
