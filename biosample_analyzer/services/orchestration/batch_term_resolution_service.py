"""
Batch Term Resolution Service

Resolves a tab-delimited list of (index, filename, term) records against the
ontology search backend, one record at a time, in input order.

Key capabilities:
- Two output modes: every candidate per term (tab-delimited) or the top
  candidate within a fixed ontology scope (comma-delimited)
- Resume from the last completed index after a crash
- Retry with a fresh lookup client after any failure, per RetryPolicy
- Flushed output and progress notices every PROGRESS_INTERVAL records

Progress, retry and abandonment notices are printed to the console; the
output file doubles as the resume source.
"""

import csv
import time
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Sequence, TextIO

from pydantic import BaseModel, Field
from rich.console import Console

from biosample_analyzer.config.constants import MIN_INPUT_COLUMNS, PROGRESS_INTERVAL
from biosample_analyzer.core.protocols import OntologyLookup
from biosample_analyzer.core.schemas.reports import TermValidationReport
from biosample_analyzer.services.metadata.term_validation_service import TermValidator
from biosample_analyzer.services.orchestration.checkpoint import CheckpointStore
from biosample_analyzer.services.orchestration.retry_policy import (
    ExhaustionAction,
    RetryExhaustedError,
    RetryPolicy,
    run_with_retry,
)
from biosample_analyzer.utils.logger import get_logger

logger = get_logger(__name__)


class BatchMode(str, Enum):
    """Output mode of a batch run."""

    MULTI_RESULT = "multi"  # every candidate, tab-delimited
    FIXED_ONTOLOGY = "fixed"  # top candidate within given ontologies, comma-delimited

    @property
    def delimiter(self) -> str:
        return "\t" if self == BatchMode.MULTI_RESULT else ","


class BatchInputRecord(BaseModel):
    """One line of batch input."""

    index: int
    filename: str = ""
    term: str


class BatchRunSummary(BaseModel):
    """Outcome of a batch run."""

    mode: BatchMode
    start_index: int = 0
    total_records: int = 0
    resolved: int = 0
    skipped_before_checkpoint: int = 0
    abandoned: List[int] = Field(default_factory=list)
    lines_written: int = 0
    aborted: bool = False


def read_batch_input(path: Path) -> List[BatchInputRecord]:
    """
    Read batch input records in file order.

    Lines with fewer than three tab-separated columns, or whose first column
    is not an integer index, are treated as headers/noise and skipped.
    """
    records = []
    with open(path, encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            cols = line.rstrip("\r\n").split("\t")
            if len(cols) < MIN_INPUT_COLUMNS:
                continue
            try:
                index = int(cols[0])
            except ValueError:
                logger.debug(f"Skipping line {line_number}: non-numeric index {cols[0]!r}")
                continue
            records.append(
                BatchInputRecord(index=index, filename=cols[1], term=cols[2].strip())
            )
    return records


def format_term_list(values: Optional[Sequence[str]]) -> str:
    return "[" + ", ".join(values or []) + "]"


class BatchTermResolutionService:
    """
    Drives term resolution over a batch input file.

    A new lookup client is created from ``client_factory`` after every failed
    attempt; the failed client is discarded.

    Usage:
        service = BatchTermResolutionService(
            client_factory=lambda: BioPortalClient(config),
            mode=BatchMode.MULTI_RESULT,
        )
        summary = service.run(Path("terms.tsv"), Path("results.tsv"))
    """

    def __init__(
        self,
        client_factory: Callable[[], OntologyLookup],
        mode: BatchMode = BatchMode.MULTI_RESULT,
        exact_match: bool = True,
        ontologies: Sequence[str] = (),
        retry_policy: Optional[RetryPolicy] = None,
        console: Optional[Console] = None,
        progress_interval: int = PROGRESS_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if mode == BatchMode.FIXED_ONTOLOGY and not ontologies:
            raise ValueError("Fixed-ontology mode requires at least one ontology")
        if progress_interval < 1:
            raise ValueError("progress_interval must be positive")

        self.client_factory = client_factory
        self.mode = mode
        self.exact_match = exact_match
        self.ontologies = list(ontologies)
        if retry_policy is None:
            retry_policy = (
                RetryPolicy.for_multi_result()
                if mode == BatchMode.MULTI_RESULT
                else RetryPolicy.for_fixed_ontology()
            )
        self.retry_policy = retry_policy
        self.console = console or Console()
        self.progress_interval = progress_interval
        self._sleep = sleep
        self._validator: Optional[TermValidator] = None

    def run(
        self,
        input_path: Path,
        output_path: Optional[Path] = None,
        start_index: Optional[int] = None,
        restart: bool = False,
    ) -> BatchRunSummary:
        """
        Resolve every input record at or after the start index.

        Args:
            input_path: Tab-delimited input (index, filename, term)
            output_path: Output file (appended to); None prints to the console
            start_index: Explicit first index to process; overrides resume
            restart: Move existing output aside and start from index 0

        Returns:
            BatchRunSummary; ``aborted`` is set when the retry policy's
            exhaustion action is ABORT and a record ran out of retries

        Raises:
            CheckpointError: If the existing output cannot be resumed from
        """
        records = read_batch_input(Path(input_path))
        store = (
            CheckpointStore(Path(output_path), self.mode.delimiter)
            if output_path is not None
            else None
        )

        if store is not None and restart:
            store.restart()
        start = self._resolve_start_index(store, start_index)

        summary = BatchRunSummary(
            mode=self.mode, start_index=start, total_records=len(records)
        )
        if not records:
            self.console.print(f"No input records found in {input_path}")
            return summary

        last_index = records[-1].index
        self._validator = TermValidator(self.client_factory())

        sink = open(output_path, "a", encoding="utf-8", newline="") if store else None
        try:
            for position, record in enumerate(records):
                if record.index < start:
                    summary.skipped_before_checkpoint += 1
                    continue

                if position % self.progress_interval == 0:
                    self.console.print(f"{record.index}/{last_index}")
                    if sink is not None:
                        sink.flush()

                try:
                    reports = run_with_retry(
                        lambda: self._resolve(record.term),
                        self.retry_policy,
                        on_retry=self._make_retry_handler(record),
                        sleep=self._sleep,
                    )
                except RetryExhaustedError as e:
                    self.console.print(f"Too many retries, skipping {record.term}")
                    logger.error(
                        f"Abandoned record {record.index} ({record.term!r}): {e.last_error}"
                    )
                    summary.abandoned.append(record.index)
                    if sink is not None:
                        sink.flush()
                    if self.retry_policy.on_exhaustion == ExhaustionAction.ABORT:
                        summary.aborted = True
                        self.console.print(
                            f"Stopping run at index {record.index} after exhausting retries"
                        )
                        break
                    # Not checkpointed: a trailing abandoned record is retried on rerun
                    continue

                summary.resolved += 1
                summary.lines_written += self._emit(sink, record, reports)
                if store is not None:
                    sink.flush()
                    store.save(record.index)
        finally:
            if sink is not None:
                sink.flush()
                sink.close()
            self._discard_client()

        logger.info(
            f"Batch run finished: {summary.resolved} resolved, "
            f"{len(summary.abandoned)} abandoned, "
            f"{summary.skipped_before_checkpoint} skipped before index {start}"
        )
        return summary

    # =========================================================================
    # Internal
    # =========================================================================

    def _resolve_start_index(
        self, store: Optional[CheckpointStore], start_index: Optional[int]
    ) -> int:
        if start_index is not None:
            self.console.print(f"Starting from index {start_index}")
            return start_index
        if store is None:
            return 0
        if not store.output_path.exists():
            store.clear()
            self.console.print(
                "Could not find output file to resume, starting from index 0..."
            )
            return 0
        start = store.load_start_index()
        self.console.print(f"Resuming {store.output_path.name} from index {start}")
        return start

    def _resolve(self, term: str) -> List[TermValidationReport]:
        if self.mode == BatchMode.MULTI_RESULT:
            return self._validator.validate_term_multi(
                term, self.exact_match, *self.ontologies
            )
        return [self._validator.validate_term(term, self.exact_match, *self.ontologies)]

    def _make_retry_handler(
        self, record: BatchInputRecord
    ) -> Callable[[int, Exception], None]:
        def handle_retry(retry_number: int, error: Exception) -> None:
            self.console.print(str(error))
            self.console.print(
                f"Caught error trying to validate {record.term}, "
                f"retrying with new client (retry {retry_number}/"
                f"{self.retry_policy.max_retries})..."
            )
            self._discard_client()
            self._validator = TermValidator(self.client_factory())

        return handle_retry

    def _discard_client(self) -> None:
        if self._validator is None:
            return
        close = getattr(self._validator.lookup, "close", None)
        if callable(close):
            close()

    def _emit(
        self,
        sink: Optional[TextIO],
        record: BatchInputRecord,
        reports: List[TermValidationReport],
    ) -> int:
        """Write one line per report; returns the number of lines written."""
        if sink is None:
            for report in reports:
                self.console.print(f"{record.term} {report!r}", markup=False)
            return len(reports)

        if self.mode == BatchMode.MULTI_RESULT:
            for report in reports:
                sink.write(
                    "\t".join(
                        [
                            str(record.index),
                            record.term,
                            report.match_value,
                            report.match_label,
                            format_term_list(report.cuis),
                            format_term_list(report.semantic_types),
                        ]
                    )
                    + "\n"
                )
        else:
            writer = csv.writer(sink, lineterminator="\n")
            for report in reports:
                writer.writerow(
                    [
                        record.index,
                        record.filename,
                        record.term,
                        report.match_value,
                        report.match_label,
                    ]
                )
        return len(reports)
