"""
Command line interface for BioSample Analyzer.

Commands:
    biosample-analyzer term       - Look up a single term in BioPortal
    biosample-analyzer batch      - Resolve a tab-delimited term list (resumable)
    biosample-analyzer validate   - Validate BioSample records from a JSON file
    biosample-analyzer version    - Print the installed version

Example:
    >>> # Every BioPortal match for one term
    >>> biosample-analyzer term "Homo sapiens" --all-results
    >>>
    >>> # Resume-safe batch run writing to results.tsv
    >>> biosample-analyzer batch terms.tsv --output results.tsv
"""

import json
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.table import Table

from biosample_analyzer.config.settings import BioPortalConfig, ConfigurationError
from biosample_analyzer.core.attribute_catalog import (
    AttributeCatalog,
    AttributeCatalogError,
)
from biosample_analyzer.core.schemas.attributes import Record
from biosample_analyzer.core.schemas.reports import TermValidationReport
from biosample_analyzer.services.metadata.attribute_validation_service import (
    AttributeValidator,
)
from biosample_analyzer.services.metadata.record_validation_service import (
    RecordValidator,
)
from biosample_analyzer.services.metadata.term_validation_service import TermValidator
from biosample_analyzer.services.orchestration.batch_term_resolution_service import (
    BatchMode,
    BatchTermResolutionService,
)
from biosample_analyzer.services.orchestration.checkpoint import CheckpointError
from biosample_analyzer.services.orchestration.retry_policy import (
    ExhaustionAction,
    RetryPolicy,
)
from biosample_analyzer.tools.providers.bioportal_provider import (
    BioPortalClient,
    OntologyLookupError,
)
from biosample_analyzer.utils.logger import get_logger, setup_logging
from biosample_analyzer.version import __version__

logger = get_logger(__name__)

app = typer.Typer(
    name="biosample-analyzer",
    help="Validate BioSample metadata and resolve terms against BioPortal",
    no_args_is_help=True,
)

# Console for Rich output
console = Console()


def _split_ontologies(ontology: Optional[str]) -> List[str]:
    if not ontology:
        return []
    return [o.strip() for o in ontology.split(",") if o.strip()]


def _load_config(api_key: Optional[str]) -> BioPortalConfig:
    try:
        config = BioPortalConfig.from_env(api_key=api_key)
        config.require_api_key()
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=2)
    return config


def _term_report_table(term: str, reports: List[TermValidationReport]) -> Table:
    table = Table(title=f"Matches for '{term}'", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("IRI")
    table.add_column("Label")
    table.add_column("Ontology")
    table.add_column("OWL class")
    table.add_column("CUIs")
    table.add_column("Semantic types")
    for rank, report in enumerate(reports, start=1):
        table.add_row(
            str(rank),
            report.match_value or "-",
            report.match_label or "-",
            report.ontology or "-",
            "yes" if report.is_owl_class else "no",
            ", ".join(report.cuis or []) or "-",
            ", ".join(report.semantic_types or []) or "-",
        )
    return table


@app.callback()
def main(
    log_level: str = typer.Option(
        "WARNING", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"
    ),
):
    """Configure logging for every command."""
    setup_logging(log_level)


@app.command("term")
def search_term(
    term: str = typer.Argument(..., help="Term to search"),
    ontology: Optional[str] = typer.Option(
        None, "--ontology", "-o", help="Comma-separated ontology acronyms (default: all)"
    ),
    exact_match: bool = typer.Option(
        True, "--exact-match/--partial-match", help="Use BioPortal exact matching"
    ),
    all_results: bool = typer.Option(
        False, "--all-results", "-a", help="Show every match, not only the first"
    ),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", "-k", help="BioPortal API key (default: $BIOPORTAL_API_KEY)"
    ),
):
    """Look up a single term."""
    config = _load_config(api_key)
    validator = TermValidator(BioPortalClient(config))
    ontologies = _split_ontologies(ontology)

    try:
        if all_results:
            reports = validator.validate_term_multi(term, exact_match, *ontologies)
        else:
            reports = [validator.validate_term(term, exact_match, *ontologies)]
    except OntologyLookupError as e:
        console.print(f"[red]Lookup failed:[/red] {e}")
        raise typer.Exit(code=1)

    if reports[0].is_unresolved:
        console.print(f"[yellow]No match for '{term}'[/yellow]")
        return
    console.print(_term_report_table(term, reports))


@app.command("batch")
def run_batch(
    input_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="Tab-delimited file: index, filename, term"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-of", help="File to append results to (default: console)"
    ),
    mode: BatchMode = typer.Option(
        BatchMode.MULTI_RESULT, "--mode", "-m", help="multi: every match; fixed: top match in --ontology"
    ),
    ontology: Optional[str] = typer.Option(
        None, "--ontology", "-o", help="Comma-separated ontology acronyms"
    ),
    exact_match: bool = typer.Option(
        True, "--exact-match/--partial-match", help="Use BioPortal exact matching"
    ),
    index: Optional[int] = typer.Option(
        None, "--index", help="Start from this input index (overrides resume)"
    ),
    restart: bool = typer.Option(
        False, "--restart", "-r", help="Move old output aside and start from index 0"
    ),
    max_retries: Optional[int] = typer.Option(
        None, "--max-retries", min=0, help="Retries per term (default: 5 multi, 10 fixed)"
    ),
    retry_delay: float = typer.Option(
        0.0, "--retry-delay", min=0.0, help="Seconds to wait before each retry"
    ),
    fail_fast: bool = typer.Option(
        False, "--fail-fast", help="Stop the run when a term exhausts its retries"
    ),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", "-k", help="BioPortal API key (default: $BIOPORTAL_API_KEY)"
    ),
):
    """Resolve every term in a batch file, resuming from previous output."""
    config = _load_config(api_key)
    ontologies = _split_ontologies(ontology)

    policy_overrides = {
        "backoff_seconds": retry_delay,
        "on_exhaustion": ExhaustionAction.ABORT if fail_fast else ExhaustionAction.SKIP,
    }
    if max_retries is not None:
        policy_overrides["max_retries"] = max_retries
    if mode == BatchMode.MULTI_RESULT:
        policy = RetryPolicy.for_multi_result(**policy_overrides)
    else:
        policy = RetryPolicy.for_fixed_ontology(**policy_overrides)

    try:
        service = BatchTermResolutionService(
            client_factory=lambda: BioPortalClient(config),
            mode=mode,
            exact_match=exact_match,
            ontologies=ontologies,
            retry_policy=policy,
            console=console,
        )
        summary = service.run(input_file, output, start_index=index, restart=restart)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=2)
    except CheckpointError as e:
        console.print(f"[red]Cannot resume:[/red] {e}")
        raise typer.Exit(code=1)

    console.print(
        f"Resolved {summary.resolved} terms, wrote {summary.lines_written} lines, "
        f"abandoned {len(summary.abandoned)}"
    )
    if summary.aborted:
        raise typer.Exit(code=1)


@app.command("validate")
def validate_records(
    records_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="JSON file with one record or a list of records"
    ),
    catalog_path: Optional[Path] = typer.Option(
        None, "--catalog", "-c", help="Attribute catalog JSON (default: packaged catalog)"
    ),
    report_json: Optional[Path] = typer.Option(
        None, "--report-json", help="Write full validation reports to this JSON file"
    ),
    fail_on_invalid: bool = typer.Option(
        False, "--fail-on-invalid", help="Exit with code 1 if any record is invalid"
    ),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", "-k", help="BioPortal API key (default: $BIOPORTAL_API_KEY)"
    ),
):
    """Validate BioSample records against the attribute catalog."""
    try:
        catalog = AttributeCatalog.from_json(catalog_path)
    except AttributeCatalogError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=2)

    try:
        with open(records_file, encoding="utf-8") as f:
            data = json.load(f)
        items = data if isinstance(data, list) else [data]
        records = [Record(**item) for item in items]
    except (json.JSONDecodeError, TypeError, ValidationError) as e:
        console.print(f"[red]Invalid records file:[/red] {e}")
        raise typer.Exit(code=2)
    logger.debug(f"Loaded {len(records)} records from {records_file}")

    config = _load_config(api_key)
    validator = RecordValidator(
        AttributeValidator(TermValidator(BioPortalClient(config))), catalog=catalog
    )

    table = Table(title="BioSample validation", box=box.SIMPLE)
    table.add_column("Record")
    table.add_column("Valid")
    table.add_column("Invalid attributes")

    reports = []
    any_invalid = False
    for position, record in enumerate(records, start=1):
        try:
            report = validator.validate(record)
        except OntologyLookupError as e:
            console.print(f"[red]Lookup failed:[/red] {e}")
            raise typer.Exit(code=1)
        reports.append(report)
        summary = validator.summarize(report)
        any_invalid = any_invalid or not summary["is_valid"]
        table.add_row(
            record.accession or f"#{position}",
            "[green]yes[/green]" if summary["is_valid"] else "[red]no[/red]",
            ", ".join(summary["invalid_attributes"]) or "-",
        )
    console.print(table)

    if report_json is not None:
        with open(report_json, "w", encoding="utf-8") as f:
            json.dump([r.model_dump(mode="json") for r in reports], f, indent=2)
        console.print(f"Wrote {len(reports)} reports to {report_json}")

    if fail_on_invalid and any_invalid:
        raise typer.Exit(code=1)


@app.command("version")
def version():
    """Print the installed version."""
    console.print(f"biosample-analyzer version {__version__}")


if __name__ == "__main__":
    app()
