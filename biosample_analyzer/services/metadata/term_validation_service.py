"""
Term Validation Service

Resolves free-text terms against an ontology search backend and converts the
ranked candidates into TermValidationReport objects.

Lookup failures raised by the backend are not caught here. Callers that want
retries (the batch runner) handle them at their own boundary.
"""

from typing import List, Sequence

from biosample_analyzer.core.protocols import OntologyLookup
from biosample_analyzer.core.schemas.ontology import OntologyCandidate
from biosample_analyzer.core.schemas.reports import TermValidationReport
from biosample_analyzer.services.metadata.term_normalizer import (
    is_blank_query,
    normalize_search_query,
)
from biosample_analyzer.utils.logger import get_logger

logger = get_logger(__name__)


class TermValidator:
    """
    Service for resolving terms to ontology classes.

    Any search hit counts as resolvable; ``is_owl_class`` and ``is_ontology``
    on the report are informational and never filter candidates.

    Usage:
        validator = TermValidator(BioPortalClient(config))
        report = validator.validate_term("Homo sapiens", True, "NCBITAXON")
        if report.is_resolvable_ontology_class:
            print(report.match_value)
    """

    def __init__(self, lookup: OntologyLookup):
        if lookup is None:
            raise ValueError("TermValidator requires an ontology lookup backend")
        self.lookup = lookup

    def validate_term(
        self, term: str, exact_match: bool = True, *ontologies: str
    ) -> TermValidationReport:
        """
        Resolve a term and report on the top-ranked candidate.

        Args:
            term: Raw term text
            exact_match: Require an exact label match
            *ontologies: Ontology acronyms restricting the search (none = all)

        Returns:
            Report for the first candidate, or the unresolved sentinel when the
            query is blank or the search returns nothing
        """
        candidates = self._search(term, exact_match, ontologies)
        if not candidates:
            return TermValidationReport.unresolved()
        return self._to_report(candidates[0])

    def validate_term_multi(
        self, term: str, exact_match: bool = True, *ontologies: str
    ) -> List[TermValidationReport]:
        """
        Resolve a term and report on every candidate, in rank order.

        Returns:
            One report per candidate; a single unresolved sentinel when there
            are none (never an empty list)
        """
        candidates = self._search(term, exact_match, ontologies)
        if not candidates:
            return [TermValidationReport.unresolved()]
        return [self._to_report(candidate) for candidate in candidates]

    def _search(
        self, term: str, exact_match: bool, ontologies: Sequence[str]
    ) -> List[OntologyCandidate]:
        query = normalize_search_query(term)
        if is_blank_query(query):
            logger.debug(f"Skipping lookup for blank term {term!r}")
            return []
        return self.lookup.search(
            query,
            exact_match=exact_match,
            ontologies=list(ontologies) or None,
        )

    @staticmethod
    def _to_report(candidate: OntologyCandidate) -> TermValidationReport:
        return TermValidationReport(
            match_value=candidate.iri,
            match_label=candidate.pref_label,
            is_ontology=candidate.is_ontology,
            is_owl_class=candidate.is_owl_class,
            is_resolvable_ontology_class=True,
            ontology=candidate.ontology,
            cuis=list(candidate.cuis or []),
            semantic_types=list(candidate.semantic_types or []),
        )
