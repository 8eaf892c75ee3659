"""
Protocol definitions for the ontology lookup capability.

Validators depend on this protocol rather than a concrete HTTP client, so any
object with a matching ``search`` method can be injected (structural
subtyping, no inheritance required).

Example:
    class StaticLookup:
        def search(self, query, exact_match=True, ontologies=None):
            return [OntologyCandidate(iri="http://purl.obolibrary.org/obo/UBERON_0002107")]

    validator = TermValidator(StaticLookup())
"""

from typing import TYPE_CHECKING, List, Optional, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from biosample_analyzer.core.schemas.ontology import OntologyCandidate


@runtime_checkable
class OntologyLookup(Protocol):
    """
    Contract for ontology search backends.

    ``search`` returns candidates in the service's rank order. An empty list
    means the term does not resolve. Transient failures (network, auth,
    malformed responses) must raise rather than return an empty list.
    """

    def search(
        self,
        query: str,
        exact_match: bool = True,
        ontologies: Optional[Sequence[str]] = None,
    ) -> List["OntologyCandidate"]:
        """Search the ontology service for ``query``."""
        ...


__all__ = ["OntologyLookup"]
