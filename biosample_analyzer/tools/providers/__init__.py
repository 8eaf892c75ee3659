"""Clients for external ontology services."""

from biosample_analyzer.tools.providers.bioportal_provider import (
    BioPortalClient,
    OntologyAuthenticationError,
    OntologyLookupError,
    OntologyRateLimitError,
)

__all__ = [
    "BioPortalClient",
    "OntologyAuthenticationError",
    "OntologyLookupError",
    "OntologyRateLimitError",
]
