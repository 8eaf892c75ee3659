"""
Pytest configuration and shared fixtures for BioSample Analyzer tests.

Fixture map:
├── fake_lookup_factory   (builds FakeOntologyLookup instances)
├── fake_lookup           (lookup returning canned candidates per query)
├── term_validator        (TermValidator over fake_lookup)
├── catalog               (packaged attribute catalog, fresh per test)
└── bioportal_config      (config with a dummy API key)
"""

from typing import Dict, List, Optional, Sequence

import pytest

from biosample_analyzer.config.settings import BioPortalConfig
from biosample_analyzer.core.attribute_catalog import AttributeCatalog
from biosample_analyzer.core.schemas.ontology import OntologyCandidate
from biosample_analyzer.services.metadata.term_validation_service import TermValidator

OWL_CLASS = "http://www.w3.org/2002/07/owl#Class"


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


# ==============================================================================
# Lookup doubles
# ==============================================================================


def make_candidate(
    iri: str,
    label: str = "",
    ontology: str = "",
    cuis: Optional[List[str]] = None,
    semantic_types: Optional[List[str]] = None,
    declared_type: str = OWL_CLASS,
) -> OntologyCandidate:
    return OntologyCandidate(
        iri=iri,
        pref_label=label,
        declared_type=declared_type,
        collection_type="CLASS",
        ontology=ontology,
        cuis=cuis,
        semantic_types=semantic_types,
    )


class FakeOntologyLookup:
    """In-memory OntologyLookup recording every search call."""

    def __init__(
        self,
        results: Optional[Dict[str, List[OntologyCandidate]]] = None,
        errors: Optional[List[Exception]] = None,
    ):
        self.results = results or {}
        self.errors = list(errors or [])
        self.calls = []
        self.closed = False

    def search(
        self,
        query: str,
        exact_match: bool = True,
        ontologies: Optional[Sequence[str]] = None,
    ) -> List[OntologyCandidate]:
        self.calls.append((query, exact_match, ontologies))
        if self.errors:
            raise self.errors.pop(0)
        return list(self.results.get(query, []))

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_lookup_factory():
    """Factory for FakeOntologyLookup instances."""
    return FakeOntologyLookup


@pytest.fixture
def fake_lookup():
    """Lookup that knows 'Homo+sapiens' and '9606'."""
    human = make_candidate(
        "http://purl.obolibrary.org/obo/NCBITaxon_9606",
        label="Homo sapiens",
        ontology="NCBITAXON",
        cuis=["C0086418"],
        semantic_types=["T016"],
    )
    return FakeOntologyLookup(results={"Homo+sapiens": [human], "9606": [human]})


@pytest.fixture
def term_validator(fake_lookup):
    return TermValidator(fake_lookup)


@pytest.fixture
def catalog():
    """Packaged catalog with singleton state reset around the test."""
    AttributeCatalog.reset_instance()
    yield AttributeCatalog.from_json()
    AttributeCatalog.reset_instance()


@pytest.fixture
def bioportal_config():
    return BioPortalConfig(api_key="test-key", base_url="https://bioportal.test")


@pytest.fixture
def candidate_factory():
    """Factory for OntologyCandidate instances (defaults to owl:Class hits)."""
    return make_candidate
