"""
Unit tests for BioPortalClient.

Tests the HTTP client for the BioPortal search endpoint covering:
- Session headers (API key authorization)
- Search URL construction (query quoting, exact match, ontology scope)
- Response parsing into ranked OntologyCandidate objects
- Error handling: 401/403, 429, 5xx, connection errors, timeouts, bad JSON,
  malformed payloads

All HTTP calls are mocked via unittest.mock.patch on the session's get method.
No real network calls are made.

Running Tests:
```bash
pytest tests/unit/tools/providers/test_bioportal_provider.py -v
```
"""

from unittest.mock import Mock, patch

import pytest
import requests

from biosample_analyzer.config.settings import BioPortalConfig, ConfigurationError
from biosample_analyzer.core.protocols import OntologyLookup
from biosample_analyzer.tools.providers.bioportal_provider import (
    BioPortalClient,
    OntologyAuthenticationError,
    OntologyLookupError,
    OntologyRateLimitError,
)

OWL_CLASS = "http://www.w3.org/2002/07/owl#Class"

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def client(bioportal_config):
    """Create a BioPortalClient against a fake base URL."""
    return BioPortalClient(bioportal_config)


def _mock_response(status_code=200, json_data=None, headers=None, text=None):
    """Build a mock requests.Response object with the specified attributes."""
    resp = Mock(spec=requests.Response)
    resp.status_code = status_code
    resp.headers = headers or {}
    resp.text = text if text is not None else (str(json_data) if json_data else "")

    if json_data is not None:
        resp.json.return_value = json_data
    else:
        resp.json.side_effect = requests.exceptions.JSONDecodeError("No JSON", "", 0)

    return resp


# =============================================================================
# Sample data
# =============================================================================

HUMAN_HIT = {
    "@id": "http://purl.obolibrary.org/obo/NCBITaxon_9606",
    "@type": OWL_CLASS,
    "prefLabel": "Homo sapiens",
    "ontologyType": "CLASS",
    "cui": ["C0086418"],
    "semantic_type": None,
    "tui": ["T016"],
    "links": {"ontology": "https://data.bioontology.org/ontologies/NCBITAXON"},
}

MOUSE_HIT = {
    "@id": "http://purl.obolibrary.org/obo/NCBITaxon_10090",
    "@type": OWL_CLASS,
    "prefLabel": "Mus musculus",
    "UMLS_CUI": ["C0025929"],
    "Semantic_Type": ["T015"],
    "links": {"ontology": "https://data.bioontology.org/ontologies/NCBITAXON"},
}

SEARCH_RESPONSE = {"page": 1, "pageCount": 1, "collection": [HUMAN_HIT, MOUSE_HIT]}


# =============================================================================
# Construction
# =============================================================================


class TestConstruction:
    def test_session_headers(self, client):
        headers = client._session.headers

        assert headers["Authorization"] == "apikey token=test-key"
        assert headers["Accept"] == "application/json"
        assert "biosample-analyzer" in headers["User-Agent"]

    def test_missing_api_key(self):
        with pytest.raises(ConfigurationError):
            BioPortalClient(BioPortalConfig(api_key=None))

    def test_satisfies_lookup_protocol(self, client):
        assert isinstance(client, OntologyLookup)


# =============================================================================
# Search
# =============================================================================


class TestSearch:
    """Tests for BioPortalClient.search."""

    def test_parses_candidates_in_rank_order(self, client):
        with patch.object(
            client._session, "get", return_value=_mock_response(json_data=SEARCH_RESPONSE)
        ):
            candidates = client.search("Homo+sapiens")

        assert [c.iri for c in candidates] == [HUMAN_HIT["@id"], MOUSE_HIT["@id"]]
        human = candidates[0]
        assert human.pref_label == "Homo sapiens"
        assert human.is_owl_class
        assert not human.is_ontology
        assert human.ontology == "NCBITAXON"
        assert human.cuis == ["C0086418"]
        assert human.semantic_types == ["T016"]

    def test_umls_fallback_fields(self, client):
        with patch.object(
            client._session, "get", return_value=_mock_response(json_data=SEARCH_RESPONSE)
        ):
            mouse = client.search("Mus+musculus")[1]

        assert mouse.cuis == ["C0025929"]
        assert mouse.semantic_types == ["T015"]

    def test_hit_without_identifiers(self, client):
        payload = {"collection": [{"@id": "http://x/1", "prefLabel": "x"}]}
        with patch.object(client._session, "get", return_value=_mock_response(json_data=payload)):
            candidate = client.search("x")[0]

        assert candidate.cuis is None
        assert candidate.semantic_types is None
        assert not candidate.is_owl_class

    def test_empty_collection(self, client):
        with patch.object(
            client._session, "get", return_value=_mock_response(json_data={"collection": []})
        ):
            assert client.search("nothing") == []

    def test_url_exact_match_and_ontologies(self, client):
        with patch.object(
            client._session, "get", return_value=_mock_response(json_data={"collection": []})
        ) as mock_get:
            client.search("Homo+sapiens", exact_match=True, ontologies=["NCBITAXON", "EFO"])

        url = mock_get.call_args.args[0]
        assert url.startswith("https://bioportal.test/search?q=Homo+sapiens&")
        assert "require_exact_match=true" in url
        assert "ontologies=NCBITAXON%2CEFO" in url
        assert "pagesize=50" in url
        assert mock_get.call_args.kwargs["timeout"] == 30.0

    def test_url_partial_match_without_ontologies(self, client):
        with patch.object(
            client._session, "get", return_value=_mock_response(json_data={"collection": []})
        ) as mock_get:
            client.search("liver", exact_match=False)

        url = mock_get.call_args.args[0]
        assert "require_exact_match=false" in url
        assert "ontologies=" not in url

    def test_query_special_characters_quoted(self, client):
        with patch.object(
            client._session, "get", return_value=_mock_response(json_data={"collection": []})
        ) as mock_get:
            client.search("C&A+cells")

        assert "q=C%26A+cells&" in mock_get.call_args.args[0]

    def test_close(self, client):
        with patch.object(client._session, "close") as mock_close:
            client.close()
        mock_close.assert_called_once()


# =============================================================================
# Error handling
# =============================================================================


class TestErrors:
    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_errors(self, client, status):
        with patch.object(client._session, "get", return_value=_mock_response(status_code=status)):
            with pytest.raises(OntologyAuthenticationError):
                client.search("liver")

    def test_rate_limit(self, client):
        resp = _mock_response(status_code=429, headers={"Retry-After": "15"})
        with patch.object(client._session, "get", return_value=resp):
            with pytest.raises(OntologyRateLimitError, match="15"):
                client.search("liver")

    def test_server_error(self, client):
        resp = _mock_response(status_code=503, text="Service Unavailable")
        with patch.object(client._session, "get", return_value=resp):
            with pytest.raises(OntologyLookupError, match="503"):
                client.search("liver")

    def test_connection_error(self, client):
        with patch.object(
            client._session, "get", side_effect=requests.exceptions.ConnectionError("refused")
        ):
            with pytest.raises(OntologyLookupError, match="Connection error"):
                client.search("liver")

    def test_timeout(self, client):
        with patch.object(client._session, "get", side_effect=requests.exceptions.Timeout()):
            with pytest.raises(OntologyLookupError, match="timed out"):
                client.search("liver")

    def test_invalid_json(self, client):
        with patch.object(client._session, "get", return_value=_mock_response(status_code=200)):
            with pytest.raises(OntologyLookupError, match="Invalid JSON"):
                client.search("liver")

    @pytest.mark.parametrize(
        "payload",
        [
            [],
            {"page": 1},
            {"collection": "nope"},
            {"collection": ["not a dict"]},
            {"collection": [{"prefLabel": "no id"}]},
        ],
    )
    def test_malformed_payloads(self, client, payload):
        resp = _mock_response(json_data=payload)
        resp.json.return_value = payload
        with patch.object(client._session, "get", return_value=resp):
            with pytest.raises(OntologyLookupError):
                client.search("liver")

    def test_all_errors_are_lookup_errors(self):
        assert issubclass(OntologyAuthenticationError, OntologyLookupError)
        assert issubclass(OntologyRateLimitError, OntologyLookupError)
