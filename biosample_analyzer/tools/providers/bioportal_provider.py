"""
BioPortal search API client for ontology term lookup.

Stateful HTTP client for the NCBO BioPortal REST API (``GET /search``). Each
instance owns a requests.Session; callers that hit a transient failure are
expected to discard the instance and build a fresh one.

An empty candidate list is a valid answer (the term does not resolve). Every
failure to obtain an answer (connection errors, timeouts, non-2xx statuses,
authentication problems, malformed JSON) raises OntologyLookupError.
"""

from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote, urlencode

import requests
from pydantic import ValidationError

from biosample_analyzer.config.settings import BioPortalConfig
from biosample_analyzer.core.schemas.ontology import OntologyCandidate, OntologySearchQuery
from biosample_analyzer.utils.logger import get_logger

logger = get_logger(__name__)

# =============================================================================
# Exceptions
# =============================================================================


class OntologyLookupError(Exception):
    """Base exception for transient ontology lookup failures."""

    pass


class OntologyAuthenticationError(OntologyLookupError):
    """Raised when the API key is rejected (401/403)."""

    pass


class OntologyRateLimitError(OntologyLookupError):
    """Raised when the rate limit is exceeded (429)."""

    pass


# =============================================================================
# Client
# =============================================================================

USER_AGENT = "biosample-analyzer/0.3 (+https://bioportal.bioontology.org)"


class BioPortalClient:
    """
    HTTP client for the BioPortal search endpoint.

    Satisfies the OntologyLookup protocol.

    Usage:
        client = BioPortalClient(BioPortalConfig.from_env())
        candidates = client.search("Homo+sapiens", exact_match=True, ontologies=["NCBITAXON"])
    """

    def __init__(self, config: Optional[BioPortalConfig] = None):
        self.config = config or BioPortalConfig.from_env()
        self._session = self._create_session(self.config.require_api_key())

    @staticmethod
    def _create_session(api_key: str) -> requests.Session:
        """Create session with auth and JSON headers."""
        session = requests.Session()
        session.headers.update(
            {
                "Accept": "application/json",
                "Authorization": f"apikey token={api_key}",
                "User-Agent": USER_AGENT,
            }
        )
        return session

    # =========================================================================
    # Public API
    # =========================================================================

    def search(
        self,
        query: str,
        exact_match: bool = True,
        ontologies: Optional[Sequence[str]] = None,
    ) -> List[OntologyCandidate]:
        """
        Search BioPortal for classes matching a normalized query.

        Args:
            query: Normalized search string; ``+`` separates words
            exact_match: Only return classes whose label matches exactly
            ontologies: Ontology acronyms restricting the search scope;
                None or empty searches every ontology

        Returns:
            Candidates in BioPortal's rank order (possibly empty)

        Raises:
            OntologyAuthenticationError: If the API key is rejected
            OntologyRateLimitError: If BioPortal throttles the request
            OntologyLookupError: On any other transport or response failure
        """
        search = OntologySearchQuery(
            query=query,
            exact_match=exact_match,
            ontologies=list(ontologies or []),
        )
        url = self._build_search_url(search)
        logger.debug(f"BioPortal search: {url}")

        payload = self._request(url)
        candidates = self._parse_collection(payload, url)

        logger.debug(f"BioPortal returned {len(candidates)} candidates for '{query}'")
        return candidates

    def close(self) -> None:
        self._session.close()

    # =========================================================================
    # Internal
    # =========================================================================

    def _build_search_url(self, search: OntologySearchQuery) -> str:
        """
        Build the search URL.

        The query is quoted with ``+`` kept literal so it keeps acting as the
        word separator produced by query normalization.
        """
        params: Dict[str, str] = {
            "require_exact_match": "true" if search.exact_match else "false",
            "pagesize": str(self.config.page_size),
            "display_context": "false",
        }
        if search.ontology_filter:
            params["ontologies"] = search.ontology_filter

        base = self.config.base_url.rstrip("/")
        return f"{base}/search?q={quote(search.query, safe='+')}&{urlencode(params)}"

    def _request(self, url: str) -> Dict[str, Any]:
        """Make HTTP request with error handling."""
        try:
            response = self._session.get(url, timeout=self.config.timeout)
            self._check_response(response)
            return response.json()
        except requests.exceptions.JSONDecodeError as e:
            raise OntologyLookupError(f"Invalid JSON response from {url}: {e}")
        except requests.exceptions.ConnectionError as e:
            raise OntologyLookupError(f"Connection error to BioPortal API: {e}")
        except requests.exceptions.Timeout as e:
            raise OntologyLookupError(f"Request to BioPortal API timed out: {e}")
        except requests.exceptions.RequestException as e:
            raise OntologyLookupError(f"BioPortal request failed: {e}")

    @staticmethod
    def _check_response(response: requests.Response) -> None:
        """Check response status and raise appropriate errors."""
        if response.status_code == 200:
            return
        if response.status_code in (401, 403):
            raise OntologyAuthenticationError(
                f"BioPortal rejected the API key ({response.status_code})"
            )
        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After", "unknown")
            raise OntologyRateLimitError(
                f"Rate limit exceeded. Retry after {retry_after}s"
            )
        raise OntologyLookupError(
            f"BioPortal API error ({response.status_code}): {response.text[:200]}"
        )

    @staticmethod
    def _parse_collection(payload: Any, url: str) -> List[OntologyCandidate]:
        """Convert the response ``collection`` into candidates, keeping rank order."""
        if not isinstance(payload, dict) or not isinstance(
            payload.get("collection"), list
        ):
            raise OntologyLookupError(f"Malformed search response from {url}")

        candidates = []
        for node in payload["collection"]:
            if not isinstance(node, dict):
                raise OntologyLookupError(f"Malformed search hit from {url}: {node!r}")
            try:
                candidates.append(OntologyCandidate.from_search_result(node))
            except (KeyError, ValidationError) as e:
                raise OntologyLookupError(f"Invalid search hit from {url}: {e}")
        return candidates
