"""
Ontology search candidate schema.

An OntologyCandidate is one ranked hit returned by the ontology search
service, already reduced to the fields term validation consumes.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from biosample_analyzer.config.constants import (
    CUI_FIELDS,
    ONTOLOGY_COLLECTION_TYPE,
    OWL_CLASS_IRI,
    SEMANTIC_TYPE_FIELDS,
)


def _first_present_list(node: Dict[str, Any], fields: List[str]) -> Optional[List[str]]:
    """Return the list stored under the first field name present in ``node``."""
    for field in fields:
        if field in node and node[field] is not None:
            value = node[field]
            if isinstance(value, str):
                return [value]
            return [str(item) for item in value]
    return None


def _ontology_acronym(node: Dict[str, Any]) -> str:
    """
    Extract the source ontology acronym from a search hit.

    Hits either carry a bare ``ontology`` field or a ``links.ontology`` URL
    whose last path segment is the acronym.
    """
    ontology = node.get("ontology")
    if isinstance(ontology, str) and ontology:
        return ontology.rstrip("/").rsplit("/", 1)[-1]
    links = node.get("links") or {}
    link = links.get("ontology") if isinstance(links, dict) else None
    if isinstance(link, str) and link:
        return link.rstrip("/").rsplit("/", 1)[-1]
    return ""


class OntologyCandidate(BaseModel):
    """
    One ranked match returned by the ontology search service.

    Attributes:
        iri: Resolved class IRI (``@id``)
        pref_label: Preferred label of the class
        declared_type: Declared semantic type IRI (``@type``)
        collection_type: Collection type (``ontologyType``), e.g. "CLASS" or "ONTOLOGY"
        ontology: Source ontology acronym (e.g. "NCBITAXON")
        cuis: UMLS concept identifiers, if the hit carries them
        semantic_types: UMLS semantic type codes, if the hit carries them
    """

    model_config = ConfigDict(frozen=True)

    iri: str
    pref_label: str = ""
    declared_type: str = ""
    collection_type: str = ""
    ontology: str = ""
    cuis: Optional[List[str]] = None
    semantic_types: Optional[List[str]] = None

    @property
    def is_owl_class(self) -> bool:
        return self.declared_type == OWL_CLASS_IRI

    @property
    def is_ontology(self) -> bool:
        return self.collection_type.lower() == ONTOLOGY_COLLECTION_TYPE

    @classmethod
    def from_search_result(cls, node: Dict[str, Any]) -> "OntologyCandidate":
        """
        Build a candidate from one element of a search response ``collection``.

        Concept identifiers are read from ``cui`` and fall back to
        ``UMLS_CUI``; semantic types from ``tui`` falling back to
        ``Semantic_Type``.

        Raises:
            KeyError: If the hit has no ``@id``
        """
        return cls(
            iri=node["@id"],
            pref_label=node.get("prefLabel") or "",
            declared_type=node.get("@type") or "",
            collection_type=node.get("ontologyType") or "",
            ontology=_ontology_acronym(node),
            cuis=_first_present_list(node, CUI_FIELDS),
            semantic_types=_first_present_list(node, SEMANTIC_TYPE_FIELDS),
        )


class OntologySearchQuery(BaseModel):
    """Parameters of one search request, as sent to the lookup service."""

    model_config = ConfigDict(frozen=True)

    query: str
    exact_match: bool = True
    ontologies: List[str] = Field(default_factory=list)

    @property
    def ontology_filter(self) -> Optional[str]:
        """Comma-joined ontology scope, or None to search every ontology."""
        if not self.ontologies:
            return None
        return ",".join(self.ontologies)
