"""
Shared constants for attribute validation and term resolution.

This module is the single source of truth for sentinel values, IRIs and batch
defaults. Other modules import from here rather than redefining them.
"""

from typing import Final, List

# Declared type of an ontology class in BioPortal search results
OWL_CLASS_IRI: Final[str] = "http://www.w3.org/2002/07/owl#Class"

# Collection type reported for hits that are whole ontologies
ONTOLOGY_COLLECTION_TYPE: Final[str] = "ontology"

# Allowed-values sentinel marking a TERM attribute as a geographic location
GEOLOC_SENTINEL: Final[str] = "GEOLOC"

# BioPortal search API
DEFAULT_BIOPORTAL_URL: Final[str] = "https://data.bioontology.org"
DEFAULT_HTTP_TIMEOUT: Final[float] = 30.0
DEFAULT_PAGE_SIZE: Final[int] = 50

# Candidate fields holding concept identifiers / semantic types, primary first
CUI_FIELDS: Final[List[str]] = ["cui", "UMLS_CUI"]
SEMANTIC_TYPE_FIELDS: Final[List[str]] = ["tui", "Semantic_Type"]

# Batch runner defaults
MULTI_RESULT_MAX_RETRIES: Final[int] = 5
FIXED_ONTOLOGY_MAX_RETRIES: Final[int] = 10
PROGRESS_INTERVAL: Final[int] = 1000
CHECKPOINT_SUFFIX: Final[str] = ".checkpoint"
BACKUP_SUFFIX: Final[str] = ".bak"
MIN_INPUT_COLUMNS: Final[int] = 3
