"""
Schema definitions for BioSample validation.

Pydantic models for the attribute catalog, submitted records, ontology
search candidates and the validation reports built from them.
"""

from .attributes import Attribute, AttributeSchema, AttributeType, Record
from .ontology import OntologyCandidate, OntologySearchQuery
from .reports import (
    AttributeGroupValidationReport,
    AttributeValidationReport,
    RecordValidationReport,
    TermValidationReport,
)

__all__ = [
    "Attribute",
    "AttributeSchema",
    "AttributeType",
    "Record",
    "OntologyCandidate",
    "OntologySearchQuery",
    # Reports
    "AttributeGroupValidationReport",
    "AttributeValidationReport",
    "RecordValidationReport",
    "TermValidationReport",
]
