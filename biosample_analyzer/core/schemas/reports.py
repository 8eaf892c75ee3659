"""
Validation report schemas.

Reports are immutable value objects created once per validation call and
owned by the caller. They serialize with ``model_dump()`` for JSON export.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from biosample_analyzer.core.schemas.attributes import Attribute, Record


class TermValidationReport(BaseModel):
    """
    Result of resolving one term against the ontology search service.

    ``is_resolvable_ontology_class`` is True for every real search hit and is
    the field consumers treat as "valid". ``is_owl_class`` and ``is_ontology``
    are informational only.

    Attributes:
        match_value: Resolved class IRI ("" when unresolved)
        match_label: Preferred label of the resolved class
        is_ontology: Hit is itself an ontology rather than a class
        is_owl_class: Hit's declared type is owl:Class
        is_resolvable_ontology_class: A hit was found
        ontology: Source ontology acronym
        cuis: UMLS concept identifiers (None when not reported)
        semantic_types: UMLS semantic type codes (None when not reported)
    """

    model_config = ConfigDict(frozen=True)

    match_value: str = ""
    match_label: str = ""
    is_ontology: bool = False
    is_owl_class: bool = False
    is_resolvable_ontology_class: bool = False
    ontology: str = ""
    cuis: Optional[List[str]] = None
    semantic_types: Optional[List[str]] = None

    @classmethod
    def unresolved(cls) -> "TermValidationReport":
        """Sentinel report for a term with no search hit."""
        return cls()

    @property
    def is_unresolved(self) -> bool:
        return not self.is_resolvable_ontology_class


class AttributeValidationReport(BaseModel):
    """
    Result of validating one record attribute against its catalog entry.

    ``is_valid_format`` can only be True when ``is_filled_in`` is True.
    ``match`` is set for value-set and term attributes that resolved.
    """

    model_config = ConfigDict(frozen=True)

    attribute: Attribute
    is_filled_in: bool
    is_valid_format: bool
    match: Optional[str] = None

    @model_validator(mode="after")
    def _valid_requires_filled(self) -> "AttributeValidationReport":
        if self.is_valid_format and not self.is_filled_in:
            raise ValueError(
                f"Attribute '{self.attribute.name}' cannot be valid without a value"
            )
        return self

    @classmethod
    def missing(cls, name: str) -> "AttributeValidationReport":
        """Report for an attribute the record does not provide."""
        return cls(
            attribute=Attribute(name=name),
            is_filled_in=False,
            is_valid_format=False,
        )

    @property
    def is_valid(self) -> bool:
        return self.is_filled_in and self.is_valid_format


class AttributeGroupValidationReport(BaseModel):
    """Attribute reports for every catalog attribute of one type."""

    model_config = ConfigDict(frozen=True)

    type_name: str
    validation_reports: List[AttributeValidationReport] = Field(default_factory=list)

    @property
    def invalid_reports(self) -> List[AttributeValidationReport]:
        return [r for r in self.validation_reports if not r.is_valid]


class RecordValidationReport(BaseModel):
    """Validation outcome for a whole record, grouped by attribute type."""

    model_config = ConfigDict(frozen=True)

    record: Record
    attribute_group_validation_reports: List[AttributeGroupValidationReport] = Field(
        default_factory=list
    )

    def get_attribute_report(self, name: str) -> Optional[AttributeValidationReport]:
        for group in self.attribute_group_validation_reports:
            for report in group.validation_reports:
                if report.attribute.name == name:
                    return report
        return None
