"""
BioSample attribute schema and record models.

AttributeSchema entries form the read-only catalog that drives validation.
Records carry the raw attribute values submitted by a data producer.
"""

from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from biosample_analyzer.config.constants import GEOLOC_SENTINEL


class AttributeType(str, Enum):
    """Value types an attribute can be declared with in the catalog."""

    BOOLEAN = "BOOLEAN"
    INTEGER = "INTEGER"
    VALUE_SET = "VALUE_SET"
    TERM = "TERM"
    ONTOLOGY_TERM = "ONTOLOGY_TERM"

    @property
    def label(self) -> str:
        """Lower-case label used for attribute group reports."""
        return self.value.lower()


class AttributeSchema(BaseModel):
    """
    Catalog entry declaring an attribute's expected type.

    Attributes:
        name: Attribute name, unique within the catalog (e.g. "organism")
        type: Declared value type
        values: Allowed values. Enumerated choices for VALUE_SET, ontology
            acronyms for TERM/ONTOLOGY_TERM. The "GEOLOC" sentinel marks a
            TERM attribute as a geographic location.
        description: Human-readable description (optional)
        harmonized_name: NCBI harmonized name, if it differs from ``name``
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    # Unknown type names are kept as plain strings so a bad catalog entry
    # degrades to a "missing" report instead of failing the whole load
    type: Union[AttributeType, str] = Field(..., union_mode="left_to_right")
    values: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    harmonized_name: Optional[str] = None

    @property
    def is_geographic_location(self) -> bool:
        return GEOLOC_SENTINEL in self.values

    @property
    def type_label(self) -> str:
        if isinstance(self.type, AttributeType):
            return self.type.label
        return str(self.type).lower()


class Attribute(BaseModel):
    """A single attribute name/value pair as submitted in a record."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: Optional[str] = None


class Record(BaseModel):
    """
    One biological sample's submitted metadata.

    Attribute names not declared in the catalog are carried along but ignored
    by validation. Catalog attributes absent from ``attributes`` are treated
    as not filled in.

    Examples:
        >>> record = Record(
        ...     accession="SAMN00000001",
        ...     attributes={"organism": "Homo sapiens", "sex": "female"},
        ... )
        >>> record.get_attribute("sex").value
        'female'
        >>> record.get_attribute("age") is None
        True
    """

    model_config = ConfigDict(frozen=True)

    accession: Optional[str] = None
    attributes: Dict[str, str] = Field(default_factory=dict)

    def get_attribute(self, name: str) -> Optional[Attribute]:
        if name not in self.attributes:
            return None
        return Attribute(name=name, value=self.attributes[name])
