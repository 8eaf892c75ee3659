"""
Attribute Validation Service

Validates one record attribute against its catalog entry. Dispatch is a
closed table keyed by AttributeType, one strategy per type:

- BOOLEAN: "true"/"false", case-insensitive
- INTEGER: optional sign followed by base-10 digits
- VALUE_SET: case-insensitive match against the allowed values, untrimmed
- TERM: geographic location when flagged GEOLOC, else unscoped ontology term
- ONTOLOGY_TERM: ontology term resolved within the allowed ontologies

Data problems (blank or malformed values) only show up in the report.
Lookup failures from the term validator propagate to the caller.
"""

import re
from typing import Callable, Dict, Optional

from biosample_analyzer.core.schemas.attributes import (
    Attribute,
    AttributeSchema,
    AttributeType,
)
from biosample_analyzer.core.schemas.reports import AttributeValidationReport
from biosample_analyzer.services.metadata.geo_location_service import (
    GeographicLocationValidator,
)
from biosample_analyzer.services.metadata.term_normalizer import (
    strip_identifier_prefix,
)
from biosample_analyzer.services.metadata.term_validation_service import TermValidator
from biosample_analyzer.utils.logger import get_logger

logger = get_logger(__name__)

_INTEGER = re.compile(r"^[+-]?[0-9]+$")
_BOOLEAN_VALUES = ("true", "false")

AttributeStrategy = Callable[[Attribute, AttributeSchema], AttributeValidationReport]


def is_filled_in(value: Optional[str]) -> bool:
    return value is not None and bool(value.strip())


class AttributeValidator:
    """
    Service for validating single BioSample attributes.

    Example:
        >>> validator = AttributeValidator(TermValidator(lookup))
        >>> schema = AttributeSchema(name="sex", type="VALUE_SET", values=["male", "female"])
        >>> report = validator.validate(Attribute(name="sex", value="Female"), schema)
        >>> report.match
        'female'
    """

    def __init__(
        self,
        term_validator: TermValidator,
        geo_validator: Optional[GeographicLocationValidator] = None,
    ):
        self.term_validator = term_validator
        self.geo_validator = geo_validator or GeographicLocationValidator()
        self._strategies: Dict[AttributeType, AttributeStrategy] = {
            AttributeType.BOOLEAN: self._validate_boolean,
            AttributeType.INTEGER: self._validate_integer,
            AttributeType.VALUE_SET: self._validate_value_set,
            AttributeType.TERM: self._validate_term,
            AttributeType.ONTOLOGY_TERM: self._validate_ontology_term,
        }

    @property
    def supported_types(self):
        return frozenset(self._strategies)

    def validate(
        self, attribute: Optional[Attribute], schema: AttributeSchema
    ) -> AttributeValidationReport:
        """
        Validate an attribute value against its schema.

        Args:
            attribute: Attribute from the record, or None if the record lacks it
            schema: Catalog entry for the attribute

        Returns:
            AttributeValidationReport; a "missing" report when the attribute is
            absent or its declared type has no validation strategy
        """
        if attribute is None:
            return AttributeValidationReport.missing(schema.name)

        strategy = self._strategies.get(schema.type)
        if strategy is None:
            logger.error(
                f"Missing functionality to handle attributes of type: {schema.type} "
                f"(attribute '{schema.name}')"
            )
            return AttributeValidationReport.missing(attribute.name)

        return strategy(attribute, schema)

    # =========================================================================
    # Strategies
    # =========================================================================

    def _validate_boolean(
        self, attribute: Attribute, schema: AttributeSchema
    ) -> AttributeValidationReport:
        value = (attribute.value or "").strip()
        return AttributeValidationReport(
            attribute=attribute,
            is_filled_in=is_filled_in(value),
            is_valid_format=value.lower() in _BOOLEAN_VALUES,
        )

    def _validate_integer(
        self, attribute: Attribute, schema: AttributeSchema
    ) -> AttributeValidationReport:
        value = (attribute.value or "").strip()
        return AttributeValidationReport(
            attribute=attribute,
            is_filled_in=is_filled_in(value),
            is_valid_format=bool(_INTEGER.match(value)),
        )

    def _validate_value_set(
        self, attribute: Attribute, schema: AttributeSchema
    ) -> AttributeValidationReport:
        filled = is_filled_in(attribute.value)
        match = None
        if filled:
            value = attribute.value.lower()
            for allowed in schema.values:
                if value == allowed.lower():
                    match = allowed
                    break
        return AttributeValidationReport(
            attribute=attribute,
            is_filled_in=filled,
            is_valid_format=match is not None,
            match=match,
        )

    def _validate_term(
        self, attribute: Attribute, schema: AttributeSchema
    ) -> AttributeValidationReport:
        if schema.is_geographic_location:
            return self._validate_geographic_location(attribute)
        return self._resolve_ontology_term(attribute)

    def _validate_ontology_term(
        self, attribute: Attribute, schema: AttributeSchema
    ) -> AttributeValidationReport:
        return self._resolve_ontology_term(attribute, *schema.values)

    # =========================================================================
    # Shared rules
    # =========================================================================

    def _resolve_ontology_term(
        self, attribute: Attribute, *ontologies: str
    ) -> AttributeValidationReport:
        filled = is_filled_in(attribute.value)
        valid = False
        match = None
        if filled:
            term = strip_identifier_prefix(attribute.value)
            report = self.term_validator.validate_term(term, True, *ontologies)
            valid = report.is_resolvable_ontology_class
            match = report.match_value or None
        return AttributeValidationReport(
            attribute=attribute,
            is_filled_in=filled,
            is_valid_format=valid,
            match=match,
        )

    def _validate_geographic_location(
        self, attribute: Attribute
    ) -> AttributeValidationReport:
        filled = is_filled_in(attribute.value)
        valid = False
        match = None
        if filled:
            valid, match = self.geo_validator.validate(attribute.value)
        return AttributeValidationReport(
            attribute=attribute,
            is_filled_in=filled,
            is_valid_format=valid,
            match=match,
        )
