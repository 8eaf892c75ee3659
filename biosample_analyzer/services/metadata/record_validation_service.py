"""
Record Validation Service

Validates a whole BioSample record against every attribute in the catalog,
grouping attribute reports by declared type in catalog order.
"""

from typing import Any, Dict, List, Optional

from biosample_analyzer.core.attribute_catalog import AttributeCatalog
from biosample_analyzer.core.schemas.attributes import Record
from biosample_analyzer.core.schemas.reports import (
    AttributeGroupValidationReport,
    AttributeValidationReport,
    RecordValidationReport,
)
from biosample_analyzer.services.metadata.attribute_validation_service import (
    AttributeValidator,
)
from biosample_analyzer.utils.logger import get_logger

logger = get_logger(__name__)


class RecordValidator:
    """
    Service for validating BioSample records against the attribute catalog.

    Key capabilities:
    - One report per catalog attribute, grouped by attribute type
    - Attributes absent from the record reported as not filled in
    - All-or-nothing validity check over the full report

    Example:
        >>> validator = RecordValidator(AttributeValidator(term_validator))
        >>> report = validator.validate(Record(attributes={"sex": "male"}))
        >>> validator.is_valid(report)
        False
    """

    def __init__(
        self,
        attribute_validator: AttributeValidator,
        catalog: Optional[AttributeCatalog] = None,
    ):
        self.attribute_validator = attribute_validator
        self.catalog = catalog or AttributeCatalog.get_instance()

    def validate(self, record: Record) -> RecordValidationReport:
        """
        Validate a record against every attribute declared in the catalog.

        Args:
            record: Submitted BioSample record

        Returns:
            RecordValidationReport with one group per catalog attribute type
        """
        groups: List[AttributeGroupValidationReport] = []
        for attr_type in self.catalog.get_attribute_types():
            reports: List[AttributeValidationReport] = []
            type_label = None
            for schema in self.catalog.get_attributes_of_type(attr_type):
                type_label = schema.type_label
                attribute = record.get_attribute(schema.name)
                if attribute is None:
                    report = AttributeValidationReport.missing(schema.name)
                else:
                    report = self.attribute_validator.validate(attribute, schema)
                reports.append(report)
            groups.append(
                AttributeGroupValidationReport(
                    type_name=type_label or str(attr_type).lower(),
                    validation_reports=reports,
                )
            )

        logger.debug(
            f"Validated record {record.accession or '<unnamed>'} against "
            f"{len(self.catalog)} catalog attributes"
        )
        return RecordValidationReport(
            record=record, attribute_group_validation_reports=groups
        )

    @staticmethod
    def is_valid(report: RecordValidationReport) -> bool:
        """True iff every catalog attribute is filled in with a valid value."""
        return all(
            attribute_report.is_valid
            for group in report.attribute_group_validation_reports
            for attribute_report in group.validation_reports
        )

    @staticmethod
    def summarize(report: RecordValidationReport) -> Dict[str, Any]:
        """
        Build display statistics for a record report.

        Returns:
            Dict with overall validity, per-group counts and the names of
            attributes that failed
        """
        groups = {}
        invalid_attributes = []
        for group in report.attribute_group_validation_reports:
            reports = group.validation_reports
            groups[group.type_name] = {
                "total": len(reports),
                "filled_in": sum(1 for r in reports if r.is_filled_in),
                "valid": sum(1 for r in reports if r.is_valid),
            }
            invalid_attributes.extend(r.attribute.name for r in group.invalid_reports)

        return {
            "accession": report.record.accession,
            "is_valid": not invalid_attributes,
            "groups": groups,
            "invalid_attributes": invalid_attributes,
        }
