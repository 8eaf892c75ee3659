"""Metadata validation services: term resolution, attribute and record validation."""

from biosample_analyzer.services.metadata.attribute_validation_service import (
    AttributeValidator,
)
from biosample_analyzer.services.metadata.geo_location_service import (
    GeographicLocationValidator,
)
from biosample_analyzer.services.metadata.record_validation_service import (
    RecordValidator,
)
from biosample_analyzer.services.metadata.term_validation_service import TermValidator

__all__ = [
    "AttributeValidator",
    "GeographicLocationValidator",
    "RecordValidator",
    "TermValidator",
]
