"""
BioSample attribute catalog.

Read-only, process-wide table mapping attribute types to the ordered list of
AttributeSchema entries declared for them. Loaded once from JSON and shared by
every validator.
"""

import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from biosample_analyzer.core.schemas.attributes import AttributeSchema, AttributeType
from biosample_analyzer.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent.parent / "config" / "biosample_attributes.json"


class AttributeCatalogError(Exception):
    """Raised when the attribute catalog cannot be loaded."""

    pass


class AttributeCatalogFile(BaseModel):
    """On-disk layout of the attribute catalog JSON."""

    version: str = "1.0.0"
    attributes: List[AttributeSchema] = Field(default_factory=list)


class AttributeCatalog:
    """
    Lookup table of BioSample attribute schemas, grouped by type.

    Types are reported in the order they first appear in the catalog, and
    attributes within a type keep their declaration order.

    Usage:
        catalog = AttributeCatalog.get_instance()
        for attr_type in catalog.get_attribute_types():
            for schema in catalog.get_attributes_of_type(attr_type):
                print(schema.name)
    """

    _instance: Optional["AttributeCatalog"] = None

    def __init__(self, schemas: Iterable[AttributeSchema], version: str = "1.0.0"):
        self.version = version
        self._by_name: Dict[str, AttributeSchema] = {}
        self._by_type: Dict[Union[AttributeType, str], List[AttributeSchema]] = {}

        for schema in schemas:
            if schema.name in self._by_name:
                raise AttributeCatalogError(
                    f"Duplicate attribute '{schema.name}' in catalog"
                )
            self._by_name[schema.name] = schema
            self._by_type.setdefault(schema.type, []).append(schema)

        logger.debug(
            f"AttributeCatalog initialized with {len(self._by_name)} attributes "
            f"across {len(self._by_type)} types (version {version})"
        )

    @classmethod
    def from_json(cls, path: Optional[Path] = None) -> "AttributeCatalog":
        """
        Load and validate the catalog from a JSON file.

        Args:
            path: Catalog file; defaults to the packaged biosample_attributes.json

        Raises:
            AttributeCatalogError: If the file is missing, unreadable or invalid
        """
        path = Path(path) if path is not None else DEFAULT_CATALOG_PATH
        if not path.exists():
            raise AttributeCatalogError(f"Attribute catalog not found: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise AttributeCatalogError(f"Invalid JSON in attribute catalog {path}: {e}")

        try:
            catalog_file = AttributeCatalogFile(**data)
        except ValidationError as e:
            raise AttributeCatalogError(f"Invalid attribute catalog {path}: {e}")

        for schema in catalog_file.attributes:
            if not isinstance(schema.type, AttributeType):
                logger.warning(
                    f"Attribute '{schema.name}' declares unsupported type "
                    f"'{schema.type}' and will always be reported as missing"
                )

        logger.debug(
            f"Loaded {len(catalog_file.attributes)} attribute schemas from {path} "
            f"(version: {catalog_file.version})"
        )
        return cls(catalog_file.attributes, version=catalog_file.version)

    @classmethod
    def get_instance(cls) -> "AttributeCatalog":
        """Shared catalog loaded from the packaged JSON file."""
        if cls._instance is None:
            cls._instance = cls.from_json()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """
        Reset singleton instance.

        Used for testing to ensure fresh state between tests.
        """
        cls._instance = None

    def get_attribute_types(self) -> List[Union[AttributeType, str]]:
        return list(self._by_type.keys())

    def get_attributes_of_type(
        self, attr_type: Union[AttributeType, str]
    ) -> List[AttributeSchema]:
        return list(self._by_type.get(attr_type, []))

    def get_attribute(self, name: str) -> Optional[AttributeSchema]:
        return self._by_name.get(name)

    @property
    def attribute_names(self) -> List[str]:
        return list(self._by_name.keys())

    def __len__(self) -> int:
        return len(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name
