"""
Runtime configuration for the BioPortal lookup client.

BioPortalConfig reads environment variables and can also be constructed
directly for testing or explicit configuration.

Environment variables:
    BIOPORTAL_API_KEY: BioPortal API key (required for lookups)
    BIOSAMPLE_BIOPORTAL_URL: API base URL (default: https://data.bioontology.org)
    BIOSAMPLE_HTTP_TIMEOUT: Request timeout in seconds (default: 30)
    BIOSAMPLE_PAGE_SIZE: Candidates requested per search (default: 50)
"""

from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, Field

from biosample_analyzer.config.constants import (
    DEFAULT_BIOPORTAL_URL,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_PAGE_SIZE,
)


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


class BioPortalConfig(BaseModel):
    """
    Connection settings for the BioPortal search API.

    Use ``from_env()`` for environment-driven creation.
    """

    api_key: Optional[str] = Field(
        default=None,
        description="BioPortal API key sent in the Authorization header",
    )
    base_url: str = Field(
        default=DEFAULT_BIOPORTAL_URL,
        description="Base URL of the BioPortal REST API",
    )
    timeout: float = Field(
        default=DEFAULT_HTTP_TIMEOUT,
        gt=0,
        description="HTTP timeout in seconds for each search request",
    )
    page_size: int = Field(
        default=DEFAULT_PAGE_SIZE,
        ge=1,
        le=500,
        description="Number of candidates requested per search",
    )

    @classmethod
    def from_env(cls, api_key: Optional[str] = None) -> BioPortalConfig:
        """
        Create a BioPortalConfig from environment variables.

        Args:
            api_key: Explicit API key; overrides BIOPORTAL_API_KEY when given.

        Returns:
            BioPortalConfig: Configuration instance.

        Raises:
            ConfigurationError: If a numeric variable cannot be parsed.
        """
        timeout_str = os.environ.get("BIOSAMPLE_HTTP_TIMEOUT", str(DEFAULT_HTTP_TIMEOUT))
        page_size_str = os.environ.get("BIOSAMPLE_PAGE_SIZE", str(DEFAULT_PAGE_SIZE))
        try:
            timeout = float(timeout_str)
            page_size = int(page_size_str)
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric setting in environment: {e}")

        return cls(
            api_key=api_key or os.environ.get("BIOPORTAL_API_KEY"),
            base_url=os.environ.get("BIOSAMPLE_BIOPORTAL_URL", DEFAULT_BIOPORTAL_URL),
            timeout=timeout,
            page_size=page_size,
        )

    def require_api_key(self) -> str:
        """Return the API key or raise ConfigurationError if none is set."""
        if not self.api_key:
            raise ConfigurationError(
                "No BioPortal API key configured. "
                "Set BIOPORTAL_API_KEY or pass --api-key."
            )
        return self.api_key
