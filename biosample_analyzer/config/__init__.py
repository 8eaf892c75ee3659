"""
Configuration module.

Runtime settings for the lookup client plus shared constants.
"""

from biosample_analyzer.config.settings import BioPortalConfig, ConfigurationError

__all__ = [
    "BioPortalConfig",
    "ConfigurationError",
]
