"""
BioSample Analyzer.

Validates BioSample metadata records against the attribute catalog and resolves
free-text terms against the NCBO BioPortal search API.
"""

from biosample_analyzer.version import __version__

__all__ = ["__version__"]
