"""
trieve-cli: a command-line client for the Trieve search platform.

Features:
- Named credential profiles with an active-profile pointer
- Credential resolution from flags, environment variables and profiles
- Dataset, API key and organization management against the Trieve API
"""

from .consts import PACKAGE_VERSION as __version__

__all__ = ["__version__"]
