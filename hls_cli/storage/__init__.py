"""
Data Persistence Layer.

This package manages the per-run scratch directory holding downloaded
segments and the application's INI configuration file.
"""

from .config_manager import ConfigManager
from .scratch import ScratchArea

__all__ = ["ConfigManager", "ScratchArea"]
