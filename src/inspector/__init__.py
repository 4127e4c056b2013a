"""
USB Inspector - USB storage device identification.

Classifies locally attached storage devices as USB-connected or not and
extracts Vendor ID / Product ID / serial identifiers from platform
device path strings.
"""

__version__ = "0.1.0"
__author__ = "USB Inspector Contributors"

from inspector.config import InspectorConfig, load_config

__all__ = ["InspectorConfig", "load_config", "__version__"]
