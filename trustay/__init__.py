"""Client-side data synchronization layer for the Trustay rental marketplace."""

from .app import Stores, build_stores
from .config import Settings, get_settings

__version__ = "0.4.0"

__all__ = ["Stores", "build_stores", "Settings", "get_settings", "__version__"]
