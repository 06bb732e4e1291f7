"""Desktop tool for coding survey and interview responses."""
from __future__ import annotations

__version__ = "0.3.0"
