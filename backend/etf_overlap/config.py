"""Settings for the ETF overlap service, overridable from the environment."""

import os
from pathlib import Path

# Directory for workspace JSON files
DATA_DIR = Path(os.environ.get("ETF_OVERLAP_DATA_DIR", Path(__file__).parent.parent / "data"))

# Storage keys
STORAGE_KEY = os.environ.get("ETF_OVERLAP_STORAGE_KEY", "etf-tabs")
LEGACY_STORAGE_KEY = "etf-data"

# Frontend origins allowed by CORS
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "ETF_OVERLAP_CORS_ORIGINS", "http://localhost:5173,http://localhost:3000"
    ).split(",")
    if origin.strip()
]

EXPORT_VERSION = "1.0"
DEFAULT_TAB_ID = "tab1"
TAB_NAME_TEMPLATE = "Comparison {number}"
