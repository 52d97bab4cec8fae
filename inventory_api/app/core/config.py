"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API starts without any configuration at all.  In a deployment you
should override these via environment variables.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Inventory API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG", "false")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Level of the per-request access lines; empty means ``log_level``.
    request_log_level: str = os.getenv("REQUEST_LOG_LEVEL", "")

    # Optional path of a log file.  When empty, logs only go to the
    # console.
    log_file: str = os.getenv("LOG_FILE", "")

    # Prefix under which every entity router is mounted, e.g.
    # ``/api/items``.
    api_prefix: str = os.getenv("API_PREFIX", "/api")

    # Upper bound for bulk, batch and lookup requests.
    max_batch_size: int = int(os.getenv("MAX_BATCH_SIZE", "100"))

    # Page size used by paginated listings when ``limit`` is omitted.
    default_page_size: int = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))

    # Load the sample records into each store at start-up.
    seed_data: bool = _env_flag("SEED_DATA", "true")


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Because the dataclass
# computes values at class definition time, environment variables
# should be set before importing this module.
settings = Settings()
