"""Application configuration loaded from environment variables."""

import os
from pathlib import Path
from pydantic_settings import BaseSettings

# Check if .env file exists and is readable
_env_file = None
try:
    env_path = Path(".env")
    if env_path.exists() and os.access(env_path, os.R_OK):
        _env_file = ".env"
except (OSError, PermissionError):
    pass


class Settings(BaseSettings):
    """All configuration for the resource API.

    Values are loaded from environment variables or a .env file.
    """

    # Application
    app_name: str = "resource-api"
    debug: bool = False
    api_prefix: str = "/api/v1"
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Database
    database_url: str = "sqlite:///./data/resource_api.db"

    # Reserved query-string keys. Callers depend on these names, so
    # changing them is a breaking change for API consumers.
    query_select_key: str = "select"
    query_populate_key: str = "populate"
    query_sort_key: str = "sort"
    query_limit_key: str = "limit"
    query_skip_key: str = "skip"

    model_config = {
        "env_file": _env_file,
        "env_file_encoding": "utf-8",
        "env_file_ignore_empty": True,
    }
