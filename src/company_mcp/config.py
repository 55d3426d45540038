"""
Service configuration.

Settings come from environment variables (a local .env file is loaded first).
"""

import os
from typing import Optional

import dotenv
from pydantic import BaseModel, Field

dotenv.load_dotenv()


class Settings(BaseModel):
    """Runtime settings for the company search service."""
    csv_path: str = Field("./data/companies.csv", description="Path to the companies CSV file")
    host: str = Field("0.0.0.0", description="Bind address")
    port: int = Field(4000, description="Listening port")
    name_field: str = Field("company_name", description="Column used for lookup by name")
    missing_value: str = Field("no_data", description="Sentinel substituted for empty values")
    default_limit: int = Field(50, ge=0, description="Page size when the caller gives none")
    max_limit: int = Field(50, ge=0, description="Upper bound on page size")
    log_level: str = Field("INFO", description="Root logging level")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        values = {
            "csv_path": os.getenv("CSV_PATH"),
            "host": os.getenv("HOST"),
            "port": os.getenv("PORT"),
            "name_field": os.getenv("NAME_FIELD"),
            "missing_value": os.getenv("MISSING_VALUE"),
            "default_limit": os.getenv("DEFAULT_LIMIT"),
            "max_limit": os.getenv("MAX_LIMIT"),
            "log_level": os.getenv("LOG_LEVEL"),
        }
        return cls(**{k: v for k, v in values.items() if v is not None})


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the process-wide settings."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
