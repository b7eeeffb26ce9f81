"""
Runtime configuration for the CV extraction engine.

The two module constants are the documented contract for callers: a result
whose confidence is below MIN_CV_PARSE_CONFIDENCE should be treated as
"probably not a CV", and no more than MAX_CV_PARSE_PAGES pages are ever read.
Both can be overridden per deployment through environment variables
(CV_ENGINE_MIN_PARSE_CONFIDENCE, CV_ENGINE_MAX_PARSE_PAGES) or a .env file.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


MIN_CV_PARSE_CONFIDENCE = 0.45
MAX_CV_PARSE_PAGES = 8


class Settings(BaseSettings):
    app_name: str = "CV Engine (Resume Structure Extraction Service)"
    log_level: str = "INFO"

    min_parse_confidence: float = Field(default=MIN_CV_PARSE_CONFIDENCE, ge=0.0, le=1.0)
    max_parse_pages: int = Field(default=MAX_CV_PARSE_PAGES, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="CV_ENGINE_",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
