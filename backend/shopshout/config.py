import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, HttpUrl, ValidationError


class Settings(BaseModel):
    supabase_url: HttpUrl = Field(alias="SUPABASE_URL")
    supabase_key: str = Field(alias="SUPABASE_ANON_KEY")
    env: str = Field(default="local", alias="APP_ENV")
    site_base_url: str = Field(default="https://shopshout.ai", alias="SITE_BASE_URL")
    # Both schemes are in use across the site; see DESIGN.md.
    product_url_scheme: Literal["marker", "short_hash"] = Field(default="marker", alias="PRODUCT_URL_SCHEME")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @property
    def base_url(self) -> str:
        return self.site_base_url.rstrip("/")


def _load_dotenv():
    # Load from repo root if present, otherwise rely on environment variables.
    root_env = Path(__file__).resolve().parents[2] / ".env"
    if root_env.exists():
        load_dotenv(root_env)
    else:
        load_dotenv()


@lru_cache()
def get_settings() -> Settings:
    _load_dotenv()
    try:
        return Settings(**os.environ)
    except ValidationError as exc:
        missing = [e["loc"][0] for e in exc.errors() if e["type"] == "missing"]
        if not missing:
            raise RuntimeError(f"Invalid configuration: {exc}") from exc
        detail = f"Missing required environment variables: {', '.join(missing)}"
        raise RuntimeError(detail) from exc


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level.upper())
