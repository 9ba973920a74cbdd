"""Runtime settings for the photo-edge API."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	"""Settings loaded from ``PHOTO_EDGE_*`` environment variables or ``.env``."""

	cors_allow_origins: str = "*"

	# S3-compatible bucket (Cloudflare R2, MinIO, AWS S3). Unset bucket == no store binding.
	r2_bucket: Optional[str] = None
	r2_endpoint_url: Optional[str] = None
	r2_access_key_id: Optional[str] = None
	r2_secret_access_key: Optional[str] = None
	r2_region: str = "auto"

	log_level: str = "INFO"

	model_config = SettingsConfigDict(env_prefix="PHOTO_EDGE_", env_file=".env", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
	return Settings()
