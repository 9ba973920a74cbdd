from __future__ import annotations

from fastapi import Depends, Request

from photo_edge.config import Settings
from photo_edge.services.object_store import ObjectStore, build_store


def get_app_settings(request: Request) -> Settings:
	return request.app.state.settings


def get_store(settings: Settings = Depends(get_app_settings)) -> ObjectStore:
	# Raises StoreNotConfiguredError when no bucket is bound; surfaces as a generic 500.
	return build_store(settings)
