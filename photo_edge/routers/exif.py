from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from photo_edge.dependencies import get_store
from photo_edge.services.metadata import safe_parse_exif
from photo_edge.services.object_store import ObjectStore
from photo_edge.services.remote import FetchFailed, fetch_bytes
from photo_edge.services.responses import error_response, json_response

router = APIRouter(prefix="/api", tags=["exif"])


@router.get("/exif", summary="Extract EXIF from a stored object")
async def exif_from_store(
	key: Optional[str] = None,
	debug: Optional[str] = None,
	store: ObjectStore = Depends(get_store),
):
	if not key:
		return error_response("Missing query param: key", 400)
	obj = await run_in_threadpool(store.get, key)
	if obj is None:
		return error_response("Not Found", 404)
	return json_response({"ok": True, "key": key, "exif": await run_in_threadpool(safe_parse_exif, obj.data, debug)})


@router.get("/exif-url", summary="Extract EXIF from an external URL (debugging)")
async def exif_from_url(url: Optional[str] = None, debug: Optional[str] = None):
	if not url:
		return error_response("Missing query param: url", 400)
	try:
		data = await fetch_bytes(url)
	except FetchFailed as e:
		return error_response(str(e), 502)
	return json_response({"ok": True, "source": url, "exif": await run_in_threadpool(safe_parse_exif, data, debug)})
