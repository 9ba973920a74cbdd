from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from photo_edge.dependencies import get_store
from photo_edge.services.object_store import DEFAULT_CONTENT_TYPE, ObjectStore
from photo_edge.services.query import parse_int
from photo_edge.services.responses import error_response, json_response

router = APIRouter(prefix="/api", tags=["objects"])

DEFAULT_LIST_LIMIT = 10


@router.get("/r2-list", summary="List stored objects")
async def r2_list(
	prefix: Optional[str] = None,
	limit: Optional[str] = None,
	store: ObjectStore = Depends(get_store),
):
	listing = await run_in_threadpool(store.list, prefix or None, parse_int(limit, DEFAULT_LIST_LIMIT))
	return json_response(listing)


@router.get("/r2-get", summary="Fetch an object's raw bytes")
async def r2_get(key: Optional[str] = None, store: ObjectStore = Depends(get_store)):
	if not key:
		return error_response("Missing query param: key", 400)
	obj = await run_in_threadpool(store.get, key)
	if obj is None:
		return error_response("Not Found", 404)
	# Set the header directly so Starlette doesn't append a charset to text/* types.
	return Response(content=obj.data, headers={"content-type": obj.content_type})


@router.put("/r2-put", summary="Store the request body as an object")
async def r2_put(request: Request, key: Optional[str] = None, store: ObjectStore = Depends(get_store)):
	if not key:
		return error_response("Missing query param: key", 400)
	content_type = request.headers.get("content-type") or DEFAULT_CONTENT_TYPE
	body = await request.body()
	res = await run_in_threadpool(store.put, key, body, content_type)
	return json_response({"ok": True, "key": key, "etag": res.get("etag")})
