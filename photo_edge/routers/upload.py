from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request

from photo_edge.dependencies import get_store
from photo_edge.services.object_store import ObjectStore
from photo_edge.services.responses import json_response
from photo_edge.services.upload_batch import (
	DEFAULT_PREFIX,
	clamp_limit,
	split_tags,
	tag_entries,
	text_field,
	upload_batch,
)

router = APIRouter(prefix="/api", tags=["upload"])


@router.post("/upload-batch", summary="Upload images to the object store and extract EXIF")
async def upload_batch_route(
	request: Request,
	prefix: Optional[str] = None,
	limit: Optional[str] = None,
	store: ObjectStore = Depends(get_store),
):
	# Multipart form: repeated "files", optional "album" and comma-separated "tags"
	form = await request.form()
	try:
		result = await upload_batch(
			store,
			tag_entries(form, "files"),
			prefix=prefix or DEFAULT_PREFIX,
			limit=clamp_limit(limit),
			album=text_field(form, "album"),
			tags=split_tags(text_field(form, "tags")),
		)
	finally:
		await form.close()
	return json_response(result)
