from __future__ import annotations

import logging
import random
import re
import string
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, Sequence, Union

from starlette.concurrency import run_in_threadpool
from starlette.datastructures import FormData, UploadFile

from photo_edge.services.metadata import safe_parse_exif
from photo_edge.services.object_store import DEFAULT_CONTENT_TYPE, ObjectStore
from photo_edge.services.query import parse_int

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "uploads"
DEFAULT_LIMIT = 20
MIN_LIMIT = 1
MAX_LIMIT = 50

_CONTROL_CHARS = re.compile(r"[\\\n\r\t\0]")
_UNSAFE_RUN = re.compile(r"[^\w.-]+", re.ASCII)
_BASE36 = string.digits + string.ascii_lowercase


@dataclass(frozen=True)
class FormEntry:
	kind: Literal["file", "text"]
	value: Union[UploadFile, str]

	@property
	def is_file(self) -> bool:
		return self.kind == "file"


def tag_entries(form: FormData, field: str) -> List[FormEntry]:
	entries: List[FormEntry] = []
	for value in form.getlist(field):
		if isinstance(value, UploadFile):
			entries.append(FormEntry("file", value))
		else:
			entries.append(FormEntry("text", str(value)))
	return entries


def text_field(form: FormData, field: str) -> str:
	value = form.get(field)
	return value if isinstance(value, str) else ""


def split_tags(raw: str) -> List[str]:
	return [t.strip() for t in raw.split(",") if t.strip()]


def clamp_limit(raw: Optional[str]) -> int:
	return max(MIN_LIMIT, min(MAX_LIMIT, parse_int(raw, DEFAULT_LIMIT)))


def sanitize_name(name: Optional[str]) -> str:
	cleaned = _CONTROL_CHARS.sub("-", name or "image")
	return _UNSAFE_RUN.sub("-", cleaned)


def make_key(prefix: str, filename: Optional[str]) -> str:
	stamp = int(time.time() * 1000)
	suffix = "".join(random.choices(_BASE36, k=6))
	return f"{prefix}/{stamp}-{suffix}-{sanitize_name(filename)}"


async def upload_batch(
	store: ObjectStore,
	entries: Sequence[FormEntry],
	prefix: str,
	limit: int,
	album: str,
	tags: List[str],
) -> Dict[str, Any]:
	"""
	Store each file entry (in submission order, up to ``limit``) and extract its EXIF.
	Files past the limit are ignored. A store failure aborts the whole batch.
	"""
	items: List[Dict[str, Any]] = []
	for entry in entries:
		if not entry.is_file:
			continue
		if len(items) >= limit:
			break
		upload = entry.value
		data = await upload.read()
		key = make_key(prefix, upload.filename)
		content_type = upload.content_type or DEFAULT_CONTENT_TYPE

		await run_in_threadpool(store.put, key, data, content_type)

		exif = await run_in_threadpool(safe_parse_exif, data)
		items.append({
			"key": key,
			"size": len(data),
			"contentType": content_type,
			"album": album,
			"tags": tags,
			"exif": exif,
		})
	skipped = sum(1 for e in entries if e.is_file) - len(items)
	if skipped > 0:
		logger.info("Batch upload limit %d reached; ignored %d file(s)", limit, skipped)
	return {"ok": True, "count": len(items), "items": items}
