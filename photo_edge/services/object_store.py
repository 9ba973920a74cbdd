"""
Object store client for an S3-compatible bucket (Cloudflare R2, MinIO, AWS S3).

Keys are used verbatim. Calls are blocking boto3 calls; async handlers run
them through the threadpool.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import ClientError

from photo_edge.config import Settings

DEFAULT_CONTENT_TYPE = "application/octet-stream"
_MISSING_CODES = {"NoSuchKey", "404", "NotFound"}


class StoreNotConfiguredError(RuntimeError):
	pass


@dataclass
class StoredObject:
	key: str
	data: bytes
	content_type: str = DEFAULT_CONTENT_TYPE
	etag: Optional[str] = None

	@property
	def size(self) -> int:
		return len(self.data)


def _strip_etag(etag: Optional[str]) -> Optional[str]:
	return etag.strip('"') if etag else None


class ObjectStore:
	def __init__(self, client: Any, bucket: str):
		self.client = client
		self.bucket = bucket

	def list(self, prefix: Optional[str] = None, limit: int = 10) -> Dict[str, Any]:
		params: Dict[str, Any] = {"Bucket": self.bucket, "MaxKeys": limit}
		if prefix:
			params["Prefix"] = prefix
		res = self.client.list_objects_v2(**params)
		objects: List[Dict[str, Any]] = []
		for item in res.get("Contents", []):
			uploaded = item.get("LastModified")
			objects.append({
				"key": item["Key"],
				"size": int(item.get("Size", 0)),
				"etag": _strip_etag(item.get("ETag")),
				"uploaded": uploaded.isoformat() if uploaded is not None else None,
			})
		return {
			"objects": objects,
			"truncated": bool(res.get("IsTruncated", False)),
			"cursor": res.get("NextContinuationToken"),
			"delimitedPrefixes": [p["Prefix"] for p in res.get("CommonPrefixes", [])],
		}

	def get(self, key: str) -> Optional[StoredObject]:
		try:
			res = self.client.get_object(Bucket=self.bucket, Key=key)
		except ClientError as e:
			if e.response.get("Error", {}).get("Code") in _MISSING_CODES:
				return None
			raise
		body = res["Body"]
		try:
			data = body.read()
		finally:
			body.close()
		return StoredObject(
			key=key,
			data=data,
			content_type=res.get("ContentType") or DEFAULT_CONTENT_TYPE,
			etag=_strip_etag(res.get("ETag")),
		)

	def put(self, key: str, data: bytes, content_type: Optional[str] = None) -> Dict[str, Optional[str]]:
		res = self.client.put_object(
			Bucket=self.bucket,
			Key=key,
			Body=data,
			ContentType=content_type or DEFAULT_CONTENT_TYPE,
		)
		return {"etag": _strip_etag(res.get("ETag"))}


def build_store(settings: Settings) -> ObjectStore:
	if not settings.r2_bucket:
		raise StoreNotConfiguredError(
			"Object store not configured. Set PHOTO_EDGE_R2_BUCKET (and PHOTO_EDGE_R2_ENDPOINT_URL for R2/MinIO)."
		)
	client = boto3.client(
		"s3",
		endpoint_url=settings.r2_endpoint_url,
		aws_access_key_id=settings.r2_access_key_id,
		aws_secret_access_key=settings.r2_secret_access_key,
		region_name=settings.r2_region,
	)
	return ObjectStore(client, settings.r2_bucket)
