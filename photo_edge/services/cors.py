"""
CORS policy driven by a comma-separated origin allow-list.

The allow-list is an immutable value rebuilt from settings on every request,
so nothing about the policy lives in process state between requests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional

from starlette.requests import Request
from starlette.responses import Response

ALLOW_METHODS = "GET,POST,PUT,DELETE,OPTIONS"
MAX_AGE_SECONDS = 86400


@dataclass(frozen=True)
class AllowList:
	allow_all: bool
	origins: FrozenSet[str] = frozenset()

	@classmethod
	def parse(cls, raw: Optional[str]) -> "AllowList":
		text = (raw or "*").strip()
		if text in ("", "*"):
			return cls(allow_all=True)
		return cls(allow_all=False, origins=frozenset(s.strip() for s in text.split(",") if s.strip()))

	def permits(self, origin: str) -> bool:
		return self.allow_all or origin in self.origins

	def granted_origin(self, origin: str) -> str:
		return "*" if self.allow_all else origin


def request_origin(request: Request) -> str:
	return request.headers.get("origin") or ""


def preflight_response(request: Request, allow_list: AllowList) -> Response:
	origin = request_origin(request)
	if not allow_list.permits(origin):
		return Response(status_code=403)
	headers = {
		"Access-Control-Allow-Origin": allow_list.granted_origin(origin),
		"Vary": "Origin",
		"Access-Control-Allow-Methods": ALLOW_METHODS,
		"Access-Control-Allow-Headers": request.headers.get("access-control-request-headers") or "*",
		"Access-Control-Max-Age": str(MAX_AGE_SECONDS),
	}
	return Response(status_code=204, headers=headers)


def apply_cors(response: Response, request: Request, allow_list: AllowList) -> Response:
	"""Grant the origin on an already-built response; status and body are left alone."""
	origin = request_origin(request)
	if allow_list.permits(origin):
		response.headers["Access-Control-Allow-Origin"] = allow_list.granted_origin(origin)
		response.headers["Vary"] = "Origin"
	return response
