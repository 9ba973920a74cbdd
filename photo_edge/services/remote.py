from __future__ import annotations

import httpx


class FetchFailed(Exception):
	def __init__(self, status_code: int):
		super().__init__(f"Fetch failed: {status_code}")
		self.status_code = status_code


async def fetch_bytes(url: str) -> bytes:
	async with httpx.AsyncClient(follow_redirects=True, timeout=None) as client:
		res = await client.get(url)
	if not res.is_success:
		raise FetchFailed(res.status_code)
	return res.content
