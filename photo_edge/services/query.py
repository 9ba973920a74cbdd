from __future__ import annotations

import re
from typing import Optional

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_int(raw: Optional[str], default: int) -> int:
	"""Read a leading integer ("2.5" -> 2, "7abc" -> 7); ``default`` when there is none."""
	m = _LEADING_INT.match(raw or "")
	return int(m.group(1)) if m else default
