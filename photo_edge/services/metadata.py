from __future__ import annotations

import logging
from datetime import datetime
from io import BytesIO
from typing import Any, Dict, Optional, Tuple

from PIL import Image
import piexif
from pillow_heif import register_heif_opener

logger = logging.getLogger(__name__)

# HEIC/HEIF (iPhone photos) through Pillow
register_heif_opener()

# IFDs reported back to callers; interop/thumbnail IFDs are left out.
_IFDS: Tuple[Tuple[str, str], ...] = (("0th", "Image"), ("Exif", "Exif"), ("GPS", "GPS"))
_SKIPPED_TAGS = {"MakerNote", "UserComment"}
_DATE_TAGS = {"DateTime", "DateTimeOriginal", "DateTimeDigitized"}
_RATIONAL_TYPES = (piexif.TYPES.Rational, piexif.TYPES.SRational)

PICKED_FIELDS = (
	"Make",
	"Model",
	"LensModel",
	"FNumber",
	"ExposureTime",
	"ISO",
	"FocalLength",
	"CreateDate",
	"GPSLatitude",
	"GPSLongitude",
	"Orientation",
)


def _rational_to_float(x: Any) -> Optional[float]:
	if x is None:
		return None
	if isinstance(x, tuple) and len(x) == 2:
		num, den = x
		if not den:
			return None
		return float(num) / float(den)
	try:
		return float(x)
	except (TypeError, ValueError):
		return None


def _bytes_to_str(v: bytes) -> str:
	return v.decode("utf-8", errors="ignore").rstrip("\x00").strip()


def _to_int_safe(v: Any) -> Optional[int]:
	if v is None:
		return None
	if isinstance(v, int):
		return v
	if isinstance(v, (list, tuple)) and v:
		return _to_int_safe(v[0])
	try:
		return int(v)
	except (TypeError, ValueError):
		return None


def _to_iso_date(v: Any) -> Any:
	# EXIF dates look like "2021:07:04 12:30:00"
	if not isinstance(v, str):
		return v
	try:
		return datetime.strptime(v, "%Y:%m:%d %H:%M:%S").isoformat()
	except ValueError:
		return v


def _dms_to_degrees(dms: Any, ref: Any) -> Optional[float]:
	if not isinstance(dms, list) or len(dms) != 3 or any(p is None for p in dms):
		return None
	deg = dms[0] + dms[1] / 60.0 + dms[2] / 3600.0
	return -deg if ref in ("S", "W") else deg


def _convert(value: Any, tag_type: Optional[int]) -> Any:
	if tag_type in _RATIONAL_TYPES:
		if isinstance(value, tuple) and value and isinstance(value[0], tuple):
			return [_rational_to_float(v) for v in value]
		return _rational_to_float(value)
	if isinstance(value, bytes):
		return _bytes_to_str(value)
	if isinstance(value, tuple):
		return list(value)
	return value


_TIFF_HEADERS = (b"II*\x00", b"MM\x00*")


def _tiff_block(exif_bytes: bytes) -> bytes:
	# HEIF EXIF items may carry an offset prefix ahead of the TIFF header.
	if exif_bytes[:4] in _TIFF_HEADERS or exif_bytes[:4] == b"Exif":
		return exif_bytes
	starts = [i for i in (exif_bytes.find(h) for h in _TIFF_HEADERS) if i >= 0]
	return exif_bytes[min(starts):] if starts else exif_bytes


def _decode(data: bytes) -> Optional[Dict[str, Any]]:
	"""
	Open any container Pillow recognises and decode its EXIF block with piexif.
	Returns None when there is nothing to decode or the data can't be parsed.
	"""
	try:
		with Image.open(BytesIO(data)) as img:
			exif_bytes = img.info.get("exif")
			if not exif_bytes:
				exif = img.getexif()
				if not exif:
					return None
				exif_bytes = exif.tobytes()
		return piexif.load(_tiff_block(exif_bytes))
	except Exception as e:
		logger.debug("EXIF decode failed: %s", e)
		return None


def _flatten(decoded: Dict[str, Any]) -> Dict[str, Any]:
	flat: Dict[str, Any] = {}
	for ifd, tag_group in _IFDS:
		for tag, value in (decoded.get(ifd) or {}).items():
			info = piexif.TAGS[tag_group].get(tag)
			name = info["name"] if info else str(tag)
			if name in _SKIPPED_TAGS:
				continue
			converted = _convert(value, info["type"] if info else None)
			flat[name] = _to_iso_date(converted) if name in _DATE_TAGS else converted
	return flat


def _pick(raw: Dict[str, Any]) -> Dict[str, Any]:
	candidates = {
		"Make": raw.get("Make"),
		"Model": raw.get("Model"),
		"LensModel": raw.get("LensModel"),
		"FNumber": raw.get("FNumber"),
		"ExposureTime": raw.get("ExposureTime"),
		"ISO": _to_int_safe(raw.get("ISOSpeedRatings")),
		"FocalLength": raw.get("FocalLength"),
		"CreateDate": raw.get("DateTimeDigitized") or raw.get("DateTimeOriginal"),
		"GPSLatitude": _dms_to_degrees(raw.get("GPSLatitude"), raw.get("GPSLatitudeRef")),
		"GPSLongitude": _dms_to_degrees(raw.get("GPSLongitude"), raw.get("GPSLongitudeRef")),
		"Orientation": _to_int_safe(raw.get("Orientation")),
	}
	return {k: v for k, v in candidates.items() if v is not None}


def safe_parse_exif(data: bytes, debug: Optional[str] = None) -> Dict[str, Any]:
	"""
	Extract a curated set of EXIF fields plus the full decoded tags under ``raw``.

	Never raises. Unparseable input yields ``{}``; a failure while shaping the
	result yields ``{}`` or, with ``debug == "1"``, ``{"error": ...}``.
	"""
	try:
		decoded = _decode(data)
		if decoded is None:
			return {}
		raw = _flatten(decoded)
		if not raw:
			return {}
		return {**_pick(raw), "raw": raw}
	except Exception as e:
		logger.warning("EXIF parse failed: %s", e, exc_info=True)
		return {"error": str(e)} if debug == "1" else {}
