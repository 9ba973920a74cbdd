from io import BytesIO
from typing import Dict, Optional

import piexif
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from photo_edge.config import Settings
from photo_edge.dependencies import get_store
from photo_edge.main import create_app
from photo_edge.services.object_store import DEFAULT_CONTENT_TYPE, StoredObject


class FakeStore:
	"""In-memory stand-in for ObjectStore."""

	def __init__(self):
		self.objects: Dict[str, StoredObject] = {}
		self.fail_puts = False

	def list(self, prefix: Optional[str] = None, limit: int = 10):
		keys = sorted(k for k in self.objects if not prefix or k.startswith(prefix))
		return {
			"objects": [{"key": k, "size": self.objects[k].size, "etag": self.objects[k].etag, "uploaded": None} for k in keys[:limit]],
			"truncated": len(keys) > limit,
			"cursor": None,
			"delimitedPrefixes": [],
		}

	def get(self, key: str):
		return self.objects.get(key)

	def put(self, key: str, data: bytes, content_type: Optional[str] = None):
		if self.fail_puts:
			raise ConnectionError("store unavailable")
		etag = f"etag-{len(self.objects) + 1}"
		self.objects[key] = StoredObject(key, data, content_type or DEFAULT_CONTENT_TYPE, etag)
		return {"etag": etag}


def make_settings(**overrides) -> Settings:
	return Settings(_env_file=None, **overrides)


@pytest.fixture
def store():
	return FakeStore()


@pytest.fixture
def make_client(store):
	def _make(cors_allow_origins: str = "*", with_store: bool = True) -> TestClient:
		app = create_app(make_settings(cors_allow_origins=cors_allow_origins, r2_bucket=None))
		if with_store:
			app.dependency_overrides[get_store] = lambda: store
		return TestClient(app)

	return _make


@pytest.fixture
def client(make_client):
	return make_client()


EXIF_SAMPLE = {
	"0th": {
		piexif.ImageIFD.Make: b"Canon",
		piexif.ImageIFD.Model: b"Canon EOS R5",
		piexif.ImageIFD.Orientation: 6,
	},
	"Exif": {
		piexif.ExifIFD.ExposureTime: (1, 250),
		piexif.ExifIFD.FNumber: (28, 10),
		piexif.ExifIFD.ISOSpeedRatings: 400,
		piexif.ExifIFD.FocalLength: (50, 1),
		piexif.ExifIFD.DateTimeOriginal: b"2021:07:04 12:30:00",
		piexif.ExifIFD.LensModel: b"RF50mm F1.8 STM",
	},
	"GPS": {
		piexif.GPSIFD.GPSLatitudeRef: b"N",
		piexif.GPSIFD.GPSLatitude: ((40, 1), (26, 1), (46, 1)),
		piexif.GPSIFD.GPSLongitudeRef: b"W",
		piexif.GPSIFD.GPSLongitude: ((79, 1), (58, 1), (56, 1)),
	},
}


def make_jpeg(exif: Optional[dict] = None) -> bytes:
	buf = BytesIO()
	img = Image.new("RGB", (8, 8), "red")
	if exif is None:
		img.save(buf, format="JPEG")
	else:
		img.save(buf, format="JPEG", exif=piexif.dump(exif))
	return buf.getvalue()


@pytest.fixture
def exif_jpeg() -> bytes:
	return make_jpeg(EXIF_SAMPLE)


@pytest.fixture
def jpeg_factory():
	return make_jpeg


@pytest.fixture
def heic_factory():
	from pillow_heif import register_heif_opener

	register_heif_opener()

	def _make(exif: Optional[dict] = EXIF_SAMPLE) -> bytes:
		buf = BytesIO()
		Image.new("RGB", (64, 64), "blue").save(buf, format="HEIF", exif=piexif.dump(exif))
		return buf.getvalue()

	return _make
