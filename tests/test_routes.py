import logging


def test_healthz_ignores_cors_config(make_client):
	for origins in ("*", "https://a.com"):
		res = make_client(origins).get("/healthz", headers={"Origin": "https://b.com"})
		assert res.status_code == 200
		assert res.json() == {"status": "ok"}
		assert res.headers["content-type"] == "application/json; charset=utf-8"


def test_hello(client):
	res = client.get("/api/hello")
	assert res.status_code == 200
	assert res.json() == {"message": "Hello from Worker API"}


def test_unknown_route_is_404(client):
	res = client.get("/api/nope")
	assert res.status_code == 404
	assert res.json() == {"error": "Not Found"}


def test_wrong_method_is_404(client):
	res = client.post("/healthz")
	assert res.status_code == 404
	assert res.json() == {"error": "Not Found"}


def test_generated_docs_routes_are_not_exposed(client):
	assert client.get("/docs").status_code == 404
	assert client.get("/openapi.json").status_code == 404


def test_r2_get_requires_key(client):
	res = client.get("/api/r2-get")
	assert res.status_code == 400
	assert res.json() == {"error": "Missing query param: key"}


def test_r2_get_missing_object(client):
	res = client.get("/api/r2-get", params={"key": "nope"})
	assert res.status_code == 404
	assert res.json() == {"error": "Not Found"}


def test_put_then_get_round_trip(client):
	body = b"hello \x00 bytes"
	res = client.put("/api/r2-put?key=foo", content=body, headers={"content-type": "text/plain"})
	assert res.status_code == 200
	assert res.json() == {"ok": True, "key": "foo", "etag": "etag-1"}

	res = client.get("/api/r2-get", params={"key": "foo"})
	assert res.status_code == 200
	assert res.content == body
	assert res.headers["content-type"] == "text/plain"


def test_put_defaults_content_type(client, store):
	client.put("/api/r2-put?key=blob", content=b"\x01\x02")
	assert store.objects["blob"].content_type == "application/octet-stream"


def test_put_requires_key(client, store):
	res = client.put("/api/r2-put", content=b"x")
	assert res.status_code == 400
	assert store.objects == {}


def test_list_defaults_and_prefix(client, store):
	for i in range(12):
		store.put(f"a/{i:02d}", b"x")
	store.put("b/1", b"x")

	res = client.get("/api/r2-list")
	assert res.status_code == 200
	assert len(res.json()["objects"]) == 10

	res = client.get("/api/r2-list", params={"prefix": "b/", "limit": "abc"})
	assert [o["key"] for o in res.json()["objects"]] == ["b/1"]


def test_missing_store_binding_is_generic_500(make_client, caplog):
	client = make_client(with_store=False)
	with caplog.at_level(logging.ERROR, logger="photo_edge"):
		res = client.get("/api/r2-get", params={"key": "foo"})
	assert res.status_code == 500
	assert res.json() == {"error": "Internal Server Error"}
	assert "PHOTO_EDGE_R2_BUCKET" not in res.text
	assert any("Unhandled error" in r.getMessage() for r in caplog.records)


def test_handler_failure_is_generic_500_with_cors(make_client, store):
	store.fail_puts = True
	client = make_client("https://a.com")
	res = client.put("/api/r2-put?key=k", content=b"x", headers={"Origin": "https://a.com"})
	assert res.status_code == 500
	assert res.json() == {"error": "Internal Server Error"}
	assert res.headers["access-control-allow-origin"] == "https://a.com"


def test_list_limit_reads_leading_integer(client, store):
	for i in range(5):
		store.put(f"k/{i}", b"x")
	res = client.get("/api/r2-list", params={"limit": "3.9"})
	assert len(res.json()["objects"]) == 3
