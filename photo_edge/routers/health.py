from fastapi import APIRouter

from photo_edge.services.responses import json_response

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthz():
	return json_response({"status": "ok"})


@router.get("/api/hello")
def hello():
	return json_response({"message": "Hello from Worker API"})
