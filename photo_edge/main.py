from __future__ import annotations

import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from photo_edge.config import Settings, get_settings
from photo_edge.logging_setup import configure_logging
from photo_edge.routers.exif import router as exif_router
from photo_edge.routers.health import router as health_router
from photo_edge.routers.objects import router as objects_router
from photo_edge.routers.upload import router as upload_router
from photo_edge.services.cors import AllowList, apply_cors, preflight_response
from photo_edge.services.responses import error_response

logger = logging.getLogger("photo_edge.main")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
	settings = settings or get_settings()
	configure_logging(settings.log_level)

	# Fixed route table only: no generated docs/openapi routes.
	app = FastAPI(title="Photo Edge API", version="0.1.0", docs_url=None, redoc_url=None, openapi_url=None)
	app.state.settings = settings

	@app.middleware("http")
	async def cors_and_errors(request: Request, call_next):
		allow_list = AllowList.parse(request.app.state.settings.cors_allow_origins)
		if request.method.upper() == "OPTIONS":
			return preflight_response(request, allow_list)

		t0 = time.perf_counter()
		try:
			response = await call_next(request)
		except Exception:
			logger.exception("Unhandled error: %s %s", request.method, request.url.path)
			response = error_response("Internal Server Error", 500)
		dt = (time.perf_counter() - t0) * 1000
		logger.info("%s %s -> %d in %.1fms", request.method, request.url.path, response.status_code, dt)
		return apply_cors(response, request, allow_list)

	@app.exception_handler(StarletteHTTPException)
	async def http_error(request: Request, exc: StarletteHTTPException):
		# Unknown path and known path with the wrong method are both "Not Found".
		if exc.status_code in (404, 405):
			return error_response("Not Found", 404)
		return error_response(str(exc.detail), exc.status_code)

	@app.exception_handler(RequestValidationError)
	async def validation_error(request: Request, exc: RequestValidationError):
		return error_response("Invalid request", 400)

	# Routers
	app.include_router(health_router)
	app.include_router(objects_router)
	app.include_router(upload_router)
	app.include_router(exif_router)

	return app


app = create_app()


if __name__ == "__main__":
	# Local dev server: uvicorn photo_edge.main:app --reload
	import uvicorn

	uvicorn.run("photo_edge.main:app", host="0.0.0.0", port=8000, reload=True)
