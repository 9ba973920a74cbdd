from __future__ import annotations

import logging

LOGGER_NAME = "photo_edge"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class _PhotoEdgeHandler(logging.StreamHandler):
	"""Marker type so repeated configuration (e.g. uvicorn --reload) doesn't stack handlers."""


def configure_logging(level: str = "INFO") -> logging.Logger:
	logger = logging.getLogger(LOGGER_NAME)
	logger.setLevel(level.upper())
	if not any(isinstance(h, _PhotoEdgeHandler) for h in logger.handlers):
		handler = _PhotoEdgeHandler()
		handler.setFormatter(logging.Formatter(LOG_FORMAT))
		logger.addHandler(handler)
	return logger
