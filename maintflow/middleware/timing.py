"""
Request timing middleware.

Every response gets ``X-Request-ID`` (echoed from the caller or generated)
and ``X-Request-Duration-Ms``. Workflow calls are logged with the
intervention id from the URL; health probes are not logged.
"""

import logging
import time
import uuid

from flask import Flask, g, request

logger = logging.getLogger(__name__)

SLOW_THRESHOLD_MS = 1000

_UNLOGGED_BLUEPRINTS = frozenset({"health"})


def _log_level(status_code: int, duration_ms: float) -> int:
    if status_code >= 500:
        return logging.ERROR
    if duration_ms > SLOW_THRESHOLD_MS:
        return logging.WARNING
    return logging.DEBUG


def _request_context(status_code: int, duration_ms: float) -> dict:
    return {
        "request_id": g.request_id,
        "method": request.method,
        "path": request.path,
        "status": status_code,
        "duration_ms": duration_ms,
        "remote_addr": request.remote_addr,
        "intervention_id": (request.view_args or {}).get("intervention_id"),
    }


def init_request_timing(app: Flask):
    """Register before/after hooks for request timing."""

    @app.before_request
    def _start_timer():
        g.request_start = time.perf_counter()
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]

    @app.after_request
    def _finish_timer(response):
        start = g.get("request_start")
        if start is None:
            return response

        duration_ms = (time.perf_counter() - start) * 1000
        response.headers["X-Request-ID"] = g.request_id
        response.headers["X-Request-Duration-Ms"] = f"{duration_ms:.1f}"

        if request.blueprint not in _UNLOGGED_BLUEPRINTS:
            logger.log(
                _log_level(response.status_code, duration_ms),
                "%s %s %d (%.0fms)", request.method, request.path, response.status_code, duration_ms,
                extra=_request_context(response.status_code, duration_ms),
            )
        return response
