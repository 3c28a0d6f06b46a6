"""
Health check blueprint.

Endpoints:
    GET /api/v1/health/ready  simple 200 for load balancers
    GET /api/v1/health/live   detailed status, including a workflow core self-check
"""

import logging
import sys
import time

from flask import Blueprint, current_app, jsonify

from maintflow.models.workflow import Intervention, InterventionStatus, WorkflowPhase
from maintflow.services.workflow_facade import enrich

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/api/v1/health")


@health_bp.route("/ready", methods=["GET"])
def ready():
    """Simple readiness probe, always 200 if app is running."""
    return jsonify({"status": "ok"}), 200


@health_bp.route("/live", methods=["GET"])
def live():
    """Detailed liveness check."""
    checks = {}
    overall = True

    # ── Workflow core ────────────────────────────────────────────────
    try:
        t0 = time.perf_counter()
        view = enrich(Intervention(id=0, status=InterventionStatus.PLANNED))
        core_ms = (time.perf_counter() - t0) * 1000
        if view.phase != WorkflowPhase.DIAGNOSTIC:
            raise RuntimeError(f"unexpected phase {view.phase.value}")
        checks["workflow_core"] = {"status": "ok", "latency_ms": round(core_ms, 1)}
    except Exception as exc:
        checks["workflow_core"] = {"status": "error", "detail": str(exc)}
        overall = False
        logger.error("Health check: workflow core failed: %s", exc)

    checks["rate_limiting"] = {
        "status": "enabled" if current_app.config.get("RATELIMIT_ENABLED") and not current_app.testing
        else "disabled",
    }

    return jsonify({
        "status": "ok" if overall else "degraded",
        "python": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        "checks": checks,
    }), 200 if overall else 503
