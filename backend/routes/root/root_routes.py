# backend/routes/root/root_routes.py

from flask import Blueprint, jsonify

from backend.cache import no_cache

root_bp = Blueprint("root", __name__)


# -----------------------------
# HEALTH
# -----------------------------
@root_bp.get("/api/health")
@no_cache
def health():
    return jsonify(success=True, status="ok"), 200
