# backend/routes/auth/auth_routes.py

from __future__ import annotations

from flask import Blueprint, jsonify, request

from backend.cache import no_cache
from backend.services.auth_service import AuthService

# -------------------------------------------------------------------
# Blueprint
# -------------------------------------------------------------------
auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


# -------------------------------------------------------------------
# Signup / Signin
# -------------------------------------------------------------------
@auth_bp.post("/signup")
def signup():
    user = AuthService.signup(request.get_json(silent=True) or {})
    return jsonify(success=True, message="User created successfully", user=user), 201


@auth_bp.post("/signin")
def signin():
    token, user = AuthService.signin(request.get_json(silent=True) or {})
    return jsonify(success=True, token=token, user=user), 200


@auth_bp.post("/google")
def google():
    token, user, created = AuthService.google(request.get_json(silent=True) or {})
    return jsonify(success=True, token=token, user=user), 201 if created else 200


# -------------------------------------------------------------------
# Signout
# Tokens are stateless; the client drops its copy.
# -------------------------------------------------------------------
@auth_bp.get("/signout")
@no_cache
def signout():
    return jsonify(success=True, message="User has been logged out!"), 200
