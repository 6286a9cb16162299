# backend/security.py
from __future__ import annotations

from datetime import timedelta
from functools import wraps
from typing import Any, Dict, Optional

from flask_bcrypt import Bcrypt
from flask_jwt_extended import (
    JWTManager,
    create_access_token,
    get_jwt_identity,
    verify_jwt_in_request,
)
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from backend.errors import BadRequestError, ForbiddenError, UnauthorizedError, register_jwt_handlers
from backend.mongo import mongo
from backend.utils.serialize import parse_object_id

bcrypt = Bcrypt()
jwt = JWTManager()

ADMIN_DENIED = "Access denied. Administrative privileges required."


def init_security(app):
    bcrypt.init_app(app)
    jwt.init_app(app)
    register_jwt_handlers(jwt)
    print("✓ Auth (bcrypt + JWT) ready")


# -------------------------------------------------------------------
# Passwords / tokens
# -------------------------------------------------------------------
def hash_password(password: str) -> str:
    return bcrypt.generate_password_hash(password).decode("utf-8")


def check_password(pw_hash: Optional[str], password: str) -> bool:
    if not pw_hash:
        return False
    try:
        return bcrypt.check_password_hash(pw_hash, password)
    except ValueError:
        # malformed stored hash
        return False


def issue_token(user: Dict[str, Any], expires: timedelta) -> str:
    return create_access_token(
        identity=str(user["_id"]),
        additional_claims={"isAdmin": bool(user.get("isAdmin"))},
        expires_delta=expires,
    )


# -------------------------------------------------------------------
# Current user
# -------------------------------------------------------------------
def current_user_id():
    return parse_object_id(get_jwt_identity(), "user")


def current_user() -> Dict[str, Any]:
    """The authenticated user's document, read fresh from the users collection."""
    user = mongo.db.users.find_one({"_id": current_user_id()})
    if not user:
        raise UnauthorizedError("User not found")
    return user


def is_admin() -> bool:
    return bool(current_user().get("isAdmin"))


def optional_user() -> Optional[Dict[str, Any]]:
    """The user behind a valid bearer token, or None for anonymous requests.

    Expired or malformed tokens count as anonymous.
    """
    try:
        verify_jwt_in_request(optional=True)
        identity = get_jwt_identity()
    except (JWTExtendedException, PyJWTError):
        return None
    if identity is None:
        return None
    try:
        return current_user()
    except (UnauthorizedError, BadRequestError):
        return None


def admin_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        if not is_admin():
            raise ForbiddenError(ADMIN_DENIED)
        return fn(*args, **kwargs)

    return wrapper

