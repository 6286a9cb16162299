# backend/services/auth_service.py

from __future__ import annotations

import secrets
import string
from typing import Any, Dict, Tuple

from flask import current_app
from pymongo.errors import DuplicateKeyError

from backend.errors import BadRequestError, ConflictError, ForbiddenError
from backend.models.user_models import DEFAULT_AVATAR, GoogleAuthModel, SigninModel, SignupModel
from backend.mongo import mongo
from backend.security import check_password, hash_password, issue_token
from backend.utils.dates import utc_now
from backend.utils.phone_utils import normalize_ugandan_phone
from backend.utils.serialize import public_user

MIN_PASSWORD = 6

PHONE_TAKEN = "Phone number already registered."
EMAIL_TAKEN = "Email already registered."
USERNAME_TAKEN = "Username already taken."


def new_user_doc(username: str, password_hash: str, phone: str | None = None,
                 email: str | None = None, avatar: str | None = None) -> Dict[str, Any]:
    now = utc_now()
    doc: Dict[str, Any] = {
        "username": username,
        "password": password_hash,
        "avatar": avatar or DEFAULT_AVATAR,
        "role": "user",
        "isSeller": False,
        "isAdmin": False,
        "isBanned": False,
        "createdAt": now,
        "updatedAt": now,
    }
    # unique sparse indexes: absent, never null
    if phone:
        doc["phoneNumber"] = phone
    if email:
        doc["email"] = email
    return doc


def _random_suffix(n: int = 4) -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(n))


class AuthService:
    # ------------------------------------------------------------
    # SIGNUP
    # ------------------------------------------------------------
    @staticmethod
    def signup(body: Dict[str, Any]) -> Dict[str, Any]:
        data = SignupModel.model_validate(body or {})

        if not data.username or not data.phoneNumber or not data.password:
            raise BadRequestError("Username, phone number, and password are required")
        if len(data.password) < MIN_PASSWORD:
            raise BadRequestError(f"Password must be at least {MIN_PASSWORD} characters")

        phone = normalize_ugandan_phone(data.phoneNumber)
        if not phone:
            raise BadRequestError("Invalid Ugandan phone number format")

        email = (data.email or "").strip().lower() or None
        if email and "@" not in email:
            raise BadRequestError("Invalid email format")

        users = mongo.db.users
        if users.find_one({"phoneNumber": phone}):
            raise ConflictError(PHONE_TAKEN)
        if email and users.find_one({"email": email}):
            raise ConflictError(EMAIL_TAKEN)
        if users.find_one({"username": data.username}):
            raise ConflictError(USERNAME_TAKEN)

        doc = new_user_doc(data.username, hash_password(data.password), phone=phone, email=email)
        try:
            doc["_id"] = users.insert_one(doc).inserted_id
        except DuplicateKeyError:
            # lost a race with a concurrent signup
            raise ConflictError("Account already exists")

        print(f"[AuthService.signup] new user {doc['_id']}")
        return public_user(doc)

    # ------------------------------------------------------------
    # SIGNIN
    # ------------------------------------------------------------
    @staticmethod
    def signin(body: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
        data = SigninModel.model_validate(body or {})
        if not data.phoneNumber or not data.password:
            raise BadRequestError("Phone number and password are required")

        phone = normalize_ugandan_phone(data.phoneNumber)
        if not phone:
            raise BadRequestError("Invalid phone number format")

        user = mongo.db.users.find_one({"phoneNumber": phone})
        if not user:
            raise BadRequestError("Account not found with this phone number!")
        if not check_password(user.get("password"), data.password):
            raise BadRequestError("Invalid password!")
        if user.get("isBanned"):
            raise ForbiddenError("Your account has been banned")

        token = issue_token(user, current_app.config["SIGNIN_TOKEN_EXPIRES"])
        return token, public_user(user)

    # ------------------------------------------------------------
    # GOOGLE (profile exchange; the identity provider already verified it)
    # ------------------------------------------------------------
    @staticmethod
    def google(body: Dict[str, Any]) -> Tuple[str, Dict[str, Any], bool]:
        """Returns (token, user, created)."""
        data = GoogleAuthModel.model_validate(body or {})
        email = data.email.strip().lower()
        if "@" not in email:
            raise BadRequestError("Invalid email format")

        expires = current_app.config["OAUTH_TOKEN_EXPIRES"]
        users = mongo.db.users

        user = users.find_one({"email": email})
        if user:
            if user.get("isBanned"):
                raise ForbiddenError("Your account has been banned")
            return issue_token(user, expires), public_user(user), False

        base = "".join((data.username or "user").split()).lower() or "user"
        username = base + _random_suffix()
        while users.find_one({"username": username}):
            username = base + _random_suffix()

        # unusable random password; these accounts sign in through Google
        doc = new_user_doc(username, hash_password(secrets.token_urlsafe(16)),
                           email=email, avatar=data.photo)
        doc["_id"] = users.insert_one(doc).inserted_id
        return issue_token(doc, expires), public_user(doc), True
