"""Pytest configuration: one Flask app per test backed by an in-memory mongomock database."""

import os
from datetime import timedelta

# app.py builds a module-level app on import; keep it off the network
os.environ.setdefault("MONGO_ENSURE_INDEXES", "0")

import mongomock
import pytest

from app import create_app
from backend.mongo import mongo
from backend.security import hash_password, issue_token
from backend.services.auth_service import new_user_doc

TEST_CONFIG = {
    "TESTING": True,
    "MONGO_URI": "mongodb://localhost:27017/nguza_test",
    "MONGO_ENSURE_INDEXES": False,
    "BCRYPT_LOG_ROUNDS": 4,
    "BACKGROUND_TASKS_INLINE": True,
    "JWT_SECRET_KEY": "test-secret-key-with-enough-length-for-hs256",
    "PROMOTE_WEBHOOK_SECRET": "hook-secret",
    "CLOUDINARY_URL": None,
}


@pytest.fixture
def app(monkeypatch):
    application = create_app(TEST_CONFIG)
    db = mongomock.MongoClient().db
    monkeypatch.setattr(mongo, "db", db, raising=False)
    monkeypatch.setattr(mongo, "cx", db.client, raising=False)
    with application.app_context():
        yield application


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return mongo.db


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

def _make_user(username, phone, *, admin=False, banned=False, email=None):
    doc = new_user_doc(username, hash_password("secret1"), phone=phone, email=email)
    doc.update(isAdmin=admin, isBanned=banned)
    if admin:
        doc["role"] = "admin"
    doc["_id"] = mongo.db.users.insert_one(doc).inserted_id
    return doc


def _auth(user):
    return {"Authorization": f"Bearer {issue_token(user, timedelta(hours=1))}"}


@pytest.fixture
def make_user(app):
    return _make_user


@pytest.fixture
def auth_headers(app):
    return _auth


@pytest.fixture
def seller(app):
    return _make_user("seller", "256772000001", email="seller@example.com")


@pytest.fixture
def buyer(app):
    return _make_user("buyer", "256772000002", email="buyer@example.com")


@pytest.fixture
def admin(app):
    return _make_user("admin", "256772000009", admin=True, email="admin@example.com")


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------

def crop_payload(**overrides):
    body = {
        "name": "Fresh Maize",
        "description": "Dry white maize from Masaka",
        "category": "Crops",
        "subCategory": "Grains & Cereals",
        "regularPrice": 50000,
        "offer": False,
        "imageUrls": ["https://img.example.com/maize.jpg"],
        "location": {"district": "Masaka", "subcounty": "Kimaanya"},
        "details": {
            "cropType": "Maize",
            "quantity": 100,
            "unit": "bags",
            "pricePerUnit": 50000,
        },
    }
    body.update(overrides)
    return body


@pytest.fixture
def listing_body():
    return crop_payload
