# backend/mongo.py
from __future__ import annotations

from flask_pymongo import PyMongo
from pymongo import ASCENDING, DESCENDING, TEXT, GEOSPHERE
from pymongo.errors import PyMongoError

mongo = PyMongo()


def init_mongo(app):
    """
    Initializes Flask-PyMongo.
    Requires app.config["MONGO_URI"] (load_config sets it from env).
    Call this during app startup (create_app).
    """
    if not app.config.get("MONGO_URI"):
        print("⚠️ MONGO_URI not set. Mongo will not be initialized.")
        return mongo

    try:
        mongo.init_app(app)
        print("✅ Mongo initialized")
    except Exception as e:
        # don't crash startup; requests will surface the driver error
        print(f"⚠️ Mongo init failed: {e}")
        return mongo

    if app.config.get("MONGO_ENSURE_INDEXES"):
        try:
            ensure_indexes(mongo.db)
            print("✓ Indexes synchronized")
        except PyMongoError as e:
            print(f"⚠️ Index sync failed: {e}")

    return mongo


def ensure_indexes(db):
    """Create the indexes the query paths rely on. Safe to call repeatedly."""
    # users: phone is the login key, email optional
    db.users.create_index([("phoneNumber", ASCENDING)], unique=True, sparse=True)
    db.users.create_index([("email", ASCENDING)], unique=True, sparse=True)
    db.users.create_index([("username", ASCENDING)], unique=True)

    # listings
    db.listings.create_index(
        [
            ("name", TEXT),
            ("details.cropType", TEXT),
            ("details.variety", TEXT),
            ("details.breed", TEXT),
            ("details.productName", TEXT),
            ("details.brand", TEXT),
            ("location.district", TEXT),
            ("description", TEXT),
        ],
        weights={
            "details.cropType": 10,
            "details.variety": 8,
            "details.breed": 8,
            "name": 5,
            "location.district": 4,
            "details.productName": 4,
            "description": 1,
        },
        name="listing_text",
    )
    db.listings.create_index([("category", ASCENDING), ("subCategory", ASCENDING),
                              ("location.district", ASCENDING), ("status", ASCENDING)])
    db.listings.create_index([("location.district", ASCENDING), ("location.subcounty", ASCENDING),
                              ("category", ASCENDING), ("status", ASCENDING)])
    db.listings.create_index([("category", ASCENDING), ("details.cropType", ASCENDING),
                              ("location.district", ASCENDING), ("status", ASCENDING)])
    db.listings.create_index([("userRef", ASCENDING), ("createdAt", DESCENDING)])
    db.listings.create_index([("regularPrice", ASCENDING), ("category", ASCENDING), ("status", ASCENDING)])
    db.listings.create_index([("isFeatured", ASCENDING), ("featuredUntil", DESCENDING),
                              ("location.district", ASCENDING)])
    db.listings.create_index([("boosted", ASCENDING), ("boostedUntil", DESCENDING), ("status", ASCENDING)])
    db.listings.create_index([("createdAt", DESCENDING), ("status", ASCENDING)])
    db.listings.create_index([("status", ASCENDING), ("expiresAt", ASCENDING)])
    db.listings.create_index([("location.coordinates", GEOSPHERE)])

    # products
    db.products.create_index(
        [("name", TEXT), ("description", TEXT), ("brand", TEXT),
         ("details.cropType", TEXT), ("details.variety", TEXT)],
        name="product_text",
    )
    db.products.create_index([("category", ASCENDING), ("subCategory", ASCENDING),
                              ("location.district", ASCENDING), ("status", ASCENDING)])
    db.products.create_index([("status", ASCENDING), ("moderationStatus", ASCENDING)])
    db.products.create_index([("userRef", ASCENDING), ("createdAt", DESCENDING)])

    # per-user collections
    db.carts.create_index([("user", ASCENDING)], unique=True)
    db.wishlists.create_index([("user", ASCENDING)], unique=True)
    db.orders.create_index([("user", ASCENDING), ("createdAt", DESCENDING)])
    db.reviews.create_index([("product", ASCENDING), ("user", ASCENDING)], unique=True)

    # reference data
    db.districts.create_index([("name", ASCENDING)], unique=True)
    db.districts.create_index([("region", ASCENDING)])
    db.crop_types.create_index([("name", ASCENDING)], unique=True)
    db.crop_types.create_index([("name", TEXT), ("commonVarieties", TEXT)])
    db.livestock_breeds.create_index([("name", ASCENDING)], unique=True)
    db.livestock_breeds.create_index([("name", TEXT)])
