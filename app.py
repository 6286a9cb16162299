# app.py (Render + Local working)

from flask import Flask
from flask_cors import CORS

from backend.app_config import load_config
from backend.cache import init_response_cache
from backend.cli import register_cli
from backend.errors import register_error_handlers
from backend.mongo import init_mongo
from backend.register_blueprints import register_all_blueprints
from backend.security import init_security
from backend.services.media_service import configure_cloudinary
from backend.tasks import init_background_tasks


def create_app(overrides=None):
    app = Flask(__name__)

    # -------------------------
    # Config & security
    # -------------------------
    load_config(app, overrides)
    CORS(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})
    init_security(app)
    register_error_handlers(app)

    # -------------------------
    # Mongo
    # -------------------------
    init_mongo(app)

    # -------------------------
    # Background work, cache, media
    # -------------------------
    init_background_tasks(app)
    init_response_cache(app)
    configure_cloudinary(app)

    # -------------------------
    # Blueprints / CLI
    # -------------------------
    register_all_blueprints(app)
    register_cli(app)

    return app


# gunicorn entry point
app = create_app()


# Local run only
if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=True)
