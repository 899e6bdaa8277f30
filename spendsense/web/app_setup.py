# spendsense/web/app_setup.py
from typing import Any, Dict, Optional

from flask import Flask

from spendsense.config import FLASK_SECRET_KEY
from spendsense.core.context import get_supabase_client
from spendsense.web.routes import ALL_BLUEPRINTS


def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Builds the SpendSense Flask application (blueprints, session, store access).
    Returns the configured app, ready to be served by a WSGI server.
    """
    app = Flask(__name__)

    app.config["SECRET_KEY"] = FLASK_SECRET_KEY
    # Each request builds its own Supabase client so user tokens never leak between requests
    app.config["SUPABASE_CLIENT_FACTORY"] = get_supabase_client
    app.json.sort_keys = False
    if config:
        app.config.update(config)

    for blueprint in ALL_BLUEPRINTS:
        app.register_blueprint(blueprint)

    @app.route("/health", methods=["GET"])
    def health():
        return {"status": "ok"}

    print(f"DEBUG: SpendSense app configured with {len(ALL_BLUEPRINTS)} blueprints.")
    return app
