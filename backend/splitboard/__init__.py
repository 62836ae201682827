import logging

from flask import Flask
from flask_cors import CORS

from splitboard.config import Config
from splitboard.extensions import init_mongo


def create_app(config_class=Config, services=None):
    """
    Build the Flask app.

    Args:
        config_class: Settings object loaded with ``app.config.from_object``.
        services: Optional dict overriding the collaborators stored under
                  ``app.extensions["splitboard"]`` (client, store, notifier, sync).
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=getattr(logging, app.config.get("LOG_LEVEL", "INFO"), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Disable strict slashes to prevent 308 redirects that break CORS preflight
    app.url_map.strict_slashes = False

    # Allow the dashboard frontend to call the API
    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", [])}})

    # Connection is opened lazily on first data access
    init_mongo(app)

    app.extensions["splitboard"] = _build_services(app.config, services or {})

    from splitboard.splitwise.routes import splitwise_bp

    app.register_blueprint(splitwise_bp, url_prefix="/api/splitwise")
    app.register_blueprint(splitwise_bp, url_prefix="/<locale>/api/splitwise", name="splitwise_localized")

    return app


def _build_services(config, overrides):
    from splitboard.core import ExpenseSyncService, build_notifier
    from splitboard.expenses.models import ExpenseStore
    from splitboard.splitwise.client import SplitwiseService

    client = overrides.get("client") or SplitwiseService.from_config(config)
    store = overrides.get("store") or ExpenseStore()
    notifier = overrides.get("notifier") or build_notifier(config)
    sync = overrides.get("sync") or ExpenseSyncService(
        client,
        store,
        notifier,
        limit=config.get("SYNC_EXPENSE_LIMIT", ExpenseSyncService.DEFAULT_LIMIT),
        dashboard_url=config.get("DASHBOARD_URL", ""),
    )
    return {"client": client, "store": store, "notifier": notifier, "sync": sync}
