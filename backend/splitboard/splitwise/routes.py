# splitboard/splitwise/routes.py

import logging

from flask import Blueprint, abort, current_app, jsonify, request

from splitboard.core import BalanceService
from splitboard.errors import SplitboardError

logger = logging.getLogger(__name__)

splitwise_bp = Blueprint("splitwise", __name__)

RECENT_EXPENSES_LIMIT = 10


def _services():
    return current_app.extensions["splitboard"]


def _cached(response):
    max_age = current_app.config.get("CACHE_MAX_AGE", 1800)
    response.headers["Cache-Control"] = f"public, max-age={max_age}, s-maxage={max_age}"
    return response


@splitwise_bp.url_value_preprocessor
def pull_locale(endpoint, values):
    # Only present when the blueprint is mounted under /<locale>/api/splitwise
    locale = (values or {}).pop("locale", None)
    if locale is not None and locale not in current_app.config.get("LOCALES", []):
        abort(404)


@splitwise_bp.route("/groups/<int:group_id>/expenses", methods=["GET"])
def group_expenses(group_id):
    """
    Refresh the group's expenses from Splitwise, then return the 10 most
    recently stored ones, newest first.
    """
    services = _services()
    try:
        services["sync"].sync(group_id)
        expenses = services["store"].find_recent_by_group(group_id, RECENT_EXPENSES_LIMIT)
    except SplitboardError:
        logger.exception("Splitwise API Error for group %s", group_id)
        return jsonify({"error": "Get Splitwise Expenses Error"}), 500

    return _cached(jsonify(expenses))


@splitwise_bp.route("/groups/info", methods=["GET"])
def groups_info():
    """Proxy the Splitwise groups list (with member balances) verbatim."""
    try:
        data = _services()["client"].fetch_groups_raw()
    except SplitboardError:
        logger.exception("Splitwise API Error while listing groups")
        return jsonify({"error": "Get Splitwise Data Error"}), 500

    return _cached(jsonify(data))


@splitwise_bp.route("/groups/<int:group_id>/balances", methods=["GET"])
def group_balances(group_id):
    """
    Chart rows for one group.

    Query params:
    - currency: Currency code to chart (default: DEFAULT_CURRENCY)
    """
    currency = request.args.get("currency", current_app.config.get("DEFAULT_CURRENCY", "CAD")).upper()
    try:
        group = _services()["client"].fetch_group(group_id)
    except SplitboardError:
        logger.exception("Splitwise API Error while loading balances of group %s", group_id)
        return jsonify({"error": "Get Splitwise Data Error"}), 500

    if group is None:
        return jsonify({"error": "Group not found"}), 404

    return _cached(jsonify(BalanceService.summary(group, currency)))
