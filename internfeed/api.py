"""
Read-only query API over the internship store, plus an on-demand refresh.
"""

from datetime import date, timedelta

from flask import Blueprint, Flask, abort, current_app, jsonify, request

from .errors import ReconcileError
from .logger import get_logger

logger = get_logger()

bp = Blueprint("internships", __name__, url_prefix="/api/internships")


def _store():
    return current_app.config["STORE"]


def _window_start():
    """Start of the listing window, or None when days=0 asks for everything."""
    days = request.args.get("days", type=int)
    if days is None:
        days = current_app.config["LIST_WINDOW_DAYS"]
    if days <= 0:
        return None
    return date.today() - timedelta(days=days)


@bp.get("")
def list_internships():
    since = _window_start()
    store = _store()
    rows = store.all() if since is None else store.find_by_date_posted_after(since)
    return jsonify([r.to_dict() for r in rows])


@bp.get("/<int:internship_id>")
def get_internship(internship_id: int):
    row = _store().get(internship_id)
    if row is None:
        abort(404)
    return jsonify(row.to_dict())


@bp.get("/recent")
def recent_internships():
    raw = request.args.get("since", "")
    try:
        since = date.fromisoformat(raw)
    except ValueError:
        return jsonify({"error": "since must be an ISO date (YYYY-MM-DD)"}), 400
    return jsonify([r.to_dict() for r in _store().find_by_date_posted_after(since)])


@bp.get("/search")
def search_internships():
    company = request.args.get("company", "").strip()
    if not company:
        return jsonify({"error": "company is required"}), 400
    rows = _store().search_company(company, since=_window_start())
    return jsonify([r.to_dict() for r in rows])


@bp.get("/count")
def count_internships():
    return jsonify(_store().count())


@bp.post("/refresh")
def refresh_internships():
    pipeline = current_app.config["PIPELINE"]
    try:
        result = pipeline.run()
    except ReconcileError as e:
        logger.error("On-demand refresh failed", error=str(e))
        return f"Error: {e}", 500, {"Content-Type": "text/plain; charset=utf-8"}
    return result.summary(), 200, {"Content-Type": "text/plain; charset=utf-8"}


def create_app(store, pipeline, list_window_days: int = 30) -> Flask:
    app = Flask(__name__)
    app.config["STORE"] = store
    app.config["PIPELINE"] = pipeline
    app.config["LIST_WINDOW_DAYS"] = list_window_days
    app.register_blueprint(bp)
    return app
