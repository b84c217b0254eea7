"""BAC Tracker Flask app.

Run from project root:
    python app.py
"""

import logging
import os
from datetime import datetime, timezone
from datetime import timedelta
from typing import Any

from flask import (
    Flask,
    flash,
    jsonify,
    redirect,
    render_template,
    request,
    session as flask_session,
    url_for,
)

from bac_tracker.app_logging import configure_logging
from bac_tracker.calculations import calculate_bac, estimate_time_to_zero
from bac_tracker.constants import load_constants
from bac_tracker.graph import curve_data
from bac_tracker.models import sort_newest_first
from bac_tracker.severity import classify_severity, format_bac
from bac_tracker.store import SessionStore
from bac_tracker.validation import InvalidInputError, parse_beverage, parse_profile

configure_logging()
logger = logging.getLogger("bac_tracker.web")

app = Flask(__name__)
app.config["SECRET_KEY"] = os.environ.get("APP_SECRET_KEY", "dev-only-change-me")
app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
app.config["SESSION_COOKIE_HTTPONLY"] = True
app.config["SESSION_COOKIE_SECURE"] = os.environ.get("SESSION_COOKIE_SECURE", "0") == "1"
app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(days=30)
app.config["BAC_CONSTANTS"] = load_constants()

CURVE_STEP_MINUTES = 15.0
CURVE_MAX_HOURS = 24.0


def get_store() -> SessionStore:
    flask_session.permanent = True
    return SessionStore(flask_session)


def _now() -> datetime:
    return datetime.now()


def _constants():
    return app.config["BAC_CONSTANTS"]


def _error(message: str, status: int = 400):
    return jsonify({"error": message}), status


def _state_payload(store: SessionStore, now: datetime) -> dict[str, Any]:
    profile = store.get_profile()
    beverages = store.get_beverages()
    constants = _constants()
    bac = calculate_bac(profile, beverages, now=now, constants=constants)
    severity = classify_severity(bac)
    return {
        "configured": profile is not None,
        "profile": profile.to_dict() if profile else None,
        "bac": format_bac(bac),
        "bac_value": bac,
        "timeToZero": estimate_time_to_zero(bac, constants),
        "severity": severity.value,
        "bacLevelClass": severity.css_class,
        "beverage_count": len(beverages),
        "curve": curve_data(
            profile,
            beverages,
            start=now,
            step_minutes=CURVE_STEP_MINUTES,
            max_hours=CURVE_MAX_HOURS,
            constants=constants,
        ),
    }


@app.route("/")
def index():
    store = get_store()
    state = _state_payload(store, _now())
    beverages = sort_newest_first(store.get_beverages())
    return render_template(
        "index.html",
        state=state,
        beverages=beverages,
        default_time=_now().strftime("%Y-%m-%dT%H:%M"),
    )


@app.route("/profile", methods=["POST"])
def form_profile_save():
    try:
        get_store().save_profile(parse_profile(request.form))
    except InvalidInputError as exc:
        flash(str(exc), "error")
    return redirect(url_for("index"))


@app.route("/beverages", methods=["POST"])
def form_beverage_add():
    store = get_store()
    if store.get_profile() is None:
        flash("Set up your profile first", "error")
        return redirect(url_for("index"))
    try:
        store.add_beverage(parse_beverage(request.form, now=_now()))
    except InvalidInputError as exc:
        flash(str(exc), "error")
    return redirect(url_for("index"))


@app.route("/beverages/<int:beverage_id>/delete", methods=["POST"])
def form_beverage_delete(beverage_id: int):
    if not get_store().delete_beverage(beverage_id):
        flash("Beverage not found", "error")
    return redirect(url_for("index"))


@app.route("/reset", methods=["POST"])
def form_reset():
    get_store().clear()
    return redirect(url_for("index"))


@app.route("/healthz")
def healthz():
    logger.info("Health check")
    return jsonify({"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()})


@app.route("/api/profile", methods=["GET"])
def api_profile_get():
    profile = get_store().get_profile()
    return jsonify({"profile": profile.to_dict() if profile else None})


@app.route("/api/profile", methods=["POST"])
def api_profile_save():
    data = request.get_json(silent=True) or {}
    try:
        profile = parse_profile(data)
    except InvalidInputError as exc:
        return _error(str(exc))
    get_store().save_profile(profile)
    return jsonify({"ok": True, "profile": profile.to_dict()})


@app.route("/api/beverages", methods=["GET"])
def api_beverages_list():
    beverages = sort_newest_first(get_store().get_beverages())
    return jsonify({"items": [b.to_dict() for b in beverages]})


@app.route("/api/beverages", methods=["POST"])
def api_beverages_add():
    store = get_store()
    if store.get_profile() is None:
        return _error("Set up your profile first")

    data = request.get_json(silent=True) or {}
    try:
        beverage = parse_beverage(data, now=_now())
    except InvalidInputError as exc:
        return _error(str(exc))
    stored = store.add_beverage(beverage)
    return jsonify({"ok": True, "beverage": stored.to_dict()})


@app.route("/api/beverages/<int:beverage_id>", methods=["DELETE"])
def api_beverages_delete(beverage_id: int):
    if not get_store().delete_beverage(beverage_id):
        return _error("Beverage not found", 404)
    return jsonify({"ok": True})


@app.route("/api/state")
def api_state():
    return jsonify(_state_payload(get_store(), _now()))


@app.route("/api/reset", methods=["POST"])
def api_reset():
    get_store().clear()
    return jsonify({"ok": True})


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=os.environ.get("FLASK_DEBUG", "0") == "1")
