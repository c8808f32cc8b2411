"""REST API for the ledger, mounted under /api."""

import logging

from flask import Blueprint, Response, current_app, jsonify, request

from . import auth
from .errors import InvalidTemplate, LedgerError, Unauthorized
from .export import EXPORT_FILENAME, export_csv

logger = logging.getLogger(__name__)

ledger_api = Blueprint("ledger", __name__, url_prefix="/api")

PUBLIC_ENDPOINTS = {"ledger.me", "ledger.login", "ledger.logout", "ledger.signup"}


def get_store():
    return current_app.extensions["ledger_store"]


def _json_body():
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _require_uid():
    uid = auth.current_user_id()
    if uid is None:
        raise Unauthorized()
    return uid


@ledger_api.before_request
def _check_session():
    if request.endpoint in PUBLIC_ENDPOINTS:
        return None
    _require_uid()
    return None


@ledger_api.errorhandler(LedgerError)
def _ledger_error(e):
    return jsonify(e.to_dict()), e.status


@ledger_api.errorhandler(OSError)
def _storage_error(e):
    logger.exception("Ledger storage error")
    return jsonify({"error": "db_error", "details": str(e)}), 500


# ---------------- session ----------------

@ledger_api.route("/me")
def me():
    uid = auth.current_user_id()
    if uid is None:
        return jsonify({"ok": False})
    return jsonify({"ok": True, "uid": uid})


@ledger_api.route("/signup", methods=["POST"])
def signup():
    body = _json_body()
    uid = auth.signup(get_store(), body.get("email"), body.get("password"))
    auth.login_user(uid)
    return jsonify({"ok": True})


@ledger_api.route("/login", methods=["POST"])
def login():
    body = _json_body()
    email = body.get("email")
    uid = auth.authenticate(get_store(), email, body.get("password"), current_app.config.get("APP_PASSWORD", ""))
    auth.login_user(uid)
    logger.info("User %d logged in", uid)
    if not email:
        return jsonify({"ok": True, "legacy": True})
    return jsonify({"ok": True})


@ledger_api.route("/logout", methods=["POST"])
def logout():
    auth.logout_user()
    return jsonify({"ok": True})


# ---------------- months ----------------

@ledger_api.route("/data")
def data():
    months = get_store().months(_require_uid())
    return jsonify({month: months[month].to_dict() for month in sorted(months)})


@ledger_api.route("/months/<month>", methods=["GET"])
def get_month(month):
    entry = get_store().get_month(_require_uid(), month)
    if entry is None:
        return jsonify({"month": month, "entry": None, "totals": None})
    return jsonify({"month": month, "entry": entry.to_dict(), "totals": entry.totals()._asdict()})


@ledger_api.route("/months/<month>", methods=["PUT"])
def put_month(month):
    entry = get_store().upsert_month(_require_uid(), month, _json_body())
    return jsonify({"ok": True, "month": month, "entry": entry.to_dict(), "totals": entry.totals()._asdict()})


@ledger_api.route("/months/<month>", methods=["DELETE"])
def delete_month(month):
    deleted = get_store().delete_month(_require_uid(), month)
    return jsonify({"ok": True, "deleted": deleted})


@ledger_api.route("/export")
def export():
    csv_text = export_csv(get_store().months(_require_uid()))
    return Response(
        csv_text,
        mimetype="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


# ---------------- template ----------------

@ledger_api.route("/template", methods=["GET"])
def get_template():
    return jsonify({"template": get_store().get_template(_require_uid())})


@ledger_api.route("/template", methods=["PUT"])
def put_template():
    template = _json_body().get("template")
    if not isinstance(template, dict):
        raise InvalidTemplate()
    get_store().save_template(_require_uid(), template)
    return jsonify({"ok": True})
