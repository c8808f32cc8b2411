"""
Password checks and login sessions.

Two modes coexist: a legacy shared password (APP_PASSWORD, user id 0) and
email/password accounts stored in the ledger file with scrypt hashes.
Sessions live in Flask's signed session cookie.
"""

import hmac
import logging

from flask import session
from werkzeug.security import check_password_hash, generate_password_hash

from .errors import InvalidCredentials, InvalidPassword, MissingCredentials, MissingFields

logger = logging.getLogger(__name__)

LEGACY_USER_ID = 0
SESSION_KEY = "uid"


def _is_text(value):
    return isinstance(value, str) and value != ""


def hash_password(password):
    return generate_password_hash(password, method="scrypt")


def verify_password(password, stored):
    if not stored:
        return False
    try:
        return check_password_hash(stored, password)
    except (TypeError, ValueError, AttributeError):
        logger.warning("Unrecognized password hash format")
        return False


def signup(store, email, password):
    """Create an account. Returns the new user id."""
    if not _is_text(email) or not _is_text(password):
        raise MissingFields()
    user = store.create_user(email, hash_password(password))
    return user["id"]


def authenticate(store, email, password, app_password=""):
    """
    Check credentials and return the user id they belong to.
    Without an email, the legacy shared password is checked instead.
    """
    if email:
        user = store.find_user(email) if isinstance(email, str) else None
        if user is None or not _is_text(password) or not verify_password(password, user.get("pass")):
            raise InvalidCredentials()
        return user["id"]

    if not app_password:
        raise MissingCredentials()
    if not isinstance(password, str):
        raise InvalidPassword()
    if hmac.compare_digest(password.encode("utf-8"), app_password.encode("utf-8")):
        return LEGACY_USER_ID
    raise InvalidPassword()


def login_user(uid):
    session.clear()
    session[SESSION_KEY] = uid
    session.permanent = True


def logout_user():
    session.clear()


def current_user_id():
    """User id of the current request's session, or None when logged out."""
    uid = session.get(SESSION_KEY)
    if isinstance(uid, bool) or not isinstance(uid, int):
        return None
    return uid
