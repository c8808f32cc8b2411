"""
JSON file store for the ledger.

Layout of the document:
    "<uid>:<YYYY-MM>"  -> month entry
    "__users"          -> [{"id", "email", "pass"}, ...]
    "__templates"      -> {"<uid>": {...form defaults...}}
"""

import logging
import threading

from ..utils.persistence import atomic_write_json, read_json
from .errors import EmailTaken, InvalidTemplate
from .months import MonthEntry, validate_month

logger = logging.getLogger(__name__)

USERS_KEY = "__users"
TEMPLATES_KEY = "__templates"


def month_key(uid, month):
    return f"{uid}:{month}"


class LedgerStore:
    """Months, templates and users of every account, in one JSON file."""

    def __init__(self, path):
        self.path = path
        self._lock = threading.RLock()

    def _read(self):
        data = read_json(self.path, {})
        if not isinstance(data, dict):
            logger.warning("Ledger file %s does not hold an object, starting empty", self.path)
            return {}
        return data

    def _write(self, data):
        atomic_write_json(self.path, data)

    # ---------------- months ----------------

    def months(self, uid):
        """All months of a user as {month: MonthEntry}, without the user prefix."""
        prefix = f"{uid}:"
        return {
            key[len(prefix):]: MonthEntry.from_dict(value)
            for key, value in self._read().items()
            if key.startswith(prefix)
        }

    def get_month(self, uid, month):
        value = self._read().get(month_key(uid, validate_month(month)))
        return MonthEntry.from_dict(value) if value is not None else None

    def upsert_month(self, uid, month, data):
        entry = data if isinstance(data, MonthEntry) else MonthEntry.from_dict(data)
        key = month_key(uid, validate_month(month))
        with self._lock:
            document = self._read()
            document[key] = entry.to_dict()
            self._write(document)
        logger.debug("Saved %s", key)
        return entry

    def delete_month(self, uid, month):
        """Remove a month. Returns False if it did not exist."""
        key = month_key(uid, validate_month(month))
        with self._lock:
            document = self._read()
            if key not in document:
                return False
            del document[key]
            self._write(document)
        logger.debug("Deleted %s", key)
        return True

    # ---------------- templates ----------------

    def _templates(self, document):
        templates = document.get(TEMPLATES_KEY, {})
        if not isinstance(templates, dict):
            logger.warning("Ignoring malformed %s in %s", TEMPLATES_KEY, self.path)
            return {}
        return templates

    def get_template(self, uid):
        template = self._templates(self._read()).get(str(uid))
        return template if isinstance(template, dict) else None

    def save_template(self, uid, template):
        if not isinstance(template, dict):
            raise InvalidTemplate("Template must be an object")
        with self._lock:
            document = self._read()
            templates = self._templates(document)
            templates[str(uid)] = template
            document[TEMPLATES_KEY] = templates
            self._write(document)

    # ---------------- users ----------------

    def _users(self, document):
        """Well-formed user records; anything else in the list is skipped."""
        users = document.get(USERS_KEY, [])
        if not isinstance(users, list):
            logger.warning("Ignoring malformed %s in %s", USERS_KEY, self.path)
            return []
        return [user for user in users if isinstance(user, dict) and isinstance(user.get("id"), int)]

    def find_user(self, email):
        for user in self._users(self._read()):
            if user.get("email") == email:
                return user
        return None

    def create_user(self, email, password_hash):
        """Register a user and return it. Ids continue from the last user."""
        with self._lock:
            document = self._read()
            users = self._users(document)
            if any(user.get("email") == email for user in users):
                raise EmailTaken(email)
            user = {
                "id": (users[-1]["id"] if users else 0) + 1,
                "email": email,
                "pass": password_hash,
            }
            users.append(user)
            document[USERS_KEY] = users
            self._write(document)
        logger.info("Created user %d", user["id"])
        return user
