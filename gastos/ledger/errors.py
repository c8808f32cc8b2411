"""Ledger errors. Each one carries the API error code and HTTP status it maps to."""


class LedgerError(Exception):
    code = "ledger_error"
    status = 500

    def to_dict(self):
        return {"error": self.code}


class MissingFields(LedgerError):
    code = "missing_fields"
    status = 400


class MissingCredentials(LedgerError):
    code = "missing_credentials"
    status = 400


class EmailTaken(LedgerError):
    code = "email_taken"
    status = 409


class InvalidCredentials(LedgerError):
    code = "invalid_credentials"
    status = 401


class InvalidPassword(LedgerError):
    code = "invalid_password"
    status = 401


class Unauthorized(LedgerError):
    code = "unauthorized"
    status = 401


class InvalidTemplate(LedgerError):
    code = "invalid_template"
    status = 400


class InvalidMonth(LedgerError):
    code = "invalid_month"
    status = 400

    def __init__(self, month):
        super().__init__(f"Invalid month key: {month!r}")
        self.month = month
