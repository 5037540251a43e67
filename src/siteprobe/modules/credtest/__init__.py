"""Login form parsing and credential-response heuristics."""

from .defaults import ADMIN_PATHS, DB_ERROR_PATTERN, DEFAULT_CREDENTIALS, SQLI_LOGIN_PAYLOADS
from .form import LoginForm, parse_login_form, resolve_form_action, select_login_form
from .helpers import classify_login_failure, looks_authenticated

__all__ = [
    "ADMIN_PATHS",
    "DB_ERROR_PATTERN",
    "DEFAULT_CREDENTIALS",
    "SQLI_LOGIN_PAYLOADS",
    "LoginForm",
    "classify_login_failure",
    "looks_authenticated",
    "parse_login_form",
    "resolve_form_action",
    "select_login_form",
]
