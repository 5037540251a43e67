"""Helper functions for login form testing."""

from __future__ import annotations

import re

from siteprobe.tools.http import HTTPResponse

_SUCCESS_INDICATORS = (
    "logout",
    "log out",
    "sign out",
    "sign off",
    "my account",
    "dashboard",
    "control panel",
)

_FAILURE_PHRASES = (
    "access denied",
    "login failed",
    "incorrect password",
    "invalid credentials",
    "invalid username",
    "invalid password",
    "invalid login",
    "authentication failed",
    "wrong password",
    "wrong credentials",
    "unable to log in",
    "login error",
)

_REJECTED_LOCATIONS = ("login", "signin", "sign-in", "error", "fail", "denied")

_USER_MISSING = re.compile(
    r"(?:user(?:name)?|account|e-?mail)\s+(?:was\s+)?(?:not found|does not exist|doesn't exist|"
    r"is not registered|unknown)|no (?:such )?(?:user|account)|unknown (?:user|username|account)",
    re.IGNORECASE,
)
_WRONG_PASSWORD = re.compile(
    r"(?:wrong|incorrect|invalid) password|password (?:is |was )?(?:incorrect|wrong|invalid)",
    re.IGNORECASE,
)


def extract_attr(tag_html: str, attr_name: str) -> str | None:
    """Extract one HTML attribute value from a tag."""
    match = re.search(rf'{attr_name}=["\']([^"\']+)["\']', tag_html, re.IGNORECASE)
    if match:
        return match.group(1).strip()
    return None


def extract_field_name(html: str, patterns: list[str]) -> str:
    """Extract input field name matching any of the patterns."""
    for pattern in patterns:
        match = re.search(
            rf'<input[^>]*name=["\']([^"\']*{pattern}[^"\']*)["\']',
            html,
            re.IGNORECASE,
        )
        if match:
            return match.group(1)
    return ""


def extract_base_form_data(form_html: str) -> dict[str, str]:
    """Extract non-button input fields and default values from a form."""
    fields: dict[str, str] = {}
    for tag in re.findall(r"<input\b[^>]*>", form_html, re.IGNORECASE):
        name = extract_attr(tag, "name")
        if not name:
            continue
        field_type = (extract_attr(tag, "type") or "text").lower()
        if field_type in {"submit", "button", "reset", "file", "image"}:
            continue
        fields[name] = extract_attr(tag, "value") or ""
    return fields


def looks_authenticated(response: HTTPResponse, password_field: str = "") -> bool:
    """Determine whether a login POST produced a session.

    Responses are fetched without following redirects:
    1. A redirect that sets a cookie and does not bounce back to a login or
       error page counts as success
    2. Specific failure *phrases*; single words like "error" appear on too
       many post-login pages
    3. Login-form re-presence: the password field is still in the response
    4. Success indicators in the body
    """
    if response.is_redirect:
        location = response.location.lower()
        return bool(response.set_cookies) and not any(
            marker in location for marker in _REJECTED_LOCATIONS
        )

    text_lower = response.body.lower()
    if any(phrase in text_lower for phrase in _FAILURE_PHRASES):
        return False

    if password_field:
        pw_lower = password_field.lower()
        if f'name="{pw_lower}"' in text_lower or f"name='{pw_lower}'" in text_lower:
            return False

    return any(ind in text_lower for ind in _SUCCESS_INDICATORS)


def classify_login_failure(body: str) -> str:
    """Return ``user_missing``, ``wrong_password`` or ``generic``."""
    if _USER_MISSING.search(body or ""):
        return "user_missing"
    if _WRONG_PASSWORD.search(body or ""):
        return "wrong_password"
    return "generic"
