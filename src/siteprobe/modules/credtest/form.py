"""Login form extraction helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from urllib.parse import urljoin

from .helpers import extract_base_form_data, extract_field_name


@dataclass
class LoginForm:
    """What is needed to submit a login form."""

    action: str
    user_field: str
    password_field: str
    base_fields: dict[str, str] = field(default_factory=dict)

    def payload(self, username: str, password: str) -> dict[str, str]:
        data = dict(self.base_fields)
        data[self.user_field] = username
        data[self.password_field] = password
        return data


def select_login_form(html: str) -> str | None:
    """Return a login form, preferring one with a password field."""
    forms = re.findall(r"<form[^>]*>.*?</form>", html, re.DOTALL | re.IGNORECASE)
    for candidate in forms:
        if re.search(r'type=["\']?password', candidate, re.IGNORECASE):
            return candidate
    return forms[0] if forms else None


def resolve_form_action(url: str, form_html: str) -> str:
    """Resolve form action to an absolute URL."""
    action_match = re.search(r'action=["\']([^"\']+)["\']', form_html, re.IGNORECASE)
    if not action_match:
        return url

    action = action_match.group(1)
    if action.startswith("http"):
        return action
    return urljoin(url, action)


def parse_login_form(url: str, html: str) -> LoginForm | None:
    """Locate the login form in a page; None when no password field exists."""
    form_html = select_login_form(html)
    if not form_html:
        return None
    password_field = extract_field_name(form_html, ["pass", "pwd"])
    if not password_field:
        return None
    user_field = extract_field_name(form_html, ["user", "login", "email", "name", "log"])
    return LoginForm(
        action=resolve_form_action(url, form_html),
        user_field=user_field or "username",
        password_field=password_field,
        base_fields=extract_base_form_data(form_html),
    )
