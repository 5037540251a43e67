"""Authentication and registration surface discovery and form audits."""

import logging
import re
import secrets
from urllib.parse import urljoin

import httpx

from siteprobe.config import ScanSettings
from siteprobe.modules.credtest import (
    ADMIN_PATHS,
    DB_ERROR_PATTERN,
    DEFAULT_CREDENTIALS,
    SQLI_LOGIN_PAYLOADS,
    LoginForm,
    classify_login_failure,
    looks_authenticated,
    parse_login_form,
)
from siteprobe.tools.http import HTTPClient, HTTPResponse

from ..models import Finding, Severity
from ..signals import SignalBag
from .base import probe

logger = logging.getLogger(__name__)

LOGIN_PATHS: tuple[str, ...] = (
    "/login",
    "/signin",
    "/sign-in",
    "/admin",
    "/administrator",
    "/wp-login.php",
    "/user/login",
    "/account/login",
    "/auth/login",
)
REGISTRATION_PATHS: tuple[str, ...] = (
    "/register",
    "/signup",
    "/sign-up",
    "/join",
    "/user/register",
    "/account/register",
)

LOGIN_HINT = re.compile(r"type=[\"']?password|\b(?:log\s?in|sign\s?in)\b", re.IGNORECASE)
REGISTRATION_HINT = re.compile(
    r"\b(?:register|sign\s?up|create (?:an )?account)\b", re.IGNORECASE
)
PASSWORD_INPUT = re.compile(r"<input\b[^>]*type=[\"']?password[^>]*>", re.IGNORECASE)
CAPTCHA_MARKER = re.compile(
    r"g-recaptcha|recaptcha|hcaptcha|h-captcha|cf-turnstile|turnstile|captcha", re.IGNORECASE
)
CSRF_MARKER = re.compile(
    r"name=[\"'][^\"']*(?:csrf|xsrf|_token|authenticity_token|requestverificationtoken|nonce)"
    r"[^\"']*[\"']|<meta[^>]+name=[\"']csrf-token[\"']",
    re.IGNORECASE,
)
AUTOCOMPLETE_ATTR = re.compile(r"\bautocomplete=", re.IGNORECASE)
EMAIL_VERIFICATION_MARKER = re.compile(
    r"verif|confirm(?:ation)? (?:e-?mail|link)|check your (?:e-?mail|inbox)|activation",
    re.IGNORECASE,
)
PASSWORD_POLICY_MARKER = re.compile(
    r"\bminlength=|\bpattern=|at least \d+ characters|"
    r"password (?:must|should) (?:contain|be|include|have)",
    re.IGNORECASE,
)


async def _collect_form_pages(
    client: HTTPClient,
    bag: SignalBag,
    settings: ScanSettings,
    paths: tuple[str, ...],
) -> list[str]:
    found: list[str] = []
    for path in paths:
        url = urljoin(bag.target.origin + "/", path.lstrip("/"))
        try:
            response = await client.get(url, timeout=settings.auth_get_timeout)
        except httpx.HTTPError as e:
            logger.debug("Auth path %s failed: %s", url, e)
            continue
        if response.status_code != 200 or not PASSWORD_INPUT.search(response.body):
            continue
        found.append(path)
        bag.page_bodies[path] = response.body
        bag.auth_set_cookies.extend(response.set_cookies)
    return found


@probe("auth_surface")
async def discover_auth_surface(
    client: HTTPClient, bag: SignalBag, settings: ScanSettings
) -> list[Finding]:
    """Detect login/registration language in the page, then confirm candidate paths."""
    bag.login_surface_detected = bool(LOGIN_HINT.search(bag.body))
    bag.registration_surface_detected = bool(REGISTRATION_HINT.search(bag.body))
    if not (bag.login_surface_detected or bag.registration_surface_detected):
        return []

    bag.accessible_login_paths = await _collect_form_pages(client, bag, settings, LOGIN_PATHS)
    bag.accessible_registration_paths = await _collect_form_pages(
        client, bag, settings, REGISTRATION_PATHS
    )

    paths = bag.accessible_login_paths + bag.accessible_registration_paths
    if not paths:
        return []
    return [
        Finding(
            severity=Severity.INFO,
            category="Authentication",
            title="Authentication surface discovered",
            detail=f"Password forms found at: {', '.join(paths)}.",
        )
    ]


def _password_input(body: str) -> str:
    match = PASSWORD_INPUT.search(body)
    return match.group(0) if match else ""


@probe("login_forms")
async def audit_login_forms(client, bag: SignalBag, settings: ScanSettings) -> list[Finding]:
    """Check the first discovered login forms for CAPTCHA, CSRF and autocomplete hints."""
    findings: list[Finding] = []
    for path in bag.accessible_login_paths[: settings.max_login_paths]:
        body = bag.page_bodies.get(path, "")
        if not CAPTCHA_MARKER.search(body):
            findings.append(
                Finding(
                    severity=Severity.HIGH,
                    category="Authentication",
                    title="Login form without CAPTCHA",
                    detail=(
                        f"The login form at {path} has no CAPTCHA or bot challenge, leaving it "
                        "open to credential stuffing and brute force."
                    ),
                )
            )
        if not CSRF_MARKER.search(body):
            findings.append(
                Finding(
                    severity=Severity.HIGH,
                    category="Authentication",
                    title="Login form without CSRF token",
                    detail=(
                        f"The login form at {path} carries no anti-CSRF token, enabling "
                        "login CSRF attacks."
                    ),
                )
            )
        if not AUTOCOMPLETE_ATTR.search(_password_input(body)):
            findings.append(
                Finding(
                    severity=Severity.LOW,
                    category="Authentication",
                    title="Password autocomplete not controlled",
                    detail=(
                        f"The password field at {path} sets no autocomplete hint "
                        "(e.g. 'current-password' or 'off')."
                    ),
                )
            )
    return findings


@probe("registration_forms")
async def audit_registration_forms(
    client, bag: SignalBag, settings: ScanSettings
) -> list[Finding]:
    """Check discovered registration forms for abuse and account-quality controls."""
    findings: list[Finding] = []
    for path in bag.accessible_registration_paths[: settings.max_login_paths]:
        body = bag.page_bodies.get(path, "")
        checks = (
            (
                CAPTCHA_MARKER,
                Severity.HIGH,
                "Registration form without CAPTCHA",
                f"The registration form at {path} has no CAPTCHA, enabling automated sign-ups.",
            ),
            (
                CSRF_MARKER,
                Severity.MEDIUM,
                "Registration form without CSRF token",
                f"The registration form at {path} carries no anti-CSRF token.",
            ),
            (
                EMAIL_VERIFICATION_MARKER,
                Severity.MEDIUM,
                "No email verification indicated",
                f"The registration page at {path} gives no sign that email addresses are "
                "verified before accounts become active.",
            ),
            (
                PASSWORD_POLICY_MARKER,
                Severity.LOW,
                "No password policy indicated",
                f"The registration form at {path} shows no password length or complexity rules.",
            ),
        )
        for marker, severity, title, detail in checks:
            if not marker.search(body):
                findings.append(
                    Finding(severity=severity, category="Registration", title=title, detail=detail)
                )
    return findings


async def _submit(
    client: HTTPClient, form: LoginForm, username: str, password: str, timeout: float
) -> HTTPResponse | None:
    try:
        return await client.post(
            form.action,
            data=form.payload(username, password),
            timeout=timeout,
            follow_redirects=False,
        )
    except httpx.HTTPError as e:
        logger.debug("Login POST to %s failed: %s", form.action, e)
        return None


async def _check_enumeration(
    client: HTTPClient, form: LoginForm, path: str, settings: ScanSettings
) -> tuple[list[Finding], bool]:
    """Two garbage logins; returns findings and whether failures look like failures."""
    garbage = secrets.token_hex(6)
    unknown_user = await _submit(
        client, form, f"sp_{garbage}@invalid.example", f"x{garbage}!", settings.auth_post_timeout
    )
    known_user = await _submit(client, form, "admin", f"x{garbage}!", settings.auth_post_timeout)
    if unknown_user is None or known_user is None:
        return [], False

    reference_ok = not (
        looks_authenticated(unknown_user, form.password_field)
        or looks_authenticated(known_user, form.password_field)
    )

    first = classify_login_failure(unknown_user.body)
    second = classify_login_failure(known_user.body)
    if first == second:
        return [], reference_ok
    return [
        Finding(
            severity=Severity.MEDIUM,
            category="Authentication",
            title="Username enumeration",
            detail=(
                f"The login form at {path} answers differently for unknown users and wrong "
                "passwords, letting attackers confirm which accounts exist."
            ),
        )
    ], reference_ok


async def _check_sql_injection(
    client: HTTPClient, form: LoginForm, path: str, settings: ScanSettings
) -> list[Finding]:
    for payload in SQLI_LOGIN_PAYLOADS:
        response = await _submit(client, form, payload, payload, settings.auth_post_timeout)
        if response is None:
            continue
        error = DB_ERROR_PATTERN.search(response.body)
        if error:
            return [
                Finding(
                    severity=Severity.CRITICAL,
                    category="Injection",
                    title="SQL injection in login form",
                    detail=(
                        f"Submitting {payload!r} to the login form at {path} produced a "
                        f"database error ({error.group(0)})."
                    ),
                )
            ]
        if looks_authenticated(response, form.password_field):
            return [
                Finding(
                    severity=Severity.CRITICAL,
                    category="Injection",
                    title="Login bypass via SQL injection",
                    detail=(
                        f"Submitting {payload!r} to the login form at {path} returned an "
                        "authenticated response."
                    ),
                )
            ]
    return []


async def _check_default_credentials(
    client: HTTPClient, bag: SignalBag, settings: ScanSettings
) -> list[Finding]:
    paths = [path for path in bag.accessible_login_paths if path in ADMIN_PATHS]
    for path in paths or bag.accessible_login_paths[:1]:
        form = parse_login_form(
            urljoin(bag.target.origin + "/", path.lstrip("/")), bag.page_bodies.get(path, "")
        )
        if form is None:
            continue
        for username, password in DEFAULT_CREDENTIALS:
            response = await _submit(client, form, username, password, settings.auth_post_timeout)
            if response is not None and looks_authenticated(response, form.password_field):
                return [
                    Finding(
                        severity=Severity.CRITICAL,
                        category="Authentication",
                        title="Default credentials accepted",
                        detail=f"The login form at {path} accepted {username}:{password}.",
                    )
                ]
    return []


@probe("login_credentials")
async def probe_login_credentials(
    client: HTTPClient, bag: SignalBag, settings: ScanSettings
) -> list[Finding]:
    """Username enumeration, SQL-injection and default-credential checks.

    These send live login attempts, so they only run when active
    authentication probes are explicitly allowed.
    """
    if not bag.accessible_login_paths:
        return []
    if not settings.allow_active_auth_probes:
        return [
            Finding(
                severity=Severity.INFO,
                category="Authentication",
                title="Active credential probes skipped",
                detail=(
                    "Login forms were found, but username-enumeration, SQL-injection and "
                    "default-credential checks send live login attempts and only run when "
                    "SITEPROBE_ALLOW_ACTIVE_AUTH is enabled for an authorized target."
                ),
            )
        ]

    path = bag.accessible_login_paths[0]
    form = parse_login_form(
        urljoin(bag.target.origin + "/", path.lstrip("/")), bag.page_bodies.get(path, "")
    )
    if form is None:
        return []

    findings, reference_ok = await _check_enumeration(client, form, path, settings)
    if not reference_ok:
        logger.info("Skipping login bypass checks on %s: failed logins look authenticated", path)
        return findings
    findings.extend(await _check_sql_injection(client, form, path, settings))
    findings.extend(await _check_default_credentials(client, bag, settings))
    return findings
