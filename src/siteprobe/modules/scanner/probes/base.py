"""Uniform error absorption for probes."""

import functools
import logging
import ssl
from collections.abc import Awaitable, Callable, Iterable

import dns.exception
import httpx

from ..models import Finding, ProbeError, ProbeResult

logger = logging.getLogger(__name__)

# Failures a probe may raise; anything else is a bug and propagates.
PROBE_ERRORS = (
    httpx.HTTPError,
    httpx.InvalidURL,
    dns.exception.DNSException,
    ssl.SSLError,
    OSError,
    ValueError,
)


def classify_error(exc: BaseException) -> str:
    """Map an exception to a probe error kind."""
    if isinstance(exc, (httpx.TimeoutException, dns.exception.Timeout, TimeoutError)):
        return "timeout"
    message = str(exc).lower()
    if isinstance(exc, ssl.SSLError) or "certificate" in message or "ssl" in message:
        return "tls"
    if isinstance(exc, dns.exception.DNSException):
        return "dns"
    if isinstance(exc, (httpx.HTTPError, OSError)):
        return "network"
    return "parse"


ProbeFunc = Callable[..., Awaitable[Iterable[Finding]]]


def probe(name: str) -> Callable[[ProbeFunc], Callable[..., Awaitable[ProbeResult]]]:
    """Wrap a probe coroutine so it always returns a ProbeResult."""

    def decorator(func: ProbeFunc) -> Callable[..., Awaitable[ProbeResult]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> ProbeResult:
            try:
                findings = await func(*args, **kwargs)
            except PROBE_ERRORS as e:
                error = ProbeError(
                    probe=name,
                    kind=classify_error(e),
                    message=str(e) or type(e).__name__,
                )
                logger.warning("Probe %s failed (%s): %s", name, error.kind, error.message)
                return ProbeResult(probe=name, error=error)
            return ProbeResult(probe=name, findings=list(findings))

        wrapper.probe_name = name
        return wrapper

    return decorator


def raise_if_all_failed(outcomes: list) -> None:
    """Re-raise the first error when every fan-out request failed."""
    if outcomes and all(isinstance(outcome, BaseException) for outcome in outcomes):
        raise outcomes[0]
