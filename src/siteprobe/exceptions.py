"""Exception hierarchy for siteprobe.

Only input problems escape a scan. Everything that goes wrong while probing
is absorbed into findings by the orchestrator.
"""


class SiteProbeError(Exception):
    """Base class for all siteprobe errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ScanInputError(SiteProbeError):
    """The scan request was rejected before any probe ran."""

    status_code = 400


class InvalidInput(ScanInputError):
    """URL is malformed or uses an unsupported scheme."""


class UnresolvableTarget(ScanInputError):
    """The target hostname could not be resolved."""


class ScanNotFound(SiteProbeError):
    """No stored scan exists for the requested id."""

    status_code = 404
