"""siteprobe package."""

__all__ = ["app", "main", "scan_url"]


def __getattr__(name: str):
    if name in ("app", "main"):
        from siteprobe.cli import app, main

        return {"app": app, "main": main}[name]
    if name == "scan_url":
        from siteprobe.modules.scanner import scan_url

        return scan_url
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    return sorted(__all__)
