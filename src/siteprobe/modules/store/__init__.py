"""Scan record store: create, get and list; records are never updated."""

from .manager import ScanStore

__all__ = ["ScanStore"]
