"""Scan record persistence."""
