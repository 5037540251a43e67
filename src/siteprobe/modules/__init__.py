"""siteprobe feature modules."""
