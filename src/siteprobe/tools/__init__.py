"""Network tooling used by the probes."""
