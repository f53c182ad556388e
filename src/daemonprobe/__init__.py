"""Daemonprobe - liveness probe for a monitoring daemon."""

__version__ = "0.3.0"
