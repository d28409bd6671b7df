"""Fleet Metrics — deterministic transport-fleet business metrics service."""

__version__ = "2.1.0"
